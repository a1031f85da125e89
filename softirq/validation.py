"""Validate raw front matter against per-collection schemas."""

from __future__ import annotations

import datetime as dt
import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping, cast

from jsonschema import Draft202012Validator
from pydantic import ValidationError

from .content.models import FRONTMATTER_MODELS, CollectionName, Frontmatter
from .errors import SchemaViolation

logger = logging.getLogger(__name__)

SCHEMA_PACKAGE = "softirq"
SCHEMA_DIRECTORY = "schemas"


def validate_frontmatter(
    collection: CollectionName | str,
    data: Mapping[str, Any],
    *,
    source_path: str | None = None,
) -> Frontmatter:
    """Return typed front matter for ``collection`` or raise `SchemaViolation`.

    Required fields are checked for presence first, in schema order. Field
    types and formats are checked afterwards, so a document missing ``date``
    reports that before complaining about a malformed ``repoURL``.
    """
    name = CollectionName(collection)
    if not isinstance(data, Mapping):
        raise SchemaViolation(
            "<root>",
            "must be a mapping of front matter keys",
            collection=name.value,
            source_path=source_path,
        )

    schema = load_schema(name)
    for field in schema.get("required", []):
        if data.get(field) is None:
            raise SchemaViolation(
                field,
                "is required",
                collection=name.value,
                source_path=source_path,
            )

    instance = _to_json_types(data)
    errors = sorted(
        get_validator(name).iter_errors(instance),
        key=lambda err: [str(part) for part in err.path],
    )
    if errors:
        first = errors[0]
        field = "/".join(str(part) for part in first.path) or "<root>"
        raise SchemaViolation(
            field,
            f"is invalid: {first.message}",
            collection=name.value,
            source_path=source_path,
        )

    unknown = sorted(key for key in instance if key not in schema.get("properties", {}))
    if unknown:
        logger.warning(
            "%s: ignoring unknown front matter key(s) for %s: %s",
            source_path or "<frontmatter>",
            name.value,
            ", ".join(unknown),
        )

    model = FRONTMATTER_MODELS[name]
    try:
        return model.model_validate(instance)
    except ValidationError as exc:
        detail = exc.errors()[0]
        field = ".".join(str(part) for part in detail["loc"]) or "<root>"
        raise SchemaViolation(
            field,
            f"is invalid: {detail['msg']}",
            collection=name.value,
            source_path=source_path,
        ) from exc


def load_schema(collection: CollectionName) -> dict[str, Any]:
    """Return the JSON schema document for a collection."""
    return _load_schema(f"{collection.value}.schema.json")


@lru_cache(maxsize=None)
def get_validator(collection: CollectionName) -> Draft202012Validator:
    schema = load_schema(collection)
    return Draft202012Validator(schema, format_checker=Draft202012Validator.FORMAT_CHECKER)


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict[str, Any]:
    path = resources.files(SCHEMA_PACKAGE).joinpath(SCHEMA_DIRECTORY, name)
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Schema '{name}' must be a JSON object.")
    return cast(dict[str, Any], payload)


def _to_json_types(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert YAML-native values into the JSON shapes the schemas describe."""
    converted: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            # An empty optional key is treated as absent.
            continue
        if isinstance(value, dt.datetime):
            value = value.date().isoformat()
        elif isinstance(value, dt.date):
            value = value.isoformat()
        converted[str(key)] = value
    return converted
