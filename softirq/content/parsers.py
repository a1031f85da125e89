"""Parse source files into `ContentEntry` instances."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..errors import FrontMatterError
from ..slugs import derive_slug
from ..validation import validate_frontmatter
from .models import CollectionName, ContentEntry

FRONT_MATTER_DELIMITER = "---"


def load_entry(
    path: str | Path,
    collection: CollectionName | str,
    collection_root: str | Path,
) -> ContentEntry:
    """Load a markdown file with YAML front matter into a validated entry."""
    source_path = Path(path)
    name = CollectionName(collection)
    try:
        text = source_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FrontMatterError(
            f"{source_path}: file is not valid UTF-8 ({exc.reason} at byte {exc.start})",
            source_path=str(source_path),
        ) from exc
    except OSError as exc:
        raise FrontMatterError(
            f"{source_path}: file could not be read ({exc.strerror or exc})",
            source_path=str(source_path),
        ) from exc
    front_matter, body = split_front_matter(text, source_path=str(source_path))

    frontmatter = validate_frontmatter(name, front_matter, source_path=str(source_path))
    slug = derive_slug(source_path, collection_root)

    return ContentEntry(
        collection=name,
        slug=slug,
        frontmatter=frontmatter,
        body=body.strip(),
        source_path=str(source_path),
    )


def split_front_matter(text: str, *, source_path: str | None = None) -> tuple[dict[str, Any], str]:
    """Separate the leading YAML block from the document body."""
    lines = text.splitlines()
    if not lines:
        return {}, ""
    if lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    front_lines: list[str] = []
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            raw_front_matter = "\n".join(front_lines)
            body = "\n".join(lines[idx + 1 :])
            return _parse_yaml(raw_front_matter, source_path), body
        front_lines.append(line)
    raise FrontMatterError(
        f"{source_path or '<document>'}: closing front matter delimiter '---' missing.",
        source_path=source_path,
    )


def _parse_yaml(raw: str, source_path: str | None) -> dict[str, Any]:
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise FrontMatterError(
            f"{source_path or '<document>'}: front matter is not valid YAML ({exc})",
            source_path=source_path,
        ) from exc
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"{source_path or '<document>'}: front matter must be a mapping, got {type(data).__name__}",
            source_path=source_path,
        )
    return data
