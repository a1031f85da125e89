"""Utilities for scaffolding new blog posts and projects."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import Config
from .content.models import CollectionName
from .slugs import normalize_segment

WHITESPACE_PATTERN = re.compile(r"\s+")


class ScaffoldError(RuntimeError):
    """Raised when scaffolding cannot continue."""


@dataclass(slots=True)
class ScaffoldResult:
    """Details about filesystem writes performed during scaffolding."""

    created: list[Path] = field(default_factory=list)
    updated: list[Path] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def record(self, path: Path, existed: bool) -> None:
        if existed:
            self.updated.append(path)
        else:
            self.created.append(path)


def normalize_slug(raw: str) -> str:
    """Convert arbitrary user input into a slug; ``/`` keeps nested segments."""
    segments = [normalize_segment(part) for part in raw.split("/") if part.strip()]
    if not segments or not all(segments):
        raise ScaffoldError("Unable to derive a valid slug. Provide letters, numbers, or hyphens.")
    if segments[-1] == "index":
        raise ScaffoldError("'index' is reserved and cannot be used as a slug.")
    return "/".join(segments)


def default_title(slug: str) -> str:
    """Generate a human-friendly title from the last slug segment."""
    text = slug.rsplit("/", 1)[-1].replace("-", " ")
    text = WHITESPACE_PATTERN.sub(" ", text).strip()
    if not text:
        return "Untitled"
    return " ".join(word.capitalize() if not word.isupper() else word for word in text.split())


def scaffold_entry(
    config: Config,
    collection: CollectionName | str,
    slug: str,
    title: str | None = None,
    *,
    force: bool = False,
    today: dt.date | None = None,
) -> ScaffoldResult:
    """Create a draft entry for ``collection`` with valid front matter.

    Blog posts are single files (``blog/<slug>.md``); projects get their own
    directory (``projects/<slug>/index.md``) so assets can sit beside them.
    """
    try:
        name = CollectionName(collection)
    except ValueError as exc:
        raise ScaffoldError(f"Unsupported collection: {collection}") from exc

    slug = normalize_slug(slug)
    title = title.strip() if title else ""
    if not title:
        title = default_title(slug)

    root = config.collection_root(name.value)
    if name is CollectionName.BLOG:
        path = root / f"{slug}.md"
    else:
        path = root / slug / "index.md"

    front_matter: dict[str, Any] = {
        "title": title,
        "description": "",
        "date": (today or dt.date.today()).isoformat(),
        "draft": True,
    }
    if name is CollectionName.PROJECTS:
        front_matter["repoURL"] = None
        front_matter["demoURL"] = None

    existed = _write_text(path, _render_document(front_matter, title), force=force)

    result = ScaffoldResult()
    result.record(path, existed)
    result.notes.append("Fill in the description and set 'draft: false' when ready to publish.")
    if name is CollectionName.PROJECTS:
        result.notes.append("Set repoURL/demoURL to absolute http(s) links or remove them.")
    return result


def _render_document(front_matter: dict[str, Any], title: str) -> str:
    header = yaml.safe_dump(front_matter, sort_keys=False, allow_unicode=True)
    return f"---\n{header}---\n\n# {title}\n\nMarkdown body starts here.\n"


def _write_text(path: Path, content: str, *, force: bool) -> bool:
    path.parent.mkdir(parents=True, exist_ok=True)
    existed = path.exists()
    if existed and not force:
        raise ScaffoldError(f"Path already exists: {path}")
    path.write_text(content, encoding="utf-8")
    return existed
