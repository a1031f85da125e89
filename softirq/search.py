"""Write the JSON document consumed by the client-side search indexer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .collections import ContentIndex
from .markdown import extract_plain_text
from .slugs import entry_route

EXCERPT_LIMIT = 280


def build_search_records(index: ContentIndex) -> list[dict[str, Any]]:
    """One record per published entry; bodies are reduced to plain text."""
    records: list[dict[str, Any]] = []
    for collection in index.collections():
        for entry in collection.list():
            text = extract_plain_text(entry.body)
            records.append(
                {
                    "collection": entry.collection.value,
                    "slug": entry.slug,
                    "url": entry_route(entry.collection.value, entry.slug),
                    "title": entry.title,
                    "description": entry.description,
                    "date": entry.date.isoformat(),
                    "excerpt": _truncate(text, EXCERPT_LIMIT),
                    "text": text,
                }
            )
    return records


def write_search_index(index: ContentIndex, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    destination = output_dir / "search-index.json"
    with destination.open("w", encoding="utf-8") as handle:
        json.dump(build_search_records(index), handle, ensure_ascii=False, indent=2)
    return destination


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    truncated = text[:limit].rsplit(" ", 1)[0]
    return f"{truncated}…"
