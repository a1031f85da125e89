"""Map content file paths to canonical slugs and site routes."""

from __future__ import annotations

import re
from pathlib import PurePath

from .errors import SlugError

SLUG_PATTERN = re.compile(r"[^a-z0-9\-]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
INDEX_STEM = "index"
# Listing pages live at /<collection>/page/<n>/.
PAGINATION_SEGMENT = "page"


def normalize_segment(value: str) -> str:
    """Lower-case one path segment and reduce it to URL-safe characters."""
    text = value.strip().lower()
    text = WHITESPACE_PATTERN.sub("-", text)
    text = re.sub(r"_+", "-", text)
    text = SLUG_PATTERN.sub("-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


def derive_slug(path: str | PurePath, collection_root: str | PurePath) -> str:
    """Return the slug for a document located under ``collection_root``.

    The root prefix and file extension are removed and each remaining segment
    is normalized. A document named ``index`` takes the name of its directory,
    so ``projects/softirq/index.md`` and ``projects/softirq.md`` both map to
    ``softirq``. Slugs under ``page/`` are rejected because listing pages
    own those routes.
    """
    source = PurePath(path)
    root = PurePath(collection_root)
    try:
        relative = source.relative_to(root)
    except ValueError as exc:
        raise SlugError(
            f"{source} is not located under collection root {root}",
            source_path=str(source),
        ) from exc

    parts = list(relative.parts)
    if not parts:
        raise SlugError(f"{source} does not name a document", source_path=str(source))

    parts[-1] = PurePath(parts[-1]).stem
    if parts[-1].lower() == INDEX_STEM:
        if len(parts) == 1:
            raise SlugError(
                f"{source} is an index document at the collection root; move it into a directory",
                source_path=str(source),
            )
        parts.pop()

    segments = [normalize_segment(part) for part in parts]
    if not all(segments):
        raise SlugError(f"{source} does not produce a URL-safe slug", source_path=str(source))
    if len(segments) > 1 and segments[0] == PAGINATION_SEGMENT:
        raise SlugError(
            f"{source} resolves to '{'/'.join(segments)}', which is reserved for listing pages",
            source_path=str(source),
        )
    return "/".join(segments)


def entry_route(collection: str, slug: str) -> str:
    """Site-relative URL of an entry page."""
    return f"/{collection}/{slug.strip('/')}/"


def collection_route(collection: str, page_number: int = 1) -> str:
    """Site-relative URL of a collection listing page."""
    if page_number <= 1:
        return f"/{collection}/"
    return f"/{collection}/{PAGINATION_SEGMENT}/{page_number}/"
