"""Exceptions raised while loading, validating, and querying content."""

from __future__ import annotations

from typing import Sequence


class ContentError(Exception):
    """Base class for build-fatal content problems."""

    def __init__(self, message: str, *, source_path: str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path


class FrontMatterError(ContentError):
    """Raised when a document's front matter block cannot be parsed."""


class SchemaViolation(ContentError):
    """Raised when front matter does not satisfy its collection schema."""

    def __init__(
        self,
        field: str,
        expected: str,
        *,
        collection: str | None = None,
        source_path: str | None = None,
    ) -> None:
        location = source_path or "<frontmatter>"
        scope = f" [{collection}]" if collection else ""
        super().__init__(f"{location}{scope}: field '{field}' {expected}", source_path=source_path)
        self.field = field
        self.expected = expected
        self.collection = collection


class SlugError(ContentError):
    """Raised when a source path cannot be mapped to a URL-safe slug."""


class SlugCollision(ContentError):
    """Raised when two documents resolve to the same slug in one collection."""

    def __init__(self, collection: str, slug: str, paths: Sequence[str]) -> None:
        ordered = sorted(paths)
        joined = ", ".join(ordered)
        super().__init__(
            f"Slug '{slug}' in collection '{collection}' is produced by more than one file: {joined}",
            source_path=ordered[-1] if ordered else None,
        )
        self.collection = collection
        self.slug = slug
        self.paths = tuple(ordered)


class NotFound(ContentError, LookupError):
    """Raised when a slug lookup does not match any entry."""

    def __init__(self, collection: str, slug: str) -> None:
        super().__init__(f"No entry '{slug}' in collection '{collection}'.")
        self.collection = collection
        self.slug = slug


class OutOfRange(ContentError, IndexError):
    """Raised when a listing page past the available range is requested."""

    def __init__(self, page_number: int, total_pages: int) -> None:
        super().__init__(f"Page {page_number} is out of range (1-{total_pages}).")
        self.page_number = page_number
        self.total_pages = total_pages
