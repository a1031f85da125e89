"""In-memory index of content entries and the collection query API."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from itertools import groupby, islice
from typing import Callable, Iterable, Iterator, Mapping, Optional

from .config import BuildMode
from .content.models import CollectionName, ContentEntry
from .errors import NotFound, OutOfRange, SlugCollision

EntryFilter = Callable[[ContentEntry], bool]

DEFAULT_SORT = "date desc"

SORT_KEYS: dict[str, Callable[[ContentEntry], object]] = {
    "date": lambda entry: entry.frontmatter.date,
    "title": lambda entry: entry.frontmatter.title.lower(),
    "slug": lambda entry: entry.slug,
}


@dataclass(frozen=True, slots=True)
class SortOrder:
    """Parsed form of a sort expression such as ``"date desc"``."""

    field: str
    descending: bool

    @classmethod
    def parse(cls, expression: str) -> "SortOrder":
        parts = expression.split()
        if not parts or len(parts) > 2:
            raise ValueError(f"Invalid sort expression: {expression!r}")
        field = parts[0].lower()
        if field not in SORT_KEYS:
            raise ValueError(f"Unknown sort field '{field}'; expected one of {sorted(SORT_KEYS)}.")
        direction = parts[1].lower() if len(parts) == 2 else "asc"
        if direction not in {"asc", "desc"}:
            raise ValueError(f"Unknown sort direction '{direction}'; expected 'asc' or 'desc'.")
        return cls(field=field, descending=direction == "desc")


def sort_entries(entries: Iterable[ContentEntry], order: SortOrder) -> list[ContentEntry]:
    """Sort by ``order`` with ties always broken by ascending slug."""
    by_slug = sorted(entries, key=lambda entry: entry.slug)
    # sorted() is stable in both directions, so slug order survives on ties.
    return sorted(by_slug, key=SORT_KEYS[order.field], reverse=order.descending)


class EntryQuery:
    """Lazy, restartable view over a filtered and sorted set of entries.

    Nothing is filtered or sorted until the query is iterated, and each
    iteration starts from the beginning again.
    """

    def __init__(
        self,
        entries: Iterable[ContentEntry],
        *,
        predicate: EntryFilter,
        order: SortOrder,
        limit: Optional[int] = None,
    ) -> None:
        if limit is not None and limit < 0:
            raise ValueError("limit cannot be negative")
        self._entries = tuple(entries)
        self._predicate = predicate
        self._order = order
        self._limit = limit

    def __iter__(self) -> Iterator[ContentEntry]:
        ordered = sort_entries((entry for entry in self._entries if self._predicate(entry)), self._order)
        if self._limit is None:
            return iter(ordered)
        return islice(ordered, self._limit)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def slugs(self) -> list[str]:
        return [entry.slug for entry in self]


@dataclass(frozen=True, slots=True)
class Page:
    """One page of a paginated listing."""

    items: tuple[ContentEntry, ...]
    number: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def next_number(self) -> int | None:
        return self.number + 1 if self.has_next else None

    @property
    def previous_number(self) -> int | None:
        return self.number - 1 if self.has_previous else None

    def group_by_year(self) -> list[tuple[int, list[ContentEntry]]]:
        """Group this page's items by publication year, keeping listing order."""
        return group_by_year(self.items)


def group_by_year(entries: Iterable[ContentEntry]) -> list[tuple[int, list[ContentEntry]]]:
    return [(year, list(items)) for year, items in groupby(entries, key=lambda entry: entry.date.year)]


class Collection:
    """Query surface over the entries of one collection."""

    def __init__(
        self,
        name: CollectionName,
        entries: Mapping[str, ContentEntry],
        *,
        mode: BuildMode = BuildMode.PRODUCTION,
    ) -> None:
        self.name = name
        self.mode = mode
        self._entries = dict(entries)

    def __len__(self) -> int:
        return len(self.list())

    def list(
        self,
        filter: Optional[EntryFilter] = None,
        sort: str = DEFAULT_SORT,
        limit: Optional[int] = None,
        *,
        drafts: bool = False,
    ) -> EntryQuery:
        """Return visible entries, newest first unless ``sort`` says otherwise.

        Drafts are only returned in preview mode and only when ``drafts`` is
        requested; production queries never see them.
        """
        include_drafts = drafts and self.mode is BuildMode.PREVIEW
        extra = filter

        def predicate(entry: ContentEntry) -> bool:
            if entry.draft and not include_drafts:
                return False
            return extra is None or extra(entry)

        return EntryQuery(
            self._entries.values(),
            predicate=predicate,
            order=SortOrder.parse(sort),
            limit=limit,
        )

    def get_by_slug(self, slug: str, *, drafts: bool = False) -> ContentEntry:
        entry = self._entries.get(slug.strip("/"))
        if entry is None:
            raise NotFound(self.name.value, slug)
        if entry.draft and not (drafts and self.mode is BuildMode.PREVIEW):
            raise NotFound(self.name.value, slug)
        return entry

    def paginate(
        self,
        page_size: int,
        page_number: int,
        *,
        filter: Optional[EntryFilter] = None,
        sort: str = DEFAULT_SORT,
        drafts: bool = False,
    ) -> Page:
        """Return the 1-indexed ``page_number`` of the listing.

        An empty collection still has a single (empty) first page. Any page
        outside ``1..total_pages`` raises `OutOfRange`.
        """
        if page_size < 1:
            raise ValueError("page_size must be positive")
        entries = list(self.list(filter, sort, drafts=drafts))
        total_items = len(entries)
        total_pages = max(1, -(-total_items // page_size))
        if page_number < 1 or page_number > total_pages:
            raise OutOfRange(page_number, total_pages)
        start = (page_number - 1) * page_size
        return Page(
            items=tuple(entries[start : start + page_size]),
            number=page_number,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
        )

    def pages(self, page_size: int, *, drafts: bool = False) -> Iterator[Page]:
        """Yield every page of the default listing."""
        first = self.paginate(page_size, 1, drafts=drafts)
        yield first
        for number in range(2, first.total_pages + 1):
            yield self.paginate(page_size, number, drafts=drafts)

    def adjacent(
        self,
        slug: str,
        *,
        drafts: bool = False,
    ) -> tuple[ContentEntry | None, ContentEntry | None]:
        """Return the (newer, older) neighbours of ``slug`` in the default order."""
        entries = list(self.list(drafts=drafts))
        for position, entry in enumerate(entries):
            if entry.slug == slug:
                newer = entries[position - 1] if position > 0 else None
                older = entries[position + 1] if position + 1 < len(entries) else None
                return newer, older
        raise NotFound(self.name.value, slug)


class ContentIndex:
    """Append-only store of every entry in the build, keyed by collection and slug.

    Insertion is guarded by a lock so the initial scan may add entries from
    several threads; a duplicate slug raises `SlugCollision` rather than
    replacing the earlier entry.
    """

    def __init__(self, *, mode: BuildMode = BuildMode.PRODUCTION) -> None:
        self._mode = mode
        self._entries: dict[CollectionName, dict[str, ContentEntry]] = {name: {} for name in CollectionName}
        self._lock = threading.Lock()

    @property
    def mode(self) -> BuildMode:
        return self._mode

    def add(self, entry: ContentEntry) -> None:
        with self._lock:
            bucket = self._entries[entry.collection]
            existing = bucket.get(entry.slug)
            if existing is not None:
                raise SlugCollision(
                    entry.collection.value,
                    entry.slug,
                    [existing.source_path, entry.source_path],
                )
            bucket[entry.slug] = entry

    def extend(self, entries: Iterable[ContentEntry]) -> None:
        for entry in entries:
            self.add(entry)

    def collection(self, name: CollectionName | str) -> Collection:
        key = CollectionName(name)
        with self._lock:
            snapshot = dict(self._entries[key])
        return Collection(key, snapshot, mode=self._mode)

    def get_by_slug(self, collection: CollectionName | str, slug: str, *, drafts: bool = False) -> ContentEntry:
        return self.collection(collection).get_by_slug(slug, drafts=drafts)

    def collections(self) -> list[Collection]:
        return [self.collection(name) for name in CollectionName]

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._entries.values())

    def __iter__(self) -> Iterator[ContentEntry]:
        with self._lock:
            entries = [entry for bucket in self._entries.values() for entry in bucket.values()]
        return iter(sorted(entries, key=lambda entry: (entry.collection.value, entry.slug)))
