"""Scan the content directory and build the entry index."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .collections import ContentIndex
from .config import Config
from .content.models import CollectionName, ContentEntry
from .content.parsers import load_entry

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".md", ".markdown", ".mdx"}
IGNORED_PREFIXES = ("_", ".")


@dataclass(frozen=True, slots=True)
class ContentSource:
    """A content file paired with the collection that owns it."""

    collection: CollectionName
    path: Path
    root: Path

    def load(self) -> ContentEntry:
        return load_entry(self.path, self.collection, self.root)


def load_index(config: Config) -> ContentIndex:
    """Parse, validate, and index every content file.

    Any invalid document or duplicate slug aborts the whole load; a site
    cannot silently omit content.
    """
    index = ContentIndex(mode=config.mode)
    sources = list(iter_sources(config))

    if config.scan_workers <= 1 or len(sources) < 2:
        for source in sources:
            index.add(source.load())
    else:
        def _ingest(source: ContentSource) -> None:
            index.add(source.load())

        with ThreadPoolExecutor(max_workers=config.scan_workers) as executor:
            # Consuming the results re-raises the first failure in source order.
            for _ in executor.map(_ingest, sources):
                pass

    logger.debug("Indexed %d entries from %s", len(index), config.content_dir)
    return index


def iter_sources(config: Config) -> Iterator[ContentSource]:
    """Yield content files for every collection in deterministic order."""
    content_dir = config.content_dir
    if not content_dir.exists():
        logger.warning("Content directory %s does not exist; building an empty site.", content_dir)
        return

    known = {name.value for name in CollectionName}
    for child in sorted(content_dir.iterdir()):
        if child.is_dir() and child.name not in known and not child.name.startswith(IGNORED_PREFIXES):
            logger.warning("Ignoring unknown collection directory %s.", child)

    for name in CollectionName:
        root = config.collection_root(name.value)
        if not root.exists():
            logger.debug("Collection directory %s not found; collection is empty.", root)
            continue
        for path in _iter_content_files(root):
            yield ContentSource(collection=name, path=path, root=root)


def _iter_content_files(root: Path) -> Iterable[Path]:
    directories = sorted(p for p in root.rglob("*") if p.is_dir() and not _is_ignored(p, root))
    directories.insert(0, root)

    for directory in directories:
        for path in sorted(directory.iterdir()):
            if not path.is_file() or _is_ignored(path, root):
                continue
            if path.suffix.lower() in SUPPORTED_SUFFIXES:
                yield path
            else:
                logger.debug("Skipping non-content file %s", path)


def _is_ignored(path: Path, root: Path) -> bool:
    return any(part.startswith(IGNORED_PREFIXES) for part in path.relative_to(root).parts)
