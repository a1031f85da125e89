"""Build reporting helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from .collections import ContentIndex
from .config import BuildMode


class CollectionStats(BaseModel):
    total: int
    published: int
    drafts: int


class PageStats(BaseModel):
    entries: int
    listings: int
    other: int


class BuildReport(BaseModel):
    project: str
    mode: BuildMode
    generated_at: datetime
    duration_seconds: float
    collections: dict[str, CollectionStats]
    pages: PageStats
    artifacts: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def build_collection_stats(index: ContentIndex) -> dict[str, CollectionStats]:
    stats: dict[str, CollectionStats] = {}
    totals: dict[str, list[int]] = {}
    for entry in index:
        counts = totals.setdefault(entry.collection.value, [0, 0])
        if entry.draft:
            counts[1] += 1
        else:
            counts[0] += 1
    for collection in index.collections():
        published, drafts = totals.get(collection.name.value, [0, 0])
        stats[collection.name.value] = CollectionStats(
            total=published + drafts,
            published=published,
            drafts=drafts,
        )
    return stats


def assemble_report(
    *,
    project: str,
    mode: BuildMode,
    duration_seconds: float,
    collections: dict[str, CollectionStats],
    pages: PageStats,
    artifacts: Iterable[Path] = (),
    output_dir: Path | None = None,
) -> BuildReport:
    warnings: list[str] = []
    for name, stats in collections.items():
        if stats.drafts and mode is BuildMode.PRODUCTION:
            warnings.append(f"{stats.drafts} draft(s) in '{name}' were not published.")

    return BuildReport(
        project=project,
        mode=mode,
        generated_at=datetime.now(timezone.utc),
        duration_seconds=duration_seconds,
        collections=collections,
        pages=pages,
        artifacts=[_relative(path, output_dir) for path in artifacts],
        warnings=warnings,
    )


def write_report(report: BuildReport, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / "build-report.json"
    with target.open("w", encoding="utf-8") as handle:
        json.dump(report.model_dump(mode="json"), handle, ensure_ascii=False, indent=2)
    return target


def _relative(path: Path, root: Path | None) -> str:
    if root is None:
        return path.as_posix()
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
