import datetime as dt
import json
from pathlib import Path

from softirq.collections import ContentIndex
from softirq.config import BuildMode
from softirq.content.models import BlogFrontmatter, CollectionName, ContentEntry
from softirq.reporting import PageStats, assemble_report, build_collection_stats, write_report


def _entry(slug: str, *, draft: bool = False) -> ContentEntry:
    return ContentEntry(
        collection=CollectionName.BLOG,
        slug=slug,
        frontmatter=BlogFrontmatter(title=slug.title(), description="d", date=dt.date(2024, 1, 1), draft=draft),
        body="Body",
        source_path=f"content/blog/{slug}.md",
    )


def test_build_collection_stats_counts_drafts() -> None:
    index = ContentIndex()
    index.extend([_entry("a"), _entry("b", draft=True), _entry("c")])

    stats = build_collection_stats(index)

    assert stats["blog"].total == 3
    assert stats["blog"].published == 2
    assert stats["blog"].drafts == 1
    assert stats["projects"].total == 0


def test_write_report_writes_json(tmp_path: Path) -> None:
    index = ContentIndex()
    index.add(_entry("a"))
    report = assemble_report(
        project="Software Interrupt",
        mode=BuildMode.PRODUCTION,
        duration_seconds=0.5,
        collections=build_collection_stats(index),
        pages=PageStats(entries=1, listings=2, other=2),
        artifacts=[tmp_path / "rss.xml", Path("/elsewhere/file.txt")],
        output_dir=tmp_path,
    )

    path = write_report(report, tmp_path)
    assert path.exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["project"] == "Software Interrupt"
    assert data["mode"] == "production"
    assert data["collections"]["blog"]["published"] == 1
    assert data["artifacts"] == ["rss.xml", "/elsewhere/file.txt"]
    assert data["warnings"] == []


def test_unpublished_drafts_are_reported_in_production() -> None:
    index = ContentIndex()
    index.extend([_entry("a", draft=True), _entry("b", draft=True)])
    stats = build_collection_stats(index)
    pages = PageStats(entries=0, listings=2, other=2)

    production = assemble_report(
        project="p", mode=BuildMode.PRODUCTION, duration_seconds=0.0, collections=stats, pages=pages
    )
    preview = assemble_report(
        project="p", mode=BuildMode.PREVIEW, duration_seconds=0.0, collections=stats, pages=pages
    )

    assert production.warnings == ["2 draft(s) in 'blog' were not published."]
    assert preview.warnings == []
