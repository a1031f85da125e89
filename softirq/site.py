"""Full site build: scan content, render pages, and write auxiliary artifacts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .collections import ContentIndex
from .config import Config
from .feeds import generate_feed
from .ingest import load_index
from .pages import PageWriteResult, SitePageWriter
from .reporting import (
    BuildReport,
    PageStats,
    assemble_report,
    build_collection_stats,
    write_report,
)
from .search import write_search_index
from .sitemap import write_robots, write_sitemap
from .staging import StagingResult, prepare_output, stage_static_site
from .themes import ThemeLoader

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    """Everything produced by a single build."""

    index: ContentIndex
    pages: PageWriteResult
    staging: StagingResult
    report: BuildReport
    report_path: Path
    artifacts: list[Path] = field(default_factory=list)


def build_site(config: Config, index: ContentIndex | None = None) -> BuildResult:
    """Build the whole site into ``config.output_dir``.

    The content scan happens before the output directory is cleared, so an
    invalid document leaves the previous build in place.
    """
    start = time.perf_counter()
    if index is None:
        index = load_index(config)

    theme = ThemeLoader(templates_dir=config.templates_dir)
    prepare_output(config)
    staging = stage_static_site(config)
    logger.debug("Staged %d static file(s)", len(staging.staged_paths))

    feed_href = f"/{config.feeds.filename}" if config.feeds.enabled else None
    writer = SitePageWriter(
        index,
        config.site,
        config.output_dir,
        theme=theme,
        drafts=config.is_preview,
        feed_href=feed_href,
    )
    pages = writer.write_all()
    logger.debug("Rendered %d page(s)", pages.total)

    artifacts: list[Path] = []
    feed_path = generate_feed(config, index)
    if feed_path is not None:
        artifacts.append(feed_path)
    if config.sitemap:
        artifacts.append(write_sitemap(index, config.site, config.output_dir))
        artifacts.append(write_robots(config.site, config.output_dir))
    if config.search_index:
        artifacts.append(write_search_index(index, config.output_dir))

    report = assemble_report(
        project=config.project_name,
        mode=config.mode,
        duration_seconds=time.perf_counter() - start,
        collections=build_collection_stats(index),
        pages=PageStats(
            entries=len(pages.entry_pages),
            listings=len(pages.listing_pages),
            other=pages.total - len(pages.entry_pages) - len(pages.listing_pages),
        ),
        artifacts=artifacts,
        output_dir=config.output_dir,
    )
    report_path = write_report(report, config.output_dir)

    return BuildResult(
        index=index,
        pages=pages,
        staging=staging,
        report=report,
        report_path=report_path,
        artifacts=artifacts,
    )
