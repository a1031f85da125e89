"""Adapt content entries into the view-models consumed by templates."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from math import ceil
from typing import Callable, Optional

from .config import SiteConfig
from .content.models import ContentEntry, ProjectFrontmatter
from .markdown import extract_plain_text, render_markdown, strip_mdx_statements
from .slugs import entry_route

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
AVERAGE_READING_SPEED_WPM = 200

MarkdownRenderer = Callable[[str], str]


def format_display_date(value: dt.date) -> str:
    """Format a date as ``16 Jul 2024`` regardless of the process locale."""
    return f"{value.day:02d} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year}"


def reading_time_minutes(body: str) -> int:
    words = len(extract_plain_text(body).split())
    if words == 0:
        return 0
    return max(1, ceil(words / AVERAGE_READING_SPEED_WPM))


class RenderedBody:
    """Handle to an entry body whose markup is produced on first access.

    Listing pages only touch titles and dates, so they never pay for
    markdown rendering. The handle implements ``__html__`` and can be
    dropped straight into an autoescaping Jinja template.
    """

    def __init__(self, source: str, *, mdx: bool = False, renderer: MarkdownRenderer = render_markdown) -> None:
        self._source = source
        self._mdx = mdx
        self._renderer = renderer
        self._html: Optional[str] = None

    @property
    def source(self) -> str:
        return self._source

    @property
    def is_rendered(self) -> bool:
        return self._html is not None

    @property
    def html(self) -> str:
        if self._html is None:
            text = strip_mdx_statements(self._source) if self._mdx else self._source
            self._html = self._renderer(text).strip()
        return self._html

    def __html__(self) -> str:
        return self.html

    def __str__(self) -> str:
        return self.html


@dataclass(frozen=True)
class EntryView:
    """Template-facing representation of a content entry."""

    collection: str
    slug: str
    url: str
    title: str
    description: str
    date: dt.date
    display_date: str
    iso_date: str
    draft: bool
    reading_time_minutes: int
    repo_url: Optional[str]
    demo_url: Optional[str]
    body: RenderedBody
    source_path: str
    canonical_url: Optional[str] = None


def adapt_entry(
    entry: ContentEntry,
    site: SiteConfig | None = None,
    *,
    renderer: MarkdownRenderer = render_markdown,
) -> EntryView:
    """Build the view-model for ``entry`` without rendering its body.

    When ``site`` carries a ``base_url`` the view also gets an absolute
    canonical URL for meta tags.
    """
    frontmatter = entry.frontmatter
    repo_url = demo_url = None
    if isinstance(frontmatter, ProjectFrontmatter):
        repo_url = frontmatter.repo_url
        demo_url = frontmatter.demo_url

    route = entry_route(entry.collection.value, entry.slug)
    return EntryView(
        collection=entry.collection.value,
        slug=entry.slug,
        url=route,
        title=frontmatter.title,
        description=frontmatter.description,
        date=frontmatter.date,
        display_date=format_display_date(frontmatter.date),
        iso_date=frontmatter.date.isoformat(),
        draft=frontmatter.draft,
        reading_time_minutes=reading_time_minutes(entry.body),
        repo_url=repo_url,
        demo_url=demo_url,
        body=RenderedBody(entry.body, mdx=entry.is_mdx, renderer=renderer),
        source_path=entry.source_path,
        canonical_url=f"{site.base_url}{route}" if site and site.base_url else None,
    )
