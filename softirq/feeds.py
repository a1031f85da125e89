"""RSS feed generation over blog posts and projects."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from email.utils import format_datetime as format_rfc2822
from html import escape
from pathlib import Path
from typing import Sequence

from .collections import ContentIndex, SortOrder, sort_entries
from .config import Config
from .content.models import ContentEntry
from .slugs import entry_route


@dataclass(slots=True)
class FeedEntry:
    """Normalized feed item derived from a content entry."""

    title: str
    url: str
    description: str
    published: datetime
    category: str

    @property
    def identifier(self) -> str:
        return self.url


def generate_feed(config: Config, index: ContentIndex) -> Path | None:
    """Write the RSS feed; returns ``None`` when feeds are disabled."""
    settings = config.feeds
    if not settings.enabled:
        return None

    site = config.site
    entries = collect_feed_entries(index, limit=settings.limit, base_url=site.base_url)
    updated = entries[0].published if entries else datetime.now(timezone.utc)
    metadata = {
        "title": site.title,
        "description": site.description,
        "home_url": _make_absolute("/", site.base_url),
        "feed_url": _make_absolute(f"/{settings.filename}", site.base_url),
    }

    config.output_dir.mkdir(parents=True, exist_ok=True)
    destination = config.output_dir / settings.filename
    destination.write_text(_render_rss(metadata, entries, updated), encoding="utf-8")
    return destination


def collect_feed_entries(
    index: ContentIndex,
    *,
    limit: int,
    base_url: str | None,
) -> list[FeedEntry]:
    """Newest published entries across every collection, drafts excluded."""
    candidates: list[ContentEntry] = []
    for collection in index.collections():
        candidates.extend(collection.list())

    ordered = sort_entries(candidates, SortOrder.parse("date desc"))
    return [
        FeedEntry(
            title=entry.title,
            url=_make_absolute(entry_route(entry.collection.value, entry.slug), base_url),
            description=entry.description,
            published=_as_datetime(entry.date),
            category=entry.collection.value,
        )
        for entry in ordered[:limit]
    ]


def _render_rss(metadata: dict[str, str], entries: Sequence[FeedEntry], updated: datetime) -> str:
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{escape(metadata['title'])}</title>",
        f"    <link>{escape(metadata['home_url'])}</link>",
        f"    <description>{escape(metadata['description'])}</description>",
        f'    <atom:link href="{escape(metadata["feed_url"])}" rel="self" type="application/rss+xml" />',
        f"    <lastBuildDate>{_format_rfc2822(updated)}</lastBuildDate>",
    ]

    for entry in entries:
        parts.extend(
            [
                "    <item>",
                f"      <title>{escape(entry.title)}</title>",
                f"      <link>{escape(entry.url)}</link>",
                f"      <guid>{escape(entry.identifier)}</guid>",
                f"      <pubDate>{_format_rfc2822(entry.published)}</pubDate>",
            ]
        )
        if entry.description:
            parts.append(f"      <description>{escape(entry.description)}</description>")
        parts.append(f"      <category>{escape(entry.category)}</category>")
        parts.append("    </item>")

    parts.extend(["  </channel>", "</rss>"])
    return "\n".join(parts) + "\n"


def _as_datetime(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _format_rfc2822(value: datetime) -> str:
    normalized = value
    if normalized.tzinfo is None:
        normalized = normalized.replace(tzinfo=timezone.utc)
    return format_rfc2822(normalized.astimezone(timezone.utc))


def _make_absolute(path: str, base_url: str | None) -> str:
    if not path:
        return ""
    if path.startswith("http://") or path.startswith("https://"):
        return path
    normalized = f"/{path.lstrip('/')}"
    if base_url:
        return f"{base_url}{normalized}"
    return normalized
