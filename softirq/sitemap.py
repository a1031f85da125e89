"""Sitemap and robots.txt generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from html import escape
from pathlib import Path

from .collections import ContentIndex
from .config import SiteConfig
from .slugs import collection_route, entry_route

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass(frozen=True, slots=True)
class SitemapUrl:
    location: str
    lastmod: date | None = None


def collect_sitemap_urls(index: ContentIndex, site: SiteConfig) -> list[SitemapUrl]:
    """Homepage, every listing page, and every published entry."""
    urls: list[SitemapUrl] = []
    newest: date | None = None

    for collection in index.collections():
        name = collection.name.value
        entries = list(collection.list())
        latest = entries[0].date if entries else None
        if latest and (newest is None or latest > newest):
            newest = latest

        first = collection.paginate(site.per_page(name), 1)
        urls.append(SitemapUrl(_absolute(collection_route(name), site), latest))
        for number in range(2, first.total_pages + 1):
            urls.append(SitemapUrl(_absolute(collection_route(name, number), site), latest))
        for entry in entries:
            urls.append(SitemapUrl(_absolute(entry_route(name, entry.slug), site), entry.date))

    urls.insert(0, SitemapUrl(_absolute("/", site), newest))
    return urls


def write_sitemap(index: ContentIndex, site: SiteConfig, output_dir: Path) -> Path:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]
    for url in collect_sitemap_urls(index, site):
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(url.location)}</loc>")
        if url.lastmod is not None:
            lines.append(f"    <lastmod>{url.lastmod.isoformat()}</lastmod>")
        lines.append("  </url>")
    lines.append("</urlset>")

    output_dir.mkdir(parents=True, exist_ok=True)
    destination = output_dir / "sitemap.xml"
    destination.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return destination


def write_robots(site: SiteConfig, output_dir: Path) -> Path:
    lines = ["User-agent: *", "Allow: /"]
    lines.append(f"Sitemap: {_absolute('/sitemap.xml', site)}")
    output_dir.mkdir(parents=True, exist_ok=True)
    destination = output_dir / "robots.txt"
    destination.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return destination


def _absolute(route: str, site: SiteConfig) -> str:
    if site.base_url:
        return f"{site.base_url}{route}"
    return route
