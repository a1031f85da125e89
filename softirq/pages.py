"""Render entry pages, collection listings, the homepage, and the 404 page."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .collections import Collection, ContentIndex, Page
from .config import SiteConfig
from .content.models import CollectionName, ContentEntry
from .render import EntryView, adapt_entry
from .slugs import collection_route
from .themes import ThemeLoader

NAVIGATION: tuple[tuple[str, str], ...] = (
    ("Home", "/"),
    ("Blog", "/blog/"),
    ("Projects", "/projects/"),
)


@dataclass(slots=True)
class PageWriteResult:
    """Paths written by a page rendering pass."""

    entry_pages: list[Path] = field(default_factory=list)
    listing_pages: list[Path] = field(default_factory=list)
    homepage: Path | None = None
    not_found_page: Path | None = None

    @property
    def total(self) -> int:
        extra = sum(1 for path in (self.homepage, self.not_found_page) if path is not None)
        return len(self.entry_pages) + len(self.listing_pages) + extra


def route_to_path(output_dir: Path, route: str) -> Path:
    """Map a site route such as ``/blog/my-post/`` onto its ``index.html`` file."""
    parts = [part for part in route.strip("/").split("/") if part]
    return output_dir.joinpath(*parts, "index.html")


class SitePageWriter:
    """Render every HTML page of the site from an entry index.

    The site configuration is passed in explicitly and handed to every
    template as ``site``.
    """

    def __init__(
        self,
        index: ContentIndex,
        site: SiteConfig,
        output_dir: Path,
        *,
        theme: ThemeLoader | None = None,
        drafts: bool = False,
        feed_href: str | None = None,
    ) -> None:
        self._index = index
        self._site = site
        self._output_dir = output_dir
        self._theme = theme or ThemeLoader()
        self._drafts = drafts
        self._feed_href = feed_href
        self._year = datetime.now(timezone.utc).year

    def write_all(self) -> PageWriteResult:
        result = PageWriteResult()
        for collection in self._index.collections():
            result.entry_pages.extend(self.write_entry_pages(collection))
            result.listing_pages.extend(self.write_listing_pages(collection))
        result.homepage = self.write_homepage()
        result.not_found_page = self.write_not_found_page()
        return result

    def write_entry_pages(self, collection: Collection) -> list[Path]:
        metadata = self._site.page_metadata(collection.name.value)

        written: list[Path] = []
        for entry in collection.list(drafts=self._drafts):
            view = adapt_entry(entry, self._site)
            newer, older = (
                self._view(neighbour)
                for neighbour in collection.adjacent(entry.slug, drafts=self._drafts)
            )
            context = self._base_context(
                path=view.url,
                title=view.title,
                description=view.description,
                body_class=f"entry-page entry-page--{view.collection}",
            )
            context.update(
                {
                    "entry": view,
                    "newer": newer,
                    "older": older,
                    "collection_title": metadata.title,
                }
            )
            written.append(self._write(view.url, self._theme.render_page("entry.html", context)))
        return written

    def write_listing_pages(self, collection: Collection) -> list[Path]:
        name = collection.name.value
        metadata = self._site.page_metadata(name)
        written: list[Path] = []
        for page in collection.pages(self._site.per_page(name), drafts=self._drafts):
            route = collection_route(name, page.number)
            title = metadata.title if page.number == 1 else f"{metadata.title} (page {page.number})"
            context = self._base_context(
                path=route,
                title=title,
                description=metadata.description,
                body_class=f"listing-page listing-page--{name}",
            )
            context.update(
                {
                    "collection": name,
                    "groups": [
                        {"year": year, "entries": [adapt_entry(entry, self._site) for entry in entries]}
                        for year, entries in page.group_by_year()
                    ],
                    "pagination": _pagination_context(name, page),
                }
            )
            written.append(self._write(route, self._theme.render_page("collection.html", context)))
        return written

    def write_homepage(self) -> Path:
        metadata = self._site.home
        context = self._base_context(
            path="/",
            title=metadata.title,
            description=metadata.description,
            body_class="home-page",
        )
        context["posts"] = self._recent(CollectionName.BLOG)
        context["projects"] = self._recent(CollectionName.PROJECTS)
        return self._write("/", self._theme.render_page("home.html", context))

    def write_not_found_page(self) -> Path:
        context = self._base_context(
            path="/404.html",
            title="Page not found",
            description=self._site.description,
            body_class="not-found-page",
        )
        destination = self._output_dir / "404.html"
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self._theme.render_page("404.html", context), encoding="utf-8")
        return destination

    def _view(self, entry: ContentEntry | None) -> EntryView | None:
        return adapt_entry(entry, self._site) if entry is not None else None

    def _recent(self, name: CollectionName) -> list[EntryView]:
        collection = self._index.collection(name)
        limit = self._site.homepage_count(name.value)
        return [adapt_entry(entry, self._site) for entry in collection.list(limit=limit, drafts=self._drafts)]

    def _base_context(
        self,
        *,
        path: str,
        title: str,
        description: str,
        body_class: str,
    ) -> dict[str, Any]:
        canonical = f"{self._site.base_url}{path}" if self._site.base_url else None
        return {
            "site": self._site,
            "nav": [
                {"label": label, "href": href, "active": _is_active(href, path)}
                for label, href in NAVIGATION
            ],
            "page": {
                "title": title,
                "description": description,
                "canonical": canonical,
                "path": path,
                "body_class": body_class,
            },
            "feed_href": self._feed_href,
            "year": self._year,
        }

    def _write(self, route: str, html: str) -> Path:
        destination = route_to_path(self._output_dir, route)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(html, encoding="utf-8")
        return destination


def _is_active(href: str, path: str) -> bool:
    if href == "/":
        return path == "/"
    return path.startswith(href)


def _pagination_context(collection: str, page: Page) -> dict[str, Any]:
    return {
        "number": page.number,
        "total_pages": page.total_pages,
        "total_items": page.total_items,
        "previous_href": (
            collection_route(collection, page.previous_number) if page.previous_number else None
        ),
        "next_href": collection_route(collection, page.next_number) if page.next_number else None,
    }
