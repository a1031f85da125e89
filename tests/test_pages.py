from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from softirq.collections import ContentIndex
from softirq.config import BuildMode, SiteConfig
from softirq.content.models import BlogFrontmatter, CollectionName, ContentEntry, ProjectFrontmatter
from softirq.pages import SitePageWriter, route_to_path
from softirq.themes import ThemeError, ThemeLoader


def _post(slug: str, date: dt.date, *, draft: bool = False) -> ContentEntry:
    return ContentEntry(
        collection=CollectionName.BLOG,
        slug=slug,
        frontmatter=BlogFrontmatter(
            title=f"Post {slug}",
            description=f"Summary of {slug}",
            date=date,
            draft=draft,
        ),
        body=f"Paragraph for **{slug}**.",
        source_path=f"content/blog/{slug}.md",
    )


def _project(slug: str) -> ContentEntry:
    return ContentEntry(
        collection=CollectionName.PROJECTS,
        slug=slug,
        frontmatter=ProjectFrontmatter(
            title=f"Project {slug}",
            description="A project.",
            date=dt.date(2024, 5, 1),
            repo_url=f"https://github.com/example/{slug}",
            demo_url=f"https://{slug}.example.com",
        ),
        body="Project body.",
        source_path=f"content/projects/{slug}/index.md",
    )


def _index(mode: BuildMode = BuildMode.PRODUCTION) -> ContentIndex:
    index = ContentIndex(mode=mode)
    index.extend(
        [
            _post("alpha", dt.date(2023, 11, 2)),
            _post("beta", dt.date(2024, 2, 14)),
            _post("gamma", dt.date(2024, 7, 16)),
            _post("wip", dt.date(2024, 8, 1), draft=True),
            _project("tracer"),
        ]
    )
    return index


def _site(**overrides: object) -> SiteConfig:
    values: dict[str, object] = {"base_url": "https://example.com", "posts_per_page": 2}
    values.update(overrides)
    return SiteConfig(**values)


def test_route_to_path() -> None:
    root = Path("/out")
    assert route_to_path(root, "/") == root / "index.html"
    assert route_to_path(root, "/blog/page/2/") == root / "blog" / "page" / "2" / "index.html"


def test_writes_entry_pages_with_neighbours(tmp_path: Path) -> None:
    writer = SitePageWriter(_index(), _site(), tmp_path)

    written = writer.write_entry_pages(_index().collection("blog"))

    assert sorted(path.relative_to(tmp_path).as_posix() for path in written) == [
        "blog/alpha/index.html",
        "blog/beta/index.html",
        "blog/gamma/index.html",
    ]
    html = (tmp_path / "blog" / "beta" / "index.html").read_text(encoding="utf-8")
    assert "<title>Post beta | Software Interrupt</title>" in html
    assert "<strong>beta</strong>" in html
    assert "14 Feb 2024" in html
    assert 'href="/blog/gamma/"' in html
    assert 'href="/blog/alpha/"' in html
    assert '<link rel="canonical" href="https://example.com/blog/beta/" />' in html


def test_project_page_links_repository_and_demo(tmp_path: Path) -> None:
    index = _index()
    SitePageWriter(index, _site(), tmp_path).write_entry_pages(index.collection("projects"))

    html = (tmp_path / "projects" / "tracer" / "index.html").read_text(encoding="utf-8")
    assert 'href="https://github.com/example/tracer"' in html
    assert 'href="https://tracer.example.com"' in html


def test_listing_pages_are_paginated_and_grouped_by_year(tmp_path: Path) -> None:
    index = _index()
    written = SitePageWriter(index, _site(), tmp_path).write_listing_pages(index.collection("blog"))

    assert [path.relative_to(tmp_path).as_posix() for path in written] == [
        "blog/index.html",
        "blog/page/2/index.html",
    ]
    first = written[0].read_text(encoding="utf-8")
    assert "Page 1 of 2" in first
    assert 'href="/blog/page/2/"' in first
    assert "2024" in first
    assert "Post alpha" not in first

    second = written[1].read_text(encoding="utf-8")
    assert "Post alpha" in second
    assert "2023" in second
    assert 'rel="prev" href="/blog/"' in second


def test_empty_collection_still_gets_listing_page(tmp_path: Path) -> None:
    index = ContentIndex()
    written = SitePageWriter(index, _site(), tmp_path).write_listing_pages(index.collection("projects"))

    assert len(written) == 1
    assert "Nothing published yet." in written[0].read_text(encoding="utf-8")


def test_homepage_lists_recent_entries(tmp_path: Path) -> None:
    path = SitePageWriter(_index(), _site(num_posts_on_homepage=2), tmp_path).write_homepage()

    html = path.read_text(encoding="utf-8")
    assert path == tmp_path / "index.html"
    assert "Post gamma" in html
    assert "Post beta" in html
    assert "Post alpha" not in html
    assert "Project tracer" in html
    assert 'aria-current="page">Home' in html


def test_drafts_only_rendered_in_preview(tmp_path: Path) -> None:
    production = SitePageWriter(_index(), _site(), tmp_path / "prod", drafts=True).write_all()
    preview = SitePageWriter(
        _index(BuildMode.PREVIEW), _site(), tmp_path / "preview", drafts=True
    ).write_all()

    assert not (tmp_path / "prod" / "blog" / "wip" / "index.html").exists()
    assert (tmp_path / "preview" / "blog" / "wip" / "index.html").exists()
    assert len(preview.entry_pages) == len(production.entry_pages) + 1


def test_write_all_includes_not_found_page(tmp_path: Path) -> None:
    result = SitePageWriter(_index(), _site(), tmp_path, feed_href="/rss.xml").write_all()

    assert result.not_found_page == tmp_path / "404.html"
    assert result.homepage == tmp_path / "index.html"
    html = result.not_found_page.read_text(encoding="utf-8")
    assert "404: Page not found" in html
    assert 'href="/rss.xml"' in html
    assert result.total == len(result.entry_pages) + len(result.listing_pages) + 2


def test_templates_dir_overrides_builtin(tmp_path: Path) -> None:
    overrides = tmp_path / "templates"
    overrides.mkdir()
    (overrides / "404.html").write_text("custom missing page", encoding="utf-8")

    theme = ThemeLoader(templates_dir=overrides)
    path = SitePageWriter(_index(), _site(), tmp_path / "out", theme=theme).write_not_found_page()

    assert path.read_text(encoding="utf-8") == "custom missing page"


def test_render_unknown_template_raises() -> None:
    with pytest.raises(ThemeError):
        ThemeLoader().render_page("missing.html", {})
