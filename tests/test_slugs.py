from __future__ import annotations

from pathlib import Path

import pytest

from softirq.errors import SlugError
from softirq.slugs import collection_route, derive_slug, entry_route, normalize_segment

ROOT = Path("/site/content/blog")


def test_flat_file_uses_its_stem() -> None:
    assert derive_slug(ROOT / "hello-world.md", ROOT) == "hello-world"


def test_nested_path_keeps_directory_segments() -> None:
    assert derive_slug(ROOT / "2024" / "july" / "release-notes.mdx", ROOT) == "2024/july/release-notes"


def test_index_document_takes_directory_name() -> None:
    root = Path("/site/content/projects")
    assert derive_slug(root / "softirq" / "index.md", root) == "softirq"
    assert derive_slug(root / "softirq.md", root) == "softirq"


def test_segments_are_normalized() -> None:
    assert derive_slug(ROOT / "My First_Post.md", ROOT) == "my-first-post"
    assert normalize_segment("  Hello,   World!  ") == "hello-world"


def test_root_index_is_rejected() -> None:
    with pytest.raises(SlugError):
        derive_slug(ROOT / "index.md", ROOT)


def test_path_outside_root_is_rejected() -> None:
    with pytest.raises(SlugError):
        derive_slug(Path("/elsewhere/post.md"), ROOT)


def test_unsluggable_name_is_rejected() -> None:
    with pytest.raises(SlugError):
        derive_slug(ROOT / "!!!.md", ROOT)


def test_routes() -> None:
    assert entry_route("blog", "hello-world") == "/blog/hello-world/"
    assert collection_route("projects") == "/projects/"
    assert collection_route("projects", 1) == "/projects/"
    assert collection_route("blog", 3) == "/blog/page/3/"


def test_listing_page_routes_are_reserved() -> None:
    with pytest.raises(SlugError, match="reserved"):
        derive_slug(ROOT / "page" / "2.md", ROOT)
    assert derive_slug(ROOT / "page.md", ROOT) == "page"
    assert derive_slug(ROOT / "notes" / "page" / "2.md", ROOT) == "notes/page/2"
