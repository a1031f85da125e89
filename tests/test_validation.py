from __future__ import annotations

import datetime as dt
import logging

import pytest

from softirq.content.models import BlogFrontmatter, CollectionName, ProjectFrontmatter
from softirq.errors import SchemaViolation
from softirq.validation import validate_frontmatter


def _blog(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "title": "Interrupt handlers",
        "description": "Top and bottom halves.",
        "date": dt.date(2024, 7, 16),
    }
    data.update(overrides)
    return data


def test_valid_blog_frontmatter_round_trips() -> None:
    frontmatter = validate_frontmatter("blog", _blog(draft=True))

    assert isinstance(frontmatter, BlogFrontmatter)
    assert frontmatter.title == "Interrupt handlers"
    assert frontmatter.description == "Top and bottom halves."
    assert frontmatter.date == dt.date(2024, 7, 16)
    assert frontmatter.draft is True


def test_draft_defaults_to_false() -> None:
    assert validate_frontmatter(CollectionName.BLOG, _blog()).draft is False


def test_iso_date_string_is_accepted() -> None:
    frontmatter = validate_frontmatter("blog", _blog(date="2024-06-23"))
    assert frontmatter.date == dt.date(2024, 6, 23)


def test_project_links_use_original_keys() -> None:
    frontmatter = validate_frontmatter(
        "projects",
        _blog(repoURL="https://github.com/example/repo", demoURL="https://example.com/demo"),
    )

    assert isinstance(frontmatter, ProjectFrontmatter)
    assert frontmatter.repo_url == "https://github.com/example/repo"
    assert frontmatter.demo_url == "https://example.com/demo"


@pytest.mark.parametrize("field", ["title", "description", "date"])
def test_missing_required_field_is_named(field: str) -> None:
    data = _blog()
    del data[field]

    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("blog", data, source_path="content/blog/post.md")

    assert excinfo.value.field == field
    assert excinfo.value.collection == "blog"
    assert "content/blog/post.md" in str(excinfo.value)


def test_null_required_field_counts_as_missing() -> None:
    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("blog", _blog(description=None))
    assert excinfo.value.field == "description"


def test_blank_title_is_rejected() -> None:
    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("blog", _blog(title="   "))
    assert excinfo.value.field == "title"


def test_malformed_date_is_rejected() -> None:
    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("blog", _blog(date="July 16th"))
    assert excinfo.value.field == "date"


def test_non_boolean_draft_is_rejected() -> None:
    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("blog", _blog(draft="yes"))
    assert excinfo.value.field == "draft"


def test_relative_project_url_is_rejected() -> None:
    with pytest.raises(SchemaViolation) as excinfo:
        validate_frontmatter("projects", _blog(repoURL="github.com/example/repo"))
    assert excinfo.value.field == "repoURL"


def test_unknown_keys_are_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="softirq.validation"):
        frontmatter = validate_frontmatter("blog", _blog(tags=["kernel"]))

    assert not hasattr(frontmatter, "tags")
    assert "tags" in caplog.text


def test_non_mapping_is_rejected() -> None:
    with pytest.raises(SchemaViolation):
        validate_frontmatter("blog", ["not", "a", "mapping"])  # type: ignore[arg-type]
