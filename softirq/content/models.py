"""Typed representations of blog and project entries."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CollectionName(str, Enum):
    """Named partition of the content namespace."""

    BLOG = "blog"
    PROJECTS = "projects"


class Frontmatter(BaseModel):
    """Metadata shared by every collection."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str = Field(description="Display title.")
    description: str = Field(description="Summary used for listings and meta tags.")
    date: dt.date = Field(description="Publication date; drives listing order.")
    draft: bool = Field(default=False, description="Hidden from production builds when true.")

    @field_validator("title")
    def _require_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title cannot be empty")
        return value


class BlogFrontmatter(Frontmatter):
    """Front matter for the blog collection."""


class ProjectFrontmatter(Frontmatter):
    """Front matter for the projects collection."""

    repo_url: Optional[str] = Field(default=None, alias="repoURL")
    demo_url: Optional[str] = Field(default=None, alias="demoURL")

    @field_validator("repo_url", "demo_url")
    def _require_absolute_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        parts = urlsplit(value)
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ValueError("must be an absolute http(s) URL")
        return value


FRONTMATTER_MODELS: dict[CollectionName, type[Frontmatter]] = {
    CollectionName.BLOG: BlogFrontmatter,
    CollectionName.PROJECTS: ProjectFrontmatter,
}


class ContentEntry(BaseModel):
    """One validated markdown/MDX document."""

    model_config = ConfigDict(frozen=True)

    collection: CollectionName = Field(description="Owning collection.")
    slug: str = Field(description="URL path identifying the entry within its collection.")
    frontmatter: Frontmatter = Field(description="Validated front matter.")
    body: str = Field(description="Raw markdown/MDX body.")
    source_path: str = Field(description="Path to the source file.")

    @property
    def title(self) -> str:
        return self.frontmatter.title

    @property
    def description(self) -> str:
        return self.frontmatter.description

    @property
    def date(self) -> dt.date:
        return self.frontmatter.date

    @property
    def draft(self) -> bool:
        return self.frontmatter.draft

    @property
    def is_mdx(self) -> bool:
        return self.source_path.lower().endswith(".mdx")
