"""Typed content entries and their collection schemas."""

from .models import (
    FRONTMATTER_MODELS,
    BlogFrontmatter,
    CollectionName,
    ContentEntry,
    Frontmatter,
    ProjectFrontmatter,
)

__all__ = [
    "FRONTMATTER_MODELS",
    "BlogFrontmatter",
    "CollectionName",
    "ContentEntry",
    "Frontmatter",
    "ProjectFrontmatter",
]
