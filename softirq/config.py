from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BuildMode(str, Enum):
    """Whether drafts may be surfaced by collection queries."""

    PRODUCTION = "production"
    PREVIEW = "preview"


class SocialLink(BaseModel):
    """External profile linked from the site footer."""

    model_config = ConfigDict(frozen=True)

    name: str
    href: str


class PageMetadata(BaseModel):
    """Title and description used for a top-level page's meta tags."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""


def _default_socials() -> tuple[SocialLink, ...]:
    return (
        SocialLink(name="LinkedIn", href="https://www.linkedin.com/in/danielhoward314"),
        SocialLink(name="GitHub", href="https://github.com/danielhoward314"),
    )


class SiteConfig(BaseModel):
    """Site identity shared by every rendered page. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="Software Interrupt")
    description: str = Field(default="Software Interrupt is the engineering blog of Daniel Howard.")
    email: str = Field(default="danielhoward314@gmail.com")
    base_url: str | None = Field(
        default="https://danielhoward-dev.netlify.app",
        description="Canonical site URL used for absolute links in feeds and the sitemap.",
    )
    num_posts_on_homepage: int = Field(default=5, ge=0)
    num_projects_on_homepage: int = Field(default=3, ge=0)
    posts_per_page: int = Field(default=10, ge=1)
    projects_per_page: int = Field(default=10, ge=1)
    home: PageMetadata = Field(
        default=PageMetadata(
            title="Home",
            description="Software Interrupt home has featured articles and projects.",
        )
    )
    blog: PageMetadata = Field(
        default=PageMetadata(
            title="Blog",
            description="A collection of articles on software engineering topics I am passionate about.",
        )
    )
    projects: PageMetadata = Field(
        default=PageMetadata(
            title="Projects",
            description="A collection of my projects with links to repositories and live demos.",
        )
    )
    socials: tuple[SocialLink, ...] = Field(default_factory=_default_socials)

    @field_validator("base_url", mode="before")
    def _normalize_base_url(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip().rstrip("/")
        return text or None

    @field_validator("title")
    def _require_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("site title cannot be empty")
        return value

    def page_metadata(self, collection: str) -> PageMetadata:
        """Return the listing metadata for a collection name."""
        if collection == "blog":
            return self.blog
        if collection == "projects":
            return self.projects
        raise KeyError(collection)

    def per_page(self, collection: str) -> int:
        return self.posts_per_page if collection == "blog" else self.projects_per_page

    def homepage_count(self, collection: str) -> int:
        return self.num_posts_on_homepage if collection == "blog" else self.num_projects_on_homepage


class FeedConfig(BaseModel):
    """Options controlling RSS feed generation."""

    enabled: bool = Field(default=True, description="Toggle rss.xml generation.")
    limit: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum number of entries to include in the feed.",
    )
    filename: str = Field(default="rss.xml")


class Config(BaseModel):
    project_name: str = Field(default="Software Interrupt")
    content_dir: Path = Field(default=Path("content"))
    output_dir: Path = Field(default=Path("dist"))
    static_dir: Path = Field(
        default=Path("public"),
        description="Files copied verbatim into the output directory.",
    )
    templates_dir: Path | None = Field(
        default=None,
        description="Optional directory whose templates override the built-in ones.",
    )
    mode: BuildMode = Field(default=BuildMode.PRODUCTION)
    scan_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Threads used to parse content files during the initial scan.",
    )
    search_index: bool = Field(default=True, description="Write search-index.json.")
    sitemap: bool = Field(default=True, description="Write sitemap.xml and robots.txt.")
    feeds: FeedConfig = Field(default_factory=FeedConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)

    @field_validator("content_dir", "output_dir", "static_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("templates_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @property
    def is_preview(self) -> bool:
        return self.mode is BuildMode.PREVIEW

    def collection_root(self, collection: str) -> Path:
        return self.content_dir / collection

    def with_mode(self, mode: BuildMode) -> "Config":
        return self.model_copy(update={"mode": mode})


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/softirq.yml``) or a
    directory containing that file. All relative paths inside the configuration
    are interpreted relative to the directory holding the config file.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    base_dir: Path
    if candidate.is_dir():
        # A project directory without a config file builds with defaults.
        config_file = candidate / "softirq.yml"
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.content_dir = _abs_required(cfg.content_dir)
    cfg.output_dir = _abs_required(cfg.output_dir)
    cfg.static_dir = _abs_required(cfg.static_dir)
    if cfg.templates_dir is not None:
        cfg.templates_dir = _abs_required(cfg.templates_dir)

    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must define a mapping.")
    return data
