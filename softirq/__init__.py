"""softirq: content pipeline for the Software Interrupt blog and portfolio."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as load_pkg_version
from pathlib import Path
import tomllib

from .collections import Collection, ContentIndex, Page
from .config import BuildMode, Config, SiteConfig, load_config
from .ingest import load_index
from .render import adapt_entry
from .slugs import derive_slug
from .validation import validate_frontmatter

__all__ = [
    "__version__",
    "BuildMode",
    "Collection",
    "Config",
    "ContentIndex",
    "Page",
    "SiteConfig",
    "adapt_entry",
    "derive_slug",
    "load_config",
    "load_index",
    "validate_frontmatter",
]


def _read_local_project_version() -> str:
    """Read the project version from pyproject.toml when the package is uninstalled."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    return data.get("project", {}).get("version", "0.0.0")


try:
    __version__ = load_pkg_version("softirq")
except PackageNotFoundError:
    __version__ = _read_local_project_version()
