"""Template loading and rendering for site pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateNotFound,
    select_autoescape,
)

from .render import format_display_date

logger = logging.getLogger(__name__)

TEMPLATE_PACKAGE = "softirq"
TEMPLATE_DIRECTORY = "templates"
REQUIRED_TEMPLATES = ("base.html", "home.html", "collection.html", "entry.html", "404.html")


class ThemeError(RuntimeError):
    """Raised when templates cannot be loaded or rendered."""


class ThemeLoader:
    """Load page templates, preferring an override directory over the built-ins."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        self._environment = Environment(
            loader=self._build_loader(templates_dir),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._environment.filters["display_date"] = format_display_date
        self.ensure_templates(REQUIRED_TEMPLATES)

    def render_page(self, name: str, context: dict[str, Any]) -> str:
        try:
            template = self._environment.get_template(name)
        except TemplateNotFound as exc:
            raise ThemeError(f"Template '{name}' not found.") from exc
        return template.render(**context)

    def ensure_templates(self, names: Sequence[str]) -> None:
        for name in names:
            try:
                self._environment.get_template(name)
            except TemplateNotFound as exc:
                raise ThemeError(f"Required template '{name}' not found.") from exc

    @staticmethod
    def _build_loader(templates_dir: Path | None) -> BaseLoader:
        loaders: list[BaseLoader] = []
        if templates_dir is not None:
            if templates_dir.exists():
                loaders.append(FileSystemLoader(str(templates_dir)))
            else:
                logger.warning(
                    "Template directory %s not found; using built-in templates.",
                    templates_dir,
                )
        loaders.append(PackageLoader(TEMPLATE_PACKAGE, TEMPLATE_DIRECTORY))
        return ChoiceLoader(loaders)
