"""Utilities for preparing the deployable site bundle."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

from .config import Config

BUNDLED_STYLESHEET = ("static", "site.css")
STYLESHEET_TARGET = Path("styles") / "site.css"


class StagingError(RuntimeError):
    """Raised when the output directory cannot be prepared safely."""


@dataclass
class StagingResult:
    """Summary of files copied into the output directory."""

    staged_paths: list[Path] = field(default_factory=list)


def reset_directory(path: Path, *, protected: tuple[Path, ...] = ()) -> None:
    """Remove a directory and recreate it empty.

    Refuses to remove ``path`` when it contains, or is, any of ``protected``.
    """
    resolved = path.resolve()
    for candidate in protected:
        target = candidate.resolve()
        if target == resolved or resolved in target.parents:
            raise StagingError(f"Refusing to clear {path}: it contains {candidate}.")
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def prepare_output(config: Config) -> None:
    reset_directory(config.output_dir, protected=(config.content_dir, config.static_dir))


def stage_static_site(config: Config) -> StagingResult:
    """Copy the bundled stylesheet and the project's static files into the output."""
    result = StagingResult()
    output_root = config.output_dir
    output_root.mkdir(parents=True, exist_ok=True)

    stylesheet = resources.files("softirq").joinpath(*BUNDLED_STYLESHEET)
    destination = output_root / STYLESHEET_TARGET
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(stylesheet.read_bytes())
    result.staged_paths.append(destination)

    static_root = config.static_dir
    if static_root.exists():
        for item in sorted(static_root.iterdir()):
            target = output_root / item.name
            if item.is_dir():
                _copytree(item, target)
            else:
                shutil.copy2(item, target)
            result.staged_paths.append(target)

    return result


def remove_path(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    elif path.exists():
        path.unlink(missing_ok=True)


def _copytree(source: Path, destination: Path) -> None:
    if destination.exists():
        shutil.rmtree(destination)
    shutil.copytree(source, destination)
