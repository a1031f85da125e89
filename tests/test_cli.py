from __future__ import annotations

import re
from pathlib import Path

from typer.testing import CliRunner

from softirq.cli import app


def _write_config(path: Path) -> None:
    path.write_text("project_name: Test Project\nscan_workers: 1\n", encoding="utf-8")


def _write_post(slug: str, date: str, *, draft: bool = False, title: str | None = None) -> None:
    path = Path("content/blog") / f"{slug}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"---\ntitle: {title or slug.title()}\ndescription: About {slug}.\ndate: {date}\n"
        f"draft: {str(draft).lower()}\n---\nBody of {slug}.\n",
        encoding="utf-8",
    )


def test_build_renders_site() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("hello", "2024-07-16")

        result = runner.invoke(app, ["build"])

        assert result.exit_code == 0, result.output
        assert "Build complete" in result.output
        assert "1 file(s) staged" in result.output
        assert Path("dist/blog/hello/index.html").exists()
        assert Path("dist/build-report.json").exists()


def test_build_preview_includes_drafts() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("wip", "2024-07-16", draft=True)

        result = runner.invoke(app, ["build", "--preview"])

        assert result.exit_code == 0, result.output
        assert Path("dist/blog/wip/index.html").exists()


def test_build_fails_on_invalid_content() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        path = Path("content/blog/broken.md")
        path.parent.mkdir(parents=True)
        path.write_text("---\ntitle: Broken\ndate: 2024-01-01\n---\n", encoding="utf-8")

        result = runner.invoke(app, ["build"])

        assert result.exit_code == 1
        assert "Build failed" in result.output
        assert "description" in result.output
        assert not Path("dist").exists()


def test_missing_config_is_a_usage_error() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["build", "--config", "missing.yml"])

        assert result.exit_code == 2


def test_lint_clean_when_content_is_valid() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("ready", "2024-01-01")

        result = runner.invoke(app, ["lint"])

        assert result.exit_code == 0, result.output
        assert "Lint clean" in result.output


def test_lint_strict_treats_warnings_as_errors() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("draft-post", "2024-01-01", draft=True)

        relaxed = runner.invoke(app, ["lint"])
        strict = runner.invoke(app, ["lint", "--strict"])

        assert relaxed.exit_code == 0, relaxed.output
        assert strict.exit_code == 1, strict.output
        assert "WARNING" in strict.output


def test_list_shows_requested_page() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("older", "2024-01-01", title="Older Entry")
        _write_post("newer", "2024-06-01", title="Newer Entry")

        result = runner.invoke(app, ["list", "blog", "--page-size", "1", "--page", "2"])

        assert result.exit_code == 0, result.output
        assert "Older Entry" in result.output
        assert "Newer Entry" not in result.output
        assert re.search(r"page\s+2/2", result.output)


def test_list_out_of_range_page_fails() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        _write_post("only", "2024-01-01")

        result = runner.invoke(app, ["list", "blog", "--page", "5"])

        assert result.exit_code == 1
        assert "out of range" in result.output


def test_new_creates_draft_post() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))

        result = runner.invoke(app, ["new", "blog", "My First Post", "--title", "Hello"])

        assert result.exit_code == 0, result.output
        assert "slug normalized to 'my-first-post'" in result.output
        text = Path("content/blog/my-first-post.md").read_text(encoding="utf-8")
        assert "title: Hello" in text
        assert "draft: true" in text


def test_new_refuses_to_overwrite() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        runner.invoke(app, ["new", "projects", "tracer"])

        result = runner.invoke(app, ["new", "projects", "tracer"])

        assert result.exit_code == 1
        assert "Cannot scaffold" in result.output
        assert Path("content/projects/tracer/index.md").exists()


def test_clean_removes_output() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))
        Path("dist/blog").mkdir(parents=True)

        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 0, result.output
        assert not Path("dist").exists()


def test_preview_requires_built_site() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        _write_config(Path("softirq.yml"))

        result = runner.invoke(app, ["preview"])

        assert result.exit_code == 1
        assert "Site output not found" in result.output
