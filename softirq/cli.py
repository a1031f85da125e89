"""CLI entrypoints for the softirq site builder."""

import logging
import webbrowser
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import BuildMode, Config, load_config
from .content.models import CollectionName
from .errors import ContentError
from .ingest import load_index
from .lint import DocumentIssue, IssueSeverity, lint_workspace
from .preview_server import bound_url, make_request_handler, serve
from .render import format_display_date
from .scaffold import ScaffoldError, ScaffoldResult, normalize_slug, scaffold_entry
from .site import BuildResult, build_site
from .staging import StagingError, remove_path
from .themes import ThemeError

console = Console()
app = typer.Typer(help="Build the Software Interrupt blog and portfolio site.")

DEFAULT_CONFIG = "softirq.yml"

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file."),
]
TitleOption = Annotated[
    str | None,
    typer.Option("--title", "-t", help="Override the default title derived from the slug."),
]
ForceFlag = Annotated[
    bool,
    typer.Option("--force", "-f", help="Overwrite existing files if they already exist."),
]
DraftsFlag = Annotated[
    bool,
    typer.Option("--drafts", help="Include draft entries (preview mode only)."),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """Build the Software Interrupt blog and portfolio site."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


@app.command()
def build(
    config_path: ConfigPathOption = DEFAULT_CONFIG,
    preview: Annotated[
        bool,
        typer.Option("--preview", help="Build in preview mode and include drafts."),
    ] = False,
) -> None:
    """Validate all content and render the full site."""
    config = _load(config_path)
    if preview:
        config = config.with_mode(BuildMode.PREVIEW)

    try:
        result = build_site(config)
    except ContentError as exc:
        console.print(f"[bold red]Build failed[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except (ThemeError, StagingError) as exc:
        console.print(f"[bold red]Build failed[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _print_build_summary(config, result)


@app.command()
def lint(
    config_path: ConfigPathOption = DEFAULT_CONFIG,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Treat warnings as errors."),
    ] = False,
) -> None:
    """Check every document and report all problems at once."""
    config = _load(config_path)
    report = lint_workspace(config)

    if not report.issues:
        console.print(
            f"[bold green]Lint clean[/]: {report.document_count} document(s), no issues detected."
        )
        raise typer.Exit()

    for issue in sorted(report.issues, key=_lint_sort_key):
        style = "red" if issue.severity is IssueSeverity.ERROR else "yellow"
        location = _display_path(Path(issue.source_path))
        if issue.pointer:
            location = f"{location} :: {issue.pointer}"
        console.print(f"[bold {style}]{issue.severity.name}[/] {location} - {escape(issue.message)}")

    console.print(
        f"[bold blue]Summary[/]: {report.error_count} error(s), {report.warning_count} warning(s) "
        f"across {report.document_count} document(s)."
    )

    exit_code = 0
    if report.error_count > 0 or (strict and report.warning_count > 0):
        exit_code = 1
    raise typer.Exit(code=exit_code)


@app.command("list")
def list_entries(
    collection: Annotated[
        CollectionName,
        typer.Argument(..., help="Collection to list."),
    ],
    config_path: ConfigPathOption = DEFAULT_CONFIG,
    page: Annotated[
        int,
        typer.Option("--page", "-p", min=1, help="Page number to show."),
    ] = 1,
    page_size: Annotated[
        int | None,
        typer.Option("--page-size", min=1, help="Entries per page; defaults to the site setting."),
    ] = None,
    sort: Annotated[
        str,
        typer.Option("--sort", help="Sort expression such as 'date desc' or 'title asc'."),
    ] = "date desc",
    drafts: DraftsFlag = False,
) -> None:
    """Show one page of a collection as a table."""
    config = _load(config_path)
    if drafts:
        config = config.with_mode(BuildMode.PREVIEW)

    try:
        index = load_index(config)
        listing = index.collection(collection).paginate(
            page_size or config.site.per_page(collection.value),
            page,
            sort=sort,
            drafts=drafts,
        )
    except ContentError as exc:
        console.print(f"[bold red]Cannot list {collection.value}[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    metadata = config.site.page_metadata(collection.value)
    table = Table(title=f"{metadata.title} (page {listing.number}/{listing.total_pages})")
    table.add_column("Date", no_wrap=True)
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Draft", justify="center")
    for entry in listing.items:
        table.add_row(
            format_display_date(entry.date),
            escape(entry.slug),
            escape(entry.title),
            "yes" if entry.draft else "",
        )
    console.print(table)
    console.print(f"[bold blue]Total[/]: {listing.total_items} entr{'y' if listing.total_items == 1 else 'ies'}.")


@app.command()
def new(
    collection: Annotated[
        CollectionName,
        typer.Argument(..., help="Collection that receives the new entry."),
    ],
    slug: Annotated[
        str,
        typer.Argument(..., help="Slug used for the entry's file and URL."),
    ],
    title: TitleOption = None,
    config_path: ConfigPathOption = DEFAULT_CONFIG,
    force: ForceFlag = False,
) -> None:
    """Create a draft blog post or project with valid front matter."""
    try:
        normalized_slug = normalize_slug(slug)
    except ScaffoldError as exc:
        console.print(f"[bold red]Cannot scaffold[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    config = _load(config_path)

    try:
        result = scaffold_entry(config, collection, normalized_slug, title, force=force)
    except ScaffoldError as exc:
        console.print(f"[bold red]Cannot scaffold[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if normalized_slug != slug:
        console.print(f"[bold yellow]Note[/]: slug normalized to '{normalized_slug}'.")

    _print_scaffold_summary(collection, normalized_slug, result)


@app.command()
def preview(
    config_path: ConfigPathOption = DEFAULT_CONFIG,
    host: Annotated[
        str,
        typer.Option("--host", help="Host interface to bind the preview server."),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option("--port", "-p", help="Port for the preview server."),
    ] = 8000,
    open_browser: Annotated[
        bool,
        typer.Option(
            "--open-browser/--no-open-browser",
            help="Automatically open the site in a browser after starting.",
        ),
    ] = False,
) -> None:
    """Serve the generated site directory with a simple HTTP server."""
    config = _load(config_path)
    if port < 0 or port > 65535:
        raise typer.BadParameter("Port must be between 0 and 65535.")

    output_dir = Path(config.output_dir)
    if not output_dir.exists():
        console.print(f"[bold red]Site output not found[/]: {_display_path(output_dir)}")
        console.print("Run 'softirq build' to generate the site before previewing.")
        raise typer.Exit(code=1)

    handler = make_request_handler(output_dir)
    try:
        with serve(host, port, handler) as server:
            site_url = bound_url(server)
            console.print(
                f"[bold green]Preview server[/]: serving {_display_path(output_dir)} at {site_url} "
                "(press Ctrl+C to stop)"
            )
            if open_browser:
                webbrowser.open(site_url)
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                console.print("\n[bold yellow]Stopping preview server...[/]")
    except OSError as exc:
        console.print(f"[bold red]Failed to start preview server[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.command()
def clean(config_path: ConfigPathOption = DEFAULT_CONFIG) -> None:
    """Remove the generated site directory."""
    config = _load(config_path)
    output_dir = Path(config.output_dir)
    if output_dir.exists():
        console.print(f"[bold green]Removing[/]: site output ({_display_path(output_dir)})")
        remove_path(output_dir)
        console.print("[bold green]Clean complete[/]: removed 1 directory.")
    else:
        console.print(f"[bold yellow]Skipping[/]: site output ({_display_path(output_dir)}) not found")


def _print_build_summary(config: Config, result: BuildResult) -> None:
    report = result.report
    mode = "preview" if config.is_preview else "production"
    console.print(f"[bold green]Build complete[/]: {mode} build of '{config.project_name}'")
    for name, stats in report.collections.items():
        console.print(
            f"[bold green]{name.capitalize()}[/]: {stats.total} entr{'y' if stats.total == 1 else 'ies'} "
            f"(published {stats.published}, drafts {stats.drafts})"
        )
    console.print(
        "[bold green]Pages[/]: "
        f"{report.pages.entries} entry page(s), {report.pages.listings} listing page(s), "
        f"{report.pages.other} other page(s) in {_display_path(config.output_dir)}"
    )
    console.print(f"[bold green]Static[/]: {len(result.staging.staged_paths)} file(s) staged")
    if result.artifacts:
        locations = ", ".join(_display_path(path) for path in result.artifacts)
        console.print(f"[bold green]Artifacts[/]: {locations}")
    console.print(
        "[bold green]Report[/]: "
        f"{_display_path(result.report_path)} (duration {report.duration_seconds:.2f}s)"
    )
    if report.warnings:
        console.print("[bold yellow]Warnings:[/]")
        for warning in report.warnings:
            console.print(f"- {escape(warning)}")


def _print_scaffold_summary(collection: CollectionName, slug: str, result: ScaffoldResult) -> None:
    console.print(f"[bold green]Scaffold ready[/]: {collection.value} '{slug}'")

    for path in result.created:
        console.print(f"- {_display_path(path)} (new)")
    for path in result.updated:
        console.print(f"- {_display_path(path)} (updated)")

    if result.notes:
        console.print("[bold blue]Next steps[/]:")
        for note in result.notes:
            console.print(f"- {escape(note)}")


def _lint_sort_key(issue: DocumentIssue) -> tuple[int, str, str]:
    severity_order = 0 if issue.severity is IssueSeverity.ERROR else 1
    return (severity_order, issue.source_path, issue.pointer or "")


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


if __name__ == "__main__":
    app()
