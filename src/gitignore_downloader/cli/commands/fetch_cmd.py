"""The ``gitignore-downloader`` command.

Wires the pipeline together: list types (cache or network), pick one
interactively when no names are given, fetch the template bodies and
merge them into the destination file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gitignore_downloader.cache import CacheStore, load_types
from gitignore_downloader.cli.ui import choose_template
from gitignore_downloader.client import TemplateClient
from gitignore_downloader.config import APP_NAME, VERSION, DownloaderConfig, load_config
from gitignore_downloader.errors import GitignoreDownloaderError, SelectionError
from gitignore_downloader.templates import normalize_type
from gitignore_downloader.writer import WriteMode, write_templates

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG with --verbose, WARNING otherwise."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def build_client(config: DownloaderConfig) -> TemplateClient:
    return TemplateClient(
        types_url=config.types_url,
        raw_base_url=config.raw_base_url,
        github_token=config.github_token,
        timeout=config.timeout_seconds,
    )


def build_cache_store() -> CacheStore:
    return CacheStore()


def stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {VERSION}")
        raise typer.Exit()


def fetch(
    types: Optional[List[str]] = typer.Argument(
        None,
        metavar="TYPE...",
        help="Template type(s) to fetch (e.g. rust, node). If omitted, a fuzzy picker opens.",
        show_default=False,
    ),
    list_types: bool = typer.Option(False, "--list", "-l", help="List all available template types."),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        metavar="PATH",
        help="Output path (defaults to .gitignore in the current directory).",
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite the output instead of appending."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the template(s) instead of writing to disk."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore cached type list and hit the API."),
    cache_ttl_minutes: Optional[int] = typer.Option(
        None,
        "--cache-ttl-minutes",
        metavar="MINUTES",
        min=0,
        help="Cache time-to-live for the type list, in minutes (default: 1440).",
    ),
    github_token: Optional[str] = typer.Option(
        None,
        "--github-token",
        help="GitHub token for API requests (falls back to GH_TOKEN or GITHUB_TOKEN).",
        show_default=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Fetch .gitignore templates from github/gitignore."""
    configure_logging(verbose)
    try:
        run(
            types or [],
            list_types=list_types,
            output=output,
            overwrite=overwrite,
            dry_run=dry_run,
            no_cache=no_cache,
            cache_ttl_minutes=cache_ttl_minutes,
            github_token=github_token,
        )
    except GitignoreDownloaderError as exc:
        logger.debug("Aborting", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(1)


def run(
    types: List[str],
    *,
    list_types: bool = False,
    output: Optional[Path] = None,
    overwrite: bool = False,
    dry_run: bool = False,
    no_cache: bool = False,
    cache_ttl_minutes: Optional[int] = None,
    github_token: Optional[str] = None,
) -> None:
    """Execute one invocation; raises GitignoreDownloaderError on failure."""
    config = load_config().merged_with(
        output=output,
        cache_ttl_minutes=cache_ttl_minutes,
        github_token=github_token,
    )

    with build_client(config) as client:
        if list_types:
            available = load_types(client, build_cache_store(), no_cache=no_cache, ttl_seconds=config.cache_ttl_seconds)
            for name in available:
                typer.echo(name)
            return

        selected = list(types)
        if not selected:
            if not stdin_is_interactive():
                raise SelectionError("No template type given and stdin is not a terminal")
            available = load_types(client, build_cache_store(), no_cache=no_cache, ttl_seconds=config.cache_ttl_seconds)
            selected.append(choose_template(available, console=console))

        normalized = [normalize_type(name) for name in selected]
        logger.debug("Fetching templates: %s", ", ".join(normalized))
        templates = client.fetch_templates(normalized)

    result = write_templates(
        config.output,
        templates,
        WriteMode.from_flags(overwrite=overwrite, dry_run=dry_run),
        console=console,
        err_console=err_console,
    )
    if result.mode is WriteMode.APPEND and not result.modified:
        console.print(
            f"[dim]Nothing appended; {escape(str(result.output))} already contains every template[/dim]",
            soft_wrap=True,
        )
