"""Merge fetched templates into an ignore file.

Three modes are supported:

- ``DRY_RUN`` prints every template to stdout and touches no files.
- ``OVERWRITE`` replaces the destination with all templates in one write.
- ``APPEND`` adds templates to the end of the destination, skipping any
  whose content already appears in the file as it was when the run began.

Every template is rendered as::

    # --- <name> ---
    <content, newline-terminated>
    <blank line>
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape

from gitignore_downloader.errors import FilesystemError
from gitignore_downloader.templates import Template

logger = logging.getLogger(__name__)


class WriteMode(str, Enum):
    DRY_RUN = "dry-run"
    OVERWRITE = "overwrite"
    APPEND = "append"

    @classmethod
    def from_flags(cls, *, overwrite: bool, dry_run: bool) -> "WriteMode":
        """Dry-run wins over overwrite; append is the default."""
        if dry_run:
            return cls.DRY_RUN
        if overwrite:
            return cls.OVERWRITE
        return cls.APPEND


@dataclass
class WriteResult:
    """Outcome of a write_templates call."""

    mode: WriteMode
    output: Path
    written: List[str] = field(default_factory=list)
    """Templates written (overwrite), appended (append) or printed (dry-run)"""

    skipped: List[str] = field(default_factory=list)
    """Templates skipped because their content was already present"""

    @property
    def modified(self) -> bool:
        return self.mode is not WriteMode.DRY_RUN and bool(self.written)


def header_line(name: str) -> str:
    return f"# --- {name} ---\n"


def render_template(template: Template) -> str:
    """Render one template block, including the trailing blank line."""
    body = template.content
    if not body.endswith("\n"):
        body += "\n"
    return header_line(template.name) + body + "\n"


def write_templates(
    output: Path,
    templates: Sequence[Template],
    mode: WriteMode = WriteMode.APPEND,
    *,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
) -> WriteResult:
    """Write ``templates`` to ``output`` according to ``mode``.

    Raises:
        FilesystemError: If the destination cannot be read or written.
    """
    console = console or Console()
    err_console = err_console or Console(stderr=True)
    output = Path(output)

    if mode is WriteMode.DRY_RUN:
        return _print_templates(output, templates)
    if mode is WriteMode.OVERWRITE:
        return _overwrite_templates(output, templates, console)
    return _append_templates(output, templates, console, err_console)


def _print_templates(output: Path, templates: Sequence[Template]) -> WriteResult:
    result = WriteResult(mode=WriteMode.DRY_RUN, output=output)
    for template in templates:
        # Raw output: template content must not be treated as Rich markup
        typer.echo(render_template(template), nl=False)
        result.written.append(template.name)
    return result


def _overwrite_templates(output: Path, templates: Sequence[Template], console: Console) -> WriteResult:
    buffer = "".join(render_template(template) for template in templates)
    try:
        with open(output, "w", encoding="utf-8", newline="") as handle:
            handle.write(buffer)
    except OSError as exc:
        raise FilesystemError(f"Cannot write {output}: {exc}", path=output) from exc

    logger.debug("Overwrote %s with %d template(s)", output, len(templates))
    console.print(f"[green]Wrote templates to[/green] {escape(str(output))}", soft_wrap=True)
    return WriteResult(
        mode=WriteMode.OVERWRITE,
        output=output,
        written=[template.name for template in templates],
    )


def _read_existing(output: Path) -> str:
    try:
        with open(output, "r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except (FileNotFoundError, UnicodeDecodeError):
        # Undecodable content gives an empty snapshot; appending still proceeds
        return ""
    except OSError as exc:
        raise FilesystemError(f"Cannot read {output}: {exc}", path=output) from exc


def _append_templates(
    output: Path,
    templates: Sequence[Template],
    console: Console,
    err_console: Console,
) -> WriteResult:
    result = WriteResult(mode=WriteMode.APPEND, output=output)
    # Snapshot taken once; templates appended during this run are not seen
    existing_content = _read_existing(output)

    try:
        with open(output, "a", encoding="utf-8", newline="") as handle:
            for template in templates:
                if existing_content and template.content in existing_content:
                    err_console.print(f"[yellow]Skipping[/yellow] {escape(template.name)} (already present)")
                    result.skipped.append(template.name)
                    continue

                if os.fstat(handle.fileno()).st_size > 0:
                    handle.write("\n")
                handle.write(render_template(template))
                handle.flush()
                console.print(f"[green]Appended[/green] {escape(template.name)}")
                result.written.append(template.name)
    except OSError as exc:
        raise FilesystemError(f"Cannot write {output}: {exc}", path=output) from exc

    logger.debug(
        "Appended %d and skipped %d template(s) in %s",
        len(result.written),
        len(result.skipped),
        output,
    )
    return result
