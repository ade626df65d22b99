"""Interactive fuzzy picker for template names."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import readchar
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from gitignore_downloader.errors import SelectionError

MAX_VISIBLE = 10


def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key == readchar.key.UP or key == readchar.key.CTRL_P:
        return "up"
    if key == readchar.key.DOWN or key == readchar.key.CTRL_N:
        return "down"

    if key == readchar.key.ENTER or key == "\n":
        return "enter"

    if key == readchar.key.BACKSPACE or key == "\x08":
        return "backspace"

    if key == readchar.key.ESC or key == "\x1b":
        return "escape"

    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


def fuzzy_score(candidate: str, query: str) -> Optional[int]:
    """Score ``candidate`` against ``query`` as a case-insensitive subsequence.

    Returns None when the query characters do not all appear in order.
    Consecutive matches and matches at word starts score higher.
    """
    if not query:
        return 0

    haystack = candidate.lower()
    score = 0
    position = 0
    previous = -2
    for char in query.lower():
        index = haystack.find(char, position)
        if index == -1:
            return None
        score += 1
        if index == previous + 1:
            score += 5
        if index == 0 or not candidate[index - 1].isalnum() or candidate[index].isupper():
            score += 3
        score -= min(index - position, 3)
        previous = index
        position = index + 1
    return score


def fuzzy_filter(options: Sequence[str], query: str) -> List[str]:
    """Return options matching ``query``, best match first.

    Ties keep their original order; an empty query returns every option.
    """
    scored: List[Tuple[int, int, str]] = []
    for index, option in enumerate(options):
        score = fuzzy_score(option, query)
        if score is not None:
            scored.append((-score, index, option))
    scored.sort()
    return [option for _, _, option in scored]


def _visible_window(total: int, cursor: int) -> Tuple[int, int]:
    if total <= MAX_VISIBLE:
        return 0, total
    start = min(max(cursor - MAX_VISIBLE // 2, 0), total - MAX_VISIBLE)
    return start, start + MAX_VISIBLE


def choose_template(
    options: Sequence[str],
    prompt_text: str = "Select a gitignore template",
    console: Console | None = None,
) -> str:
    """Let the user pick one option with type-to-filter and arrow keys.

    The first option is highlighted initially.

    Raises:
        SelectionError: If there is nothing to choose from, the prompt is
            cancelled, or the chosen index falls outside the list.
    """
    if not options:
        raise SelectionError("No templates available to choose from")

    console = console or Console()
    query = ""
    matches = list(options)
    cursor = 0

    def build_panel() -> Panel:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")

        table.add_row("?", f"[bold]{escape(query)}[/bold][dim]_[/dim]")
        start, end = _visible_window(len(matches), cursor)
        for i in range(start, end):
            if i == cursor:
                table.add_row("▶", f"[cyan]{escape(matches[i])}[/cyan]")
            else:
                table.add_row(" ", escape(matches[i]))
        if not matches:
            table.add_row("", "[dim]No matches[/dim]")

        table.add_row("", "")
        table.add_row(
            "",
            f"[dim]{len(matches)}/{len(options)} · Type to filter, ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]",
        )
        return Panel(table, title=f"[bold]{escape(prompt_text)}[/bold]", border_style="cyan", padding=(1, 2))

    console.print()

    with Live(build_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                raise SelectionError("Selection cancelled") from None

            if key == "escape":
                raise SelectionError("Selection cancelled")
            if key == "enter":
                if matches:
                    break
            elif key == "up" and matches:
                cursor = (cursor - 1) % len(matches)
            elif key == "down" and matches:
                cursor = (cursor + 1) % len(matches)
            elif key == "backspace":
                query = query[:-1]
                matches = fuzzy_filter(options, query)
                cursor = 0
            elif len(key) == 1 and key.isprintable():
                query += key
                matches = fuzzy_filter(options, query)
                cursor = 0

            live.update(build_panel(), refresh=True)

    # Unreachable while Enter requires a match
    if not 0 <= cursor < len(matches):
        raise SelectionError("Selection out of range")
    return matches[cursor]


__all__ = [
    "choose_template",
    "fuzzy_filter",
    "fuzzy_score",
    "get_key",
]
