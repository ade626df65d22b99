"""
gitignore-downloader - fetch .gitignore templates from github/gitignore.

Usage:
    gitignore-downloader rust node
    gitignore-downloader --list
    gitignore-downloader --dry-run python
    gitignore-downloader            # opens a fuzzy picker
"""

import typer

from gitignore_downloader.cli.commands import fetch
from gitignore_downloader.config import APP_NAME, VERSION

__version__ = VERSION

app = typer.Typer(
    name=APP_NAME,
    help="Fetch .gitignore templates from github/gitignore",
    add_completion=False,
)
app.command()(fetch)


def main():
    app()


if __name__ == "__main__":
    main()
