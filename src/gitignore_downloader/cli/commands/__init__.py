"""CLI command modules for gitignore-downloader."""

from .fetch_cmd import fetch

__all__ = ["fetch"]
