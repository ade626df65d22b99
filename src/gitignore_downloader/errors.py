"""Exception hierarchy for gitignore-downloader."""

from __future__ import annotations

from pathlib import Path


class GitignoreDownloaderError(Exception):
    """Base exception for all user-facing failures."""
    pass


class NetworkError(GitignoreDownloaderError):
    """An HTTP request failed or returned a non-200 status."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ParseError(GitignoreDownloaderError):
    """A response body or config file could not be decoded."""


class FilesystemError(GitignoreDownloaderError):
    """Reading or writing a local file failed."""

    def __init__(self, message: str, *, path: Path | None = None):
        self.path = path
        super().__init__(message)


class SelectionError(GitignoreDownloaderError):
    """The interactive picker was aborted or returned an invalid choice."""


class ConfigError(GitignoreDownloaderError):
    """Configuration is invalid or a required directory cannot be resolved."""


__all__ = [
    "GitignoreDownloaderError",
    "NetworkError",
    "ParseError",
    "FilesystemError",
    "SelectionError",
    "ConfigError",
]
