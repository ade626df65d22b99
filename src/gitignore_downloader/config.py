"""Configuration for gitignore-downloader.

Settings are resolved in this order (first wins):

1. Command-line flags
2. Environment variables (``GITIGNORE_DOWNLOADER_*``, ``GH_TOKEN``, ``GITHUB_TOKEN``)
3. ``[gitignore]`` section of the user config file
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import toml  # type: ignore[import-untyped]
from platformdirs import user_cache_dir, user_config_dir

from gitignore_downloader.errors import ConfigError, ParseError

logger = logging.getLogger(__name__)

VERSION = "0.1.0"
APP_NAME = "gitignore-downloader"
USER_AGENT = f"{APP_NAME}/{VERSION}"

TYPES_URL = "https://api.github.com/repos/github/gitignore/contents"
RAW_BASE_URL = "https://raw.githubusercontent.com/github/gitignore/master/"
TEMPLATE_SUFFIX = ".gitignore"

CACHE_FILE = "types.json"
CONFIG_FILE = "config.toml"
CONFIG_SECTION = "gitignore"

DEFAULT_OUTPUT = ".gitignore"
DEFAULT_CACHE_TTL_MINUTES = 60 * 24
DEFAULT_TIMEOUT_SECONDS = 30.0

CACHE_DIR_ENV = "GITIGNORE_DOWNLOADER_CACHE_DIR"
CONFIG_PATH_ENV = "GITIGNORE_DOWNLOADER_CONFIG"


def resolve_github_token(cli_token: str | None = None) -> str | None:
    """Return sanitized GitHub token (cli arg takes precedence) or None."""
    return ((cli_token or os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()) or None


def get_cache_dir() -> Path:
    """Return the directory holding the cached type list.

    Resolution order:
    1. GITIGNORE_DOWNLOADER_CACHE_DIR environment variable
    2. The platform cache directory (via platformdirs)

    Raises:
        ConfigError: If no cache directory can be determined.
    """
    if env_dir := os.environ.get(CACHE_DIR_ENV):
        return Path(env_dir).expanduser()

    try:
        resolved = user_cache_dir(APP_NAME, APP_NAME)
    except Exception as exc:
        raise ConfigError(f"Cannot determine cache directory: {exc}") from exc
    if not resolved:
        raise ConfigError("Cannot determine cache directory")
    return Path(resolved)


def get_cache_path() -> Path:
    return get_cache_dir() / CACHE_FILE


def get_config_path() -> Path:
    """Return the user config file path (it does not have to exist)."""
    if env_path := os.environ.get(CONFIG_PATH_ENV):
        return Path(env_path).expanduser()
    return Path(user_config_dir(APP_NAME, APP_NAME)) / CONFIG_FILE


@dataclass(frozen=True)
class DownloaderConfig:
    """Resolved settings for one run."""

    output: Path = Path(DEFAULT_OUTPUT)
    cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES
    types_url: str = TYPES_URL
    raw_base_url: str = RAW_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    github_token: str | None = None

    @property
    def cache_ttl_seconds(self) -> int:
        return self.cache_ttl_minutes * 60

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DownloaderConfig":
        """Build a config from the ``[gitignore]`` table of the config file.

        Unknown keys are ignored. Values of the wrong type raise ConfigError.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"[{CONFIG_SECTION}] must be a table")

        config = cls()
        if "output" in data:
            output = data["output"]
            if not isinstance(output, str) or not output.strip():
                raise ConfigError("output must be a non-empty string")
            config = replace(config, output=Path(output).expanduser())
        if "cache_ttl_minutes" in data:
            config = replace(config, cache_ttl_minutes=_validate_ttl(data["cache_ttl_minutes"]))
        for key in ("types_url", "raw_base_url"):
            if key in data:
                value = data[key]
                if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                    raise ConfigError(f"{key} must be an http(s) URL")
                config = replace(config, **{key: value})
        if "timeout_seconds" in data:
            timeout = data["timeout_seconds"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("timeout_seconds must be a positive number")
            config = replace(config, timeout_seconds=float(timeout))
        return config

    def merged_with(
        self,
        *,
        output: Path | None = None,
        cache_ttl_minutes: int | None = None,
        github_token: str | None = None,
    ) -> "DownloaderConfig":
        """Return a copy with command-line values layered on top."""
        config = self
        if output is not None:
            config = replace(config, output=output)
        if cache_ttl_minutes is not None:
            config = replace(config, cache_ttl_minutes=_validate_ttl(cache_ttl_minutes))
        token = resolve_github_token(github_token)
        if token:
            config = replace(config, github_token=token)
        return config


def _validate_ttl(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError("cache_ttl_minutes must be a non-negative integer")
    return value


def load_config(path: Path | None = None) -> DownloaderConfig:
    """Load the user config file, falling back to defaults when absent.

    Raises:
        ParseError: If the file exists but is not valid TOML.
        ConfigError: If a recognised key holds an invalid value.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return DownloaderConfig()

    try:
        raw: dict[str, Any] = toml.load(config_path)
    except toml.TomlDecodeError as exc:
        raise ParseError(f"Invalid config file {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    logger.debug("Loaded config from %s", config_path)
    return DownloaderConfig.from_dict(raw.get(CONFIG_SECTION))
