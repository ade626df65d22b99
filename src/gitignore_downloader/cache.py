"""Local cache of the available template names.

The cache is a small JSON file::

    {"fetched_at": 1700000000, "types": ["Go", "Node", "Rust"]}

It is advisory: a missing, unreadable or stale file is a cache miss and
triggers a fresh directory fetch. Writes are direct (last writer wins).
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from gitignore_downloader.config import get_cache_path
from gitignore_downloader.errors import FilesystemError

if TYPE_CHECKING:
    from gitignore_downloader.client import TemplateClient

logger = logging.getLogger(__name__)


@dataclass
class CachedTypeList:
    """Template names together with the time they were fetched."""

    fetched_at: int
    """Unix timestamp (seconds) of the directory fetch"""

    types: List[str] = field(default_factory=list)
    """Sorted, de-duplicated template names"""

    def is_fresh(self, ttl_seconds: int, now: Optional[float] = None) -> bool:
        """Return True while the entry is younger than ``ttl_seconds``.

        A timestamp in the future never counts as fresh.
        """
        current = time.time() if now is None else now
        age = current - self.fetched_at
        return 0 <= age <= ttl_seconds

    def to_dict(self) -> dict:
        return {"fetched_at": self.fetched_at, "types": list(self.types)}

    @classmethod
    def from_dict(cls, data: object) -> "CachedTypeList":
        if not isinstance(data, dict):
            raise ValueError("cache payload must be an object")
        fetched_at = data.get("fetched_at")
        types = data.get("types")
        if isinstance(fetched_at, bool) or not isinstance(fetched_at, int):
            raise ValueError("fetched_at must be an integer")
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            raise ValueError("types must be a list of strings")
        return cls(fetched_at=fetched_at, types=types)


class CacheStore:
    """Reads and writes the cached type list."""

    def __init__(self, path: Path | None = None):
        self.path = path if path is not None else get_cache_path()

    def read(self) -> Optional[CachedTypeList]:
        """Return the cached entry regardless of age, or None if unusable."""
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return CachedTypeList.from_dict(payload)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.debug("Ignoring unreadable cache %s: %s", self.path, exc)
            return None

    def load(self, ttl_seconds: int) -> Optional[List[str]]:
        """Return cached types if present and fresh, otherwise None."""
        cached = self.read()
        if cached is None:
            return None
        if not cached.is_fresh(ttl_seconds):
            logger.debug("Cache %s is stale (fetched_at=%s)", self.path, cached.fetched_at)
            return None
        return list(cached.types)

    def save(self, types: List[str]) -> None:
        """Persist ``types`` stamped with the current time."""
        cached = CachedTypeList(fetched_at=int(time.time()), types=list(types))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(cached.to_dict()), encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(f"Cannot write cache file {self.path}: {exc}", path=self.path) from exc
        logger.debug("Cached %d template types at %s", len(types), self.path)


def load_types(
    client: "TemplateClient",
    store: CacheStore,
    *,
    no_cache: bool = False,
    ttl_seconds: int,
) -> List[str]:
    """Return available template names from the cache or the network.

    ``no_cache`` skips the cache read but the fresh list is still saved.
    """
    if not no_cache:
        cached = store.load(ttl_seconds)
        if cached is not None:
            logger.debug("Using %d cached template types", len(cached))
            return cached

    fresh = client.list_types()
    store.save(fresh)
    return fresh
