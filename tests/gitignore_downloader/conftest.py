from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator, List

import httpx
import pytest

from gitignore_downloader.client import TemplateClient

TYPES_URL = "https://api.example.test/repos/github/gitignore/contents"
RAW_BASE_URL = "https://raw.example.test/github/gitignore/master/"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep cache, config and tokens away from the developer's machine."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv("GITIGNORE_DOWNLOADER_CACHE_DIR", str(cache_dir))
    monkeypatch.setenv("GITIGNORE_DOWNLOADER_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield cache_dir


class FakeGitHub:
    """Serves a directory listing and raw templates through httpx.MockTransport."""

    def __init__(self) -> None:
        self.listing: object = []
        self.listing_status = 200
        self.templates: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url == TYPES_URL:
            if self.listing_status != 200:
                return httpx.Response(self.listing_status, json={"message": "rate limited"})
            return httpx.Response(200, json=self.listing)
        if url.startswith(RAW_BASE_URL):
            filename = url[len(RAW_BASE_URL):]
            name = filename[: -len(".gitignore")]
            if name in self.templates:
                return httpx.Response(200, text=self.templates[name])
        return httpx.Response(404, text="404: Not Found")

    def client(self, **kwargs) -> TemplateClient:
        http = httpx.Client(transport=httpx.MockTransport(self.handler))
        return TemplateClient(http, types_url=TYPES_URL, raw_base_url=RAW_BASE_URL, **kwargs)

    def requested_urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture()
def github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.listing = [
        {"name": ".github", "type": "dir"},
        {"name": "Rust.gitignore", "type": "file"},
        {"name": "Node.gitignore", "type": "file"},
        {"name": "Go.gitignore", "type": "file"},
        {"name": "README.md", "type": "file"},
    ]
    fake.templates = {
        "Rust": "target/\n",
        "Node": "node_modules/\n",
        "Go": "*.exe\nvendor/",
    }
    return fake


@pytest.fixture()
def client_factory(github: FakeGitHub) -> Callable[..., TemplateClient]:
    return lambda config: github.client(github_token=config.github_token)
