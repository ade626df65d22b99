"""HTTP access to the github/gitignore template collection."""

from __future__ import annotations

import logging
import ssl
from typing import Iterable, List, Optional

import httpx
import truststore

from gitignore_downloader.config import (
    DEFAULT_TIMEOUT_SECONDS,
    RAW_BASE_URL,
    TEMPLATE_SUFFIX,
    TYPES_URL,
    USER_AGENT,
)
from gitignore_downloader.errors import NetworkError, ParseError
from gitignore_downloader.templates import Template, built_in_flag

logger = logging.getLogger(__name__)


def build_http_client(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.Client:
    """Return an httpx client that verifies TLS against the OS trust store."""
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(
        verify=ssl_context,
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def _auth_headers(token: Optional[str]) -> dict:
    """Return Authorization header dict only when a non-empty token exists."""
    return {"Authorization": f"Bearer {token}"} if token else {}


def parse_type_listing(entries: object) -> List[str]:
    """Turn a directory listing payload into sorted, unique template names.

    Raises:
        ParseError: If the payload is not a list of objects with a string ``name``.
    """
    if not isinstance(entries, list):
        raise ParseError("Unexpected directory listing: expected a JSON array")

    types = set()
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise ParseError(f"Unexpected directory listing entry: {entry!r}")
        name = entry["name"]
        if name.endswith(TEMPLATE_SUFFIX):
            clean = name[: -len(TEMPLATE_SUFFIX)]
            if clean:
                types.add(clean)
    return sorted(types)


class TemplateClient:
    """Lists and downloads templates over a single HTTP client."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        types_url: str = TYPES_URL,
        raw_base_url: str = RAW_BASE_URL,
        github_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._owns_client = client is None
        self._client = client if client is not None else build_http_client(timeout)
        self.types_url = types_url
        self.raw_base_url = raw_base_url if raw_base_url.endswith("/") else raw_base_url + "/"
        self.github_token = github_token

    def __enter__(self) -> "TemplateClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _get(self, url: str, *, api: bool = False) -> httpx.Response:
        headers = _auth_headers(self.github_token) if api else {}
        logger.debug("GET %s", url)
        try:
            return self._client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"Request to {url!r} failed: {exc}", url=url) from exc
        except UnicodeEncodeError as exc:
            # Header values must be ASCII
            raise NetworkError(f"Request to {url!r} has a non-ASCII header value: {exc}", url=url) from exc

    def list_types(self) -> List[str]:
        """Fetch the names of all templates in the upstream collection."""
        response = self._get(self.types_url, api=True)
        if response.status_code != 200:
            raise NetworkError(
                f"Failed to fetch types (status {response.status_code})",
                url=self.types_url,
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Failed to parse directory listing: {exc}") from exc

        types = parse_type_listing(payload)
        logger.debug("Directory listing returned %d template types", len(types))
        return types

    def template_url(self, name: str) -> str:
        return f"{self.raw_base_url}{name}{TEMPLATE_SUFFIX}"

    def fetch_template(self, name: str) -> Template:
        """Return one template, from the built-in flags or the network."""
        snippet = built_in_flag(name)
        if snippet is not None:
            return Template(name=name, content=snippet)

        url = self.template_url(name)
        response = self._get(url)
        if response.status_code != 200:
            raise NetworkError(
                f"Template '{name}' not found (status {response.status_code})",
                url=url,
                status_code=response.status_code,
            )
        return Template(name=name, content=response.text)

    def fetch_templates(self, names: Iterable[str]) -> List[Template]:
        """Fetch templates in order, stopping at the first failure."""
        return [self.fetch_template(name) for name in names]
