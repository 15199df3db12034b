"""HTTP collaborator shared by object and attachment retrieval."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from pydantic import BaseModel

from cloudobjects.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class FetcherConfig(BaseModel):
    """Configuration for the object API client."""

    base_url: str = "https://api.cloudobjects.io/"
    timeout: float = 20.0
    connect_timeout: float = 5.0
    auth_ns: str | None = None
    auth_secret: str | None = None
    prefix: str = ""


class HTTPFetcher:
    """
    Issues GET requests against the object API.

    Paths are relative to the base URL and get the configured prefix
    (e.g. an Account Gateway mount point) prepended. Network failures
    and timeouts are raised as ``TransportError``; HTTP error statuses
    are not, callers inspect the response themselves.
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or FetcherConfig()
        self.prefix = self.config.prefix
        self._client = client
        self._owns_client = client is None

    def _create_client(self) -> httpx.AsyncClient:
        auth = None
        if self.config.auth_ns and self.config.auth_secret:
            auth = httpx.BasicAuth(self.config.auth_ns, self.config.auth_secret)
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout),
            headers=self._get_default_headers(),
            auth=auth,
            follow_redirects=True,
        )

    def _get_default_headers(self) -> dict[str, str]:
        return {"User-Agent": "cloudobjects-sdk-python/0.1"}

    @property
    def client(self) -> httpx.AsyncClient:
        """The HTTP client, created on first use."""
        if self._client is None or self._client.is_closed:
            self._client = self._create_client()
            self._owns_client = True
        return self._client

    def set_client(self, client: httpx.AsyncClient, prefix: str | None = None) -> None:
        """Replace the HTTP client, optionally with a path prefix."""
        self._client = client
        self._owns_client = False
        self.prefix = prefix or ""

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        try:
            yield self.client
        except httpx.HTTPError as e:
            url = str(e.request.url) if _has_request(e) else None
            raise TransportError(f"HTTP error: {e}", url=url) from e

    async def fetch(
        self,
        path: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET ``prefix + path``."""
        url = f"{self.prefix}{path}"
        logger.debug(f"GET {url}")
        async with self._get_client() as client:
            return await client.get(url, headers=headers, params=params)

    async def close(self) -> None:
        """Close the HTTP client if it was created here."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> HTTPFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _has_request(error: httpx.HTTPError) -> bool:
    try:
        error.request
    except RuntimeError:
        return False
    return True
