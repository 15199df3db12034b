"""Loading of the account graph from the Account Gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from cloudobjects.cache.keys import CacheKeys
from cloudobjects.cache.stores import KeyValueStore
from cloudobjects.cache.tiered import ResolutionCache
from cloudobjects.core.exceptions import RemoteServiceError, TransportError
from cloudobjects.core.vocabulary import JSONLD_MEDIA_TYPE
from cloudobjects.graph.document import Document

if TYPE_CHECKING:
    from cloudobjects.accountgateway.context import AccountContext

logger = logging.getLogger(__name__)


class DataLoader:
    """
    Fetches the account graph of an account context.

    With a store configured and a ``C-Data-Updated`` header on the
    incoming request, the graph is cached under ``accdata:{aauid}`` as
    ``timestamp|data`` and reused as long as the timestamp matches.
    """

    CACHE_TTL = 172800  # 48 hours
    SEPARATOR = "|"
    DATA_UPDATED_HEADER = "C-Data-Updated"

    def __init__(
        self,
        cache: KeyValueStore | None = None,
        *,
        cache_prefix: str = CacheKeys.ACCOUNT_DATA_PREFIX,
        mount_point_name: str = "~",
    ) -> None:
        self.cache = cache
        self.cache_prefix = cache_prefix
        self.mount_point_name = mount_point_name

    def set_cache(self, cache: KeyValueStore | None) -> DataLoader:
        self.cache = cache
        return self

    def set_cache_prefix(self, cache_prefix: str) -> DataLoader:
        self.cache_prefix = cache_prefix
        return self

    def set_mount_point_name(self, mount_point_name: str) -> DataLoader:
        self.mount_point_name = mount_point_name
        return self

    async def _fetch(self, context: AccountContext) -> str:
        path = f"/{self.mount_point_name}/"
        try:
            response = await context.get_client().get(path, headers={"Accept": JSONLD_MEDIA_TYPE})
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=path) from e
        if not response.is_success:
            raise RemoteServiceError(
                f"Account Gateway returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )
        return response.text

    async def fetch_account_graph_data_document(self, context: AccountContext) -> Document:
        """
        Get the account graph for a context.

        Raises:
            TransportError: If the Account Gateway could not be reached
            RemoteServiceError: If the Account Gateway returned an error
        """
        timestamp = None
        if context.request_headers is not None:
            timestamp = context.request_headers.get(self.DATA_UPDATED_HEADER)

        if self.cache is None or timestamp is None:
            return Document.parse(await self._fetch(context))

        cache: ResolutionCache[Document] = ResolutionCache(
            self.cache, prefix=self.cache_prefix, separator=self.SEPARATOR
        )
        key = str(context.aauid)
        hit = await cache.get(key, marker=timestamp)
        if hit is not None:
            logger.debug(f"Using cached account graph for {key}")
            return Document.parse(hit.payload)

        data = await self._fetch(context)
        await cache.put(key, timestamp, data, self.CACHE_TTL)
        return Document.parse(data)
