"""Retrieval of object descriptions through the tiered cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from cloudobjects.cache.client import AsyncRedisClient
from cloudobjects.cache.snapshot import StaticConfigSnapshot
from cloudobjects.cache.stores import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from cloudobjects.cache.tiered import ResolutionCache
from cloudobjects.core.exceptions import (
    ConfigurationError,
    RemoteServiceError,
    TransportError,
)
from cloudobjects.core.iri import IRI
from cloudobjects.core.types import CacheProvider, CacheTier
from cloudobjects.core.vocabulary import JSONLD_MEDIA_TYPE, REVISION_PROPERTY
from cloudobjects.graph.document import Document, DocumentParseError, Node
from cloudobjects.parsing.coid import COIDParser
from cloudobjects.resolution.base import FetcherConfig, HTTPFetcher

if TYPE_CHECKING:
    from cloudobjects.config import CloudObjectsSettings
    from cloudobjects.resolution.attachments import AttachmentRetriever

logger = logging.getLogger(__name__)


def create_store(settings: CloudObjectsSettings) -> KeyValueStore | None:
    """Build the external cache store selected in the settings."""
    match settings.cache_provider:
        case CacheProvider.NONE:
            return None
        case CacheProvider.MEMORY:
            return MemoryKeyValueStore()
        case CacheProvider.REDIS:
            if settings.redis_url is None:
                raise ConfigurationError("cache_provider 'redis' requires redis_url")
            return AsyncRedisClient(str(settings.redis_url))
        case CacheProvider.FILE:
            return FileKeyValueStore(settings.cache_directory)
        case _:
            raise ConfigurationError(
                f"Unsupported cache provider: {settings.cache_provider}",
                details={"supported": [p.value for p in CacheProvider]},
            )


class ObjectRetriever:
    """
    Provides access to object descriptions on CloudObjects.

    Lookups go through process memory, the static snapshot (if any) and
    the external store (if any and a freshness marker is known) before
    falling back to the object API. Objects that cannot be fetched are
    reported as ``None``.

    Usage:
        retriever = ObjectRetriever.from_settings()
        node = await retriever.get("coid://cloudobjects.io/isAtRevision")
    """

    REVISION_PROPERTY = REVISION_PROPERTY

    def __init__(
        self,
        fetcher: HTTPFetcher | None = None,
        cache: ResolutionCache[Node] | None = None,
        *,
        cache_ttl: int = 60,
        cache_ttl_attachments: int = 0,
        auth_ns: str | None = None,
    ) -> None:
        self.fetcher = fetcher or HTTPFetcher()
        self.cache: ResolutionCache[Node] = cache or ResolutionCache()
        self.cache_ttl = cache_ttl
        self.cache_ttl_attachments = cache_ttl_attachments
        self.auth_ns = auth_ns
        self._attachments: AttachmentRetriever | None = None

    @classmethod
    def from_settings(
        cls,
        settings: CloudObjectsSettings | None = None,
        store: KeyValueStore | None = None,
    ) -> ObjectRetriever:
        """Create a retriever (and its store) from settings."""
        if settings is None:
            from cloudobjects.config import get_settings

            settings = get_settings()

        fetcher = HTTPFetcher(
            FetcherConfig(
                base_url=settings.api_base_url,
                timeout=settings.timeout,
                connect_timeout=settings.connect_timeout,
                auth_ns=settings.auth_ns,
                auth_secret=settings.auth_secret,
            )
        )
        snapshot = None
        if settings.static_config_path is not None:
            snapshot = StaticConfigSnapshot(settings.static_config_path)
        cache: ResolutionCache[Node] = ResolutionCache(
            store if store is not None else create_store(settings),
            snapshot,
            prefix=settings.cache_prefix,
        )
        return cls(
            fetcher,
            cache,
            cache_ttl=settings.cache_ttl,
            cache_ttl_attachments=settings.cache_ttl_attachments,
            auth_ns=settings.auth_ns,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """The HTTP client used to access the API."""
        return self.fetcher.client

    def set_client(self, client: httpx.AsyncClient, prefix: str | None = None) -> None:
        """
        Set the HTTP client used to access the API.

        Args:
            client: The HTTP client
            prefix: Optional path prefix, e.g. an Account Gateway mount point
        """
        self.fetcher.set_client(client, prefix)

    @staticmethod
    def revision_of(node: Node | None) -> str | None:
        """The revision token of an object, if it has one."""
        if node is None:
            return None
        values = node.get_property(REVISION_PROPERTY)
        return str(values[0]) if values else None

    def _materialize(self, key: str, payload: str) -> Node | None:
        try:
            document = Document.parse(payload)
        except DocumentParseError as e:
            logger.warning(f"Unreadable description for {key}: {e}")
            return None
        node = document.graph.get_node(key)
        if node is None:
            logger.warning(f"Description does not describe {key}")
        return node

    async def _fetch_description(self, coid: IRI) -> str | None:
        try:
            response = await self.fetcher.fetch(
                f"{coid.host}{coid.path}/object",
                headers={"Accept": JSONLD_MEDIA_TYPE},
            )
        except TransportError as e:
            logger.warning(f"Failed to fetch {coid}: {e.message}")
            return None
        if not response.is_success:
            logger.warning(f"Failed to fetch {coid}: HTTP {response.status_code}")
            return None
        return response.text

    async def get_object(self, coid: IRI | str, *, revision: str | None = None) -> Node | None:
        """
        Get an object description from CloudObjects.

        Args:
            coid: COID of the object
            revision: Freshness marker for the external cache tier. Without
                it a cached description is never trusted.

        Returns:
            The node describing the object, None if it couldn't be retrieved

        Raises:
            InvalidIdentifierError: If the COID is not valid
        """
        coid = COIDParser.require_valid(coid)
        key = str(coid)

        hit = await self.cache.get(key, marker=revision)
        if hit is not None:
            if hit.tier == CacheTier.MEMORY:
                return hit.value
            node = self._materialize(key, hit.payload)
            if node is not None:
                return await self.cache.remember(key, node)

        logger.debug(f"Fetching {key} from API")
        payload = await self._fetch_description(coid)
        if payload is None:
            return None
        node = self._materialize(key, payload)
        if node is None:
            return None

        marker = revision or self.revision_of(node) or ""
        await self.cache.put(key, marker, payload, self.cache_ttl)
        return await self.cache.remember(key, node)

    async def get(self, coid: IRI | str) -> Node | None:
        """Shorthand for ``get_object`` accepting strings or IRIs."""
        if isinstance(coid, (str, IRI)):
            return await self.get_object(coid)
        raise TypeError("COID must be passed as a string or an IRI.")

    @property
    def attachments(self) -> AttachmentRetriever:
        if self._attachments is None:
            from cloudobjects.resolution.attachments import AttachmentRetriever

            self._attachments = AttachmentRetriever(self, ttl=self.cache_ttl_attachments)
        return self._attachments

    async def get_attachment(
        self,
        coid: IRI | str,
        filename: str,
        *,
        serve_stale: bool = False,
    ) -> bytes | None:
        """Get an attachment of an object, see ``AttachmentRetriever.get``."""
        return await self.attachments.get(coid, filename, serve_stale=serve_stale)

    async def get_authenticating_namespace_object(self) -> Node | None:
        """Get the object of the namespace the client authenticates as."""
        if not self.auth_ns:
            raise ConfigurationError("No authenticating namespace configured (auth_ns)")
        return await self.get_object(COIDParser.from_string(self.auth_ns))

    async def fetch_objects_in_namespace_with_type(
        self,
        namespace: IRI | str,
        type_coid: IRI | str | None = None,
    ) -> list[Node]:
        """
        Fetch all objects of a namespace, optionally only those of a type.

        Always calls the API. Every returned object is put into the memory
        and external cache tiers individually; objects outside the
        namespace are dropped.

        Raises:
            InvalidIdentifierError: If the namespace COID is not valid
            RemoteServiceError: If the listing could not be retrieved
        """
        namespace = COIDParser.get_namespace_coid(COIDParser.require_valid(namespace))
        params = {"type": str(type_coid)} if type_coid is not None else None

        try:
            response = await self.fetcher.fetch(
                f"{namespace.host}/all",
                headers={"Accept": JSONLD_MEDIA_TYPE},
                params=params,
            )
        except TransportError as e:
            raise RemoteServiceError(f"Failed to list {namespace}: {e.message}") from e
        if not response.is_success:
            raise RemoteServiceError(
                f"Failed to list {namespace}: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            document = Document.parse(response.content)
        except DocumentParseError as e:
            raise RemoteServiceError(
                f"Invalid listing for {namespace}: {e.message}",
                status_code=response.status_code,
            ) from e

        objects: list[Node] = []
        for node in document.graph.get_nodes():
            if node.is_blank or (not node.types and not node.properties):
                continue
            if (
                not COIDParser.is_valid_coid(node.id)
                or IRI(node.id).host != namespace.host
            ):
                logger.debug(f"Ignoring {node.id} in listing for {namespace}")
                continue

            payload = document.to_json(document.graph.subgraph(node))
            await self.cache.put(node.id, self.revision_of(node) or "", payload, self.cache_ttl)
            objects.append(await self.cache.remember(node.id, node, replace=True))
        return objects

    async def fetch_objects_in_namespace(self, namespace: IRI | str) -> list[Node]:
        return await self.fetch_objects_in_namespace_with_type(namespace)

    async def get_coid_list_for_namespace_with_type(
        self,
        namespace: IRI | str,
        type_coid: IRI | str | None = None,
    ) -> list[IRI]:
        objects = await self.fetch_objects_in_namespace_with_type(namespace, type_coid)
        return [IRI(node.id) for node in objects]

    async def get_coid_list_for_namespace(self, namespace: IRI | str) -> list[IRI]:
        return await self.get_coid_list_for_namespace_with_type(namespace)

    async def close(self) -> None:
        await self.fetcher.close()
        if self.cache.store is not None:
            await self.cache.store.close()

    async def __aenter__(self) -> ObjectRetriever:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
