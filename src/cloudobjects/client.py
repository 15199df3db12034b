"""Main library client for standalone usage."""

from __future__ import annotations

import logging
from typing import Any

from cloudobjects.cache.stores import KeyValueStore
from cloudobjects.config import CloudObjectsSettings
from cloudobjects.core.iri import IRI
from cloudobjects.core.types import AuthResult
from cloudobjects.graph.document import Node
from cloudobjects.helpers.crypto import CryptoHelper
from cloudobjects.helpers.sdk_loader import SDKLoader
from cloudobjects.helpers.shared_secret import SharedSecretAuthentication
from cloudobjects.resolution.objects import ObjectRetriever
from cloudobjects.schema.validator import SchemaValidator
from cloudobjects.webapi.factory import APIClientFactory

logger = logging.getLogger(__name__)


class CloudObjectsClient:
    """
    Main client for the cloudobjects library.

    Wires settings, the external cache store and the object retriever
    together and gives access to the helpers built on top of them.

    Usage:
        async with CloudObjectsClient() as client:
            # Get an object description
            node = await client.get_object("coid://cloudobjects.io/isAtRevision")

            # Get an attachment
            content = await client.get_attachment("coid://example.com/Site", "index.html")

            # Validate data against a JSON element
            await client.schema_validator.validate_against_coid(data, "coid://example.com/Schema")

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: CloudObjectsSettings | None = None,
        *,
        store: KeyValueStore | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Client settings. If not provided, loaded from environment.
            store: External cache store, overriding ``settings.cache_provider``.
        """
        self._settings = settings or CloudObjectsSettings()
        self._store = store
        self._retriever: ObjectRetriever | None = None
        self._api_clients: APIClientFactory | None = None
        self._crypto: CryptoHelper | None = None
        self._sdk_loader: SDKLoader | None = None

    async def __aenter__(self) -> CloudObjectsClient:
        """Initialize resources on context entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def _initialize(self) -> None:
        logging.getLogger("cloudobjects").setLevel(self._settings.log_level.upper())
        self._retriever = ObjectRetriever.from_settings(self._settings, self._store)
        logger.info(
            f"CloudObjects client initialized (cache: {self._settings.cache_provider.value})"
        )

    async def close(self) -> None:
        """Close all resources."""
        if self._api_clients:
            await self._api_clients.close()
            self._api_clients = None

        if self._retriever:
            await self._retriever.close()
            self._retriever = None

        self._crypto = None
        self._sdk_loader = None

    @property
    def settings(self) -> CloudObjectsSettings:
        return self._settings

    @property
    def retriever(self) -> ObjectRetriever:
        if self._retriever is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with CloudObjectsClient() as client:'"
            )
        return self._retriever

    # Object retrieval

    async def get_object(self, coid: IRI | str, *, revision: str | None = None) -> Node | None:
        return await self.retriever.get_object(coid, revision=revision)

    async def get_attachment(
        self,
        coid: IRI | str,
        filename: str,
        *,
        serve_stale: bool = False,
    ) -> bytes | None:
        return await self.retriever.get_attachment(coid, filename, serve_stale=serve_stale)

    async def fetch_objects_in_namespace(
        self,
        namespace: IRI | str,
        type_coid: IRI | str | None = None,
    ) -> list[Node]:
        return await self.retriever.fetch_objects_in_namespace_with_type(namespace, type_coid)

    async def get_coid_list_for_namespace(
        self,
        namespace: IRI | str,
        type_coid: IRI | str | None = None,
    ) -> list[IRI]:
        return await self.retriever.get_coid_list_for_namespace_with_type(namespace, type_coid)

    # Helpers

    @property
    def schema_validator(self) -> SchemaValidator:
        return SchemaValidator(self.retriever)

    @property
    def api_clients(self) -> APIClientFactory:
        if self._api_clients is None:
            self._api_clients = APIClientFactory(self.retriever)
        return self._api_clients

    @property
    def crypto(self) -> CryptoHelper:
        if self._crypto is None:
            self._crypto = CryptoHelper(self.retriever)
        return self._crypto

    @property
    def sdk_loader(self) -> SDKLoader:
        if self._sdk_loader is None:
            self._sdk_loader = SDKLoader(self.retriever)
        return self._sdk_loader

    async def verify_shared_secret(self, username: str, password: str) -> AuthResult:
        return await SharedSecretAuthentication(self.retriever).verify(username, password)

    async def get_api_client(self, api_coid: IRI | str, specific_client: bool = False) -> Any:
        return await self.api_clients.get_client_with_coid(api_coid, specific_client)


# Convenience function for one-off lookups
async def get_object(
    coid: IRI | str,
    *,
    settings: CloudObjectsSettings | None = None,
) -> Node | None:
    """
    Get an object description (convenience function).

    For multiple lookups, use CloudObjectsClient to benefit from caching.
    """
    async with CloudObjectsClient(settings) as client:
        return await client.get_object(coid)
