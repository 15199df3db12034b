"""Creation of preconfigured HTTP clients for web APIs described on CloudObjects."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cloudobjects.core.exceptions import InvalidObjectConfigurationError, RemoteServiceError
from cloudobjects.core.iri import IRI
from cloudobjects.core.vocabulary import CO, OAUTH2, WEBAPIS
from cloudobjects.graph.document import Node
from cloudobjects.graph.reader import NodeReader
from cloudobjects.parsing.coid import COIDParser
from cloudobjects.resolution.objects import ObjectRetriever
from cloudobjects.webapi.graphql import GraphQLClient

logger = logging.getLogger(__name__)


class APIClientFactory:
    """
    Builds ``httpx.AsyncClient`` instances from ``wa:HTTPEndpoint`` objects.

    Credentials that are not stored on the API object itself are read from
    the client's namespace, which defaults to the retriever's
    authenticating namespace. Clients are kept per API and reused.

    Usage:
        factory = APIClientFactory(retriever)
        client = await factory.get_client_with_coid("coid://example.com/API")
        response = await client.get("items")
    """

    DEFAULT_CONNECT_TIMEOUT = 5.0
    DEFAULT_TIMEOUT = 20.0

    def __init__(self, retriever: ObjectRetriever, namespace_coid: IRI | str | None = None) -> None:
        self.retriever = retriever
        self.namespace_coid = namespace_coid
        self.reader = NodeReader(prefixes={"co": CO, "wa": WEBAPIS, "oauth2": OAUTH2})
        self._namespace: Node | None = None
        self._namespace_loaded = False
        self._clients: dict[str, httpx.AsyncClient | GraphQLClient] = {}

    async def _get_namespace(self) -> Node | None:
        if not self._namespace_loaded:
            if self.namespace_coid is not None:
                self._namespace = await self.retriever.get_object(self.namespace_coid)
            else:
                self._namespace = await self.retriever.get_authenticating_namespace_object()
            self._namespace_loaded = True
        return self._namespace

    async def _read_credential(self, api: Node, fixed: str, from_property: str, label: str) -> str:
        value = self.reader.get_first_value_string(api, fixed)
        if value is not None:
            return value

        property_name = self.reader.get_first_value_string(api, from_property)
        if property_name is None:
            raise InvalidObjectConfigurationError(
                f"An API must have either a fixed {label} or a defined {label} property."
            )
        value = self.reader.get_first_value_string(await self._get_namespace(), property_name)
        if value is None:
            raise InvalidObjectConfigurationError(
                f"The namespace does not have a value for <{property_name}>."
            )
        return value

    async def _configure_api_key_authentication(self, api: Node, config: dict[str, Any]) -> None:
        api_key = await self._read_credential(api, "wa:hasFixedAPIKey", "wa:usesAPIKeyFrom", "API key")

        parameter = self.reader.get_first_value_node(api, "wa:usesAuthenticationParameter")
        if parameter is None or not self.reader.has_property(parameter, "wa:hasKey"):
            raise InvalidObjectConfigurationError(
                "The API does not declare a parameter for inserting the API key."
            )
        parameter_name = self.reader.get_first_value_string(parameter, "wa:hasKey")

        if self.reader.has_type(parameter, "wa:HeaderParameter"):
            config["headers"][parameter_name] = api_key
        elif self.reader.has_type(parameter, "wa:QueryParameter"):
            config["params"] = {parameter_name: api_key}
        else:
            raise InvalidObjectConfigurationError(
                "The authentication parameter must be either <wa:HeaderParameter> or <wa:QueryParameter>."
            )

    async def _configure_bearer_token_authentication(self, api: Node, config: dict[str, Any]) -> None:
        token = await self._read_credential(
            api, "oauth2:hasFixedBearerToken", "oauth2:usesFixedBearerTokenFrom", "access token"
        )
        config["headers"]["Authorization"] = f"Bearer {token}"

    async def _configure_basic_authentication(self, api: Node, config: dict[str, Any]) -> None:
        username = await self._read_credential(
            api, "wa:hasFixedUsername", "wa:usesUsernameFrom", "username"
        )
        password = await self._read_credential(
            api, "wa:hasFixedPassword", "wa:usesPasswordFrom", "password"
        )
        config["auth"] = httpx.BasicAuth(username, password)

    async def _configure_shared_secret_basic_authentication(
        self, api: Node, config: dict[str, Any]
    ) -> None:
        namespace = await self._get_namespace()
        if namespace is None:
            raise InvalidObjectConfigurationError("The client namespace could not be retrieved.")
        username = IRI(namespace.id).host

        provider_namespace = await self.retriever.get_object(COIDParser.get_namespace_coid(api.id))
        shared_secrets = self.reader.get_all_values_node(provider_namespace, "co:hasSharedSecret")
        if len(shared_secrets) != 1:
            raise RemoteServiceError("Could not retrieve the shared secret.")
        password = self.reader.get_first_value_string(shared_secrets[0], "co:hasTokenValue", "")

        config["auth"] = httpx.BasicAuth(username, password)

    async def create_client(
        self,
        api: Node,
        specific_client: bool = False,
    ) -> httpx.AsyncClient | GraphQLClient:
        """Build a client for an API node."""
        if not self.reader.has_type(api, "wa:HTTPEndpoint"):
            raise InvalidObjectConfigurationError(
                "The API node must have the type <coid://webapis.co-n.net/HTTPEndpoint>."
            )
        base_url = self.reader.get_first_value_string(api, "wa:hasBaseURL")
        if base_url is None:
            raise InvalidObjectConfigurationError("The API must have a base URL.")

        config: dict[str, Any] = {
            "base_url": base_url,
            "timeout": httpx.Timeout(self.DEFAULT_TIMEOUT, connect=self.DEFAULT_CONNECT_TIMEOUT),
            "headers": {},
        }

        mechanism = "wa:supportsAuthenticationMechanism"
        if self.reader.has_property_value(api, mechanism, "wa:APIKeyAuthentication"):
            await self._configure_api_key_authentication(api, config)
        elif self.reader.has_property_value(api, mechanism, "oauth2:FixedBearerTokenAuthentication"):
            await self._configure_bearer_token_authentication(api, config)
        elif self.reader.has_property_value(api, mechanism, "wa:HTTPBasicAuthentication"):
            await self._configure_basic_authentication(api, config)
        elif self.reader.has_property_value(api, mechanism, "wa:SharedSecretAuthenticationViaHTTPBasic"):
            await self._configure_shared_secret_basic_authentication(api, config)

        client = httpx.AsyncClient(**config)
        if specific_client and self.reader.has_type(api, "wa:GraphQLEndpoint"):
            return GraphQLClient(client, base_url)
        return client

    async def get_client_with_coid(
        self,
        api_coid: IRI | str,
        specific_client: bool = False,
    ) -> httpx.AsyncClient | GraphQLClient:
        """
        Get a client for the web API with the given COID.

        Args:
            api_coid: COID of the API object
            specific_client: Return a client class specific to the API type
                (``GraphQLClient`` for ``wa:GraphQLEndpoint``) instead of a
                plain ``httpx.AsyncClient``

        Raises:
            RemoteServiceError: If the API object could not be retrieved
            InvalidObjectConfigurationError: If the API object is incomplete
        """
        cache_key = f"{api_coid}|{specific_client}"
        if cache_key not in self._clients:
            api = await self.retriever.get_object(api_coid)
            if api is None:
                raise RemoteServiceError(f"Could not retrieve API <{api_coid}>.")
            self._clients[cache_key] = await self.create_client(api, specific_client)
            logger.debug(f"Created API client for {api_coid}")
        return self._clients[cache_key]

    async def close(self) -> None:
        for client in self._clients.values():
            if isinstance(client, GraphQLClient):
                await client.close()
            else:
                await client.aclose()
        self._clients.clear()
