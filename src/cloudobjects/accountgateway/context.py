"""The context of a request made on behalf of an account."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote_plus

import httpx

from cloudobjects.accountgateway.loader import DataLoader
from cloudobjects.core.exceptions import (
    ConfigurationError,
    InvalidIdentifierError,
    RemoteServiceError,
    TransportError,
)
from cloudobjects.core.iri import IRI
from cloudobjects.core.types import AAUIDType
from cloudobjects.core.vocabulary import ACCOUNT_GATEWAYS, JSONLD_MEDIA_TYPE
from cloudobjects.graph.document import Document, Node
from cloudobjects.graph.reader import NodeReader
from cloudobjects.parsing.aauid import AAUIDParser

logger = logging.getLogger(__name__)


class AccountContext:
    """
    An account, its access token and (optionally) the incoming request.

    The account graph is loaded lazily through the ``DataLoader`` the
    first time one of the graph accessors is awaited. If the request
    carried ``C-Connection-Data``, the graph built from that header is
    used instead and nothing is loaded.

    Usage:
        context = AccountContext.from_headers(request.headers)
        if context is not None:
            account = await context.get_account()
    """

    DEFAULT_BASE_URL_TEMPLATE = "https://{aauid}.aauid.net"

    AAUID_HEADER = "C-AAUID"
    ACCESS_TOKEN_HEADER = "C-Access-Token"
    ACCESSOR_HEADER = "C-Accessor"
    ACCOUNT_DOMAIN_HEADER = "C-Account-Domain"
    LATEST_VERSION_HEADER = "C-Accessor-Latest-Version"
    ACCOUNT_CONNECTION_HEADER = "C-Account-Connection"
    INSTALL_CONNECTION_HEADER = "C-Install-Connection"
    CONNECTION_DATA_HEADER = "C-Connection-Data"
    LOG_CODE_HEADER = "C-Code-For-Logger"

    def __init__(
        self,
        aauid: IRI | str,
        access_token: str,
        data_loader: DataLoader | None = None,
    ) -> None:
        aauid = IRI(aauid)
        if AAUIDParser.get_type(aauid) != AAUIDType.ACCOUNT:
            raise InvalidIdentifierError(f"Not a valid account AAUID: {aauid}", identifier=str(aauid))

        self.aauid = aauid
        self.access_token = access_token
        self.data_loader = data_loader or DataLoader()

        self.request_headers: httpx.Headers | None = None
        self.client_ip: str | None = None
        self.accessor_coid: IRI | None = None
        self.account_domain: str | None = None
        self.connection_qualifier: str | None = None
        self.install_qualifier: str | None = None
        self.latest_accessor_version_coid: IRI | None = None

        self._base_url_template = self.DEFAULT_BASE_URL_TEMPLATE
        self._document: Document | None = None
        self._client: httpx.AsyncClient | None = None
        self._log_code: str | None = None
        self._reader = NodeReader(prefixes={"agws": ACCOUNT_GATEWAYS})

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        client_ip: str | None = None,
        data_loader: DataLoader | None = None,
    ) -> AccountContext | None:
        """
        Create a context from the headers of an incoming request.

        Returns None unless both ``C-AAUID`` and ``C-Access-Token`` are set.
        """
        headers = httpx.Headers(headers)
        if cls.AAUID_HEADER not in headers or cls.ACCESS_TOKEN_HEADER not in headers:
            return None

        context = cls(
            AAUIDParser.from_string(headers[cls.AAUID_HEADER]),
            headers[cls.ACCESS_TOKEN_HEADER],
            data_loader,
        )
        context._parse_request(headers, client_ip)
        return context

    @classmethod
    def from_request(cls, request: Any, data_loader: DataLoader | None = None) -> AccountContext | None:
        """Create a context from a Starlette-style request object."""
        client = getattr(request, "client", None)
        client_ip = getattr(client, "host", None) if client else None
        return cls.from_headers(request.headers, client_ip, data_loader)

    def _parse_request(self, headers: httpx.Headers, client_ip: str | None) -> None:
        self.request_headers = headers
        self.client_ip = client_ip

        if self.ACCESSOR_HEADER in headers:
            self.accessor_coid = IRI(headers[self.ACCESSOR_HEADER])
        if self.ACCOUNT_DOMAIN_HEADER in headers:
            self.account_domain = headers[self.ACCOUNT_DOMAIN_HEADER]
        if self.LATEST_VERSION_HEADER in headers:
            self.latest_accessor_version_coid = IRI(headers[self.LATEST_VERSION_HEADER])
        if self.ACCOUNT_CONNECTION_HEADER in headers:
            self.connection_qualifier = headers[self.ACCOUNT_CONNECTION_HEADER]
        if self.INSTALL_CONNECTION_HEADER in headers:
            self.install_qualifier = headers[self.INSTALL_CONNECTION_HEADER]

        if self.CONNECTION_DATA_HEADER in headers:
            if self._document is None:
                self._document = Document()
            node = self._document.graph.create_node(
                f"{self.aauid}:connection:{self.connection_qualifier}"
            )
            for pair in headers[self.CONNECTION_DATA_HEADER].split(","):
                key, sep, value = pair.partition("=")
                if sep:
                    node.add_property_value(key.strip(), unquote_plus(value))

    @property
    def in_request_context(self) -> bool:
        return self.request_headers is not None

    @property
    def uses_account_connection(self) -> bool:
        """Whether the API is accessed by a connected account on another service."""
        return self.connection_qualifier is not None

    @property
    def is_new_accessor_version_available(self) -> bool:
        return self.latest_accessor_version_coid is not None

    async def get_document(self) -> Document:
        if self._document is None:
            self._document = await self.data_loader.fetch_account_graph_data_document(self)
        return self._document

    async def _get_node(self, node_id: str) -> Node | None:
        return (await self.get_document()).graph.get_node(node_id)

    async def get_account(self) -> Node | None:
        return await self._get_node(str(self.aauid))

    async def get_person(self) -> Node | None:
        return await self._get_node(f"{self.aauid}:person")

    async def get_connected_account(self, qualifier: str | None = None) -> Node | None:
        """Connected account by qualifier, defaulting to the connection qualifier."""
        qualifier = qualifier or self.connection_qualifier
        if not qualifier:
            return None
        return await self._get_node(f"{self.aauid}:account:{qualifier}")

    async def get_account_connection(self, qualifier: str | None = None) -> Node | None:
        """Account connection by qualifier, defaulting to the connection qualifier."""
        qualifier = qualifier or self.connection_qualifier
        if not qualifier:
            return None
        return await self._get_node(f"{self.aauid}:connection:{qualifier}")

    async def get_connected_account_for_service(self, service: IRI | str) -> Node | None:
        document = await self.get_document()
        for account in document.graph.get_nodes_by_type(ACCOUNT_GATEWAYS + "Account"):
            if self._reader.get_first_value_iri(account, "agws:isForService") == IRI(service):
                return account
        return None

    async def get_all_account_connections(self) -> list[Node]:
        return self._reader.get_all_values_node(await self.get_account(), "agws:hasConnection")

    async def get_all_connected_accounts(self) -> list[Node]:
        accounts = []
        for connection in await self.get_all_account_connections():
            account = self._reader.get_first_value_node(connection, "agws:connectsTo")
            if account is not None:
                accounts.append(account)
        return accounts

    @property
    def account_gateway_base_url(self) -> str:
        account_id = AAUIDParser.get_aauid(self.aauid)
        return self._base_url_template.replace("{aauid}", account_id)

    def set_account_gateway_base_url_template(self, template: str) -> None:
        """
        Change the Account Gateway URL, e.g. for testing.

        ``{aauid}`` in the template is replaced with the account id.
        """
        self._base_url_template = template
        self._client = None

    async def _track_accessor_version(self, response: httpx.Response) -> None:
        if self.LATEST_VERSION_HEADER in response.headers:
            self.latest_accessor_version_coid = IRI(response.headers[self.LATEST_VERSION_HEADER])

    def get_client(self) -> httpx.AsyncClient:
        """A client preconfigured to access the Account Gateway for this account."""
        if self._client is None or self._client.is_closed:
            headers = {"Authorization": f"Bearer {self.access_token}"}
            if self.request_headers is not None:
                forwarded_for = self.request_headers.get("X-Forwarded-For", self.client_ip)
                if forwarded_for:
                    headers["X-Forwarded-For"] = forwarded_for
            self._client = httpx.AsyncClient(
                base_url=self.account_gateway_base_url,
                headers=headers,
                event_hooks={"response": [self._track_accessor_version]},
            )
        return self._client

    async def push_graph_updates(self) -> None:
        """Push local changes of the account graph to the Account Gateway."""
        document = await self.get_document()
        path = f"/{self.data_loader.mount_point_name}/"
        try:
            response = await self.get_client().post(
                path,
                headers={"Content-Type": JSONLD_MEDIA_TYPE},
                content=document.to_json(),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=path) from e
        if not response.is_success:
            raise RemoteServiceError(
                f"Account Gateway rejected graph update: HTTP {response.status_code}",
                status_code=response.status_code,
            )

    def set_log_code(self, log_code: str) -> None:
        """Set a custom code for the current request in the Account Gateway logs."""
        if not self.in_request_context:
            raise ConfigurationError("Not in a request context.")
        self._log_code = log_code

    def process_response(self, response: Any) -> Any:
        """Add headers for the Account Gateway to an outgoing response."""
        if self._log_code:
            response.headers[self.LOG_CODE_HEADER] = self._log_code
        return response

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
