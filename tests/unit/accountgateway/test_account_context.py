"""Tests for account contexts."""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from httpx import Response

from cloudobjects.accountgateway.context import AccountContext
from cloudobjects.core.exceptions import (
    ConfigurationError,
    InvalidIdentifierError,
    RemoteServiceError,
    TransportError,
)
from cloudobjects.core.iri import IRI
from cloudobjects.graph.document import Literal
from cloudobjects.parsing.aauid import AAUIDParser

AAUID = "aauid:aaaabbbbccccdddd"
GATEWAY_URL = "https://aaaabbbbccccdddd.aauid.net/~/"


# ============================================================================
# Construction Tests
# ============================================================================


class TestConstruction:
    """Tests for creating contexts."""

    def test_requires_account_aauid(self):
        with pytest.raises(InvalidIdentifierError):
            AccountContext("aauid:aaaabbbbccccdddd:connection:AA", "DUMMY")

    def test_rejects_invalid_aauid(self):
        with pytest.raises(InvalidIdentifierError):
            AccountContext("aauid:short", "DUMMY")

    def test_not_in_request_context(self, context):
        assert context.in_request_context is False
        assert context.uses_account_connection is False
        assert context.is_new_accessor_version_available is False

    def test_from_headers(self):
        context = AccountContext.from_headers(
            {"C-AAUID": "1234123412341234", "C-Access-Token": "test"}
        )

        assert context is not None
        assert AAUIDParser.get_aauid(context.aauid) == "1234123412341234"
        assert context.access_token == "test"
        assert context.in_request_context is True

    def test_header_names_are_case_insensitive(self):
        context = AccountContext.from_headers(
            {"c-aauid": "1234123412341234", "c-access-token": "test"}
        )

        assert context is not None

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"C-AAUID": "1234123412341234"},
            {"C-Access-Token": "test"},
        ],
    )
    def test_from_headers_requires_both(self, headers):
        assert AccountContext.from_headers(headers) is None

    def test_from_request(self):
        request = SimpleNamespace(
            headers={"C-AAUID": "1234123412341234", "C-Access-Token": "test"},
            client=SimpleNamespace(host="10.0.0.1"),
        )

        context = AccountContext.from_request(request)

        assert context is not None
        assert context.client_ip == "10.0.0.1"

    def test_optional_headers(self):
        context = AccountContext.from_headers(
            {
                "C-AAUID": "1234123412341234",
                "C-Access-Token": "test",
                "C-Accessor": "coid://example.com/App",
                "C-Account-Domain": "example.org",
                "C-Accessor-Latest-Version": "coid://example.com/App/2.0",
                "C-Account-Connection": "AA",
                "C-Install-Connection": "BB",
            }
        )

        assert context.accessor_coid == IRI("coid://example.com/App")
        assert context.account_domain == "example.org"
        assert context.connection_qualifier == "AA"
        assert context.install_qualifier == "BB"
        assert context.uses_account_connection is True
        assert context.is_new_accessor_version_available is True


# ============================================================================
# Gateway URL Tests
# ============================================================================


class TestGatewayBaseURL:
    """Tests for the Account Gateway base URL."""

    def test_default(self, context):
        assert context.account_gateway_base_url == "https://aaaabbbbccccdddd.aauid.net"

    def test_template_with_placeholder(self, context):
        context.set_account_gateway_base_url_template("http://{aauid}.localhost")

        assert context.account_gateway_base_url == "http://aaaabbbbccccdddd.localhost"
        assert context.get_client().base_url.host == "aaaabbbbccccdddd.localhost"

    def test_template_without_placeholder(self, context):
        context.set_account_gateway_base_url_template("http://localhost")

        assert context.account_gateway_base_url == "http://localhost"

    def test_template_resets_client(self, context):
        client = context.get_client()
        context.set_account_gateway_base_url_template("http://localhost")

        assert context.get_client() is not client

    def test_client_authorization(self, context):
        client = context.get_client()

        assert client.headers["Authorization"] == "Bearer DUMMY"
        assert "X-Forwarded-For" not in client.headers
        assert context.get_client() is client


# ============================================================================
# Account Graph Tests
# ============================================================================


class TestAccountGraph:
    """Tests for reading the account graph."""

    async def test_get_account(self, context, gateway_route):
        account = await context.get_account()

        assert account.id == AAUID
        assert gateway_route.calls[0].request.headers["Authorization"] == "Bearer DUMMY"

    async def test_graph_is_loaded_once(self, context, gateway_route):
        await context.get_account()
        await context.get_person()

        assert gateway_route.call_count == 1

    async def test_get_person(self, context, gateway_route):
        person = await context.get_person()

        assert person.id == f"{AAUID}:person"

    async def test_connected_account_by_qualifier(self, context, gateway_route):
        assert (await context.get_connected_account("AA")).id == f"{AAUID}:account:AA"
        assert (await context.get_account_connection("AA")).id == f"{AAUID}:connection:AA"
        assert await context.get_connected_account("ZZ") is None

    async def test_connected_account_without_qualifier(self, context, gateway_route):
        assert await context.get_connected_account() is None
        assert await context.get_account_connection() is None

    async def test_connected_account_for_service(self, context, gateway_route):
        account = await context.get_connected_account_for_service("coid://example.com")

        assert account.id == f"{AAUID}:account:AA"
        assert await context.get_connected_account_for_service("coid://other.com") is None

    async def test_all_connections(self, context, gateway_route):
        connections = await context.get_all_account_connections()
        accounts = await context.get_all_connected_accounts()

        assert [c.id for c in connections] == [f"{AAUID}:connection:AA"]
        assert [a.id for a in accounts] == [f"{AAUID}:account:AA"]

    async def test_gateway_error(self, context, respx_mock):
        respx_mock.get(GATEWAY_URL).mock(return_value=Response(401))

        with pytest.raises(RemoteServiceError) as exc_info:
            await context.get_account()

        assert exc_info.value.status_code == 401

    async def test_tracks_latest_accessor_version(self, context, respx_mock, account_graph):
        respx_mock.get(GATEWAY_URL).mock(
            return_value=Response(
                200,
                json=account_graph,
                headers={"C-Accessor-Latest-Version": "coid://example.com/App/2.0"},
            )
        )

        await context.get_account()

        assert context.is_new_accessor_version_available is True
        assert context.latest_accessor_version_coid == IRI("coid://example.com/App/2.0")


# ============================================================================
# Request Context Tests
# ============================================================================


class TestRequestContext:
    """Tests for behaviour that depends on the incoming request."""

    HEADERS = {"C-AAUID": "aaaabbbbccccdddd", "C-Access-Token": "DUMMY"}

    async def test_connection_data_header(self, respx_mock):
        context = AccountContext.from_headers(
            {
                **self.HEADERS,
                "C-Account-Connection": "AA",
                "C-Connection-Data": "token=abc%2Fdef,label=a+b,broken",
            }
        )

        connection = await context.get_account_connection()

        assert connection.id == f"{AAUID}:connection:AA"
        assert connection.get_property("token") == [Literal("abc/def")]
        assert connection.get_property("label") == [Literal("a b")]
        assert len(respx_mock.calls) == 0
        await context.close()

    async def test_forwards_client_ip(self, gateway_route):
        context = AccountContext.from_headers(self.HEADERS, client_ip="10.0.0.1")

        await context.get_account()

        assert gateway_route.calls[0].request.headers["X-Forwarded-For"] == "10.0.0.1"
        await context.close()

    async def test_forwards_existing_forwarded_for(self, gateway_route):
        context = AccountContext.from_headers(
            {**self.HEADERS, "X-Forwarded-For": "192.0.2.1"}, client_ip="10.0.0.1"
        )

        await context.get_account()

        assert gateway_route.calls[0].request.headers["X-Forwarded-For"] == "192.0.2.1"
        await context.close()

    def test_log_code_outside_request(self, context):
        with pytest.raises(ConfigurationError):
            context.set_log_code("ABC")

    def test_process_response(self):
        context = AccountContext.from_headers(self.HEADERS)
        context.set_log_code("ABC")
        response = Response(200)

        assert context.process_response(response) is response
        assert response.headers["C-Code-For-Logger"] == "ABC"

    def test_process_response_without_log_code(self):
        context = AccountContext.from_headers(self.HEADERS)
        response = Response(200)

        context.process_response(response)

        assert "C-Code-For-Logger" not in response.headers


# ============================================================================
# Graph Update Tests
# ============================================================================


class TestPushGraphUpdates:
    """Tests for writing the account graph back."""

    async def test_posts_document(self, context, gateway_route, respx_mock):
        route = respx_mock.post(GATEWAY_URL).mock(return_value=Response(204))
        person = await context.get_person()
        person.set_property("http://schema.org/name", "Jane")

        await context.push_graph_updates()

        request = route.calls[0].request
        assert request.headers["Content-Type"] == "application/ld+json"
        body = json.loads(request.content)
        person_data = next(item for item in body if item["@id"] == f"{AAUID}:person")
        assert person_data["http://schema.org/name"] == [{"@value": "Jane"}]

    async def test_rejected_update(self, context, gateway_route, respx_mock):
        respx_mock.post(GATEWAY_URL).mock(return_value=Response(400))

        with pytest.raises(RemoteServiceError):
            await context.push_graph_updates()

    async def test_transport_error(self, context, gateway_route, respx_mock):
        respx_mock.post(GATEWAY_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransportError):
            await context.push_graph_updates()
