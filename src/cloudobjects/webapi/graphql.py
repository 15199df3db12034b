"""Minimal GraphQL client on top of a preconfigured HTTP client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cloudobjects.core.exceptions import RemoteServiceError, TransportError

logger = logging.getLogger(__name__)


class GraphQLClient:
    """
    Sends GraphQL operations to the base URL of an ``httpx.AsyncClient``.

    Authentication, timeouts and headers are taken from the wrapped
    client as configured by ``APIClientFactory``. Operations are posted to
    ``endpoint_url``, which defaults to the client's base URL.
    """

    def __init__(self, client: httpx.AsyncClient, endpoint_url: str | None = None) -> None:
        self.client = client
        self.endpoint_url = endpoint_url or str(client.base_url)

    async def query(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Run a query or mutation and return its ``data``.

        Raises:
            TransportError: If the endpoint could not be reached
            RemoteServiceError: On HTTP errors or GraphQL errors in the response
        """
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        if operation_name:
            body["operationName"] = operation_name

        try:
            response = await self.client.post(self.endpoint_url, json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=self.endpoint_url) from e

        if not response.is_success:
            raise RemoteServiceError(
                f"GraphQL endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise RemoteServiceError(
                "GraphQL endpoint returned invalid JSON",
                status_code=response.status_code,
            ) from e

        if not isinstance(result, dict):
            raise RemoteServiceError(
                "GraphQL endpoint returned a response that is not a JSON object",
                status_code=response.status_code,
            )

        if result.get("errors"):
            raise RemoteServiceError(
                f"GraphQL errors: {result['errors'][0].get('message', 'unknown error')}",
                status_code=response.status_code,
                details={"errors": result["errors"]},
            )
        return result.get("data") or {}

    async def close(self) -> None:
        await self.client.aclose()
