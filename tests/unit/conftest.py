"""Unit test fixtures with HTTP mocking."""

from __future__ import annotations

import json
from typing import Any

import pytest
import respx
from httpx import Response

from cloudobjects.cache.stores import MemoryKeyValueStore
from cloudobjects.cache.tiered import ResolutionCache
from cloudobjects.core.vocabulary import JSONLD_MEDIA_TYPE
from cloudobjects.resolution.base import FetcherConfig, HTTPFetcher
from cloudobjects.resolution.objects import ObjectRetriever

API_URL = "https://api.cloudobjects.io/"


# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock():
    """Provide a respx mock router for HTTP mocking.

    Use this when you need fine-grained control over mocked responses.
    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


def mock_jsonld_response(data: dict[str, Any] | list[Any], status_code: int = 200) -> Response:
    """Create a mock JSON-LD response."""
    return Response(
        status_code=status_code,
        content=json.dumps(data).encode(),
        headers={"Content-Type": JSONLD_MEDIA_TYPE},
    )


def object_url(coid: str) -> str:
    """URL the object API serves a description at."""
    return API_URL + coid.removeprefix("coid://") + "/object"


# ============================================================================
# Retriever Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def fetcher() -> HTTPFetcher:
    return HTTPFetcher(FetcherConfig(base_url=API_URL))


@pytest.fixture
async def retriever(fetcher: HTTPFetcher, memory_store: MemoryKeyValueStore):
    """Retriever with an in-memory external store."""
    retriever = ObjectRetriever(
        fetcher,
        ResolutionCache(memory_store),
        auth_ns="test.cloudobjects.io",
    )
    yield retriever
    await retriever.close()


@pytest.fixture
async def uncached_retriever(fetcher: HTTPFetcher):
    """Retriever without an external store."""
    retriever = ObjectRetriever(fetcher, auth_ns="test.cloudobjects.io")
    yield retriever
    await retriever.close()


@pytest.fixture(name="jsonld_response")
def jsonld_response_fixture():
    """Factory fixture for JSON-LD responses."""
    return mock_jsonld_response


@pytest.fixture(name="object_url")
def object_url_fixture():
    """Function mapping a COID to its object API URL."""
    return object_url
