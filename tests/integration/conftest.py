"""Integration test fixtures for the public CloudObjects API and Redis."""

from __future__ import annotations

import os
from typing import AsyncIterator

import pytest

from cloudobjects.cache.client import AsyncRedisClient
from cloudobjects.config import CloudObjectsSettings
from cloudobjects.resolution.objects import ObjectRetriever


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if os.getenv("CLOUDOBJECTS_ONLINE_TESTS"):
        return
    skip = pytest.mark.skip(reason="set CLOUDOBJECTS_ONLINE_TESTS=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


# ============================================================================
# Object API Fixtures
# ============================================================================


@pytest.fixture
def online_settings() -> CloudObjectsSettings:
    """Settings for the public API, without authentication."""
    return CloudObjectsSettings(
        _env_file=None,
        api_base_url=os.getenv("TEST_API_BASE_URL", "https://api.cloudobjects.io/"),
    )


@pytest.fixture
async def public_retriever(online_settings) -> AsyncIterator[ObjectRetriever]:
    async with ObjectRetriever.from_settings(online_settings) as retriever:
        yield retriever


# ============================================================================
# Redis Fixtures
# ============================================================================


@pytest.fixture
def redis_url() -> str:
    """Get test Redis URL from environment or use default."""
    return os.getenv("TEST_REDIS_URL", "redis://localhost:6380/0")


@pytest.fixture
async def redis_store(redis_url: str) -> AsyncIterator[AsyncRedisClient]:
    async with AsyncRedisClient(redis_url) as store:
        yield store
