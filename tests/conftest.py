"""Shared test fixtures for all tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from cloudobjects.config import CloudObjectsSettings
from cloudobjects.core.types import CacheProvider

# ============================================================================
# Sample Object Descriptions
# ============================================================================

ROOT_OBJECT: dict[str, Any] = {
    "@context": {
        "cloudobjects": "coid://cloudobjects.io/",
        "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
        "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    },
    "@id": "coid://cloudobjects.io",
    "@type": "cloudobjects:Namespace",
    "cloudobjects:hasPublicListing": "true",
    "cloudobjects:revision": "1-325baa62b76105f56dc09386f5a2ec91",
    "rdfs:comment": "The CloudObjects namespace defines the essential objects.",
    "rdfs:label": "CloudObjects",
}


def make_object(coid: str, revision: str | None = None, **properties: Any) -> dict[str, Any]:
    """Build a JSON-LD object description with an optional revision."""
    data: dict[str, Any] = {
        "@context": {
            "co": "coid://cloudobjects.io/",
            "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
        },
        "@id": coid,
        "@type": "co:Object",
    }
    if revision is not None:
        data["co:isAtRevision"] = revision
    data.update(properties)
    return data


@pytest.fixture(name="make_object")
def make_object_fixture():
    """Factory fixture for object descriptions."""
    return make_object


@pytest.fixture
def root_object() -> dict[str, Any]:
    """The description of coid://cloudobjects.io as served by the API."""
    return ROOT_OBJECT


@pytest.fixture
def root_object_json() -> str:
    return json.dumps(ROOT_OBJECT)


@pytest.fixture
def example_object() -> dict[str, Any]:
    """A versioned object at revision 1-abc."""
    return make_object(
        "coid://example.com/Example/1.0",
        revision="1-abc",
        **{"rdfs:label": "Example"},
    )


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def test_settings(tmp_path) -> CloudObjectsSettings:
    """Settings with an in-memory cache and no environment influence."""
    return CloudObjectsSettings(
        _env_file=None,
        api_base_url="https://api.cloudobjects.io/",
        cache_provider=CacheProvider.MEMORY,
        auth_ns="test.cloudobjects.io",
        auth_secret="TEST",
        log_level="DEBUG",
    )
