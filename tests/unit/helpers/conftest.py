"""Fixtures for helper tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

NAMESPACE_URL = "https://api.cloudobjects.io/test.cloudobjects.io/object"


@pytest.fixture
def namespace_object() -> Callable[..., dict[str, Any]]:
    """Factory for descriptions of the coid://test.cloudobjects.io namespace."""

    def factory(**properties: Any) -> dict[str, Any]:
        return {
            "@context": {
                "co": "coid://cloudobjects.io/",
                "common": "coid://common.cloudobjects.io/",
            },
            "@id": "coid://test.cloudobjects.io",
            "@type": "co:Namespace",
            **properties,
        }

    return factory


@pytest.fixture
def serve_namespace(respx_mock, jsonld_response, namespace_object):
    """Serve a namespace description with the given properties."""

    def serve(**properties: Any):
        return respx_mock.get(NAMESPACE_URL).mock(
            return_value=jsonld_response(namespace_object(**properties))
        )

    return serve
