"""Fixtures for Account Gateway tests."""

from __future__ import annotations

from typing import Any

import pytest

from cloudobjects.accountgateway.context import AccountContext

AAUID = "aauid:aaaabbbbccccdddd"
GATEWAY_URL = "https://aaaabbbbccccdddd.aauid.net/~/"


@pytest.fixture
def account_graph() -> dict[str, Any]:
    """An account graph with a person and one connected account."""
    return {
        "@context": {"agws": "coid://accountgateways.cloudobjects.io/"},
        "@graph": [
            {
                "@id": AAUID,
                "@type": "agws:Account",
                "agws:hasConnection": {"@id": f"{AAUID}:connection:AA"},
            },
            {"@id": f"{AAUID}:person", "@type": "agws:Person"},
            {
                "@id": f"{AAUID}:connection:AA",
                "@type": "agws:AccountConnection",
                "agws:connectsTo": {"@id": f"{AAUID}:account:AA"},
            },
            {
                "@id": f"{AAUID}:account:AA",
                "@type": "agws:Account",
                "agws:isForService": {"@id": "coid://example.com"},
            },
        ],
    }


@pytest.fixture
async def context():
    context = AccountContext(AAUID, "DUMMY")
    yield context
    await context.close()


@pytest.fixture
def gateway_route(respx_mock, jsonld_response, account_graph):
    return respx_mock.get(GATEWAY_URL).mock(return_value=jsonld_response(account_graph))
