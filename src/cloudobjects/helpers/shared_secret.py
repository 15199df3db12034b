"""Authentication of namespaces by their CloudObjects shared secret."""

from __future__ import annotations

import hmac
import logging

from cloudobjects.core.types import AuthResult, COIDType
from cloudobjects.core.vocabulary import CO
from cloudobjects.graph.reader import NodeReader
from cloudobjects.parsing.coid import COIDParser
from cloudobjects.resolution.objects import ObjectRetriever

logger = logging.getLogger(__name__)


class SharedSecretAuthentication:
    """
    Verifies credentials where the username is a namespace hostname and
    the password is the 40 character shared secret of that namespace.
    """

    PASSWORD_LENGTH = 40

    def __init__(self, retriever: ObjectRetriever) -> None:
        self.retriever = retriever
        self.reader = NodeReader(prefixes={"co": CO})

    async def verify(self, username: str, password: str) -> AuthResult:
        namespace_coid = COIDParser.PREFIX + username
        if COIDParser.get_type(namespace_coid) != COIDType.ROOT:
            return AuthResult.INVALID_USERNAME
        if len(password) != self.PASSWORD_LENGTH:
            return AuthResult.INVALID_PASSWORD

        namespace = await self.retriever.get_object(namespace_coid)
        if namespace is None:
            return AuthResult.NAMESPACE_NOT_FOUND

        shared_secrets = self.reader.get_all_values_node(namespace, "co:hasSharedSecret")
        if len(shared_secrets) != 1:
            return AuthResult.SHARED_SECRET_NOT_RETRIEVABLE

        expected = self.reader.get_first_value_string(shared_secrets[0], "co:hasTokenValue")
        if expected is not None and hmac.compare_digest(expected.encode(), password.encode()):
            return AuthResult.OK

        logger.info(f"Shared secret mismatch for {username}")
        return AuthResult.SHARED_SECRET_INCORRECT
