"""Symmetric encryption with a namespace's shared encryption key."""

from __future__ import annotations

from cryptography.fernet import Fernet

from cloudobjects.core.exceptions import InvalidObjectConfigurationError
from cloudobjects.core.iri import IRI
from cloudobjects.core.vocabulary import COMMON
from cloudobjects.graph.document import Node
from cloudobjects.graph.reader import NodeReader
from cloudobjects.resolution.objects import ObjectRetriever


class CryptoHelper:
    """
    Encrypts and decrypts data with Fernet.

    The key is the ``common:usesSharedEncryptionKey`` value of a namespace
    (a urlsafe base64 encoded 32-byte key). If no namespace is given, the
    retriever's authenticating namespace is used.

    Usage:
        crypto = CryptoHelper(retriever)
        token = await crypto.encrypt_with_shared_encryption_key("secret")
    """

    def __init__(self, retriever: ObjectRetriever, namespace_coid: IRI | str | None = None) -> None:
        self.retriever = retriever
        self.namespace_coid = namespace_coid
        self.reader = NodeReader(prefixes={"common": COMMON})
        self._fernet: Fernet | None = None

    async def _get_namespace(self) -> Node | None:
        if self.namespace_coid is not None:
            return await self.retriever.get_object(self.namespace_coid)
        return await self.retriever.get_authenticating_namespace_object()

    async def get_shared_encryption_key(self) -> Fernet:
        if self._fernet is None:
            namespace = await self._get_namespace()
            key = self.reader.get_first_value_string(namespace, "common:usesSharedEncryptionKey")
            if key is None:
                raise InvalidObjectConfigurationError("The namespace doesn't have an encryption key.")
            try:
                self._fernet = Fernet(key)
            except ValueError as e:
                raise InvalidObjectConfigurationError(
                    f"The namespace's encryption key is not usable: {e}"
                ) from e
        return self._fernet

    async def encrypt_with_shared_encryption_key(self, data: str | bytes) -> str:
        if isinstance(data, str):
            data = data.encode("utf-8")
        fernet = await self.get_shared_encryption_key()
        return fernet.encrypt(data).decode("ascii")

    async def decrypt_with_shared_encryption_key(self, token: str | bytes) -> str:
        """
        Decrypt a token created with the same key.

        Raises:
            cryptography.fernet.InvalidToken: If the token is malformed or
                was not encrypted with this key
        """
        fernet = await self.get_shared_encryption_key()
        return fernet.decrypt(token).decode("utf-8")
