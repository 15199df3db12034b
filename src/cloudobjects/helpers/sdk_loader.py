"""Construction of third-party API SDKs from credentials stored in CloudObjects."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cloudobjects.core.exceptions import ConfigurationError
from cloudobjects.graph.document import Node
from cloudobjects.graph.reader import NodeReader
from cloudobjects.resolution.objects import ObjectRetriever

# Reads keyword arguments for an SDK factory from the namespace node
CredentialReader = Callable[[NodeReader, Node | None], dict[str, Any]]


def _aws_credentials(reader: NodeReader, namespace: Node | None) -> dict[str, Any]:
    return {
        "aws_access_key_id": reader.get_first_value_string(
            namespace, "coid://amazonws.cloudobjects.io/accessKeyId"
        ),
        "aws_secret_access_key": reader.get_first_value_string(
            namespace, "coid://amazonws.cloudobjects.io/secretAccessKey"
        ),
    }


def _getstream_credentials(reader: NodeReader, namespace: Node | None) -> dict[str, Any]:
    return {
        "api_key": reader.get_first_value_string(namespace, "coid://getstreamio.cloudobjects.io/key"),
        "api_secret": reader.get_first_value_string(
            namespace, "coid://getstreamio.cloudobjects.io/secret"
        ),
    }


def _pusher_credentials(reader: NodeReader, namespace: Node | None) -> dict[str, Any]:
    return {
        "key": reader.get_first_value_string(namespace, "coid://pusher.cloudobjects.io/key"),
        "secret": reader.get_first_value_string(namespace, "coid://pusher.cloudobjects.io/secret"),
        "app_id": reader.get_first_value_string(namespace, "coid://pusher.cloudobjects.io/appId"),
    }


class SDKLoader:
    """
    Creates SDK clients with credentials of the authenticating namespace.

    Each registered key maps to a reader that extracts factory keyword
    arguments from the namespace. ``get`` calls the factory with those
    arguments plus any options and keeps the instance for reuse.

    Usage:
        loader = SDKLoader(retriever)
        s3 = await loader.get("aws", functools.partial(boto3.client, "s3"))
    """

    BUILTIN_READERS: dict[str, CredentialReader] = {
        "aws": _aws_credentials,
        "getstream": _getstream_credentials,
        "pusher": _pusher_credentials,
    }

    def __init__(self, retriever: ObjectRetriever) -> None:
        self.retriever = retriever
        self.reader = NodeReader()
        self._readers: dict[str, CredentialReader] = dict(self.BUILTIN_READERS)
        self._instances: dict[tuple[str, Callable[..., Any], str], Any] = {}

    def register(self, key: str, reader: CredentialReader) -> None:
        self._readers[key] = reader

    @property
    def supported(self) -> list[str]:
        return sorted(self._readers)

    async def get(self, key: str, factory: Callable[..., Any], **options: Any) -> Any:
        """
        Get an SDK instance.

        Raises:
            ConfigurationError: If there are no rules for ``key``
        """
        credential_reader = self._readers.get(key)
        if credential_reader is None:
            raise ConfigurationError(
                f"No rules defined to initialize <{key}>.",
                details={"supported": self.supported},
            )

        cache_key = (key, factory, repr(sorted(options.items())))
        if cache_key not in self._instances:
            namespace = await self.retriever.get_authenticating_namespace_object()
            kwargs = {**credential_reader(self.reader, namespace), **options}
            self._instances[cache_key] = factory(**kwargs)
        return self._instances[cache_key]
