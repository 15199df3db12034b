"""CloudObjects SDK - identifiers, object retrieval and helpers for CloudObjects."""

from cloudobjects.accountgateway import AccountContext, DataLoader
from cloudobjects.client import CloudObjectsClient, get_object
from cloudobjects.config import CloudObjectsSettings, get_settings
from cloudobjects.core.exceptions import (
    CloudObjectsError,
    ConfigurationError,
    InvalidIdentifierError,
    InvalidObjectConfigurationError,
    RemoteServiceError,
    TransportError,
)
from cloudobjects.core.iri import IRI
from cloudobjects.core.types import AAUIDType, AuthResult, CacheProvider, CacheTier, COIDType
from cloudobjects.graph import Document, Node, NodeReader
from cloudobjects.parsing import AAUIDParser, COIDParser
from cloudobjects.resolution import AttachmentRetriever, ObjectRetriever

__version__ = "0.1.0"
__all__ = [
    # Client
    "CloudObjectsClient",
    "get_object",
    "CloudObjectsSettings",
    "get_settings",
    # Identifiers
    "IRI",
    "AAUIDParser",
    "COIDParser",
    # Types
    "AAUIDType",
    "AuthResult",
    "CacheProvider",
    "CacheTier",
    "COIDType",
    # Graph
    "Document",
    "Node",
    "NodeReader",
    # Retrieval
    "AttachmentRetriever",
    "ObjectRetriever",
    # Account Gateway
    "AccountContext",
    "DataLoader",
    # Exceptions
    "CloudObjectsError",
    "ConfigurationError",
    "InvalidIdentifierError",
    "InvalidObjectConfigurationError",
    "RemoteServiceError",
    "TransportError",
    # Version
    "__version__",
]
