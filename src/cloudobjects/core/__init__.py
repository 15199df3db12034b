"""Core types, value objects and exceptions."""

from .exceptions import (
    CloudObjectsError,
    ConfigurationError,
    InvalidIdentifierError,
    InvalidObjectConfigurationError,
    RemoteServiceError,
    TransportError,
)
from .iri import IRI
from .types import AAUIDType, AuthResult, CacheProvider, CacheTier, COIDType

__all__ = [
    # Types
    "AAUIDType",
    "AuthResult",
    "CacheProvider",
    "CacheTier",
    "COIDType",
    # Value objects
    "IRI",
    # Exceptions
    "CloudObjectsError",
    "ConfigurationError",
    "InvalidIdentifierError",
    "InvalidObjectConfigurationError",
    "RemoteServiceError",
    "TransportError",
]
