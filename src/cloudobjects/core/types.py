"""Core enums and type definitions."""

from enum import StrEnum


class COIDType(StrEnum):
    """Kinds of CloudObjects identifiers."""

    INVALID = "invalid"
    ROOT = "root"
    UNVERSIONED = "unversioned"
    VERSIONED = "versioned"
    VERSION_WILDCARD = "version_wildcard"


class AAUIDType(StrEnum):
    """Kinds of account identifiers."""

    INVALID = "invalid"
    ACCOUNT = "account"
    CONNECTION = "connection"
    CONNECTED_ACCOUNT = "connected_account"


class CacheTier(StrEnum):
    """Tiers of the resolution cache, in lookup order."""

    MEMORY = "memory"
    STATIC = "static"
    EXTERNAL = "external"


class CacheProvider(StrEnum):
    """Backends available for the external cache tier."""

    NONE = "none"
    MEMORY = "memory"
    REDIS = "redis"
    FILE = "file"


class AuthResult(StrEnum):
    """Outcome of a shared secret credential check."""

    OK = "ok"
    INVALID_USERNAME = "invalid_username"
    INVALID_PASSWORD = "invalid_password"
    NAMESPACE_NOT_FOUND = "namespace_not_found"
    SHARED_SECRET_NOT_RETRIEVABLE = "shared_secret_not_retrievable"
    SHARED_SECRET_INCORRECT = "shared_secret_incorrect"
