"""Custom exception hierarchy for cloudobjects."""

from typing import Any


class CloudObjectsError(Exception):
    """Base exception for all cloudobjects errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidIdentifierError(CloudObjectsError, ValueError):
    """A COID or AAUID was malformed where a valid one is required."""

    def __init__(
        self,
        message: str,
        identifier: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.identifier = identifier


class TransportError(CloudObjectsError):
    """Network or timeout failure while talking to a remote API."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class RemoteServiceError(CloudObjectsError):
    """The CloudObjects API failed or returned an unusable response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ConfigurationError(CloudObjectsError):
    """Required client configuration is missing or unsupported."""

    pass


class InvalidObjectConfigurationError(CloudObjectsError):
    """An object's description doesn't match what the client expects."""

    pass
