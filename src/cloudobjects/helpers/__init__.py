"""Helpers built on top of object retrieval."""

from .crypto import CryptoHelper
from .sdk_loader import SDKLoader
from .shared_secret import SharedSecretAuthentication

__all__ = ["CryptoHelper", "SDKLoader", "SharedSecretAuthentication"]
