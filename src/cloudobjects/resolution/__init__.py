"""Object and attachment retrieval against the CloudObjects API."""

from .attachments import AttachmentRetriever
from .base import FetcherConfig, HTTPFetcher
from .objects import ObjectRetriever, create_store

__all__ = [
    "AttachmentRetriever",
    "FetcherConfig",
    "HTTPFetcher",
    "ObjectRetriever",
    "create_store",
]
