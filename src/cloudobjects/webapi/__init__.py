"""HTTP clients for web APIs described on CloudObjects."""

from .factory import APIClientFactory
from .graphql import GraphQLClient

__all__ = ["APIClientFactory", "GraphQLClient"]
