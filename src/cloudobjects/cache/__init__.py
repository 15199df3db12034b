"""Caching layer: tiered lookup over memory, static snapshots and Redis."""

from .client import AsyncRedisClient
from .keys import CacheKeys
from .snapshot import MappingSnapshot, StaticConfigSnapshot, StaticSnapshot
from .stores import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .tiered import CacheHit, ResolutionCache

__all__ = [
    "AsyncRedisClient",
    "CacheHit",
    "CacheKeys",
    "FileKeyValueStore",
    "KeyValueStore",
    "MappingSnapshot",
    "MemoryKeyValueStore",
    "ResolutionCache",
    "StaticConfigSnapshot",
    "StaticSnapshot",
]
