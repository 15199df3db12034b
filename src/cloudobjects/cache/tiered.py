"""Tiered lookup chain shared by object and attachment resolution."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from cloudobjects.cache.keys import CacheKeys
from cloudobjects.cache.snapshot import StaticSnapshot
from cloudobjects.cache.stores import KeyValueStore
from cloudobjects.core.types import CacheTier

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheHit(Generic[T]):
    """
    Result of a successful cache lookup.

    A memory hit carries the materialized ``value``; static and external
    hits carry the raw ``payload`` that still needs to be parsed.
    """

    tier: CacheTier
    value: T | None = None
    payload: str | None = None
    marker: str | None = None


class ResolutionCache(Generic[T]):
    """
    Three-tier cache: process memory, static snapshot, external store.

    Tiers are consulted strictly in that order and the first hit wins.
    The memory tier never expires and is only populated through
    ``remember``. External entries are stored as ``marker + separator +
    payload`` and only count as a hit when the stored marker equals the
    marker supplied by the caller.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        snapshot: StaticSnapshot | None = None,
        *,
        prefix: str = CacheKeys.PREFIX,
        separator: str = "#",
    ) -> None:
        self.store = store
        self.snapshot = snapshot
        self.prefix = prefix
        self.separator = separator
        self._memory: dict[str, T] = {}
        self._lock = asyncio.Lock()

    def _store_key(self, key: str) -> str:
        return CacheKeys.object(key, self.prefix)

    def recall(self, key: str) -> T | None:
        """Memory tier only."""
        return self._memory.get(key)

    async def remember(self, key: str, value: T, *, replace: bool = False) -> T:
        """
        Put a value into the memory tier.

        Unless ``replace`` is set, a value stored for the key by another
        caller first is kept and returned.
        """
        async with self._lock:
            if replace:
                self._memory[key] = value
                return value
            return self._memory.setdefault(key, value)

    def forget(self, key: str) -> None:
        self._memory.pop(key, None)

    async def _read_entry(self, key: str) -> tuple[str, str] | None:
        if self.store is None:
            return None
        store_key = self._store_key(key)
        if not await self.store.contains(store_key):
            return None
        entry = await self.store.fetch(store_key)
        if entry is None:
            return None
        stored_marker, sep, payload = entry.partition(self.separator)
        if not sep:
            logger.warning(f"Discarding malformed cache entry: {store_key}")
            return None
        return stored_marker, payload

    async def get(self, key: str, marker: str | None = None) -> CacheHit[T] | None:
        """
        Look a key up in all tiers.

        Without a ``marker`` the external tier is skipped, since freshness
        cannot be evaluated.
        """
        if key in self._memory:
            logger.debug(f"Memory cache hit: {key}")
            return CacheHit(tier=CacheTier.MEMORY, value=self._memory[key])

        if self.snapshot is not None:
            payload = await self.snapshot.lookup(key)
            if payload is not None:
                logger.debug(f"Static snapshot hit: {key}")
                return CacheHit(tier=CacheTier.STATIC, payload=payload)

        if marker is None:
            return None

        entry = await self._read_entry(key)
        if entry is None:
            return None
        stored_marker, payload = entry
        if stored_marker != marker:
            logger.debug(f"Stale cache entry for {key}: {stored_marker!r} != {marker!r}")
            return None

        logger.debug(f"External cache hit: {key}")
        return CacheHit(tier=CacheTier.EXTERNAL, payload=payload, marker=stored_marker)

    async def get_stale(self, key: str) -> str | None:
        """Payload of the external entry for a key, whatever its marker."""
        entry = await self._read_entry(key)
        return entry[1] if entry else None

    async def put(self, key: str, marker: str, payload: str, ttl: int = 0) -> None:
        """Write an entry to the external tier (no-op without a store)."""
        if self.store is None:
            return
        await self.store.save(self._store_key(key), f"{marker}{self.separator}{payload}", ttl)
