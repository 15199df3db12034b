"""Key/value stores backing the external cache tier."""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiofiles
import aiofiles.os


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Storage used for the external cache tier.

    ``ttl`` is in seconds; zero or less means the entry never expires.
    Expiry is entirely up to the store.
    """

    async def contains(self, key: str) -> bool: ...

    async def fetch(self, key: str) -> str | None: ...

    async def save(self, key: str, data: str, ttl: int = 0) -> None: ...

    async def close(self) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store, shareable between several retrievers in one process."""

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}

    def _live_entry(self, key: str) -> tuple[str, float | None] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def contains(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def fetch(self, key: str) -> str | None:
        entry = self._live_entry(key)
        return entry[0] if entry else None

    async def save(self, key: str, data: str, ttl: int = 0) -> None:
        expires_at = self._clock() + ttl if ttl > 0 else None
        self._entries[key] = (data, expires_at)

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._entries)


class FileKeyValueStore:
    """Stores each entry as a small JSON file in a directory."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory or tempfile.gettempdir())
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.clobj.json"

    async def _read(self, key: str) -> str | None:
        path = self._path(key)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                entry = json.loads(await f.read())
        except (OSError, ValueError):
            return None
        if not isinstance(entry, dict):
            return None
        expires_at = entry.get("expires_at")
        if expires_at is not None and expires_at <= time.time():
            with contextlib.suppress(FileNotFoundError):
                await aiofiles.os.remove(path)
            return None
        return entry.get("data")

    async def contains(self, key: str) -> bool:
        return await self._read(key) is not None

    async def fetch(self, key: str) -> str | None:
        return await self._read(key)

    async def save(self, key: str, data: str, ttl: int = 0) -> None:
        entry = {
            "key": key,
            "expires_at": time.time() + ttl if ttl > 0 else None,
            "data": data,
        }
        # unique temp file per write, renamed over the entry
        temp_fd, temp_path = tempfile.mkstemp(dir=self.directory, prefix=".tmp_", suffix=".json")
        os.close(temp_fd)
        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(entry))
            await aiofiles.os.replace(temp_path, self._path(key))
        finally:
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.remove(temp_path)

    async def delete(self, key: str) -> bool:
        try:
            await aiofiles.os.remove(self._path(key))
        except FileNotFoundError:
            return False
        return True

    async def close(self) -> None:
        pass
