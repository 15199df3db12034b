"""Read-only snapshots of object descriptions consulted before any remote call."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiofiles
import aiofiles.os

from cloudobjects.parsing.coid import COIDParser

logger = logging.getLogger(__name__)


@runtime_checkable
class StaticSnapshot(Protocol):
    """A key to document mapping that is never written to."""

    async def lookup(self, key: str) -> str | None: ...


class MappingSnapshot:
    """Snapshot backed by an in-memory mapping of COID strings to JSON-LD."""

    def __init__(self, documents: Mapping[str, str]) -> None:
        self._documents = dict(documents)

    async def lookup(self, key: str) -> str | None:
        return self._documents.get(key)


class StaticConfigSnapshot:
    """
    Snapshot backed by a directory tree of pre-baked object descriptions.

    The description of ``coid://example.com/Object/1.0`` is expected at
    ``{root}/example.com/Object/1.0/object.jsonld``.
    """

    FILENAME = "object.jsonld"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def path_for(self, key: str) -> Path | None:
        coid = COIDParser.from_string(key)
        if not COIDParser.is_valid_coid(coid):
            return None
        parts = [coid.host, *(s for s in coid.path.split("/") if s), self.FILENAME]
        location = self.root.joinpath(*parts).resolve()
        if not location.is_relative_to(self.root):
            logger.warning(f"Ignoring static config lookup outside of {self.root}: {key}")
            return None
        return location

    async def lookup(self, key: str) -> str | None:
        location = self.path_for(key)
        if location is None or not await aiofiles.os.path.isfile(location):
            return None
        async with aiofiles.open(location, "r", encoding="utf-8") as f:
            return await f.read()
