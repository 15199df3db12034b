"""Retrieval of object attachments, cached per object revision."""

from __future__ import annotations

import base64
import binascii
import logging
import posixpath
from typing import TYPE_CHECKING

from cloudobjects.cache.tiered import ResolutionCache
from cloudobjects.core.exceptions import TransportError
from cloudobjects.core.iri import IRI
from cloudobjects.parsing.coid import COIDParser

if TYPE_CHECKING:
    from cloudobjects.resolution.objects import ObjectRetriever

logger = logging.getLogger(__name__)


class AttachmentRetriever:
    """
    Fetches files attached to objects.

    Content is returned as raw bytes. Cached content is keyed by
    ``objectId#filename`` and stored as ``revision#base64(content)``; it is
    only served while the object is still at that revision. Attachments of
    objects without a revision are never written to the external store.
    """

    SEPARATOR = "#"

    def __init__(self, objects: ObjectRetriever, ttl: int = 0) -> None:
        self.objects = objects
        self.ttl = ttl
        self.cache: ResolutionCache[bytes] = ResolutionCache(
            objects.cache.store,
            prefix=objects.cache.prefix,
            separator=self.SEPARATOR,
        )

    @staticmethod
    def _encode(content: bytes) -> str:
        return base64.b64encode(content).decode("ascii")

    @staticmethod
    def _decode(key: str, payload: str | None) -> bytes | None:
        if payload is None:
            return None
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error:
            logger.warning(f"Discarding undecodable attachment cache entry: {key}")
            return None

    async def _fetch(self, coid: IRI, filename: str) -> bytes | None:
        try:
            response = await self.objects.fetcher.fetch(f"{coid.host}{coid.path}/{filename}")
        except TransportError as e:
            logger.warning(f"Failed to fetch attachment {filename} of {coid}: {e.message}")
            return None
        if not response.is_success:
            logger.warning(
                f"Failed to fetch attachment {filename} of {coid}: HTTP {response.status_code}"
            )
            return None
        return response.content

    async def get(
        self,
        coid: IRI | str,
        filename: str,
        *,
        serve_stale: bool = False,
    ) -> bytes | None:
        """
        Get the content of an attachment.

        Args:
            coid: COID of the object the file is attached to
            filename: Name of the attachment; directory parts are ignored
            serve_stale: Return outdated cached content if the fetch fails

        Returns:
            The attachment bytes, None if the object or file is unavailable
        """
        coid = COIDParser.require_valid(coid)
        node = await self.objects.get_object(coid)
        if node is None:
            return None

        filename = posixpath.basename(filename)
        key = f"{node.id}{self.SEPARATOR}{filename}"
        revision = self.objects.revision_of(node)
        # memory entries belong to one revision of the object
        memory_key = f"{revision or ''}{self.SEPARATOR}{key}"

        content = self.cache.recall(memory_key)
        if content is not None:
            logger.debug(f"Memory cache hit: {memory_key}")
            return content

        hit = await self.cache.get(key, marker=revision)
        if hit is not None:
            content = self._decode(key, hit.payload)
            if content is not None:
                return await self.cache.remember(memory_key, content)

        content = await self._fetch(coid, filename)
        if content is None:
            if serve_stale and revision is not None:
                return self._decode(key, await self.cache.get_stale(key))
            return None

        if revision is not None:
            await self.cache.put(key, revision, self._encode(content), self.ttl)
        return await self.cache.remember(memory_key, content)
