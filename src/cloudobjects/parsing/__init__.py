"""Identifier parsing for COIDs and AAUIDs."""

from .aauid import AAUIDParser, ParsedAAUID
from .coid import COIDParser, ParsedCOID

__all__ = ["AAUIDParser", "COIDParser", "ParsedAAUID", "ParsedCOID"]
