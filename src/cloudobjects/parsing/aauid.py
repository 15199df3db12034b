"""Validation and decomposition of AAUIDs (aauid:id[:kind:qualifier])."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from cloudobjects.core.iri import IRI
from cloudobjects.core.types import AAUIDType


@dataclass(frozen=True)
class ParsedAAUID:
    """An AAUID together with its classification and segments."""

    aauid: IRI
    aauid_type: AAUIDType
    account_id: str | None = None
    qualifier: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.aauid_type != AAUIDType.INVALID


class AAUIDParser:
    """Classifies AAUIDs and extracts their parts. Never raises on bad input."""

    SCHEME: ClassVar[str] = "aauid"
    PREFIX: ClassVar[str] = "aauid:"

    ACCOUNT_ID_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[a-z0-9]{16}$", re.ASCII)
    QUALIFIER_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Z]{2}$", re.ASCII)

    QUALIFIED_KINDS: ClassVar[dict[str, AAUIDType]] = {
        "connection": AAUIDType.CONNECTION,
        "account": AAUIDType.CONNECTED_ACCOUNT,
    }

    @classmethod
    def from_string(cls, value: str) -> IRI:
        """Create an AAUID from a string, adding the ``aauid:`` prefix if missing."""
        return IRI(value if value.startswith(cls.PREFIX) else cls.PREFIX + value)

    @staticmethod
    def _as_iri(aauid: IRI | str) -> IRI:
        return aauid if isinstance(aauid, IRI) else IRI(aauid)

    @classmethod
    def get_type(cls, aauid: IRI | str) -> AAUIDType:
        aauid = cls._as_iri(aauid)
        if aauid.scheme != cls.SCHEME or aauid.path == "":
            return AAUIDType.INVALID

        segments = aauid.path.split(":")
        match len(segments):
            case 1:
                if cls.ACCOUNT_ID_PATTERN.fullmatch(segments[0]):
                    return AAUIDType.ACCOUNT
                return AAUIDType.INVALID
            case 3:
                if not cls.ACCOUNT_ID_PATTERN.fullmatch(
                    segments[0]
                ) or not cls.QUALIFIER_PATTERN.fullmatch(segments[2]):
                    return AAUIDType.INVALID
                return cls.QUALIFIED_KINDS.get(segments[1], AAUIDType.INVALID)
            case _:
                return AAUIDType.INVALID

    @classmethod
    def is_valid_aauid(cls, aauid: IRI | str) -> bool:
        return cls.get_type(aauid) != AAUIDType.INVALID

    @classmethod
    def get_aauid(cls, aauid: IRI | str) -> str | None:
        """The 16 character account id of any valid AAUID."""
        aauid = cls._as_iri(aauid)
        if cls.get_type(aauid) == AAUIDType.INVALID:
            return None
        return aauid.path.split(":")[0]

    @classmethod
    def get_qualifier(cls, aauid: IRI | str) -> str | None:
        """The two letter qualifier of a connection or connected account AAUID."""
        aauid = cls._as_iri(aauid)
        if cls.get_type(aauid) not in (AAUIDType.CONNECTION, AAUIDType.CONNECTED_ACCOUNT):
            return None
        return aauid.path.split(":")[2]

    @classmethod
    def parse(cls, aauid: IRI | str) -> ParsedAAUID:
        aauid = cls._as_iri(aauid)
        return ParsedAAUID(
            aauid=aauid,
            aauid_type=cls.get_type(aauid),
            account_id=cls.get_aauid(aauid),
            qualifier=cls.get_qualifier(aauid),
        )
