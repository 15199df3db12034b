"""Validation and decomposition of COIDs (coid://authority[/name[/version]])."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from cloudobjects.core.exceptions import InvalidIdentifierError
from cloudobjects.core.iri import IRI
from cloudobjects.core.types import COIDType


@dataclass(frozen=True)
class ParsedCOID:
    """A COID together with its classification and segments."""

    coid: IRI
    coid_type: COIDType
    name: str | None = None
    version: str | None = None
    version_wildcard: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.coid_type != COIDType.INVALID

    @property
    def namespace(self) -> IRI | None:
        return COIDParser.get_namespace_coid(self.coid)

    def __repr__(self) -> str:
        return f"ParsedCOID(type={self.coid_type.value}, coid={self.coid.value!r})"


class COIDParser:
    """
    Classifies COIDs and extracts their parts.

    None of the classification or accessor methods raise on malformed
    input; they report ``COIDType.INVALID`` or ``None`` instead.
    """

    SCHEME: ClassVar[str] = "coid"
    PREFIX: ClassVar[str] = "coid://"

    HOSTNAME_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^([a-z0-9-]+\.)?[a-z0-9-]+\.[a-z]+$", re.ASCII
    )
    SEGMENT_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^[A-Za-z\-_0-9.]+$", re.ASCII
    )
    VERSION_WILDCARD_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^((\^|~)(\d+\.)?\d|(\d+\.){1,2}\*)$", re.ASCII
    )

    @classmethod
    def from_string(cls, value: str) -> IRI:
        """Create a COID from a string, adding the ``coid://`` prefix if missing."""
        return IRI(value if value.startswith(cls.PREFIX) else cls.PREFIX + value)

    @staticmethod
    def _as_iri(coid: IRI | str) -> IRI:
        return coid if isinstance(coid, IRI) else IRI(coid)

    @classmethod
    def get_type(cls, coid: IRI | str) -> COIDType:
        """Classify a COID according to its authority and path segments."""
        coid = cls._as_iri(coid)

        if (
            coid.scheme != cls.SCHEME
            or coid.host == ""
            or not cls.HOSTNAME_PATTERN.fullmatch(coid.host)
        ):
            return COIDType.INVALID

        if coid.path in ("", "/"):
            return COIDType.ROOT

        segments = coid.path.split("/")
        match len(segments):
            case 2:
                if cls.SEGMENT_PATTERN.fullmatch(segments[1]):
                    return COIDType.UNVERSIONED
                return COIDType.INVALID
            case 3:
                if not cls.SEGMENT_PATTERN.fullmatch(segments[1]):
                    return COIDType.INVALID
                if cls.SEGMENT_PATTERN.fullmatch(segments[2]):
                    return COIDType.VERSIONED
                if cls.VERSION_WILDCARD_PATTERN.fullmatch(segments[2]):
                    return COIDType.VERSION_WILDCARD
                return COIDType.INVALID
            case _:
                return COIDType.INVALID

    @classmethod
    def is_valid_coid(cls, coid: IRI | str) -> bool:
        return cls.get_type(coid) != COIDType.INVALID

    @classmethod
    def get_name(cls, coid: IRI | str) -> str | None:
        """Name segment of any non-root, valid COID."""
        coid = cls._as_iri(coid)
        if cls.get_type(coid) in (COIDType.INVALID, COIDType.ROOT):
            return None
        return coid.path.split("/")[1]

    @classmethod
    def get_version(cls, coid: IRI | str) -> str | None:
        """Version segment of a versioned COID."""
        coid = cls._as_iri(coid)
        if cls.get_type(coid) != COIDType.VERSIONED:
            return None
        return coid.path.split("/")[2]

    @classmethod
    def get_version_wildcard(cls, coid: IRI | str) -> str | None:
        """Version range segment of a version wildcard COID."""
        coid = cls._as_iri(coid)
        if cls.get_type(coid) != COIDType.VERSION_WILDCARD:
            return None
        return coid.path.split("/")[2]

    @classmethod
    def get_namespace_coid(cls, coid: IRI | str) -> IRI | None:
        """
        Root COID of the namespace a COID belongs to.

        Root COIDs are returned unchanged, invalid ones yield None.
        """
        coid = cls._as_iri(coid)
        match cls.get_type(coid):
            case COIDType.ROOT:
                return coid
            case COIDType.UNVERSIONED | COIDType.VERSIONED | COIDType.VERSION_WILDCARD:
                return IRI(cls.PREFIX + coid.host)
            case _:
                return None

    @classmethod
    def parse(cls, coid: IRI | str) -> ParsedCOID:
        """Classify a COID and collect all of its parts at once."""
        coid = cls._as_iri(coid)
        return ParsedCOID(
            coid=coid,
            coid_type=cls.get_type(coid),
            name=cls.get_name(coid),
            version=cls.get_version(coid),
            version_wildcard=cls.get_version_wildcard(coid),
        )

    @classmethod
    def require_valid(cls, coid: IRI | str) -> IRI:
        """Return the COID as an IRI, raising if it is invalid."""
        coid = cls._as_iri(coid)
        if not cls.is_valid_coid(coid):
            raise InvalidIdentifierError(f"Not a valid COID: {coid}", identifier=str(coid))
        return coid
