"""IRI value object used for COIDs and AAUIDs."""

from __future__ import annotations

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class IRI(BaseModel):
    """
    An absolute or relative IRI, split into its RFC 3986 components.

    Comparison is exact string comparison; nothing (not even the scheme)
    is case-normalized.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="The IRI exactly as given")

    # RFC 3986, appendix B
    COMPONENTS_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$",
        re.DOTALL,
    )

    def __init__(self, value: str | IRI, **data) -> None:
        super().__init__(value=str(value), **data)

    def _components(self) -> tuple[str | None, ...]:
        return self.COMPONENTS_PATTERN.match(self.value).groups()

    @property
    def scheme(self) -> str | None:
        return self._components()[0]

    @property
    def authority(self) -> str | None:
        return self._components()[1]

    @property
    def host(self) -> str:
        """The authority without user info and port, or an empty string."""
        authority = self.authority
        if not authority:
            return ""
        host = authority.rpartition("@")[2]
        if not host.startswith("["):
            host = host.split(":", 1)[0]
        return host

    @property
    def path(self) -> str:
        return self._components()[2] or ""

    @property
    def query(self) -> str | None:
        return self._components()[3]

    @property
    def fragment(self) -> str | None:
        return self._components()[4]

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"IRI({self.value!r})"

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IRI):
            return self.value == other.value
        return NotImplemented
