"""
Archival marker for todo records.

A record is either current (Active), retired without a successor (Archived),
or retired in favour of a named successor (ReplacedBy). The marker is stored
as a short string; the encoding below is version 1 of that format.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from todor.errors import DeserializationError

# Storage encoding version for the archival column
ARCHIVAL_ENCODING_VERSION = 1

ACTIVE_MARKER = "No"
ARCHIVED_MARKER = "Yes"
_REPLACED_RE = re.compile(r"Replaced\(([0-9A-Za-z-]+)\)")


class ArchivalState(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    REPLACED = "replaced"


@dataclass(frozen=True)
class Archival:
    """
    Tri-state archival status.

    Attributes:
        state: Which of the three variants this is
        replaced_by: Successor record id, set only for REPLACED
    """

    state: ArchivalState = ArchivalState.ACTIVE
    replaced_by: Optional[str] = None

    def __post_init__(self):
        if self.state is ArchivalState.REPLACED and not self.replaced_by:
            raise ValueError("A replaced record needs a successor id")
        if self.state is not ArchivalState.REPLACED and self.replaced_by is not None:
            raise ValueError(f"Only replaced records carry a successor id, not {self.state.value}")

    @classmethod
    def active(cls) -> "Archival":
        return cls(ArchivalState.ACTIVE)

    @classmethod
    def archived(cls) -> "Archival":
        return cls(ArchivalState.ARCHIVED)

    @classmethod
    def replaced(cls, successor_id: str) -> "Archival":
        return cls(ArchivalState.REPLACED, str(successor_id))

    @property
    def is_active(self) -> bool:
        return self.state is ArchivalState.ACTIVE

    @property
    def is_archived(self) -> bool:
        return self.state is ArchivalState.ARCHIVED

    @property
    def is_replaced(self) -> bool:
        return self.state is ArchivalState.REPLACED

    def encode(self) -> str:
        """Serialize to the storage string ("No", "Yes", "Replaced(<id>)")."""
        if self.is_active:
            return ACTIVE_MARKER
        if self.is_archived:
            return ARCHIVED_MARKER
        return f"Replaced({self.replaced_by})"

    @classmethod
    def decode(cls, value: str) -> "Archival":
        """
        Parse a storage string back into an Archival.

        Raises:
            DeserializationError: If the value is not a valid marker
        """
        if value is None:
            raise DeserializationError("Missing archival marker")
        if value == ACTIVE_MARKER:
            return cls.active()
        if value == ARCHIVED_MARKER:
            return cls.archived()

        match = _REPLACED_RE.fullmatch(value)
        if match:
            return cls.replaced(match.group(1))

        raise DeserializationError(f"Invalid archival marker: {value!r}")

    def __repr__(self) -> str:
        if self.is_replaced:
            return f"ReplacedBy({self.replaced_by})"
        return "Active" if self.is_active else "Archived"
