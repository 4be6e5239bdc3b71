"""
Todo record model for todor.

Records are never deleted and their text never changes; an edit produces a
new record and links the old one to it through the archival marker.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from todor.models.archival import Archival


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class TodoRecord:
    """
    A single todo note.

    Attributes:
        text: Note content (immutable once stored)
        id: Unique identifier (UUID)
        done: Completion flag
        created_at: When the record was created (UTC)
        archival: Active, Archived, or ReplacedBy(successor id)
    """

    text: str
    id: str = field(default_factory=lambda: str(uuid4()))
    done: bool = False
    created_at: Optional[datetime] = None
    archival: Archival = field(default_factory=Archival.active)

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = utcnow()
        else:
            self.created_at = to_utc(self.created_at)

    @property
    def is_active(self) -> bool:
        return self.archival.is_active

    @property
    def replaced_by(self) -> Optional[str]:
        return self.archival.replaced_by

    def canonical(self) -> str:
        """Full-record string representation, used for free-text search."""
        return (
            f"TodoRecord(id={self.id!r}, text={self.text!r}, done={self.done}, "
            f"created_at={self.created_at.isoformat()}, archival={self.archival!r})"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage/serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "created_at": self.created_at.isoformat(),
            "archival": self.archival.encode(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TodoRecord":
        """
        Create a TodoRecord from a database row.

        Raises:
            DeserializationError: If the archival marker is corrupt
        """
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            done=bool(data.get("done", False)),
            created_at=created_at,
            archival=Archival.decode(data.get("archival")),
        )
