"""Domain entity: the audited, soft-deletable business record."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

CODE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 255


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _later_than(previous: datetime | None) -> datetime:
    """Current instant, bumped past ``previous`` if the clock has not advanced."""
    now = _utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


@dataclass
class Entity:
    """Core domain record with code, description and audit fields.

    Creation audit fields are written once. Last-update fields stay ``None``
    until the first update or logical delete. ``canceled`` only ever moves
    from ``False`` to ``True``.
    """

    code: str
    description: str
    create_actor: str
    id: UUID = field(default_factory=uuid4)
    create_timestamp: datetime = field(default_factory=_utcnow)
    last_update_timestamp: datetime | None = None
    last_update_actor: str | None = None
    canceled: bool = False

    def apply_changes(self, code: str, description: str, actor: str) -> None:
        """Overwrite the mutable fields and stamp the update audit fields."""
        self.code = code
        self.description = description
        self._touch(actor)

    def cancel(self, actor: str) -> None:
        """Logically delete the record. Calling it again re-stamps the audit fields."""
        self.canceled = True
        self._touch(actor)

    def _touch(self, actor: str) -> None:
        self.last_update_timestamp = _later_than(
            self.last_update_timestamp or self.create_timestamp
        )
        self.last_update_actor = actor
