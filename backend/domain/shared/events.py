"""
Domain Events.

Domain events are records of significant business occurrences.
They are used for decoupling and eventual consistency.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened in the domain.
    They are used for:
    - Decoupling the store from its consumers
    - Triggering side effects (rate sync, websocket pushes)
    - Audit trail
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


class ChangeKind(str, Enum):
    """Kind of row change delivered by the change-notification feed."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class RowChanged(DomainEvent):
    """A row in one of the store's tables was inserted, updated or deleted."""

    event: ChangeKind = ChangeKind.UPDATE
    table: str = ""
    row: Dict[str, Any] = field(default_factory=dict)

    def as_message(self) -> Dict[str, Any]:
        """Wire shape pushed to websocket subscribers."""
        return {
            "event": self.event.value,
            "table": self.table,
            "row": self.row,
            "timestamp": self.occurred_at.isoformat(),
        }
