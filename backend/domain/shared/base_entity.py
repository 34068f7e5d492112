"""
Base class for the plain domain objects the calculators work on.

ORM rows convert to these through `to_entity()`; the domain layer never
touches Django models directly.
"""

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4


@dataclass(eq=False)
class Entity(ABC):
    """Identity is the UUID; `created_at` gives the input order of siblings."""

    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    @property
    def key(self) -> str:
        return str(self.id)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
