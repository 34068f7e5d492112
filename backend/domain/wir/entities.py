"""
WIR Domain - Entities.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from domain.shared.base_entity import Entity
from domain.shared.value_objects import WIRResult, WIRStatus


@dataclass(eq=False, kw_only=True)
class WIR(Entity):
    """
    Work Inspection Request.

    Only the fields the domain rules need; descriptive and location
    fields stay on the ORM row.
    """

    wir_number: str = ""
    status: WIRStatus = WIRStatus.SUBMITTED
    result: Optional[WIRResult] = None
    value: Decimal = Decimal('0')
    submittal_date: Optional[date] = None
    received_date: Optional[date] = None
    linked_boq_items: List[UUID] = field(default_factory=list)
    selected_breakdown_items: List[UUID] = field(default_factory=list)
    calculated_amount: Optional[Decimal] = None
    calculation_equation: str = ""
    parent_wir_id: Optional[UUID] = None
    original_wir_id: Optional[UUID] = None
    revision_number: int = 0

    @property
    def is_payable(self) -> bool:
        return self.result is not None and self.result.is_payable
