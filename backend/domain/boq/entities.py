"""
BOQ Domain - Entities.

BOQItem is a node of the cost-breakdown tree, BreakdownItem is a
percentage/value rule attached to one BOQ item.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from domain.shared.base_entity import Entity
from domain.shared.value_objects import BOQCode, Percentage


@dataclass(eq=False, kw_only=True)
class BOQItem(Entity):
    """
    A single priced item of the Bill of Quantities.

    `children` is only populated by the hierarchy builder; rows read
    from the store carry just `parent_id`.
    """

    code: str
    description: str = ""
    description_ar: str = ""
    quantity: Decimal = Decimal('0')
    unit: str = ""
    unit_ar: str = ""
    unit_rate: Decimal = Decimal('0')
    total_amount: Optional[Decimal] = None
    parent_id: Optional[UUID] = None
    children: List[BOQItem] = field(default_factory=list, repr=False)

    @property
    def level(self) -> int:
        """Depth in the tree, derived from the code (root = 0)."""
        return BOQCode(self.code).level if self.code else 0

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_selectable_leaf(self) -> bool:
        """A WIR may only be raised against a leaf that carries quantity."""
        return not self.children and self.quantity > 0

    @property
    def boq_amount(self) -> Decimal:
        """Budgeted amount: stored total, or quantity x unit rate."""
        if self.total_amount is not None:
            return self.total_amount
        return self.quantity * self.unit_rate


@dataclass(eq=False, kw_only=True)
class BreakdownItem(Entity):
    """
    Percentage/value rule attached to one BOQ item.

    Composite breakdown items group sub-items for display; only leaf
    sub-items (is_leaf and a parent breakdown) feed WIR calculations.
    """

    boq_item_id: UUID
    keyword: str = ""
    keyword_ar: str = ""
    description: str = ""
    description_ar: str = ""
    percentage: Decimal = Decimal('0')
    value: Decimal = Decimal('0')
    parent_breakdown_id: Optional[UUID] = None
    unit_rate: Decimal = Decimal('0')
    quantity: Decimal = Decimal('0')
    is_leaf: bool = False

    @property
    def is_selectable(self) -> bool:
        return self.is_leaf and self.parent_breakdown_id is not None

    @property
    def label(self) -> str:
        return self.keyword or self.description or str(self.id)

    @property
    def share(self) -> Percentage:
        return Percentage(self.percentage)
