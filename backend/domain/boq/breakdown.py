"""
BOQ Domain - Breakdown Linker.

Selects the breakdown sub-items a WIR may use for its calculation.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from .entities import BreakdownItem


def is_selectable(item: BreakdownItem) -> bool:
    """Only terminal sub-items carry a usable percentage; composites would double count."""
    return item.is_leaf and item.parent_breakdown_id is not None


def selectable_breakdown_items(
    items: Iterable[BreakdownItem],
    boq_item_ids: Iterable[UUID],
) -> List[BreakdownItem]:
    """Selectable breakdown items owned by any of the given BOQ items, in input order."""
    wanted = {str(boq_id) for boq_id in boq_item_ids}
    return [
        item for item in items
        if str(item.boq_item_id) in wanted and is_selectable(item)
    ]


def group_by_parent(items: Iterable[BreakdownItem]) -> Dict[Optional[UUID], List[BreakdownItem]]:
    """Map each parent breakdown id (None for top level) to its direct children."""
    groups: Dict[Optional[UUID], List[BreakdownItem]] = {}
    for item in items:
        groups.setdefault(item.parent_breakdown_id, []).append(item)
    return groups


def invalid_selection(
    selected_ids: Iterable,
    items: Iterable[BreakdownItem],
    boq_item_ids: Iterable[UUID],
) -> List[str]:
    """Selected ids that exist but are not selectable for the linked BOQ items."""
    items = list(items)
    allowed = {item.key for item in selectable_breakdown_items(items, boq_item_ids)}
    known = {item.key for item in items}
    return [
        str(selected) for selected in selected_ids
        if str(selected) in known and str(selected) not in allowed
    ]
