"""
BOQ Services.

Read-side helpers that load BOQ and breakdown rows as domain entities
and run the hierarchy builder and breakdown linker over them.
"""

from typing import Iterable, List, Optional

from domain.boq.breakdown import selectable_breakdown_items
from domain.boq.entities import BOQItem, BreakdownItem
from domain.boq.hierarchy import ORDER_INPUT, build_tree, flatten, nodes_at_level


def load_boq_items() -> List[BOQItem]:
    from infrastructure.persistence.models import BOQItem as BOQItemModel

    return [row.to_entity() for row in BOQItemModel.objects.order_by('created_at', 'code')]


def load_breakdown_items(boq_item_ids: Optional[Iterable] = None) -> List[BreakdownItem]:
    from infrastructure.persistence.models import BreakdownItem as BreakdownItemModel

    queryset = BreakdownItemModel.objects.order_by('created_at')
    if boq_item_ids is not None:
        queryset = queryset.filter(boq_item_id__in=list(boq_item_ids))
    return [row.to_entity() for row in queryset]


def boq_tree(order: str = ORDER_INPUT) -> List[BOQItem]:
    return build_tree(load_boq_items(), order)


def boq_flat(order: str = ORDER_INPUT, level: Optional[int] = None, selectable: bool = False) -> List[BOQItem]:
    """Pre-order list for selectors, optionally one level or selectable leaves only."""
    nodes = flatten(boq_tree(order))
    if level is not None:
        nodes = nodes_at_level(nodes, level)
    if selectable:
        nodes = [node for node in nodes if node.is_selectable_leaf]
    return nodes


def selectable_breakdown(boq_item_ids: Iterable) -> List[BreakdownItem]:
    boq_item_ids = list(boq_item_ids)
    return selectable_breakdown_items(load_breakdown_items(boq_item_ids), boq_item_ids)
