"""
BOQ Domain - Hierarchy Builder.

Turns the flat list of BOQ rows read from the store into a forest and
flattens it back for selector lists.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from domain.shared.value_objects import BOQCode

from .entities import BOQItem


ORDER_INPUT = "input"
ORDER_CODE = "code"


def code_level(code: str) -> int:
    """Level of a dotted code: number of '.' separators."""
    return BOQCode(code).level


def parent_code(code: str) -> Optional[str]:
    parent = BOQCode(code).parent_code
    return parent.value if parent else None


def build_tree(items: Iterable[BOQItem], order: str = ORDER_INPUT) -> List[BOQItem]:
    """
    Build a forest of BOQ items linked through `parent_id`.

    Pass 1 indexes every item and resets its children; pass 2 attaches
    each item to its parent. An item whose parent does not resolve is
    kept as a root so that orphaned rows stay visible. Items that are
    only reachable through a parent cycle are detached and promoted to
    roots, which keeps every input record in the forest exactly once.

    Roots and children keep input order unless `order="code"`.
    """
    items = list(items)
    by_id: Dict[UUID, BOQItem] = {}
    for item in items:
        item.children = []
        by_id[item.id] = item

    roots: List[BOQItem] = []
    for item in items:
        parent = by_id.get(item.parent_id) if item.parent_id else None
        if parent is not None and parent is not item:
            parent.children.append(item)
        else:
            roots.append(item)

    reachable = {node.id for node in flatten(roots)}
    for item in items:
        if item.id in reachable:
            continue
        parent = by_id[item.parent_id]
        parent.children.remove(item)
        roots.append(item)
        reachable.update(node.id for node in flatten([item]))

    if order == ORDER_CODE:
        _sort_by_code(roots)
    return roots


def _sort_by_code(nodes: List[BOQItem]) -> None:
    nodes.sort(key=lambda node: BOQCode(node.code).sort_key if node.code else ())
    for node in nodes:
        _sort_by_code(node.children)


def flatten(roots: Iterable[BOQItem]) -> List[BOQItem]:
    """Depth-first pre-order walk of the forest."""
    result: List[BOQItem] = []
    seen: Set[UUID] = set()
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        result.append(node)
        stack.extend(reversed(node.children))
    return result


def nodes_at_level(nodes: Iterable[BOQItem], level: int) -> List[BOQItem]:
    return [node for node in nodes if node.level == level]


def selectable_leaves(roots: Iterable[BOQItem]) -> List[BOQItem]:
    """Leaves with quantity, in tree order; what a WIR may link to."""
    return [node for node in flatten(roots) if node.is_selectable_leaf]
