from decimal import Decimal
from uuid import uuid4

from domain.boq.breakdown import (
    group_by_parent,
    invalid_selection,
    is_selectable,
    selectable_breakdown_items,
)
from domain.boq.entities import BreakdownItem


def make(boq_id, keyword, parent=None, is_leaf=True, percentage='0.1'):
    return BreakdownItem(
        boq_item_id=boq_id,
        keyword=keyword,
        parent_breakdown_id=parent.id if parent else None,
        is_leaf=is_leaf,
        percentage=Decimal(percentage),
    )


def test_only_leaf_sub_items_are_selectable():
    boq_id = uuid4()
    group = make(boq_id, 'Group', is_leaf=False)
    top_leaf = make(boq_id, 'Standalone')
    sub = make(boq_id, 'Sub', parent=group)

    assert not is_selectable(group)
    assert not is_selectable(top_leaf)
    assert is_selectable(sub)


def test_filter_keeps_input_order_and_linked_items_only():
    linked, other = uuid4(), uuid4()
    group = make(linked, 'Group', is_leaf=False)
    second = make(linked, 'B', parent=group)
    first = make(linked, 'A', parent=group)
    foreign_group = make(other, 'Other', is_leaf=False)
    foreign = make(other, 'C', parent=foreign_group)

    items = [group, second, first, foreign_group, foreign]

    assert selectable_breakdown_items(items, [str(linked)]) == [second, first]
    assert selectable_breakdown_items(items, []) == []


def test_group_by_parent():
    boq_id = uuid4()
    group = make(boq_id, 'Group', is_leaf=False)
    sub = make(boq_id, 'Sub', parent=group)

    groups = group_by_parent([group, sub])

    assert groups[None] == [group]
    assert groups[group.id] == [sub]


def test_invalid_selection_ignores_unknown_ids():
    boq_id = uuid4()
    group = make(boq_id, 'Group', is_leaf=False)
    sub = make(boq_id, 'Sub', parent=group)
    missing = uuid4()

    invalid = invalid_selection([group.id, sub.id, missing], [group, sub], [boq_id])

    assert invalid == [str(group.id)]
