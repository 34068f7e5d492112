from decimal import Decimal
from uuid import uuid4

from domain.boq.entities import BOQItem
from domain.boq.hierarchy import (
    ORDER_CODE,
    build_tree,
    code_level,
    flatten,
    nodes_at_level,
    parent_code,
    selectable_leaves,
)


def item(code, parent=None, quantity='1'):
    return BOQItem(
        code=code,
        quantity=Decimal(quantity),
        parent_id=parent.id if parent else None,
    )


def test_code_level_and_parent_code():
    assert code_level('1') == 0
    assert code_level('1.2.3') == 2
    assert parent_code('1.2.3') == '1.2'
    assert parent_code('1') is None


def test_build_tree_links_children_in_input_order():
    root = item('1', quantity='0')
    second = item('1.2', root)
    first = item('1.1', root)

    roots = build_tree([root, second, first])

    assert roots == [root]
    assert [child.code for child in root.children] == ['1.2', '1.1']


def test_code_order_is_natural():
    root = item('1', quantity='0')
    children = [item(code, root) for code in ('1.10', '1.9', '1.2')]

    build_tree([root] + children, ORDER_CODE)

    assert [child.code for child in root.children] == ['1.2', '1.9', '1.10']


def test_orphan_becomes_root():
    orphan = BOQItem(code='2.1', parent_id=uuid4())
    roots = build_tree([orphan])
    assert roots == [orphan]


def test_every_record_appears_once_even_with_a_parent_cycle():
    a = item('1')
    b = item('2', a)
    a.parent_id = b.id
    c = item('3')

    roots = build_tree([a, b, c])
    flat = flatten(roots)

    assert sorted(node.code for node in flat) == ['1', '2', '3']
    assert len(flat) == 3


def test_flatten_is_preorder():
    root = item('1', quantity='0')
    child = item('1.1', root, quantity='0')
    grandchild = item('1.1.1', child)
    sibling = item('1.2', root)

    flat = flatten(build_tree([root, child, grandchild, sibling]))

    assert [node.code for node in flat] == ['1', '1.1', '1.1.1', '1.2']


def test_nodes_at_level_and_selectable_leaves():
    root = item('1', quantity='0')
    leaf = item('1.1', root, quantity='5')
    empty_leaf = item('1.2', root, quantity='0')

    roots = build_tree([root, leaf, empty_leaf])

    assert nodes_at_level(flatten(roots), 1) == [leaf, empty_leaf]
    assert selectable_leaves(roots) == [leaf]
