from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core import config
from pagebuilder.core.exceptions import DocumentFormatError, NodeNotFoundError
from pagebuilder.core.models import Node, NodeKind
from pagebuilder.core.tree import ComponentTree, can_contain


def _section(tree: ComponentTree) -> Node:
    result = tree.create_section()
    assert result.ok
    return tree.get(result.node_id)


def test_new_section_has_one_column() -> None:
    tree = ComponentTree()
    section = _section(tree)
    assert section.kind is NodeKind.SECTION
    assert len(section.children) == 1
    assert section.children[0].kind is NodeKind.COLUMN
    assert section.children[0].parent_id == section.id


def test_add_column_right_twice_keeps_order() -> None:
    tree = ComponentTree()
    section = _section(tree)
    first = section.children[0].id
    second = tree.add_column(section.id, "right").node_id
    third = tree.add_column(section.id, "right").node_id
    assert tree.column_count(section.id) == 3
    assert [c.id for c in section.children] == [first, second, third]


def test_add_column_relative_to_reference() -> None:
    tree = ComponentTree()
    section = _section(tree)
    first = section.children[0].id
    right = tree.add_column(section.id, "right", first).node_id
    left = tree.add_column(section.id, "left", right).node_id
    assert [c.id for c in section.children] == [first, left, right]
    leftmost = tree.add_column(section.id, "left").node_id
    assert section.children[0].id == leftmost


def test_removing_last_column_is_rejected() -> None:
    tree = ComponentTree()
    section = _section(tree)
    result = tree.remove_column(section.children[0].id)
    assert not result.ok
    assert result.message == "Sections must have at least 1 column"
    assert tree.column_count(section.id) == 1


def test_column_cap_is_enforced() -> None:
    tree = ComponentTree()
    section = _section(tree)
    for _ in range(config.MAX_COLUMNS - 1):
        assert tree.add_column(section.id).ok
    before = [c.id for c in section.children]
    result = tree.add_column(section.id)
    assert not result.ok
    assert result.message == f"Maximum {config.MAX_COLUMNS} columns allowed"
    assert [c.id for c in section.children] == before


def test_inner_section_cap_is_four() -> None:
    tree = ComponentTree()
    section = _section(tree)
    inner_id = tree.create_inner_section(section.children[0].id).node_id
    for _ in range(config.MAX_INNER_COLUMNS - 1):
        assert tree.add_column(inner_id).ok
    result = tree.add_column(inner_id)
    assert not result.ok
    assert result.message == f"Maximum {config.MAX_INNER_COLUMNS} inner columns allowed"
    assert all(c.kind is NodeKind.INNER_COLUMN for c in tree.children_of(inner_id))


def test_containment_rules() -> None:
    assert can_contain(None, NodeKind.SECTION)
    assert not can_contain(None, NodeKind.COLUMN)
    assert can_contain(NodeKind.SECTION, NodeKind.COLUMN)
    assert not can_contain(NodeKind.SECTION, NodeKind.WIDGET)
    assert can_contain(NodeKind.COLUMN, NodeKind.WIDGET)
    assert can_contain(NodeKind.COLUMN, NodeKind.INNER_SECTION)
    assert not can_contain(NodeKind.COLUMN, NodeKind.SECTION)
    assert can_contain(NodeKind.INNER_SECTION, NodeKind.INNER_COLUMN)
    assert not can_contain(NodeKind.INNER_SECTION, NodeKind.COLUMN)
    assert not can_contain(NodeKind.INNER_COLUMN, NodeKind.INNER_SECTION)
    for kind in NodeKind:
        assert not can_contain(NodeKind.WIDGET, kind)


def test_widget_cannot_go_directly_into_section() -> None:
    tree = ComponentTree()
    section = _section(tree)
    result = tree.add_widget(section.id, "heading")
    assert not result.ok
    assert len(tree) == 2


def test_add_widget_canonicalizes_attribute_names() -> None:
    tree = ComponentTree()
    column = _section(tree).children[0]
    widget_id = tree.add_widget(column.id, "heading", attributes={"paddingTop": 10}).node_id
    assert tree.get(widget_id).attributes == {"padding-top": 10}


def test_remove_cascades_to_subtree() -> None:
    tree = ComponentTree()
    section = _section(tree)
    column_id = section.children[0].id
    inner_id = tree.create_inner_section(column_id).node_id
    inner_col = tree.children_of(inner_id)[0].id
    widget_id = tree.add_widget(inner_col, "text").node_id

    result = tree.remove(section.id)
    assert result.ok
    assert set(result.removed_ids) == {section.id, column_id, inner_id, inner_col, widget_id}
    assert len(tree) == 0
    assert widget_id not in tree


def test_get_unknown_id_raises() -> None:
    tree = ComponentTree()
    with pytest.raises(NodeNotFoundError):
        tree.get("missing")
    assert not tree.remove("missing").ok


def test_move_widget_between_columns() -> None:
    tree = ComponentTree()
    section = _section(tree)
    left = section.children[0].id
    right = tree.add_column(section.id).node_id
    widget_id = tree.add_widget(left, "button").node_id

    assert tree.move(widget_id, right).ok
    assert tree.get(widget_id).parent_id == right
    assert tree.children_of(left) == []


def test_columns_only_move_within_their_section() -> None:
    tree = ComponentTree()
    first = _section(tree)
    second = _section(tree)
    tree.add_column(first.id)
    column_id = first.children[0].id

    assert not tree.move(column_id, second.id).ok
    assert tree.get(column_id).parent_id == first.id
    assert tree.move(column_id, first.id, 1).ok
    assert first.children[1].id == column_id


def test_move_into_own_subtree_is_rejected() -> None:
    tree = ComponentTree()
    section = _section(tree)
    column_id = section.children[0].id
    inner_id = tree.create_inner_section(column_id).node_id
    target = tree.children_of(inner_id)[0].id
    result = tree.move(inner_id, target)
    assert not result.ok
    assert tree.get(inner_id).parent_id == column_id


def test_sections_reorder_at_page_root() -> None:
    tree = ComponentTree()
    first = _section(tree)
    second = _section(tree)
    assert tree.move(second.id, None, 0).ok
    assert [s.id for s in tree.sections] == [second.id, first.id]


def test_column_widths_share_remaining_space() -> None:
    tree = ComponentTree()
    section = _section(tree)
    tree.add_column(section.id)
    tree.add_column(section.id)
    ids = [c.id for c in section.children]
    assert list(tree.column_widths(section.id).values()) == ["33.333%"] * 3

    tree.set_attribute(ids[0], "flex-basis", 50)
    widths = tree.column_widths(section.id)
    assert widths[ids[0]] == "50%"
    assert widths[ids[1]] == "25%"
    assert widths[ids[2]] == "25%"

    assert tree.remove_column(ids[2]).ok
    widths = tree.column_widths(section.id)
    assert widths == {ids[0]: "50%", ids[1]: "50%"}


def test_set_attributes_merges_and_clears() -> None:
    tree = ComponentTree()
    column = _section(tree).children[0]
    tree.set_attributes(column.id, {"paddingTop": 10, "color": "#fff"})
    assert column.attributes == {"padding-top": 10, "color": "#fff"}
    tree.set_attributes(column.id, {"color": None})
    assert column.attributes == {"padding-top": 10}
    tree.clear_attribute(column.id, "padding_top")
    assert column.attributes == {}


def test_events_are_emitted_for_mutations() -> None:
    tree = ComponentTree()
    events = []
    tree.subscribe(events.append)
    section = _section(tree)
    tree.set_attribute(section.id, "color", "red")
    tree.remove(section.id)
    assert [e.kind for e in events] == ["added", "updated", "removed"]
    assert events[0].node_ids == (section.id, section.children[0].id)


def test_round_trip_through_dict() -> None:
    tree = ComponentTree()
    section = _section(tree)
    tree.add_widget(section.children[0].id, "heading", attributes={"text": "Hi"})
    restored = ComponentTree.from_dict(tree.to_dict())
    assert restored.to_dict() == tree.to_dict()
    assert restored.ids() == tree.ids()


def test_load_rejects_broken_documents() -> None:
    empty_section = {"id": "s1", "kind": "section", "children": []}
    with pytest.raises(DocumentFormatError):
        ComponentTree.from_dict({"sections": [empty_section]})

    widget_in_section = {
        "id": "s1",
        "kind": "section",
        "children": [{"id": "w1", "kind": "widget", "widget_type": "text"}],
    }
    with pytest.raises(DocumentFormatError):
        ComponentTree.from_dict({"sections": [widget_in_section]})

    duplicated = {
        "id": "s1",
        "kind": "section",
        "children": [{"id": "s1", "kind": "column"}],
    }
    with pytest.raises(DocumentFormatError):
        ComponentTree.from_dict({"sections": [duplicated]})
