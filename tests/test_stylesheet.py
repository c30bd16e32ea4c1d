from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core.compiler import compile_node_css
from pagebuilder.core.stylesheet import StyleApplier, StylesheetAggregator
from pagebuilder.core.tree import ComponentTree


def test_aggregator_replaces_and_joins_entries() -> None:
    sheet = StylesheetAggregator()
    sheet.upsert("a", "A1")
    sheet.upsert("b", "B1")
    sheet.upsert("a", "A2")
    assert sheet.render_all() == "A2\n\nB1"
    sheet.remove("a")
    sheet.remove("missing")
    assert sheet.render_all() == "B1"
    assert "a" not in sheet
    assert len(sheet) == 1


def test_applier_tracks_attribute_changes() -> None:
    tree = ComponentTree()
    applier = StyleApplier(tree)
    section_id = tree.create_section().node_id
    assert applier.css == ""

    tree.set_attribute(section_id, "paddingTop", 10)
    assert applier.aggregator.get(section_id) == compile_node_css(section_id, {"padding-top": 10})

    tree.clear_attribute(section_id, "padding-top")
    assert section_id not in applier.aggregator


def test_applier_drops_entries_for_removed_subtree() -> None:
    tree = ComponentTree()
    applier = StyleApplier(tree)
    section_id = tree.create_section().node_id
    column_id = tree.children_of(section_id)[0].id
    widget_id = tree.add_widget(column_id, "text", attributes={"color": "red"}).node_id
    tree.set_attribute(column_id, "margin-top", 5)
    assert set(applier.aggregator.ids()) == {widget_id, column_id}

    tree.remove(section_id)
    assert applier.css == ""
    assert len(applier.aggregator) == 0


def test_sheet_matches_compiling_every_node() -> None:
    tree = ComponentTree()
    applier = StyleApplier(tree)
    first = tree.create_section().node_id
    second = tree.create_section().node_id
    tree.set_attribute(first, "color", "red")
    tree.set_attribute(second, "hideTablet", True)
    for node in tree.walk():
        expected = compile_node_css(node.id, node.attributes)
        assert (applier.aggregator.get(node.id) or "") == expected


def test_detached_applier_stops_listening() -> None:
    tree = ComponentTree()
    applier = StyleApplier(tree)
    section_id = tree.create_section().node_id
    applier.detach()
    tree.set_attribute(section_id, "color", "red")
    assert applier.css == ""
    applier.attach()
    assert "color: red;" in applier.css
