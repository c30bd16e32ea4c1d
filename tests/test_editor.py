from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core import storage
from pagebuilder.core.editor import EditorSession
from pagebuilder.core.exceptions import DocumentFormatError
from pagebuilder.core.models import Node, NodeKind, PageDocument


def _session_with_heading() -> tuple[EditorSession, str, str]:
    session = EditorSession(title="Home")
    section_id = session.create_section().node_id
    column_id = session.tree.children_of(section_id)[0].id
    widget_id = session.add_widget(column_id, "heading", attributes={"text": "Welcome"}).node_id
    return session, column_id, widget_id


def test_set_property_updates_tree_and_stylesheet() -> None:
    session, _, widget_id = _session_with_heading()
    result = session.set_property(widget_id, "fontSize", 24)
    assert result.ok
    assert session.tree.get(widget_id).attributes["font-size"] == 24
    assert "font-size: 24px;" in session.css


def test_set_property_rejects_bad_shapes() -> None:
    session, _, widget_id = _session_with_heading()
    result = session.set_property(widget_id, "text-align", "sideways")
    assert not result.ok
    assert "text-align" not in session.tree.get(widget_id).attributes


def test_selection_drives_the_inspector_panel() -> None:
    session, column_id, widget_id = _session_with_heading()
    panel = session.on_select(widget_id)
    assert panel.tab == "content"
    assert "text" in panel.property_names()

    session.switch_tab("style")
    assert session.panel.tab == "style"

    session.on_deselect()
    assert session.panel is None
    assert session.selected is None


def test_removing_selected_node_clears_selection() -> None:
    session, column_id, widget_id = _session_with_heading()
    session.on_select(widget_id)
    assert session.remove(widget_id).ok
    assert session.selected_id is None
    assert session.panel is None


def test_rejected_structure_command_keeps_tree() -> None:
    session, column_id, _ = _session_with_heading()
    before = session.tree.to_dict()
    assert not session.remove_column(column_id).ok
    assert session.tree.to_dict() == before


def test_save_payload_contains_tree_css_and_html() -> None:
    session, column_id, widget_id = _session_with_heading()
    session.set_property(column_id, "paddingTop", 10)
    payload = session.save_payload()
    assert payload.tree == session.tree.to_dict()
    assert "padding-top: 10px;" in payload.css
    assert f'data-node-id="{widget_id}"' in payload.html
    assert "Welcome" in payload.html


def test_document_round_trip_through_storage(tmp_path: Path) -> None:
    session, column_id, widget_id = _session_with_heading()
    session.set_property(widget_id, "hideMobile", True)
    path = tmp_path / "page.pbpage"
    storage.save_document(path, session.document())

    restored = EditorSession()
    restored.load_document(storage.load_document(path))
    assert restored.title == "Home"
    assert restored.tree.to_dict() == session.tree.to_dict()
    assert restored.css == session.css
    assert "@media (max-width: 767px)" in restored.css


def test_load_document_replaces_previous_tree() -> None:
    session, _, _ = _session_with_heading()
    session.load_document(PageDocument(title="Blank"))
    assert len(session.tree) == 0
    assert session.css == ""
    assert session.title == "Blank"


def test_load_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.pbpage"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(DocumentFormatError):
        storage.load_document(path)


def test_failed_load_keeps_selection_and_tree() -> None:
    session, _, widget_id = _session_with_heading()
    session.on_select(widget_id)
    before = session.tree.to_dict()
    broken = PageDocument(sections=[Node(id="s1", kind=NodeKind.SECTION)])

    with pytest.raises(DocumentFormatError):
        session.load_document(broken)
    assert session.tree.to_dict() == before
    assert session.selected_id == widget_id
    assert session.panel is not None
