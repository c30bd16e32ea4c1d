from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core.models import Node, NodeKind
from pagebuilder.core.organizer import SectionOrganizer, section_key, section_title
from pagebuilder.core.tabs import TabController
from pagebuilder.core.ui_state import EditorUIState, UIStateStore


def test_organize_groups_by_section_for_active_tab() -> None:
    organizer = SectionOrganizer()
    panel = organizer.organize(
        {"paddingTop": 1, "color": "#fff", "padding-left": 2, "text": "x", "hide-mobile": True},
        "style",
    )
    assert panel.sections == {"spacing": ["padding-top", "padding-left"], "colors": ["color"]}
    assert not panel.empty


def test_organize_puts_unknown_properties_in_general() -> None:
    panel = SectionOrganizer().organize(["mysteryThing", "text"], "content")
    assert panel.sections == {"general": ["mystery-thing"], "content": ["text"]}


def test_empty_panel_messages() -> None:
    panel = SectionOrganizer().organize([], "advanced")
    assert panel.empty
    assert panel.empty_message == "No advanced settings available"
    assert panel.empty_hint == "This widget doesn't have any advanced options"


def test_divider_has_no_content_settings() -> None:
    divider = Node(id="w1", kind=NodeKind.WIDGET, widget_type="divider")
    panel = SectionOrganizer().panel_for(divider, "content")
    assert panel.empty
    assert panel.empty_message == "No content settings available"


def test_panel_for_column_includes_sizing() -> None:
    column = Node(id="c1", kind=NodeKind.COLUMN)
    panel = SectionOrganizer().panel_for(column, "style")
    assert "flex-basis" in panel.property_names()
    assert "background-type" in panel.sections["background"]


def test_section_keys_and_titles() -> None:
    assert section_key("Box Shadow") == "section-box-shadow"
    assert section_key("typography") == "section-typography"
    assert section_title("box-shadow") == "Box Shadow"
    assert section_title("css") == "Custom CSS"


def test_sections_default_open_and_toggle() -> None:
    organizer = SectionOrganizer()
    assert organizer.is_open("typography")
    assert organizer.toggle("typography") is False
    assert not organizer.is_open("typography")
    organizer.expand_all(["typography", "spacing"])
    assert organizer.is_open("typography")
    organizer.collapse_all(["spacing"])
    assert organizer.ui_state.section_states["section-spacing"] is False


def test_tab_switch_reorganizes_and_notifies() -> None:
    controller = TabController(EditorUIState())
    panels = []
    controller.on_panel_changed(panels.append)
    heading = Node(id="w1", kind=NodeKind.WIDGET, widget_type="heading", attributes={"text": "Hi"})

    panel = controller.select(heading)
    assert panel.tab == "content"
    assert "text" in panel.property_names()

    assert controller.switch_tab("style") is True
    assert controller.panel.tab == "style"
    assert "font-size" in controller.panel.property_names()
    assert controller.switch_tab("style") is False

    controller.deselect()
    assert panels[-1] is None
    assert len(panels) == 3


def test_unknown_tab_is_rejected() -> None:
    controller = TabController(EditorUIState())
    with pytest.raises(ValueError):
        controller.switch_tab("layout")
    assert controller.active_tab == "content"


def test_active_tab_persists_across_sessions(tmp_path: Path) -> None:
    store = UIStateStore(tmp_path / "state.json")
    state = EditorUIState.load(store)
    TabController(state).switch_tab("advanced")
    state.set_section_open("section-typography", False)

    restored = EditorUIState.load(UIStateStore(tmp_path / "state.json"))
    assert restored.active_tab == "advanced"
    assert restored.is_section_open("section-typography") is False
    assert restored.is_section_open("section-spacing") is True


def test_corrupt_state_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    state = EditorUIState.load(UIStateStore(path))
    assert state.active_tab == "content"
    assert state.section_states == {}

    path.write_text(json.dumps({"active_tab": "bogus", "section_states": {"a": "yes"}}), encoding="utf-8")
    state = EditorUIState.load(UIStateStore(path))
    assert state.active_tab == "content"
    assert state.section_states == {}
