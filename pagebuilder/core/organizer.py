"""Groups a node's editable properties into inspector sections for one tab."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .models import Node
from .schema import describe, format_section_title, properties_for
from .ui_state import EditorUIState

SECTION_TITLES = {
    "css": "Custom CSS",
    "box-shadow": "Box Shadow",
}


def section_key(section: str) -> str:
    """Normalized key used to remember a section's open/collapsed state."""
    return "section-" + re.sub(r"\s+", "-", section.strip().lower())


def section_title(section: str) -> str:
    return SECTION_TITLES.get(section, format_section_title(section))


@dataclass
class OrganizedPanel:
    tab: str
    sections: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.sections

    @property
    def empty_message(self) -> str:
        return f"No {self.tab} settings available" if self.empty else ""

    @property
    def empty_hint(self) -> str:
        return f"This widget doesn't have any {self.tab} options" if self.empty else ""

    def property_names(self) -> List[str]:
        return [name for names in self.sections.values() for name in names]


class SectionOrganizer:
    def __init__(self, ui_state: Optional[EditorUIState] = None) -> None:
        self.ui_state = ui_state if ui_state is not None else EditorUIState()

    def organize(
        self,
        properties: Union[Mapping[str, object], Iterable[str]],
        active_tab: str,
    ) -> OrganizedPanel:
        """Properties of ``active_tab`` grouped by section, in first-seen order."""
        panel = OrganizedPanel(tab=active_tab)
        seen = set()
        for name in properties:
            descriptor = describe(name)
            if descriptor.tab != active_tab or descriptor.name in seen:
                continue
            seen.add(descriptor.name)
            panel.sections.setdefault(descriptor.section, []).append(descriptor.name)
        return panel

    def panel_for(self, node: Node, active_tab: str) -> OrganizedPanel:
        names = properties_for(node.kind_key)
        extra = [name for name in node.attributes if name not in names]
        return self.organize(names + extra, active_tab)

    # ------------------------------------------------------- Section state --
    def is_open(self, section: str) -> bool:
        return self.ui_state.is_section_open(section_key(section))

    def set_open(self, section: str, is_open: bool) -> None:
        self.ui_state.set_section_open(section_key(section), is_open)

    def toggle(self, section: str) -> bool:
        is_open = not self.is_open(section)
        self.set_open(section, is_open)
        return is_open

    def collapse_all(self, sections: Iterable[str]) -> None:
        for section in sections:
            self.set_open(section, False)

    def expand_all(self, sections: Iterable[str]) -> None:
        for section in sections:
            self.set_open(section, True)
