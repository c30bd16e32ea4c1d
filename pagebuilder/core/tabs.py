"""Inspector tab controller."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .models import Node
from .organizer import OrganizedPanel, SectionOrganizer
from .schema import TABS
from .ui_state import EditorUIState

logger = logging.getLogger(__name__)

PanelListener = Callable[[Optional[OrganizedPanel]], None]


class TabController:
    """Tracks the single active tab shared by every selection.

    Switching tab or selecting another node re-runs the organizer and hands
    the new panel to every listener; deselecting hands them ``None``.
    """

    def __init__(self, ui_state: EditorUIState, organizer: Optional[SectionOrganizer] = None) -> None:
        self.ui_state = ui_state
        self.organizer = organizer if organizer is not None else SectionOrganizer(ui_state)
        self.selected: Optional[Node] = None
        self.panel: Optional[OrganizedPanel] = None
        self._listeners: List[PanelListener] = []

    @property
    def active_tab(self) -> str:
        return self.ui_state.active_tab

    def on_panel_changed(self, listener: PanelListener) -> None:
        self._listeners.append(listener)

    def is_visible(self, tab: str) -> bool:
        return tab == self.active_tab

    def switch_tab(self, tab: str) -> bool:
        """Activate ``tab``; returns ``False`` when it already was active."""
        if tab not in TABS:
            raise ValueError(f"Unknown tab {tab!r}; expected one of {', '.join(TABS)}")
        if tab == self.active_tab:
            return False
        self.ui_state.set_active_tab(tab)
        logger.debug("Active inspector tab is now %s", tab)
        self.refresh()
        return True

    def select(self, node: Node) -> OrganizedPanel:
        self.selected = node
        self.refresh()
        return self.panel

    def deselect(self) -> None:
        self.selected = None
        self.refresh()

    def refresh(self) -> None:
        if self.selected is None:
            self.panel = None
        else:
            self.panel = self.organizer.panel_for(self.selected, self.active_tab)
        for listener in list(self._listeners):
            listener(self.panel)
