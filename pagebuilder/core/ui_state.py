"""Editor UI state (active inspector tab, open/collapsed sections) and its store."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from . import config
from .schema import DEFAULT_TAB, TABS

logger = logging.getLogger(__name__)


class UIStateStore:
    """Very small settings helper storing JSON data."""

    ACTIVE_TAB_KEY = "active_tab"
    SECTION_STATES_KEY = "section_states"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else config.PAGEBUILDER_UI_STATE_PATH

    def read(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable editor state %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, data: Dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save editor state to %s: %s", self.path, exc)


@dataclass
class EditorUIState:
    active_tab: str = DEFAULT_TAB
    section_states: Dict[str, bool] = field(default_factory=dict)
    store: Optional[UIStateStore] = field(default=None, repr=False, compare=False)

    @classmethod
    def load(cls, store: Optional[UIStateStore] = None) -> "EditorUIState":
        """Read persisted state; anything missing or malformed means defaults."""
        state = cls(store=store)
        if store is None:
            return state
        data = store.read()
        tab = data.get(UIStateStore.ACTIVE_TAB_KEY)
        if isinstance(tab, str) and tab in TABS:
            state.active_tab = tab
        sections = data.get(UIStateStore.SECTION_STATES_KEY)
        if isinstance(sections, dict):
            state.section_states = {
                str(key): bool(value) for key, value in sections.items() if isinstance(value, bool)
            }
        return state

    def to_dict(self) -> Dict[str, object]:
        return {
            UIStateStore.ACTIVE_TAB_KEY: self.active_tab,
            UIStateStore.SECTION_STATES_KEY: dict(self.section_states),
        }

    def save(self) -> None:
        if self.store is not None:
            self.store.write(self.to_dict())

    def set_active_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab {tab!r}; expected one of {', '.join(TABS)}")
        self.active_tab = tab
        self.save()

    def is_section_open(self, key: str) -> bool:
        return self.section_states.get(key, True)

    def set_section_open(self, key: str, is_open: bool) -> None:
        self.section_states[key] = bool(is_open)
        self.save()
