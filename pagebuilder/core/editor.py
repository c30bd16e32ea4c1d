"""Editor session: the glue between the tree, the live stylesheet and the inspector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .generator import render_tree_html
from .models import Node, PageDocument
from .organizer import OrganizedPanel, SectionOrganizer
from .schema import canonical_name, validate_value
from .stylesheet import StyleApplier, StylesheetAggregator
from .tabs import TabController
from .tree import ComponentTree, MutationResult, Side, TreeEvent
from .ui_state import EditorUIState

logger = logging.getLogger(__name__)


@dataclass
class SavePayload:
    tree: Dict[str, object]
    css: str
    html: str


class EditorSession:
    """One open page in the editor.

    Every edit flows through the tree; the style applier listens to tree
    events so the aggregated stylesheet is always current, and the tab
    controller re-organizes the inspector whenever the selection changes.
    """

    def __init__(
        self,
        tree: Optional[ComponentTree] = None,
        ui_state: Optional[EditorUIState] = None,
        title: str = "Untitled page",
        slug: str = "index",
    ) -> None:
        self.tree = tree if tree is not None else ComponentTree()
        self.aggregator = StylesheetAggregator()
        self.applier = StyleApplier(self.tree, self.aggregator)
        self.ui_state = ui_state if ui_state is not None else EditorUIState()
        self.organizer = SectionOrganizer(self.ui_state)
        self.tabs = TabController(self.ui_state, self.organizer)
        self.title = title
        self.slug = slug
        self.selected_id: Optional[str] = None
        self.tree.subscribe(self._on_tree_event)

    # ---------------------------------------------------------- Selection --
    @property
    def selected(self) -> Optional[Node]:
        return self.tree.find(self.selected_id)

    @property
    def panel(self) -> Optional[OrganizedPanel]:
        return self.tabs.panel

    def on_select(self, node_id: str) -> OrganizedPanel:
        node = self.tree.get(node_id)
        self.selected_id = node.id
        return self.tabs.select(node)

    def on_deselect(self) -> None:
        self.selected_id = None
        self.tabs.deselect()

    def switch_tab(self, tab: str) -> bool:
        return self.tabs.switch_tab(tab)

    def _on_tree_event(self, event: TreeEvent) -> None:
        if self.selected_id is None or self.selected_id not in event.node_ids:
            return
        if event.kind == "removed":
            logger.debug("Selected node %s was removed", self.selected_id)
            self.on_deselect()
        else:
            self.tabs.refresh()

    # --------------------------------------------------------- Properties --
    def set_property(self, node_id: str, name: str, value: object) -> MutationResult:
        key = canonical_name(name)
        check = validate_value(key, value)
        if not check.ok:
            logger.warning("Rejected value for %s on %s: %s", key, node_id, check.message)
            return MutationResult(False, check.message, node_id=node_id)
        return self.tree.set_attribute(node_id, key, value)

    def clear_property(self, node_id: str, name: str) -> MutationResult:
        return self.tree.clear_attribute(node_id, name)

    # --------------------------------------------------------- Structure --
    def create_section(self, index: Optional[int] = None) -> MutationResult:
        return self.tree.create_section(index)

    def create_inner_section(self, parent_id: str, index: Optional[int] = None) -> MutationResult:
        return self.tree.create_inner_section(parent_id, index)

    def add_widget(self, parent_id: str, widget_type: str, index: Optional[int] = None,
                   attributes: Optional[Dict[str, object]] = None) -> MutationResult:
        return self.tree.add_widget(parent_id, widget_type, index, attributes)

    def add_column(self, section_id: str, side: Side = "right",
                   reference_column_id: Optional[str] = None) -> MutationResult:
        return self.tree.add_column(section_id, side, reference_column_id)

    def remove_column(self, column_id: str) -> MutationResult:
        return self.tree.remove_column(column_id)

    def remove(self, node_id: str) -> MutationResult:
        return self.tree.remove(node_id)

    def move(self, node_id: str, new_parent_id: Optional[str], index: Optional[int] = None) -> MutationResult:
        return self.tree.move(node_id, new_parent_id, index)

    # -------------------------------------------------------- Persistence --
    @property
    def css(self) -> str:
        return self.applier.css

    def html(self) -> str:
        return render_tree_html(self.tree, self.title)

    def save_payload(self) -> SavePayload:
        return SavePayload(tree=self.tree.to_dict(), css=self.css, html=self.html())

    def document(self) -> PageDocument:
        payload = self.save_payload()
        return PageDocument(
            title=self.title,
            slug=self.slug,
            sections=[Node.from_dict(section) for section in payload.tree["sections"]],
            css=payload.css,
            html=payload.html,
        )

    def load_document(self, document: PageDocument) -> None:
        """Rebuild the tree from ``document`` and recompile every node."""
        self.tree.load(document.sections)
        self.on_deselect()
        self.applier.refresh()
        self.title = document.title
        self.slug = document.slug
        logger.info("Loaded page %r with %d nodes", self.title, len(self.tree))
