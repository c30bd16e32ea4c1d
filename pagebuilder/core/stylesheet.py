"""Live stylesheet: one CSS entry per node, concatenated into a single sheet."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .compiler import compile_node_css
from .tree import ComponentTree, TreeEvent

logger = logging.getLogger(__name__)


class StylesheetAggregator:
    """Map of node id -> generated CSS text.

    Entries are replaced wholesale; ``render_all`` joins them in insertion
    order.
    """

    SEPARATOR = "\n\n"

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def upsert(self, node_id: str, css_text: str) -> None:
        self._entries[node_id] = css_text

    def remove(self, node_id: str) -> None:
        self._entries.pop(node_id, None)

    def get(self, node_id: str) -> Optional[str]:
        return self._entries.get(node_id)

    def ids(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def render_all(self) -> str:
        return self.SEPARATOR.join(text for text in self._entries.values() if text)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class StyleApplier:
    """Keeps a :class:`StylesheetAggregator` in step with a :class:`ComponentTree`."""

    def __init__(self, tree: ComponentTree, aggregator: Optional[StylesheetAggregator] = None) -> None:
        self.tree = tree
        self.aggregator = aggregator if aggregator is not None else StylesheetAggregator()
        self._attached = False
        self.attach()

    def attach(self) -> None:
        if self._attached:
            return
        self.tree.subscribe(self._on_tree_event)
        self._attached = True
        self.refresh()

    def detach(self) -> None:
        if self._attached:
            self.tree.unsubscribe(self._on_tree_event)
            self._attached = False

    def _on_tree_event(self, event: TreeEvent) -> None:
        if event.kind == "removed":
            for node_id in event.node_ids:
                self.aggregator.remove(node_id)
        else:
            self.update(event.node_ids)

    def update(self, node_ids: Iterable[str]) -> None:
        for node_id in node_ids:
            node = self.tree.find(node_id)
            if node is None:
                self.aggregator.remove(node_id)
                continue
            css = compile_node_css(node.id, node.attributes)
            if css:
                self.aggregator.upsert(node.id, css)
            else:
                self.aggregator.remove(node.id)
            logger.debug("Compiled %d chars of CSS for %s", len(css), node.id)

    def refresh(self) -> None:
        """Recompile every node from scratch."""
        self.aggregator.clear()
        self.update(self.tree.ids())

    @property
    def css(self) -> str:
        return self.aggregator.render_all()
