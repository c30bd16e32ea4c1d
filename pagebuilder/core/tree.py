"""Component tree: Section -> Column -> Widget, with validated mutations.

All structural changes go through :class:`ComponentTree`. Every mutation is
checked before anything is touched, so a rejected command leaves the tree
exactly as it was and returns a :class:`MutationResult` carrying the message
for the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Literal, Optional, Tuple

from . import config
from .exceptions import DocumentFormatError, NodeNotFoundError
from .models import Node, NodeKind, new_node_id
from .schema import canonical_name

logger = logging.getLogger(__name__)

Side = Literal["left", "right"]
EventKind = Literal["added", "updated", "removed"]

# Containers whose children are columns and therefore carry a column budget.
_COLUMN_CONTAINERS = {
    NodeKind.SECTION: (NodeKind.COLUMN, config.MAX_COLUMNS),
    NodeKind.INNER_SECTION: (NodeKind.INNER_COLUMN, config.MAX_INNER_COLUMNS),
}


@dataclass
class MutationResult:
    ok: bool
    message: str = ""
    node_id: Optional[str] = None
    removed_ids: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class TreeEvent:
    kind: EventKind
    node_ids: Tuple[str, ...]


TreeListener = Callable[[TreeEvent], None]


def can_contain(parent_kind: Optional[NodeKind], child_kind: NodeKind) -> bool:
    """Containment rules. ``parent_kind=None`` is the page root."""
    if parent_kind is None:
        return child_kind is NodeKind.SECTION
    if parent_kind is NodeKind.SECTION:
        return child_kind in (NodeKind.COLUMN, NodeKind.INNER_SECTION)
    if parent_kind is NodeKind.COLUMN:
        return child_kind not in (NodeKind.SECTION, NodeKind.COLUMN)
    if parent_kind is NodeKind.INNER_SECTION:
        return child_kind is NodeKind.INNER_COLUMN
    if parent_kind is NodeKind.INNER_COLUMN:
        return child_kind not in (NodeKind.SECTION, NodeKind.INNER_SECTION)
    if parent_kind is NodeKind.WIDGET:
        return False
    raise AssertionError(f"Unhandled node kind: {parent_kind!r}")


def column_limits(kind: NodeKind) -> Optional[Tuple[int, int]]:
    """(min, max) child count for column containers, ``None`` for everything else."""
    entry = _COLUMN_CONTAINERS.get(kind)
    if entry is None:
        return None
    return config.MIN_COLUMNS, entry[1]


def _too_many_message(kind: NodeKind) -> str:
    limit = column_limits(kind)[1]
    if kind is NodeKind.INNER_SECTION:
        return f"Maximum {limit} inner columns allowed"
    return f"Maximum {limit} columns allowed"


def _too_few_message(kind: NodeKind) -> str:
    if kind is NodeKind.INNER_SECTION:
        return f"Inner sections must have at least {config.MIN_COLUMNS} column"
    return f"Sections must have at least {config.MIN_COLUMNS} column"


def _format_percent(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return (text or "0") + "%"


def _parse_percent(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1].strip()
    elif not text or any(ch.isalpha() for ch in text):
        return None
    try:
        return float(text)
    except ValueError:
        return None


def column_widths_for(container: Node) -> Dict[str, str]:
    """Effective width of every child of a Section/InnerSection.

    Explicit percentage ``flex-basis`` values are kept as set; the width that
    remains is shared equally by the columns without one. Other explicit
    values (``200px``) are reported verbatim and take no share.
    """
    explicit: Dict[str, str] = {}
    used = 0.0
    auto: List[str] = []
    for child in container.children:
        basis = child.attributes.get("flex-basis")
        if basis is None or basis == "" or basis == "auto":
            auto.append(child.id)
            continue
        percent = _parse_percent(basis)
        if percent is None:
            explicit[child.id] = str(basis)
        else:
            explicit[child.id] = _format_percent(percent)
            used += percent
    share = max(0.0, 100.0 - used) / len(auto) if auto else 0.0
    return {
        child.id: explicit.get(child.id) or _format_percent(share)
        for child in container.children
    }


class ComponentTree:
    def __init__(self) -> None:
        self.sections: List[Node] = []
        self._index: Dict[str, Node] = {}
        self._listeners: List[TreeListener] = []

    # ------------------------------------------------------------ Queries --
    def get(self, node_id: str) -> Node:
        try:
            return self._index[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def find(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def parent_of(self, node_id: str) -> Optional[Node]:
        return self.find(self.get(node_id).parent_id)

    def children_of(self, node_id: Optional[str]) -> List[Node]:
        if node_id is None:
            return list(self.sections)
        return list(self.get(node_id).children)

    def column_count(self, container_id: str) -> int:
        return len(self.get(container_id).children)

    def ids(self) -> List[str]:
        return [node.id for node in self.walk()]

    def walk(self, roots: Optional[Iterable[Node]] = None) -> Iterator[Node]:
        """Pre-order traversal of the whole tree (or of ``roots``)."""
        stack = list(reversed(list(self.sections if roots is None else roots)))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def is_descendant(self, node_id: str, ancestor_id: str) -> bool:
        current = self.find(node_id)
        while current is not None:
            if current.id == ancestor_id:
                return True
            current = self.find(current.parent_id)
        return False

    def column_widths(self, container_id: str) -> Dict[str, str]:
        return column_widths_for(self.get(container_id))

    # ---------------------------------------------------------- Observers --
    def subscribe(self, listener: TreeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: TreeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: EventKind, node_ids: Iterable[str]) -> None:
        event = TreeEvent(kind, tuple(node_ids))
        if not event.node_ids:
            return
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------- Construction --
    def _make(self, kind: NodeKind, widget_type: Optional[str] = None,
              attributes: Optional[Dict[str, object]] = None) -> Node:
        node_id = new_node_id(kind)
        while node_id in self._index:
            node_id = new_node_id(kind)
        attrs = {canonical_name(k): v for k, v in (attributes or {}).items()}
        return Node(id=node_id, kind=kind, widget_type=widget_type, attributes=attrs)

    def _attach(self, node: Node, parent: Optional[Node], index: Optional[int]) -> None:
        siblings = self.sections if parent is None else parent.children
        position = len(siblings) if index is None else max(0, min(index, len(siblings)))
        node.parent_id = parent.id if parent is not None else None
        siblings.insert(position, node)
        for item in self.walk([node]):
            self._index[item.id] = item
            for child in item.children:
                child.parent_id = item.id

    def _detach(self, node: Node) -> int:
        parent = self.find(node.parent_id)
        siblings = self.sections if parent is None else parent.children
        position = siblings.index(node)
        del siblings[position]
        return position

    def _reject(self, message: str) -> MutationResult:
        logger.warning("Structural command rejected: %s", message)
        return MutationResult(False, message)

    # ---------------------------------------------------------- Mutations --
    def create_section(self, index: Optional[int] = None) -> MutationResult:
        section = self._make(NodeKind.SECTION)
        section.children.append(self._make(NodeKind.COLUMN))
        self._attach(section, None, index)
        self._emit("added", [n.id for n in self.walk([section])])
        return MutationResult(True, node_id=section.id)

    def create_inner_section(self, parent_id: str, index: Optional[int] = None) -> MutationResult:
        parent = self.find(parent_id)
        if parent is None:
            return self._reject(f"Unknown node id: {parent_id}")
        if not can_contain(parent.kind, NodeKind.INNER_SECTION):
            return self._reject(f"An inner section cannot be placed inside a {parent.display_name}")
        limits = column_limits(parent.kind)
        if limits is not None and len(parent.children) >= limits[1]:
            return self._reject(_too_many_message(parent.kind))
        inner = self._make(NodeKind.INNER_SECTION)
        inner.children.append(self._make(NodeKind.INNER_COLUMN))
        self._attach(inner, parent, index)
        self._emit("added", [n.id for n in self.walk([inner])])
        return MutationResult(True, node_id=inner.id)

    def add_widget(
        self,
        parent_id: str,
        widget_type: str,
        index: Optional[int] = None,
        attributes: Optional[Dict[str, object]] = None,
    ) -> MutationResult:
        parent = self.find(parent_id)
        if parent is None:
            return self._reject(f"Unknown node id: {parent_id}")
        if not can_contain(parent.kind, NodeKind.WIDGET):
            return self._reject(f"Widgets cannot be placed directly inside a {parent.display_name}")
        widget = self._make(NodeKind.WIDGET, widget_type=widget_type or "text", attributes=attributes)
        self._attach(widget, parent, index)
        self._emit("added", [widget.id])
        return MutationResult(True, node_id=widget.id)

    def add_column(self, section_id: str, side: Side = "right",
                   reference_column_id: Optional[str] = None) -> MutationResult:
        """Insert a default column left or right of ``reference_column_id``.

        Without a reference the column goes to the far end on ``side``.
        """
        container = self.find(section_id)
        if container is None:
            return self._reject(f"Unknown node id: {section_id}")
        if container.kind not in _COLUMN_CONTAINERS:
            return self._reject(f"Columns can only be added to sections, not to a {container.display_name}")
        if side not in ("left", "right"):
            return self._reject(f"Unknown side {side!r}; expected 'left' or 'right'")
        column_kind, limit = _COLUMN_CONTAINERS[container.kind]
        if reference_column_id is None:
            position = 0 if side == "left" else len(container.children)
        else:
            reference = self.find(reference_column_id)
            if reference is None or reference.parent_id != container.id:
                return self._reject("The reference column does not belong to this section")
            position = container.children.index(reference)
            if side == "right":
                position += 1
        if len(container.children) >= limit:
            return self._reject(_too_many_message(container.kind))
        column = self._make(column_kind)
        self._attach(column, container, position)
        logger.debug("Added %s %s to %s at %d", column_kind.value, column.id, container.id, position)
        self._emit("added", [column.id])
        return MutationResult(True, node_id=column.id)

    def remove_column(self, column_id: str) -> MutationResult:
        column = self.find(column_id)
        if column is None:
            return self._reject(f"Unknown node id: {column_id}")
        if column.kind not in (NodeKind.COLUMN, NodeKind.INNER_COLUMN):
            return self._reject(f"{column.display_name} is not a column")
        return self.remove(column_id)

    def remove(self, node_id: str) -> MutationResult:
        """Delete ``node_id`` and its whole subtree."""
        node = self.find(node_id)
        if node is None:
            return self._reject(f"Unknown node id: {node_id}")
        parent = self.find(node.parent_id)
        if parent is not None:
            limits = column_limits(parent.kind)
            if limits is not None and len(parent.children) <= limits[0]:
                return self._reject(_too_few_message(parent.kind))
        removed = [item.id for item in self.walk([node])]
        self._detach(node)
        for item_id in removed:
            self._index.pop(item_id, None)
        node.parent_id = None
        self._emit("removed", removed)
        return MutationResult(True, node_id=node_id, removed_ids=removed)

    def can_drag_within(self, node: Node, destination: Optional[Node]) -> bool:
        """Where a node may be dragged to, given where it lives now."""
        if node.kind is NodeKind.SECTION:
            return destination is None
        if destination is None:
            return False
        if node.kind in (NodeKind.COLUMN, NodeKind.INNER_COLUMN):
            return destination.id == node.parent_id
        if node.kind is NodeKind.INNER_SECTION:
            return destination.kind in (NodeKind.COLUMN, NodeKind.SECTION)
        return True

    def move(self, node_id: str, new_parent_id: Optional[str], index: Optional[int] = None) -> MutationResult:
        """Relocate ``node_id`` under ``new_parent_id`` (``None`` = page root)."""
        node = self.find(node_id)
        if node is None:
            return self._reject(f"Unknown node id: {node_id}")
        destination = None
        if new_parent_id is not None:
            destination = self.find(new_parent_id)
            if destination is None:
                return self._reject(f"Unknown node id: {new_parent_id}")
            if self.is_descendant(destination.id, node.id):
                return self._reject("A node cannot be moved inside itself")
        destination_kind = destination.kind if destination is not None else None
        if not can_contain(destination_kind, node.kind):
            target = destination.display_name if destination is not None else "the page"
            return self._reject(f"{node.display_name} cannot be placed inside {target}")
        if not self.can_drag_within(node, destination):
            return self._reject(f"{node.display_name} cannot be dragged there")
        source = self.find(node.parent_id)
        same_parent = (source.id if source else None) == (destination.id if destination else None)
        if not same_parent:
            if source is not None:
                limits = column_limits(source.kind)
                if limits is not None and len(source.children) <= limits[0]:
                    return self._reject(_too_few_message(source.kind))
            if destination is not None:
                limits = column_limits(destination.kind)
                if limits is not None and len(destination.children) >= limits[1]:
                    return self._reject(_too_many_message(destination.kind))
        self._detach(node)
        self._attach(node, destination, index)
        self._emit("updated", [node.id])
        return MutationResult(True, node_id=node.id)

    # --------------------------------------------------------- Attributes --
    def set_attribute(self, node_id: str, name: str, value: object) -> MutationResult:
        return self.set_attributes(node_id, {name: value})

    def set_attributes(self, node_id: str, values: Dict[str, object]) -> MutationResult:
        """Merge ``values`` into the node's attribute bag; ``None`` clears a key."""
        node = self.find(node_id)
        if node is None:
            return self._reject(f"Unknown node id: {node_id}")
        for name, value in values.items():
            key = canonical_name(name)
            if value is None:
                node.attributes.pop(key, None)
            else:
                node.attributes[key] = value
        self._emit("updated", [node_id])
        return MutationResult(True, node_id=node_id)

    def clear_attribute(self, node_id: str, name: str) -> MutationResult:
        return self.set_attributes(node_id, {name: None})

    # ------------------------------------------------------ Serialization --
    def to_dict(self) -> Dict[str, object]:
        return {"sections": [section.to_dict() for section in self.sections]}

    def clear(self) -> None:
        removed = self.ids()
        self.sections = []
        self._index = {}
        self._emit("removed", removed)

    def load(self, sections: List[Node]) -> None:
        """Replace the tree with ``sections`` after checking every invariant."""
        seen: Dict[str, Node] = {}
        for node in self.walk(sections):
            if node.id in seen:
                raise DocumentFormatError(f"Duplicate node id: {node.id}")
            seen[node.id] = node
        for section in sections:
            self._check_subtree(None, section)
        self.clear()
        for section in sections:
            self._attach(section, None, None)
        self._emit("added", self.ids())

    def _check_subtree(self, parent: Optional[Node], node: Node) -> None:
        parent_kind = parent.kind if parent is not None else None
        if not can_contain(parent_kind, node.kind):
            where = parent.id if parent is not None else "page root"
            raise DocumentFormatError(f"{node.display_name} {node.id} cannot be placed inside {where}")
        limits = column_limits(node.kind)
        if limits is not None and not limits[0] <= len(node.children) <= limits[1]:
            raise DocumentFormatError(
                f"{node.display_name} {node.id} has {len(node.children)} columns; "
                f"expected {limits[0]}-{limits[1]}"
            )
        for child in node.children:
            self._check_subtree(node, child)

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "ComponentTree":
        raw = data.get("sections", []) if isinstance(data, dict) else None
        if not isinstance(raw, list):
            raise DocumentFormatError("Tree payload must contain a 'sections' list")
        tree = cls()
        tree.load([Node.from_dict(entry) for entry in raw])
        return tree
