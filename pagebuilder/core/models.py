"""Data models for the page builder."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .exceptions import DocumentFormatError


DOCUMENT_VERSION = 1


class NodeKind(Enum):
    SECTION = "section"
    COLUMN = "column"
    INNER_SECTION = "inner-section"
    INNER_COLUMN = "inner-column"
    WIDGET = "widget"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()

    @classmethod
    def parse(cls, raw: object) -> "NodeKind":
        if isinstance(raw, NodeKind):
            return raw
        text = str(raw).strip().lower().replace("_", "-")
        for kind in cls:
            if kind.value == text:
                return kind
        raise DocumentFormatError(f"Unknown node kind: {raw!r}")


WIDGET_TYPES: tuple[str, ...] = (
    "heading",
    "text",
    "button",
    "image",
    "icon",
    "video",
    "spacer",
    "divider",
    "menu-anchor",
    "blockquote",
    "site-logo",
    "icon-list",
    "breadcrumbs",
    "countdown",
    "tabs",
    "off-canvas",
    "form",
)

_ID_PREFIXES = {
    NodeKind.SECTION: "sec",
    NodeKind.COLUMN: "col",
    NodeKind.INNER_SECTION: "isec",
    NodeKind.INNER_COLUMN: "icol",
    NodeKind.WIDGET: "w",
}


def new_node_id(kind: NodeKind) -> str:
    return f"{_ID_PREFIXES[kind]}-{uuid.uuid4().hex[:8]}"


@dataclass
class Node:
    """One element of the component tree.

    ``children`` is owned by the node; ``parent_id`` is a lookup-only back
    reference maintained by the tree.
    """

    id: str
    kind: NodeKind
    widget_type: Optional[str] = None
    children: List["Node"] = field(default_factory=list)
    attributes: Dict[str, object] = field(default_factory=dict)
    parent_id: Optional[str] = None

    @property
    def kind_key(self) -> str:
        """Key used for trait lookup: the widget type for widgets, else the kind."""
        if self.kind is NodeKind.WIDGET:
            return self.widget_type or "widget"
        return self.kind.value

    @property
    def display_name(self) -> str:
        if self.kind is NodeKind.WIDGET:
            return (self.widget_type or "widget").replace("-", " ").title()
        return self.kind.label

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "id": self.id,
            "kind": self.kind.value,
            "attributes": dict(self.attributes),
            "children": [child.to_dict() for child in self.children],
        }
        if self.widget_type:
            payload["widget_type"] = self.widget_type
        return payload

    @classmethod
    def from_dict(cls, data: object, parent_id: Optional[str] = None) -> "Node":
        if not isinstance(data, dict):
            raise DocumentFormatError(f"Node payload must be a mapping, got {type(data).__name__}")
        kind = NodeKind.parse(data.get("kind", ""))
        node_id = str(data.get("id") or new_node_id(kind))
        widget_raw = data.get("widget_type")
        widget_type = str(widget_raw) if kind is NodeKind.WIDGET and widget_raw else None
        if kind is NodeKind.WIDGET and widget_type is None:
            widget_type = "text"
        attrs_raw = data.get("attributes")
        attributes = {str(k): v for k, v in attrs_raw.items()} if isinstance(attrs_raw, dict) else {}
        node = cls(
            id=node_id,
            kind=kind,
            widget_type=widget_type,
            attributes=attributes,
            parent_id=parent_id,
        )
        children_raw = data.get("children", [])
        if isinstance(children_raw, list):
            node.children = [cls.from_dict(child, parent_id=node_id) for child in children_raw]
        return node


@dataclass
class PageDocument:
    """A page as handed to and received from the persistence layer."""

    title: str = "Untitled page"
    slug: str = "index"
    sections: List[Node] = field(default_factory=list)
    css: str = ""
    html: str = ""
    version: int = DOCUMENT_VERSION

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "slug": self.slug,
            "version": self.version,
            "sections": [section.to_dict() for section in self.sections],
            "css": self.css,
            "html": self.html,
        }

    @classmethod
    def from_dict(cls, data: object) -> "PageDocument":
        if not isinstance(data, dict):
            raise DocumentFormatError("Page document must be a JSON object")

        def safe_int(val, default=DOCUMENT_VERSION):
            try:
                return int(val)
            except (TypeError, ValueError):
                return default

        sections_raw = data.get("sections", [])
        if not isinstance(sections_raw, list):
            raise DocumentFormatError("'sections' must be a list")
        return cls(
            title=str(data.get("title", "Untitled page")),
            slug=str(data.get("slug", "index")),
            sections=[Node.from_dict(entry) for entry in sections_raw],
            css=str(data.get("css", "") or ""),
            html=str(data.get("html", "") or ""),
            version=safe_int(data.get("version", DOCUMENT_VERSION)),
        )
