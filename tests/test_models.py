from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core.exceptions import DocumentFormatError, NodeNotFoundError
from pagebuilder.core.models import Node, NodeKind, PageDocument, new_node_id


def test_node_kind_parse_is_lenient_about_spelling() -> None:
    assert NodeKind.parse("inner_section") is NodeKind.INNER_SECTION
    assert NodeKind.parse("Column") is NodeKind.COLUMN
    with pytest.raises(DocumentFormatError):
        NodeKind.parse("row")


def test_new_node_ids_are_prefixed_and_unique() -> None:
    ids = {new_node_id(NodeKind.WIDGET) for _ in range(50)}
    assert len(ids) == 50
    assert all(node_id.startswith("w-") for node_id in ids)
    assert new_node_id(NodeKind.INNER_COLUMN).startswith("icol-")


def test_widget_without_type_defaults_to_text() -> None:
    node = Node.from_dict({"id": "w1", "kind": "widget"})
    assert node.widget_type == "text"
    assert node.kind_key == "text"
    assert node.display_name == "Text"


def test_page_document_rejects_bad_payloads() -> None:
    with pytest.raises(DocumentFormatError):
        PageDocument.from_dict(["not", "a", "dict"])
    with pytest.raises(DocumentFormatError):
        PageDocument.from_dict({"sections": "nope"})
    document = PageDocument.from_dict({"title": "T", "version": "x"})
    assert document.version == 1
    assert document.sections == []


def test_node_not_found_is_a_key_error() -> None:
    error = NodeNotFoundError("abc")
    assert isinstance(error, KeyError)
    assert str(error) == "Unknown node id: 'abc'"
