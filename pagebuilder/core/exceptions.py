"""Custom exceptions for the page builder."""


class PageBuilderError(Exception):
    """Base exception for page builder operations."""


class NodeNotFoundError(PageBuilderError, KeyError):
    """No node with the requested id exists in the tree."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node id: {self.node_id!r}"


class DocumentFormatError(PageBuilderError):
    """A persisted page document could not be interpreted."""
