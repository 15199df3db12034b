"""JSON-LD graph model and node reading helpers."""

from .document import Document, DocumentParseError, Graph, Literal, Node
from .reader import NodeReader

__all__ = [
    "Document",
    "DocumentParseError",
    "Graph",
    "Literal",
    "Node",
    "NodeReader",
]
