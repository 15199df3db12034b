"""Convenience accessors for reading values from graph nodes."""

from __future__ import annotations

from typing import Any

from cloudobjects.core.iri import IRI
from cloudobjects.graph.document import Literal, Node


class NodeReader:
    """
    Reads types and property values from nodes.

    Property and type names may be given as full IRIs or as compact
    ``prefix:local`` names using the prefixes passed to the constructor.
    Every method accepts ``None`` in place of a node and then behaves as
    if the node had no values at all.

    Usage:
        reader = NodeReader(prefixes={"co": "coid://cloudobjects.io/"})
        if reader.has_type(node, "co:Namespace"):
            label = reader.get_first_value_string(node, "rdfs:label", "unnamed")
    """

    def __init__(self, prefixes: dict[str, str] | None = None) -> None:
        self.prefixes = dict(prefixes or {})

    def expand(self, uri: str | IRI | Node) -> str:
        """Expand a compact name using the configured prefixes."""
        uri = uri.id if isinstance(uri, Node) else str(uri)
        prefix, sep, local = uri.partition(":")
        if sep and prefix in self.prefixes and not local.startswith("//"):
            return self.prefixes[prefix] + local
        return uri

    @staticmethod
    def _as_string(value: Node | Literal) -> str:
        return value.id if isinstance(value, Node) else str(value)

    def _values(self, node: Node | None, property_name: str | IRI) -> list[Node | Literal]:
        if node is None:
            return []
        return node.get_property(self.expand(property_name))

    def has_type(self, node: Node | None, type_name: str | IRI | Node) -> bool:
        if node is None:
            return False
        return node.has_type(self.expand(type_name))

    def has_property(self, node: Node | None, property_name: str | IRI) -> bool:
        return len(self._values(node, property_name)) > 0

    def has_property_value(
        self,
        node: Node | None,
        property_name: str | IRI,
        value: Any,
    ) -> bool:
        """
        Check whether any value of a property equals ``value``.

        Node values are compared by (expanded) id, literals by their
        string form.
        """
        for v in self._values(node, property_name):
            if isinstance(v, Node):
                if v.id == self.expand(value):
                    return True
            elif str(v) == str(value) or v.value == value:
                return True
        return False

    def get_first_value_string(
        self,
        node: Node | None,
        property_name: str | IRI,
        default: str | None = None,
    ) -> str | None:
        """First value as string; node values yield their id."""
        values = self._values(node, property_name)
        if not values:
            return default
        return self._as_string(values[0])

    def get_first_value_iri(
        self,
        node: Node | None,
        property_name: str | IRI,
        default: IRI | None = None,
    ) -> IRI | None:
        """First value that references a node, as an IRI."""
        for v in self._values(node, property_name):
            if isinstance(v, Node):
                return IRI(v.id)
        return default

    def get_first_value_node(
        self,
        node: Node | None,
        property_name: str | IRI,
        default: Node | None = None,
    ) -> Node | None:
        for v in self._values(node, property_name):
            if isinstance(v, Node):
                return v
        return default

    def get_all_values_string(self, node: Node | None, property_name: str | IRI) -> list[str]:
        return [self._as_string(v) for v in self._values(node, property_name)]

    def get_all_values_iri(self, node: Node | None, property_name: str | IRI) -> list[IRI]:
        return [IRI(v.id) for v in self._values(node, property_name) if isinstance(v, Node)]

    def get_all_values_node(self, node: Node | None, property_name: str | IRI) -> list[Node]:
        return [v for v in self._values(node, property_name) if isinstance(v, Node)]
