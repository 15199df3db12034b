"""In-memory JSON-LD graph used to represent object descriptions."""

from __future__ import annotations

import itertools
import json
from dataclasses import dataclass
from typing import Any, Union

from pyld import jsonld

from cloudobjects.core.exceptions import CloudObjectsError


@dataclass(frozen=True)
class Literal:
    """A literal property value."""

    value: str | int | float | bool
    datatype: str | None = None
    language: str | None = None

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)

    def to_jsonld(self) -> dict[str, Any]:
        data: dict[str, Any] = {"@value": self.value}
        if self.datatype:
            data["@type"] = self.datatype
        if self.language:
            data["@language"] = self.language
        return data


Value = Union["Node", Literal]


class Node:
    """A node in a graph, identified by an IRI or a blank node id."""

    def __init__(self, graph: Graph, node_id: str) -> None:
        self._graph = graph
        self._id = node_id
        self._types: list[str] = []
        self._properties: dict[str, list[Value]] = {}

    @property
    def id(self) -> str:
        return self._id

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def is_blank(self) -> bool:
        return self._id.startswith("_:")

    @property
    def types(self) -> list[str]:
        return list(self._types)

    def add_type(self, type_iri: str | Node) -> None:
        type_iri = type_iri.id if isinstance(type_iri, Node) else str(type_iri)
        if type_iri not in self._types:
            self._types.append(type_iri)

    def set_type(self, type_iri: str | Node) -> None:
        self._types = []
        self.add_type(type_iri)

    def has_type(self, type_iri: str) -> bool:
        return type_iri in self._types

    @property
    def properties(self) -> dict[str, list[Value]]:
        return {iri: list(values) for iri, values in self._properties.items()}

    def get_property(self, property_iri: str) -> list[Value]:
        """All values of a property; an empty list if there are none."""
        return list(self._properties.get(str(property_iri), []))

    def _coerce(self, value: Any) -> Value:
        if isinstance(value, (Node, Literal)):
            return value
        return Literal(value)

    def set_property(self, property_iri: str, value: Any) -> None:
        """Replace all values of a property. ``None`` removes it."""
        property_iri = str(property_iri)
        if value is None:
            self._properties.pop(property_iri, None)
            return
        values = value if isinstance(value, list) else [value]
        self._properties[property_iri] = [self._coerce(v) for v in values]

    def add_property_value(self, property_iri: str, value: Any) -> None:
        self._properties.setdefault(str(property_iri), []).append(self._coerce(value))

    def to_jsonld(self) -> dict[str, Any]:
        """This node in flattened, expanded JSON-LD form."""
        data: dict[str, Any] = {"@id": self._id}
        if self._types:
            data["@type"] = list(self._types)
        for iri, values in self._properties.items():
            data[iri] = [
                {"@id": v.id} if isinstance(v, Node) else v.to_jsonld() for v in values
            ]
        return data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Node):
            return self._id == other._id and self._graph is other._graph
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self._graph), self._id))

    def __repr__(self) -> str:
        return f"Node({self._id!r})"


class Graph:
    """A set of nodes keyed by id."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._blank_ids = itertools.count()

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(str(node_id))

    def get_nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def get_nodes_by_type(self, type_iri: str) -> list[Node]:
        return [node for node in self._nodes.values() if node.has_type(str(type_iri))]

    def create_node(self, node_id: str | None = None) -> Node:
        """Return the node with the given id, creating it if necessary."""
        if node_id is None:
            node_id = f"_:n{next(self._blank_ids)}"
            while node_id in self._nodes:
                node_id = f"_:n{next(self._blank_ids)}"
        node_id = str(node_id)
        if node_id not in self._nodes:
            self._nodes[node_id] = Node(self, node_id)
        return self._nodes[node_id]

    def subgraph(self, node: Node) -> list[Node]:
        """The node plus all blank nodes reachable from it."""
        result = [node]
        seen = {node.id}
        index = 0
        while index < len(result):
            for values in result[index]._properties.values():
                for value in values:
                    if isinstance(value, Node) and value.is_blank and value.id not in seen:
                        seen.add(value.id)
                        result.append(value)
            index += 1
        return result


class DocumentParseError(CloudObjectsError):
    """A response body could not be read as JSON-LD."""

    pass


class Document:
    """A JSON-LD document and the graph it describes."""

    def __init__(self, graph: Graph | None = None) -> None:
        self.graph = graph or Graph()

    @classmethod
    def parse(cls, data: str | bytes | dict[str, Any] | list[Any]) -> Document:
        """
        Parse JSON-LD into a graph.

        The input is flattened with pyld so that every node, including
        embedded and blank nodes, becomes a top-level entry.
        """
        try:
            if isinstance(data, (str, bytes)):
                data = json.loads(data)
            flattened = jsonld.flatten(data)
        except (ValueError, jsonld.JsonLdError) as e:
            raise DocumentParseError(f"Invalid JSON-LD document: {e}") from e

        document = cls()
        graph = document.graph
        for item in flattened:
            node = graph.create_node(item["@id"])
            for type_iri in item.get("@type", []):
                node.add_type(type_iri)
            for key, values in item.items():
                if key.startswith("@"):
                    continue
                for value in values:
                    for parsed in cls._parse_value(graph, value):
                        node.add_property_value(key, parsed)
        return document

    @classmethod
    def _parse_value(cls, graph: Graph, value: dict[str, Any]) -> list[Value]:
        if "@list" in value:
            return [v for item in value["@list"] for v in cls._parse_value(graph, item)]
        if "@id" in value:
            return [graph.create_node(value["@id"])]
        if "@value" in value:
            return [
                Literal(
                    value["@value"],
                    datatype=value.get("@type"),
                    language=value.get("@language"),
                )
            ]
        return []

    def to_jsonld(self, nodes: list[Node] | None = None) -> list[dict[str, Any]]:
        """Serialize all (or the given) nodes as expanded JSON-LD."""
        nodes = self.graph.get_nodes() if nodes is None else nodes
        return [node.to_jsonld() for node in nodes]

    def to_json(self, nodes: list[Node] | None = None) -> str:
        return json.dumps(self.to_jsonld(nodes))
