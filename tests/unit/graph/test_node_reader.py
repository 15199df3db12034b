"""Tests for NodeReader."""

from __future__ import annotations

import pytest

from cloudobjects.core.iri import IRI
from cloudobjects.graph.document import Document, Node
from cloudobjects.graph.reader import NodeReader


@pytest.fixture
def reader() -> NodeReader:
    return NodeReader(
        prefixes={
            "co": "coid://cloudobjects.io/",
            "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
        }
    )


@pytest.fixture
def root_node(root_object_json: str) -> Node:
    return Document.parse(root_object_json).graph.get_node("coid://cloudobjects.io")


@pytest.fixture
def linked_node() -> Node:
    document = Document.parse(
        {
            "@id": "coid://example.com/A",
            "coid://cloudobjects.io/links": [
                {"@id": "coid://example.com/B"},
                {"@id": "coid://example.com/C"},
            ],
            "coid://cloudobjects.io/note": ["first", "second"],
        }
    )
    return document.graph.get_node("coid://example.com/A")


# ============================================================================
# Prefix Expansion Tests
# ============================================================================


class TestExpand:
    """Tests for compact name expansion."""

    def test_known_prefix(self, reader: NodeReader):
        assert reader.expand("co:Namespace") == "coid://cloudobjects.io/Namespace"

    def test_unknown_prefix(self, reader: NodeReader):
        assert reader.expand("foo:bar") == "foo:bar"

    def test_full_iri_untouched(self, reader: NodeReader):
        assert reader.expand("coid://cloudobjects.io/Namespace") == "coid://cloudobjects.io/Namespace"

    def test_scheme_like_prefix_not_expanded(self):
        reader = NodeReader(prefixes={"coid": "http://wrong/"})
        assert reader.expand("coid://example.com") == "coid://example.com"

    def test_iri_and_node(self, reader: NodeReader, linked_node: Node):
        assert reader.expand(IRI("co:x")) == "coid://cloudobjects.io/x"
        assert reader.expand(linked_node) == "coid://example.com/A"


# ============================================================================
# Type and Property Tests
# ============================================================================


class TestTypesAndProperties:
    """Tests for has_type, has_property and has_property_value."""

    def test_has_type(self, reader: NodeReader, root_node: Node):
        assert reader.has_type(root_node, "coid://cloudobjects.io/Namespace")
        assert reader.has_type(root_node, "co:Namespace")
        assert not reader.has_type(root_node, "coid://cloudobjects.io/MemberRole")
        assert not reader.has_type(root_node, "co:MemberRole")

    def test_has_property(self, reader: NodeReader, root_node: Node):
        assert reader.has_property(root_node, "rdfs:label")
        assert not reader.has_property(root_node, "co:makesTriplesVisibleTo")

    def test_has_property_value_literal(self, reader: NodeReader, root_node: Node):
        assert reader.has_property_value(
            root_node, "http://www.w3.org/2000/01/rdf-schema#label", "CloudObjects"
        )
        assert reader.has_property_value(root_node, "rdfs:label", "CloudObjects")
        assert not reader.has_property_value(root_node, "rdfs:label", "Other")

    def test_has_property_value_node(self, reader: NodeReader, linked_node: Node):
        assert reader.has_property_value(linked_node, "co:links", "coid://example.com/C")
        assert not reader.has_property_value(linked_node, "co:links", "coid://example.com/D")

    def test_has_property_value_compact_node_id(self, linked_node: Node):
        reader = NodeReader(prefixes={"ex": "coid://example.com/", "co": "coid://cloudobjects.io/"})
        assert reader.has_property_value(linked_node, "co:links", "ex:B")


# ============================================================================
# Value Accessor Tests
# ============================================================================


class TestValueAccessors:
    """Tests for get_first_value_* and get_all_values_*."""

    def test_first_value_string(self, reader: NodeReader, root_node: Node):
        assert (
            reader.get_first_value_string(root_node, "http://www.w3.org/2000/01/rdf-schema#label")
            == "CloudObjects"
        )
        assert reader.get_first_value_string(root_node, "rdfs:label") == "CloudObjects"

    def test_first_value_string_default(self, reader: NodeReader, root_node: Node):
        assert reader.get_first_value_string(root_node, "co:makesTriplesVisibleTo") is None
        assert (
            reader.get_first_value_string(root_node, "co:makesTriplesVisibleTo", "theDefaultValue")
            == "theDefaultValue"
        )

    def test_first_value_string_of_node(self, reader: NodeReader, linked_node: Node):
        assert reader.get_first_value_string(linked_node, "co:links") == "coid://example.com/B"

    def test_first_value_iri(self, reader: NodeReader, linked_node: Node):
        assert reader.get_first_value_iri(linked_node, "co:links") == IRI("coid://example.com/B")
        assert reader.get_first_value_iri(linked_node, "co:note") is None

    def test_first_value_node(self, reader: NodeReader, linked_node: Node):
        node = reader.get_first_value_node(linked_node, "co:links")
        assert node is not None and node.id == "coid://example.com/B"

    def test_all_values(self, reader: NodeReader, linked_node: Node):
        assert reader.get_all_values_iri(linked_node, "co:links") == [
            IRI("coid://example.com/B"),
            IRI("coid://example.com/C"),
        ]
        assert [n.id for n in reader.get_all_values_node(linked_node, "co:links")] == [
            "coid://example.com/B",
            "coid://example.com/C",
        ]
        assert sorted(reader.get_all_values_string(linked_node, "co:note")) == ["first", "second"]

    def test_none_node(self, reader: NodeReader):
        """A missing node behaves like a node without values."""
        assert reader.has_type(None, "co:Namespace") is False
        assert reader.has_property(None, "rdfs:label") is False
        assert reader.has_property_value(None, "rdfs:label", "x") is False
        assert reader.get_first_value_string(None, "rdfs:label", "default") == "default"
        assert reader.get_first_value_iri(None, "co:links") is None
        assert reader.get_first_value_node(None, "co:links") is None
        assert reader.get_all_values_string(None, "rdfs:label") == []
        assert reader.get_all_values_iri(None, "co:links") == []
        assert reader.get_all_values_node(None, "co:links") == []
