"""Validation of data against JSON element specifications stored as objects."""

from __future__ import annotations

from typing import Any

import jsonschema

from cloudobjects.core.exceptions import InvalidObjectConfigurationError
from cloudobjects.core.iri import IRI
from cloudobjects.core.vocabulary import JSON
from cloudobjects.graph.document import Node
from cloudobjects.graph.reader import NodeReader
from cloudobjects.resolution.objects import ObjectRetriever


class SchemaValidator:
    """
    Validates data against JSON specifications in the CloudObjects format.

    A specification node is translated into an equivalent JSON Schema which
    is then checked with ``jsonschema``. Validation failures raise
    ``jsonschema.ValidationError``.
    """

    # json:* element type -> JSON Schema type, first match wins
    TYPE_MAP: tuple[tuple[str, str], ...] = (
        ("json:String", "string"),
        ("json:Boolean", "boolean"),
        ("json:Number", "number"),
        ("json:Integer", "integer"),
        ("json:Array", "array"),
        ("json:Object", "object"),
    )

    def __init__(self, retriever: ObjectRetriever | None = None) -> None:
        self.retriever = retriever
        self.reader = NodeReader(prefixes={"json": JSON})

    def to_json_schema(self, node: Node, _seen: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Translate a specification node into a JSON Schema."""
        if node.id in _seen:
            return {}
        seen = _seen | {node.id}

        for type_name, schema_type in self.TYPE_MAP:
            if self.reader.has_type(node, type_name):
                break
        else:
            return {}

        schema: dict[str, Any] = {"type": schema_type}
        if schema_type != "object":
            return schema

        properties: dict[str, Any] = {}
        required: list[str] = []
        for prop in self.reader.get_all_values_node(node, "json:requiresProperty"):
            key = self.reader.get_first_value_string(prop, "json:hasKey")
            if key is None:
                continue
            properties[key] = self.to_json_schema(prop, seen)
            required.append(key)
        for prop in self.reader.get_all_values_node(node, "json:supportsOptionalProperty"):
            key = self.reader.get_first_value_string(prop, "json:hasKey")
            if key is None or key in properties:
                continue
            properties[key] = self.to_json_schema(prop, seen)

        if properties:
            schema["properties"] = properties
        if required:
            schema["required"] = required
        return schema

    def validate_against_node(self, data: Any, node: Node) -> None:
        """Validate data against a specification node."""
        jsonschema.validate(instance=data, schema=self.to_json_schema(node))

    async def validate_against_coid(self, data: Any, coid: IRI | str) -> None:
        """
        Validate data against a specification stored in CloudObjects.

        Raises:
            InvalidObjectConfigurationError: If the object is not a JSON element
            jsonschema.ValidationError: If the data does not match
        """
        if self.retriever is None:
            raise InvalidObjectConfigurationError("No object retriever to load specifications from")
        element = await self.retriever.get_object(coid)
        if not self.reader.has_type(element, "json:Element"):
            raise InvalidObjectConfigurationError(
                "You can only validate data against JSON elements!",
                details={"coid": str(coid)},
            )
        self.validate_against_node(data, element)
