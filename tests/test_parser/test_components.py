"""Tests for fetchgen.parser.components -- $ref lookup in the document."""

from __future__ import annotations

from typing import Any

import pytest

from fetchgen.exceptions import SchemaResolutionError
from fetchgen.parser.components import (
    extract_component_key,
    get_schemas,
    key_schema,
    resolve_node,
    resolve_ref,
)


class TestResolveRef:
    """Test JSON Pointer navigation."""

    def test_resolves_schema(self, example_document: dict[str, Any]) -> None:
        result = resolve_ref("#/components/schemas/example.order.OrderStatus", example_document)
        assert result["enum"] == ["CREATED", "PAID", "SHIPPED", "RECEIVED"]

    def test_resolves_shared_parameter(self, example_document: dict[str, Any]) -> None:
        result = resolve_ref("#/components/parameters/wow.id", example_document)
        assert result["name"] == "id"
        assert result["in"] == "path"

    def test_unescapes_pointer_segments(self) -> None:
        document = {"paths": {"/a/{b}": {"get": {"x": 1}}}}
        assert resolve_ref("#/paths/~1a~1{b}/get", document) == {"x": 1}

    def test_navigates_lists(self) -> None:
        document = {"tags": [{"name": "a"}, {"name": "b"}]}
        assert resolve_ref("#/tags/1/name", document) == "b"

    def test_missing_key_raises(self, example_document: dict[str, Any]) -> None:
        with pytest.raises(SchemaResolutionError, match="key 'example.Missing' not found") as info:
            resolve_ref("#/components/schemas/example.Missing", example_document)
        assert info.value.ref == "#/components/schemas/example.Missing"

    def test_external_ref_raises(self) -> None:
        with pytest.raises(SchemaResolutionError, match="External \\$ref not supported"):
            resolve_ref("common.yaml#/components/schemas/Error", {})

    def test_invalid_list_index_raises(self) -> None:
        with pytest.raises(SchemaResolutionError, match="invalid array index"):
            resolve_ref("#/tags/5", {"tags": []})


class TestComponentHelpers:
    """Test the helpers built on resolve_ref."""

    def test_extract_component_key(self) -> None:
        reference = {"$ref": "#/components/schemas/example.cart.CartState"}
        assert extract_component_key(reference) == "example.cart.CartState"

    def test_resolve_node_passes_inline_nodes_through(self) -> None:
        node = {"type": "string"}
        assert resolve_node(node, {}) is node

    def test_resolve_node_follows_references(self, example_document: dict[str, Any]) -> None:
        result = resolve_node({"$ref": "#/components/responses/wow.CommandOk"}, example_document)
        assert result["description"] == "Command accepted"

    def test_key_schema(self, example_document: dict[str, Any]) -> None:
        result = key_schema(
            {"$ref": "#/components/schemas/example.cart.CartItem"}, example_document
        )
        assert result.key == "example.cart.CartItem"
        assert result.schema_["required"] == ["productId"]

    def test_get_schemas_without_components(self) -> None:
        assert get_schemas({"openapi": "3.0.0"}) == {}
