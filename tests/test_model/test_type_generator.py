"""Tests for fetchgen.model.type_generator -- one declaration per schema."""

from __future__ import annotations

from typing import Any

from fetchgen.model.model_info import resolve_model_info
from fetchgen.model.type_generator import ADDITIONAL_PROPERTIES_DOC, TypeGenerator
from fetchgen.models import KeySchema
from fetchgen.source.declarations import (
    EnumDeclaration,
    InterfaceDeclaration,
    TypeAliasDeclaration,
)
from fetchgen.source.source_file import SourceFile, model_file_path


def _generate(key: str, schema: dict[str, Any], document: dict[str, Any] | None = None):
    model_info = resolve_model_info(key)
    source_file = SourceFile(model_file_path(model_info))
    TypeGenerator(model_info, source_file, KeySchema(key=key, schema=schema), document).generate()
    [declaration] = source_file.declarations
    return source_file, declaration


class TestEnum:
    """Test enum declarations."""

    def test_members_upper_snake_case(self) -> None:
        _, declaration = _generate(
            "example.order.OrderStatus", {"type": "string", "enum": ["CREATED", "in-transit"]}
        )
        assert isinstance(declaration, EnumDeclaration)
        assert [(m.name, m.initializer) for m in declaration.members] == [
            ("CREATED", "'CREATED'"),
            ("IN_TRANSIT", "'in-transit'"),
        ]

    def test_empty_values_skipped(self) -> None:
        _, declaration = _generate(
            "example.cart.CartAggregatedFields", {"type": "string", "enum": ["", "id", "items"]}
        )
        assert [m.initializer for m in declaration.members] == ["'id'", "'items'"]

    def test_documented_with_key(self) -> None:
        _, declaration = _generate("example.order.OrderStatus", {"enum": ["A"], "title": "Status"})
        assert declaration.docs == ["Status", "- key: example.order.OrderStatus"]


class TestInterface:
    """Test interface declarations."""

    def test_properties(self, example_document: dict[str, Any]) -> None:
        schemas = example_document["components"]["schemas"]
        source_file, declaration = _generate(
            "example.order.OrderSummary", schemas["example.order.OrderSummary"], example_document
        )
        assert isinstance(declaration, InterfaceDeclaration)
        summary = {p.name: (p.type, p.optional) for p in declaration.properties}
        assert summary == {
            "id": ("string", False),
            "status": ("OrderStatus", False),
            "total": ("number", True),
            "items": ("CartItem[]", True),
        }
        assert [imp.module_specifier for imp in source_file.imports] == ["../cart/types"]

    def test_property_docs_from_constraints(self, example_document: dict[str, Any]) -> None:
        schemas = example_document["components"]["schemas"]
        _, declaration = _generate(
            "example.cart.AddCartItem", schemas["example.cart.AddCartItem"], example_document
        )
        quantity = declaration.get_property("quantity")
        assert quantity.docs == ["- format: int32", "- Numeric Constraints", "  - minimum: 1"]
        assert declaration.docs[0] == "Add cart item"

    def test_index_signature(self) -> None:
        _, declaration = _generate(
            "a.Labels",
            {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "additionalProperties": {"type": "string"},
            },
        )
        assert declaration.index_signature.return_type == "string"
        assert declaration.index_signature.docs == [ADDITIONAL_PROPERTIES_DOC]

    def test_quoted_property_names(self) -> None:
        _, declaration = _generate(
            "a.Headers", {"type": "object", "properties": {"x-trace-id": {"type": "string"}}}
        )
        assert declaration.properties[0].name == "'x-trace-id'"


class TestIntersection:
    """Test ``allOf`` declarations."""

    def test_extends_references_and_merges_inline_objects(self) -> None:
        schema = {
            "allOf": [
                {"$ref": "#/components/schemas/a.Base"},
                {"$ref": "#/components/schemas/b.Audit"},
                {"type": "object", "properties": {"extra": {"type": "boolean"}}},
            ]
        }
        source_file, declaration = _generate("a.Derived", schema)
        assert isinstance(declaration, InterfaceDeclaration)
        assert declaration.extends == ["Base", "Audit"]
        assert [p.name for p in declaration.properties] == ["extra"]
        assert [imp.module_specifier for imp in source_file.imports] == ["../b/types"]

    def test_other_members_become_intersection_alias(self) -> None:
        schema = {"allOf": [{"$ref": "#/components/schemas/a.Base"}, {"type": "string"}]}
        _, declaration = _generate("a.Tagged", schema)
        assert isinstance(declaration, TypeAliasDeclaration)
        assert declaration.type == "(Base & string)"


class TestAliases:
    """Test array and fallback type aliases."""

    def test_array_alias(self) -> None:
        _, declaration = _generate(
            "a.Names", {"type": "array", "items": {"type": "string"}}
        )
        assert isinstance(declaration, TypeAliasDeclaration)
        assert declaration.type == "Array<string>"

    def test_union_alias(self) -> None:
        _, declaration = _generate(
            "a.Id", {"oneOf": [{"type": "string"}, {"type": "integer"}]}
        )
        assert declaration.type == "(string | number)"

    def test_empty_object_alias(self) -> None:
        source_file, declaration = _generate("example.cart.RemoveCartItem", {"type": "object"})
        assert isinstance(declaration, TypeAliasDeclaration)
        assert declaration.type == "Record<string, any>"
        assert source_file.path == "example/cart/types.ts"
