"""Tests for fetchgen.client.command_client."""

from __future__ import annotations

from typing import Any

import pytest

from fetchgen.client.command_client import (
    COMMAND_ENDPOINT_PATHS,
    COMMAND_RESULT_STREAM_TYPE,
    COMMAND_RESULT_TYPE,
    CommandClientGenerator,
)
from fetchgen.context import GenerateContext
from fetchgen.models import (
    AggregateDefinition,
    CommandDefinition,
    GeneratorConfig,
    HTTPMethod,
    KeySchema,
    TagAliasAggregate,
    TagConfig,
    TagInfo,
)
from fetchgen.source.source_file import SourceFile


@pytest.fixture
def command_file(generate_context: GenerateContext, quiet_output) -> SourceFile:
    CommandClientGenerator(generate_context).generate()
    return generate_context.get_or_create_source_file("example/cart/commandClient.ts")


class TestCommandClient:
    """Test ``commandClient.ts`` of the cart aggregate."""

    def test_declarations(self, command_file: SourceFile) -> None:
        assert command_file.declaration_names() == [
            COMMAND_ENDPOINT_PATHS,
            "DEFAULT_COMMAND_CLIENT_OPTIONS",
            "CartCommandClient",
            "CartStreamCommandClient",
        ]

    def test_endpoint_paths(self, command_file: SourceFile) -> None:
        paths = command_file.get_declaration(COMMAND_ENDPOINT_PATHS)
        assert [(m.name, m.initializer) for m in paths.members] == [
            ("ADD_CART_ITEM", "'/tenant/{tenantId}/cart/{id}/add_cart_item'"),
            ("REMOVE_CART_ITEM", "'/tenant/{tenantId}/cart/{id}/remove_cart_item'"),
        ]

    def test_methods(self, command_file: SourceFile) -> None:
        client = command_file.get_class("CartCommandClient")
        add = client.get_method("addCartItem")
        assert add.return_type == COMMAND_RESULT_TYPE
        assert add.decorators[0].name == "post"
        assert add.decorators[0].arguments == [f"{COMMAND_ENDPOINT_PATHS}.ADD_CART_ITEM"]
        assert [p.name for p in add.parameters] == ["id", "commandRequest", "attributes"]
        assert add.parameters[1].type == "CommandRequest<AddCartItem>"
        assert not add.parameters[1].optional
        assert add.docs == ["Add cart item", "Adds a product to the cart"]
        assert add.statements == ["throw autoGeneratedError(id, commandRequest, attributes);"]

    def test_empty_command_body_optional(self, command_file: SourceFile) -> None:
        remove = command_file.get_class("CartCommandClient").get_method("removeCartItem")
        assert remove.decorators[0].name == "put"
        assert remove.parameters[1].optional

    def test_stream_client(self, command_file: SourceFile) -> None:
        client = command_file.get_class("CartStreamCommandClient")
        assert client.decorators[0].arguments[0] == "''"
        assert "JsonEventStreamResultExtractor" in client.decorators[0].arguments[1]
        assert all(m.return_type == COMMAND_RESULT_STREAM_TYPE for m in client.methods)
        assert client.ctor.parameters[0].initializer == "DEFAULT_COMMAND_CLIENT_OPTIONS"

    def test_imports(self, command_file: SourceFile) -> None:
        wow = command_file.get_import("@ahoo-wang/fetcher-wow")
        assert wow.type_only
        assert "CommandResult" in wow.named_imports
        assert command_file.get_import("./types").named_imports == [
            "AddCartItem",
            "RemoveCartItem",
        ]
        decorators = command_file.get_import("@ahoo-wang/fetcher-decorator")
        assert {"post", "put"} <= set(decorators.named_imports)


class TestIgnoredPathParameters:
    """Test the per-tag ignore list."""

    def test_tag_override(self, generate_context: GenerateContext, quiet_output) -> None:
        generate_context.config = GeneratorConfig(
            tags={"example.cart": TagConfig(ignore_path_parameters=["id"])}
        )
        CommandClientGenerator(generate_context).generate()
        source_file = generate_context.get_or_create_source_file("example/cart/commandClient.ts")
        add = source_file.get_class("CartCommandClient").get_method("addCartItem")
        assert [p.name for p in add.parameters] == ["tenantId", "commandRequest", "attributes"]


class TestCommandNames:
    """Test endpoint members and method names of awkwardly named commands."""

    @pytest.fixture
    def basket_file(self, minimal_document: dict[str, Any], quiet_output) -> SourceFile:
        command_schema = KeySchema(
            key="shop.basket.AddItem",
            schema={"type": "object", "properties": {"sku": {"type": "string"}}},
        )

        def command(name: str) -> CommandDefinition:
            return CommandDefinition(
                name=name,
                method=HTTPMethod.POST,
                path=f"/basket/{name}",
                schema=command_schema,
                operation={"operationId": f"shop.basket.{name}"},
            )

        definition = AggregateDefinition(
            aggregate=TagAliasAggregate(
                tag=TagInfo(name="shop.basket"), context_alias="shop", aggregate_name="basket"
            ),
            commands={name: command(name) for name in ["addItem", "add_item", "remove-item"]},
            state=KeySchema(key="shop.basket.BasketState", schema={"type": "object"}),
            fields=KeySchema(key="shop.basket.BasketAggregatedFields", schema={"enum": ["id"]}),
        )
        context = GenerateContext(
            minimal_document, "out", context_aggregates={"shop": [definition]}
        )
        CommandClientGenerator(context).generate()
        return context.get_or_create_source_file("shop/basket/commandClient.ts")

    def test_endpoint_members_unique(self, basket_file: SourceFile) -> None:
        paths = basket_file.get_declaration(COMMAND_ENDPOINT_PATHS)
        assert [m.name for m in paths.members] == [
            "ADD_ITEM",
            "BASKET_ADD_ITEM",
            "REMOVE_ITEM",
        ]

    def test_method_names_unique(self, basket_file: SourceFile) -> None:
        for client_name in ["BasketCommandClient", "BasketStreamCommandClient"]:
            client = basket_file.get_class(client_name)
            assert [m.name for m in client.methods] == [
                "addItem",
                "basketAddItem",
                "removeItem",
            ]
        second = basket_file.get_class("BasketCommandClient").get_method("basketAddItem")
        assert second.decorators[0].arguments == [f"{COMMAND_ENDPOINT_PATHS}.BASKET_ADD_ITEM"]
