"""Tests for fetchgen.client.query_client."""

from __future__ import annotations

from fetchgen.client.query_client import DEFAULT_QUERY_CLIENT_OPTIONS, QueryClientGenerator
from fetchgen.context import GenerateContext
from fetchgen.models import AggregateDefinition
from fetchgen.source.declarations import TypeAliasDeclaration, VariableStatement


class TestQueryClient:
    """Test ``queryClient.ts`` of the cart aggregate."""

    def test_declarations(self, generate_context: GenerateContext, quiet_output) -> None:
        QueryClientGenerator(generate_context).generate()
        source_file = generate_context.get_or_create_source_file("example/cart/queryClient.ts")
        assert source_file.declaration_names() == [
            DEFAULT_QUERY_CLIENT_OPTIONS,
            "DOMAIN_EVENT_TYPES",
            "cartQueryClientFactory",
        ]

    def test_options(self, generate_context: GenerateContext, quiet_output) -> None:
        QueryClientGenerator(generate_context).generate()
        source_file = generate_context.get_or_create_source_file("example/cart/queryClient.ts")
        options = source_file.get_declaration(DEFAULT_QUERY_CLIENT_OPTIONS)
        assert isinstance(options, VariableStatement)
        assert options.type == "QueryClientOptions"
        assert not options.exported
        assert "contextAlias: 'example'" in options.initializer
        assert "aggregateName: 'cart'" in options.initializer
        assert "ResourceAttributionPathSpec.TENANT" in options.initializer

    def test_factory_and_events(self, generate_context: GenerateContext, quiet_output) -> None:
        QueryClientGenerator(generate_context).generate()
        source_file = generate_context.get_or_create_source_file("example/cart/queryClient.ts")
        events = source_file.get_declaration("DOMAIN_EVENT_TYPES")
        assert isinstance(events, TypeAliasDeclaration)
        assert events.type == "CartItemAdded | CartItemRemoved"
        factory = source_file.get_declaration("cartQueryClientFactory")
        assert factory.exported
        assert factory.initializer == (
            "new QueryClientFactory<CartState, CartAggregatedFields | string, "
            "DOMAIN_EVENT_TYPES>(DEFAULT_QUERY_CLIENT_OPTIONS)"
        )

    def test_imports(self, generate_context: GenerateContext, quiet_output) -> None:
        QueryClientGenerator(generate_context).generate()
        source_file = generate_context.get_or_create_source_file("example/cart/queryClient.ts")
        model_import = source_file.get_import("./types")
        assert model_import.named_imports == [
            "CartItemAdded",
            "CartItemRemoved",
            "CartState",
            "CartAggregatedFields",
        ]
        assert source_file.get_import("@ahoo-wang/fetcher-wow") is not None

    def test_no_events_is_never(self, generate_context: GenerateContext, quiet_output) -> None:
        [cart] = generate_context.context_aggregates["example"]
        silent = AggregateDefinition(
            aggregate=cart.aggregate, commands=cart.commands, state=cart.state, fields=cart.fields
        )
        QueryClientGenerator(generate_context).process_query_client(silent)
        source_file = generate_context.get_or_create_source_file("example/cart/queryClient.ts")
        assert source_file.get_declaration("DOMAIN_EVENT_TYPES").type == "never"
