"""Tests for fetchgen.client.api_client."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from fetchgen.aggregate import AggregateResolver
from fetchgen.client.api_client import ApiClientGenerator
from fetchgen.context import GenerateContext
from fetchgen.models import TagInfo
from fetchgen.source.declarations import ClassDeclaration


@pytest.fixture
def order_client(generate_context: GenerateContext, quiet_output) -> ClassDeclaration:
    ApiClientGenerator(generate_context).generate()
    source_file = generate_context.get_or_create_source_file("example/OrderApiClient.ts")
    return source_file.get_class("OrderApiClient")


class TestApiTags:
    """Test which tags and operations get a client."""

    def test_framework_and_aggregate_tags_excluded(
        self, generate_context: GenerateContext
    ) -> None:
        assert list(ApiClientGenerator(generate_context).resolve_api_tags()) == ["Order"]

    def test_mixed_tag_operations_excluded(self, generate_context: GenerateContext) -> None:
        generator = ApiClientGenerator(generate_context)
        grouped = generator.group_operations(generator.resolve_api_tags())
        assert [e.operation_id for e in grouped["Order"]] == [
            "order.getById",
            "order.create",
            "order.upload",
            "order.stream",
        ]

    def test_file_path_below_context_alias(self, generate_context: GenerateContext) -> None:
        generator = ApiClientGenerator(generate_context)
        assert generator.api_client_file_path(TagInfo(name="Order")) == "example/OrderApiClient.ts"
        assert generator.api_client_file_path(TagInfo(name="sales.Invoice")) == (
            "example/sales/InvoiceApiClient.ts"
        )

    def test_without_context_alias(self, example_document: dict[str, Any]) -> None:
        context = GenerateContext(example_document, "out")
        generator = ApiClientGenerator(context)
        assert generator.api_client_file_path(TagInfo(name="Order")) == "OrderApiClient.ts"


class TestApiClient:
    """Test the generated ``OrderApiClient``."""

    def test_class(self, order_client: ClassDeclaration) -> None:
        assert order_client.docs == ["Order queries"]
        assert order_client.ctor.parameters[0].optional
        assert [m.name for m in order_client.methods] == ["getById", "create", "upload", "stream"]

    def test_path_parameter_and_default_request(self, order_client: ClassDeclaration) -> None:
        method = order_client.get_method("getById")
        assert method.decorators[0].name == "get"
        assert method.decorators[0].arguments == ["'/orders/{orderId}'"]
        order_id, http_request, attributes = method.parameters
        assert (order_id.name, order_id.type) == ("orderId", "number")
        assert (http_request.type, http_request.optional) == ("ParameterRequest", True)
        assert attributes.name == "attributes"
        assert method.return_type == "Promise<OrderSummary>"
        assert method.docs == ["Get order"]

    def test_json_body_and_primitive_response(self, order_client: ClassDeclaration) -> None:
        method = order_client.get_method("create")
        assert method.decorators[0].name == "post"
        assert method.parameters[0].type == "ParameterRequest<CreateOrder>"
        assert not method.parameters[0].optional
        assert method.return_type == "Promise<string>"

    def test_multipart_and_wildcard_response(self, order_client: ClassDeclaration) -> None:
        method = order_client.get_method("upload")
        assert method.parameters[0].type == "ParameterRequest<FormData>"
        assert method.return_type == "Promise<boolean>"

    def test_event_stream(self, order_client: ClassDeclaration) -> None:
        method = order_client.get_method("stream")
        assert method.return_type == "Promise<JsonServerSentEventStream<OrderSummary>>"
        assert len(method.decorators[0].arguments) == 2
        assert "resultExtractor" in method.decorators[0].arguments[1]

    def test_imports(self, generate_context: GenerateContext, order_client) -> None:
        source_file = generate_context.get_or_create_source_file("example/OrderApiClient.ts")
        assert source_file.get_import("./order/types").named_imports == [
            "OrderSummary",
            "CreateOrder",
        ]
        assert "type JsonServerSentEventStream" in (
            source_file.get_import("@ahoo-wang/fetcher-eventstream").named_imports
        )
        assert "type ParameterRequest" in (
            source_file.get_import("@ahoo-wang/fetcher-decorator").named_imports
        )


class TestFailures:
    """Test per-operation rollback."""

    def test_broken_response_reference(
        self, example_document: dict[str, Any], quiet_output
    ) -> None:
        document = copy.deepcopy(example_document)
        response = document["paths"]["/orders"]["post"]["responses"]["200"]
        response["content"]["application/json"]["schema"] = {
            "$ref": "#/components/schemas/example.order.Missing"
        }
        context = GenerateContext(
            document, "out", context_aggregates=AggregateResolver(document).resolve()
        )
        ApiClientGenerator(context).generate()
        client = context.get_or_create_source_file("OrderApiClient.ts").get_class(
            "OrderApiClient"
        )
        assert [m.name for m in client.methods] == ["getById", "upload", "stream"]
        [failure] = context.failures
        assert failure.key == "order.create"
