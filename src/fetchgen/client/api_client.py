"""Generate ``<Name>ApiClient.ts`` for every plain API tag.

API tags are the document tags that are neither the framework tags (``wow``,
``Actuator``) nor aggregate tags.  An operation is included when it has an
``operationId`` and every one of its tags is an API tag; it then becomes a
method of each of its tags' clients.

Request and response types:

======================================  ====================================
Operation shape                         Generated type
======================================  ====================================
no / unrecognised request body          ``httpRequest?: ParameterRequest``
``multipart/form-data`` body            ``ParameterRequest<FormData>``
JSON body referencing a schema          ``ParameterRequest<Model>``
JSON (or ``*/*``) reference response    ``Promise<Model>``
JSON (or ``*/*``) primitive response    ``Promise<string>`` etc.
``text/event-stream`` array of refs     ``Promise<JsonServerSentEventStream<Model>>``
other ``text/event-stream``             ``Promise<JsonServerSentEventStream<any>>``
anything else                           ``Promise<any>``
======================================  ====================================

Streaming methods carry the event-stream result extractor metadata in their
HTTP method decorator.
"""

from __future__ import annotations

from typing import Any, Optional

from fetchgen import output
from fetchgen.aggregate.resolver import document_tags
from fetchgen.client.decorators import (
    DECORATOR_MODULE,
    EVENTSTREAM_MODULE,
    STREAM_RESULT_EXTRACTOR_METADATA,
    add_api_metadata_ctor,
    add_import_decorator,
    add_import_stream_result_extractor,
    add_method_decorator_import,
    add_stub_method,
    attributes_parameter,
    create_decorator_class,
    path_parameter,
    request_parameter,
    resolve_method_name,
)
from fetchgen.context import Generator
from fetchgen.exceptions import CyclicSchemaError, SchemaResolutionError
from fetchgen.model.model_info import resolve_model_info
from fetchgen.model.type_resolver import TypeResolver, quote
from fetchgen.models import TagInfo
from fetchgen.parser.components import resolve_node
from fetchgen.parser.operations import (
    APPLICATION_JSON,
    MULTIPART_FORM_DATA,
    OperationEndpoint,
    extract_content_schema,
    extract_ok_response,
    extract_path_parameters,
    extract_request_body,
    extract_response_event_stream_schema,
    extract_response_json_schema,
    extract_response_wildcard_schema,
    iter_operation_endpoints,
    resolve_path_parameter_type,
)
from fetchgen.schemas import is_array, is_primitive, is_reference, resolve_primitive_type
from fetchgen.source.declarations import ClassDeclaration, Decorator
from fetchgen.source.jsdoc import jsdoc
from fetchgen.source.source_file import SourceFile

EXCLUDED_TAGS = frozenset({"wow", "Actuator"})

API_CLIENT_SUFFIX = "ApiClient"
PARAMETER_REQUEST_TYPE = "ParameterRequest"
DEFAULT_RETURN_TYPE = "Promise<any>"
STREAM_TYPE = "JsonServerSentEventStream"


class _ReturnType:
    def __init__(self, type_name: str, stream: bool = False) -> None:
        self.type_name = type_name
        self.stream = stream


class ApiClientGenerator(Generator):
    """Generate one decorator-driven client class per API tag."""

    def generate(self) -> None:
        api_tags = self.resolve_api_tags()
        grouped = self.group_operations(api_tags)
        output.progress(f"Generating API clients for {len(grouped)} tags")
        for index, (tag_name, endpoints) in enumerate(grouped.items(), start=1):
            output.progress_with_count(
                index, len(grouped), f"Processing API client for tag: {tag_name}", 1
            )
            self.generate_api_client(api_tags[tag_name], endpoints)
        output.success("API client generation completed")

    def resolve_api_tags(self) -> dict[str, TagInfo]:
        aggregate_tags = {
            aggregate.aggregate.tag.name
            for aggregates in self.context.context_aggregates.values()
            for aggregate in aggregates
        }
        return {
            tag.name: tag
            for tag in document_tags(self.context.document)
            if tag.name not in EXCLUDED_TAGS and tag.name not in aggregate_tags
        }

    def group_operations(
        self, api_tags: dict[str, TagInfo]
    ) -> dict[str, list[OperationEndpoint]]:
        """Group eligible operations by API tag, in document order."""
        grouped: dict[str, list[OperationEndpoint]] = {}
        for endpoint in iter_operation_endpoints(self.context.document):
            if not endpoint.operation_id or not endpoint.tags:
                continue
            if not all(tag in api_tags for tag in endpoint.tags):
                continue
            for tag in endpoint.tags:
                grouped.setdefault(tag, []).append(endpoint)
        return grouped

    def api_client_file_path(self, tag: TagInfo) -> str:
        model_info = resolve_model_info(tag.name)
        return self.context.context_file_path(
            model_info.path, f"{model_info.name}{API_CLIENT_SUFFIX}.ts"
        )

    def generate_api_client(
        self, tag: TagInfo, endpoints: list[OperationEndpoint]
    ) -> ClassDeclaration:
        model_info = resolve_model_info(tag.name)
        source_file = self.context.get_or_create_source_file(self.api_client_file_path(tag))
        add_import_decorator(source_file)
        source_file.add_import(DECORATOR_MODULE, [f"type {PARAMETER_REQUEST_TYPE}"])
        client = create_decorator_class(
            f"{model_info.name}{API_CLIENT_SUFFIX}",
            source_file,
            docs=jsdoc([tag.description]),
        )
        add_api_metadata_ctor(client)
        for endpoint in endpoints:
            snapshot = source_file.snapshot()
            try:
                self.process_operation(source_file, client, endpoint)
            except (SchemaResolutionError, CyclicSchemaError) as exc:
                source_file.restore(snapshot)
                self.context.record_failure(endpoint.operation_id or endpoint.path, exc)
        return client

    def process_operation(
        self,
        source_file: SourceFile,
        client: ClassDeclaration,
        endpoint: OperationEndpoint,
    ) -> None:
        resolver = TypeResolver(source_file, self.context.document)
        operation = endpoint.operation
        ignored = set(self.context.ignored_path_parameters(endpoint.tags))
        parameters = [
            path_parameter(parameter["name"], resolve_path_parameter_type(parameter))
            for parameter in extract_path_parameters(operation, self.context.document)
            if parameter.get("name") and parameter["name"] not in ignored
        ]
        request_type = self.resolve_request_type(resolver, operation)
        parameters.append(
            request_parameter(
                "httpRequest", request_type, optional=request_type == PARAMETER_REQUEST_TYPE
            )
        )
        parameters.append(attributes_parameter())

        return_type = self.resolve_return_type(resolver, operation)
        decorator_arguments = [quote(endpoint.path)]
        if return_type.stream:
            add_import_stream_result_extractor(source_file)
            source_file.add_import(EVENTSTREAM_MODULE, [f"type {STREAM_TYPE}"])
            decorator_arguments.append(STREAM_RESULT_EXTRACTOR_METADATA)

        method_name = resolve_method_name(endpoint.operation_id, client.has_method)
        decorator = add_method_decorator_import(source_file, endpoint.method)
        add_stub_method(
            client,
            method_name,
            Decorator(name=decorator, arguments=decorator_arguments),
            parameters,
            return_type.type_name,
            docs=jsdoc([operation.get("summary"), operation.get("description")]),
        )

    # ------------------------------------------------------------------ #
    # Type resolution
    # ------------------------------------------------------------------ #

    def resolve_request_type(
        self, resolver: TypeResolver, operation: dict[str, Any]
    ) -> str:
        request_body = extract_request_body(operation, self.context.document)
        if not request_body:
            return PARAMETER_REQUEST_TYPE
        content = request_body.get("content") or {}
        if MULTIPART_FORM_DATA in content:
            return f"{PARAMETER_REQUEST_TYPE}<FormData>"
        json_schema = extract_content_schema(request_body, APPLICATION_JSON)
        if is_reference(json_schema):
            model_info = resolver.resolve_reference(json_schema)
            return f"{PARAMETER_REQUEST_TYPE}<{model_info.name}>"
        return PARAMETER_REQUEST_TYPE

    def resolve_return_type(
        self, resolver: TypeResolver, operation: dict[str, Any]
    ) -> _ReturnType:
        ok_response = extract_ok_response(operation)
        if not ok_response:
            return _ReturnType(DEFAULT_RETURN_TYPE)
        ok_response = resolve_node(ok_response, self.context.document)

        json_schema = extract_response_json_schema(ok_response)
        if json_schema:
            return _ReturnType(self._schema_return_type(resolver, json_schema))

        stream_schema = extract_response_event_stream_schema(ok_response)
        if stream_schema:
            item_type = self._stream_item_type(resolver, stream_schema) or "any"
            return _ReturnType(f"Promise<{STREAM_TYPE}<{item_type}>>", stream=True)

        wildcard_schema = extract_response_wildcard_schema(ok_response)
        if wildcard_schema:
            return _ReturnType(self._schema_return_type(resolver, wildcard_schema))
        return _ReturnType(DEFAULT_RETURN_TYPE)

    def _schema_return_type(self, resolver: TypeResolver, schema: dict[str, Any]) -> str:
        if is_reference(schema):
            return f"Promise<{resolver.resolve_reference(schema).name}>"
        schema_type = schema.get("type")
        if schema_type and is_primitive(schema_type):
            return f"Promise<{resolve_primitive_type(schema_type)}>"
        return DEFAULT_RETURN_TYPE

    def _stream_item_type(
        self, resolver: TypeResolver, schema: dict[str, Any]
    ) -> Optional[str]:
        target = resolve_node(schema, self.context.document)
        if isinstance(target, dict) and is_array(target) and is_reference(target.get("items")):
            return resolver.resolve_reference(target["items"]).name
        return None
