"""Walk the ``paths`` object and pick apart operations, bodies and responses.

Every helper works on the raw document dicts.  Operations are yielded in
path declaration order and, within a path item, in :class:`HTTPMethod`
order (get, put, post, delete, options, head, patch, trace), which makes
the generated client methods reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from fetchgen.models import HTTPMethod, ParameterLocation
from fetchgen.parser.components import resolve_node
from fetchgen.schemas import is_primitive, is_reference, resolve_primitive_type

APPLICATION_JSON = "application/json"
MULTIPART_FORM_DATA = "multipart/form-data"
TEXT_EVENT_STREAM = "text/event-stream"
WILDCARD = "*/*"

DEFAULT_PATH_PARAMETER_TYPE = "string"


@dataclass(frozen=True)
class OperationEndpoint:
    """One operation together with the path and method it is declared under."""

    path: str
    method: HTTPMethod
    operation: dict[str, Any]

    @property
    def operation_id(self) -> Optional[str]:
        return self.operation.get("operationId")

    @property
    def tags(self) -> list[str]:
        return self.operation.get("tags") or []


def extract_operations(path_item: dict[str, Any]) -> list[tuple[HTTPMethod, dict[str, Any]]]:
    """Return the ``(method, operation)`` pairs declared on a path item."""
    return [
        (method, path_item[method.value])
        for method in HTTPMethod
        if isinstance(path_item.get(method.value), dict)
    ]


def iter_operation_endpoints(document: dict[str, Any]) -> Iterator[OperationEndpoint]:
    """Yield every operation of the document."""
    for path, path_item in (document.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in extract_operations(path_item):
            yield OperationEndpoint(path=path, method=method, operation=operation)


def extract_ok_response(operation: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Return the ``200`` response of *operation*, possibly a ``$ref`` node."""
    return (operation.get("responses") or {}).get("200")


def extract_content_schema(
    holder: Optional[dict[str, Any]], content_type: str
) -> Optional[dict[str, Any]]:
    """Return the schema of ``holder.content[content_type]``.

    *holder* is a response or request body object (already dereferenced);
    ``None`` or ``$ref`` holders yield ``None``.
    """
    if not holder or is_reference(holder):
        return None
    media_type = (holder.get("content") or {}).get(content_type)
    if not media_type:
        return None
    return media_type.get("schema")


def extract_response_json_schema(response: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    return extract_content_schema(response, APPLICATION_JSON)


def extract_response_event_stream_schema(response: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    return extract_content_schema(response, TEXT_EVENT_STREAM)


def extract_response_wildcard_schema(response: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    return extract_content_schema(response, WILDCARD)


def extract_operation_ok_response_json_schema(operation: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Shortcut for the JSON schema of the ``200`` response."""
    return extract_response_json_schema(extract_ok_response(operation))


def extract_request_body(
    operation: dict[str, Any], document: dict[str, Any]
) -> Optional[dict[str, Any]]:
    """Return the request body object of *operation*, following a ``$ref``."""
    request_body = operation.get("requestBody")
    if request_body is None:
        return None
    return resolve_node(request_body, document)


def extract_path_parameters(
    operation: dict[str, Any], document: dict[str, Any]
) -> list[dict[str, Any]]:
    """Return the ``in: path`` parameters of *operation*, references resolved."""
    parameters = [resolve_node(p, document) for p in operation.get("parameters") or []]
    return [p for p in parameters if p.get("in") == ParameterLocation.PATH.value]


def resolve_path_parameter_type(parameter: dict[str, Any]) -> str:
    """Resolve the TypeScript type of a path parameter.

    Falls back to ``string`` when the schema is missing, a reference, untyped
    or not primitive.
    """
    schema = parameter.get("schema")
    if not schema or is_reference(schema):
        return DEFAULT_PATH_PARAMETER_TYPE
    schema_type = schema.get("type")
    if not schema_type or not is_primitive(schema_type):
        return DEFAULT_PATH_PARAMETER_TYPE
    return resolve_primitive_type(schema_type)
