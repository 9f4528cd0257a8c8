"""Building blocks shared by the client generators.

Generated clients are decorator-driven classes for
``@ahoo-wang/fetcher-decorator``: an ``@api(...)`` class implementing
``ApiMetadataCapable`` whose methods carry an HTTP method decorator
(``@post(...)``), parameter decorators (``@path``, ``@request``,
``@attribute``) and a body that only throws ``autoGeneratedError``; the
runtime replaces the body with the real request.
"""

from __future__ import annotations

from typing import Callable, Optional

from fetchgen.model.type_resolver import quote
from fetchgen.models import HTTPMethod, TagAliasAggregate
from fetchgen.naming import camel_case, is_identifier, pascal_case
from fetchgen.source.declarations import (
    ClassDeclaration,
    ConstructorDeclaration,
    Decorator,
    MethodDeclaration,
    ParameterDeclaration,
)
from fetchgen.source.source_file import SourceFile

FETCHER_MODULE = "@ahoo-wang/fetcher"
DECORATOR_MODULE = "@ahoo-wang/fetcher-decorator"
EVENTSTREAM_MODULE = "@ahoo-wang/fetcher-eventstream"

API_METADATA_TYPE = "ApiMetadata"
API_METADATA_CAPABLE = "ApiMetadataCapable"

STREAM_RESULT_EXTRACTOR_METADATA = """{
  headers: { Accept: ContentTypeValues.TEXT_EVENT_STREAM },
  resultExtractor: JsonEventStreamResultExtractor,
}"""
"""``@api``/endpoint metadata making a call return a parsed event stream."""

ATTRIBUTES_PARAMETER = "attributes"


def add_import_decorator(source_file: SourceFile) -> None:
    """Import the decorator names every generated client uses."""
    source_file.add_import(
        DECORATOR_MODULE,
        [
            f"type {API_METADATA_TYPE}",
            f"type {API_METADATA_CAPABLE}",
            "api",
            "attribute",
            "autoGeneratedError",
            "path",
            "request",
        ],
    )


def add_import_stream_result_extractor(source_file: SourceFile) -> None:
    """Import what :data:`STREAM_RESULT_EXTRACTOR_METADATA` refers to."""
    source_file.add_import(FETCHER_MODULE, ["ContentTypeValues"])
    source_file.add_import(EVENTSTREAM_MODULE, ["JsonEventStreamResultExtractor"])


def method_to_decorator(method: HTTPMethod) -> str:
    """Name of the decorator for *method* (``delete`` is a reserved word)."""
    return "del" if method == HTTPMethod.DELETE else method.value


def add_method_decorator_import(source_file: SourceFile, method: HTTPMethod) -> str:
    decorator = method_to_decorator(method)
    source_file.add_import(DECORATOR_MODULE, [decorator])
    return decorator


def create_decorator_class(
    name: str,
    source_file: SourceFile,
    api_arguments: Optional[list[str]] = None,
    docs: Optional[list[str]] = None,
) -> ClassDeclaration:
    """Add an exported ``@api(...)`` class implementing ``ApiMetadataCapable``."""
    return source_file.add_class(
        ClassDeclaration(
            name=name,
            decorators=[Decorator(name="api", arguments=api_arguments or [])],
            implements=[API_METADATA_CAPABLE],
            docs=docs or [],
        )
    )


def add_api_metadata_ctor(
    client: ClassDeclaration, initializer: Optional[str] = None
) -> None:
    """Give *client* a ``constructor(public readonly apiMetadata ...) {}``.

    With an *initializer* the parameter defaults to it, otherwise it is
    optional.
    """
    client.ctor = ConstructorDeclaration(
        parameters=[
            ParameterDeclaration(
                name="apiMetadata",
                type=API_METADATA_TYPE,
                scope="public",
                readonly=True,
                optional=initializer is None,
                initializer=initializer,
            )
        ]
    )


def path_parameter(name: str, type_name: str = "string") -> ParameterDeclaration:
    """``@path('name') name: type``; non-identifier names are camel-cased."""
    return ParameterDeclaration(
        name=name if is_identifier(name) else camel_case(name),
        type=type_name,
        decorators=[Decorator(name="path", arguments=[quote(name)])],
    )


def request_parameter(name: str, type_name: str, optional: bool) -> ParameterDeclaration:
    return ParameterDeclaration(
        name=name,
        type=type_name,
        optional=optional,
        decorators=[Decorator(name="request")],
    )


def attributes_parameter() -> ParameterDeclaration:
    return ParameterDeclaration(
        name=ATTRIBUTES_PARAMETER,
        type="Record<string, any>",
        optional=True,
        decorators=[Decorator(name="attribute")],
    )


def add_stub_method(
    client: ClassDeclaration,
    name: str,
    decorator: Decorator,
    parameters: list[ParameterDeclaration],
    return_type: str,
    docs: Optional[list[str]] = None,
) -> MethodDeclaration:
    """Add a method whose body throws ``autoGeneratedError(<parameters>)``."""
    method = MethodDeclaration(
        name=name,
        decorators=[decorator],
        parameters=parameters,
        return_type=return_type,
        statements=[
            f"throw autoGeneratedError({', '.join(p.name for p in parameters)});"
        ],
        docs=docs or [],
    )
    client.methods.append(method)
    return method


def resolve_method_name(
    operation_id: str,
    exists: Callable[[str], bool],
    convert: Callable[[list[str]], str] = camel_case,
) -> str:
    """Derive a unique method name from a dot-delimited operation id.

    Candidates are the *convert* joins (camelCase by default) of ever
    longer suffixes of the id, starting from its last segment; the first
    one for which *exists* returns ``False`` is used.  When every candidate
    is taken the join of the full id is returned.

    Example::

        >>> resolve_method_name("user.get.profile", lambda name: name == "profile")
        'getProfile'
        >>> resolve_method_name("user.get.profile", lambda name: True)
        'userGetProfile'
    """
    parts = operation_id.split(".")
    for start in range(len(parts) - 1, -1, -1):
        candidate = convert(parts[start:])
        if candidate and not exists(candidate):
            return candidate
    return convert(parts)


def client_name(aggregate: TagAliasAggregate, suffix: str) -> str:
    """``<PascalAggregate><suffix>``, e.g. ``CartCommandClient``."""
    return f"{pascal_case(aggregate.aggregate_name)}{suffix}"


def aggregate_client_file_path(aggregate: TagAliasAggregate, file_name: str) -> str:
    return f"{aggregate.context_alias}/{aggregate.aggregate_name}/{file_name}.ts"
