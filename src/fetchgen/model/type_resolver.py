"""Resolve schema nodes to TypeScript type expressions.

:class:`TypeResolver` turns any schema node into a type expression string
and, as a side effect, imports every referenced model into the file the
expression is written to.  Dispatch follows
:func:`fetchgen.schemas.classify`:

=============  ==========================================================
Kind           Result
=============  ==========================================================
REFERENCE      name of the referenced model (import registered)
MAP            ``Record<string, V>``
CONST          literal type (``'x'``, ``1``, ``true``)
ENUM           union of literals (``'a' | 'b'``)
ALL_OF         ``(A & B)``
UNION          ``(A | B)``
ARRAY          ``T[]`` / ``(A | B)[]``
OBJECT         inline ``{ a: T; b?: U }`` or ``Record<string, any>``
PRIMITIVE      ``string``, ``number``, ``boolean``, ``null`` or ``any``
=============  ==========================================================

``nullable: true`` appends ``| null`` to whatever the node resolved to.

References are never expanded: only the target's *name* is needed, so
cyclic reference graphs resolve in constant time per reference.  Literal
inline recursion (a node containing itself) raises
:class:`~fetchgen.exceptions.CyclicSchemaError`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from fetchgen.exceptions import CyclicSchemaError, SchemaResolutionError
from fetchgen.model.model_info import WOW_TYPE_MAPPING, resolve_reference_model_info
from fetchgen.models import ModelInfo
from fetchgen.naming import quote, resolve_property_name
from fetchgen.parser.components import (
    COMPONENTS_SCHEMAS_REF,
    extract_component_key,
    get_schemas,
)
from fetchgen.schemas import (
    ANY_TYPE,
    EMPTY_OBJECT_TYPE,
    SchemaKind,
    classify,
    composition_members,
    resolve_primitive_type,
    to_array_type,
)
from fetchgen.source.source_file import SourceFile

NULL_TYPE = "null"


class TypeResolver:
    """Resolve type expressions written into *source_file*.

    Args:
        source_file: The file the resolved expressions end up in; imports
            of referenced models are added to it.
        document: The OpenAPI document.  When given, references to
            ``#/components/schemas/...`` keys that do not exist raise
            :class:`~fetchgen.exceptions.SchemaResolutionError`.
    """

    def __init__(
        self, source_file: SourceFile, document: Optional[dict[str, Any]] = None
    ) -> None:
        self.source_file = source_file
        self.document = document
        self._resolving: set[int] = set()

    def resolve_reference(self, reference: dict[str, Any]) -> ModelInfo:
        """Resolve a ``$ref`` node to its model and import it into the file."""
        self._check_reference(reference)
        model_info = resolve_reference_model_info(reference)
        self.source_file.add_model_import(model_info)
        return model_info

    def resolve_type(self, schema: Any) -> str:
        """Resolve *schema* to a type expression.

        Raises:
            SchemaResolutionError: If a reference points to a missing schema.
            CyclicSchemaError: If an inline node contains itself.
        """
        kind = classify(schema)
        if kind == SchemaKind.REFERENCE:
            return self.resolve_reference(schema).name
        if not isinstance(schema, dict):
            return ANY_TYPE

        node_id = id(schema)
        if node_id in self._resolving:
            raise CyclicSchemaError(
                f"Inline schema contains itself in {self.source_file.path}"
            )
        self._resolving.add(node_id)
        try:
            type_expression = self._resolve_kind(kind, schema)
        finally:
            self._resolving.discard(node_id)

        if schema.get("nullable") is True:
            return with_null(type_expression)
        return type_expression

    def resolve_object_type(self, schema: dict[str, Any]) -> str:
        """Resolve an object node to an inline structural type."""
        required = set(schema.get("required") or [])
        members = []
        for name, property_schema in (schema.get("properties") or {}).items():
            optional = "" if name in required else "?"
            members.append(
                f"{resolve_property_name(name)}{optional}: "
                f"{self.resolve_type(property_schema)}"
            )
        additional = self.resolve_additional_properties(schema)
        if additional is not None:
            members.append(f"[key: string]: {additional}")
        if not members:
            return EMPTY_OBJECT_TYPE
        return "{ " + "; ".join(members) + " }"

    def resolve_additional_properties(self, schema: dict[str, Any]) -> Optional[str]:
        """Value type of ``additionalProperties``, or ``None`` when there is none."""
        additional = schema.get("additionalProperties")
        if additional is None or additional is False:
            return None
        if additional is True or additional == {}:
            return ANY_TYPE
        return self.resolve_type(additional)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _resolve_kind(self, kind: SchemaKind, schema: dict[str, Any]) -> str:
        if kind == SchemaKind.MAP:
            return f"Record<string, {self.resolve_additional_properties(schema)}>"
        if kind == SchemaKind.CONST:
            return literal_type(schema["const"])
        if kind == SchemaKind.ENUM:
            return " | ".join(literal_type(value) for value in schema["enum"])
        if kind in (SchemaKind.ALL_OF, SchemaKind.UNION):
            separator = " & " if kind == SchemaKind.ALL_OF else " | "
            types = [self.resolve_type(member) for member in composition_members(schema)]
            return f"({separator.join(types)})"
        if kind == SchemaKind.ARRAY:
            items = schema.get("items")
            item_type = ANY_TYPE if items is None else self.resolve_type(items)
            return to_array_type(item_type)
        if kind == SchemaKind.OBJECT:
            return self.resolve_object_type(schema)
        schema_type = schema.get("type")
        if not schema_type:
            return ANY_TYPE
        return resolve_primitive_type(schema_type)

    def _check_reference(self, reference: dict[str, Any]) -> None:
        if self.document is None:
            return
        ref = reference["$ref"]
        if not ref.startswith(COMPONENTS_SCHEMAS_REF):
            raise SchemaResolutionError(
                f"Unsupported $ref '{ref}': only {COMPONENTS_SCHEMAS_REF}... "
                "references can name a type",
                ref=ref,
            )
        key = extract_component_key(reference)
        if key not in WOW_TYPE_MAPPING and key not in get_schemas(self.document):
            raise SchemaResolutionError(
                f"Cannot resolve $ref '{ref}': schema '{key}' not found", ref=ref
            )


def literal_type(value: Any) -> str:
    """Render *value* as a TypeScript literal type.

    Example::

        >>> literal_type("PAID")
        "'PAID'"
        >>> literal_type(1)
        '1'
    """
    if isinstance(value, str):
        return quote(value)
    return json.dumps(value)


def with_null(type_expression: str) -> str:
    """Union *type_expression* with ``null`` unless it already includes it.

    A union wrapped in one pair of parentheses counts as its members, so
    ``(string | null)`` is left alone.
    """
    members = [member.strip() for member in _unwrap(type_expression).split("|")]
    if NULL_TYPE in members:
        return type_expression
    return f"{type_expression} | {NULL_TYPE}"


def _unwrap(type_expression: str) -> str:
    """Drop one pair of parentheses enclosing the whole of *type_expression*."""
    if not (type_expression.startswith("(") and type_expression.endswith(")")):
        return type_expression
    depth = 0
    for index, char in enumerate(type_expression):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index < len(type_expression) - 1:
                return type_expression
    return type_expression[1:-1]
