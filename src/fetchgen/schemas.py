"""Classification of OpenAPI schema nodes.

A schema node is the plain ``dict`` parsed from the document.  Downstream
code never inspects nodes ad hoc; it asks :func:`classify` (type expressions)
or :func:`classify_declaration` (top-level declarations) for a
:class:`SchemaKind` once, then matches on it.  The shape predicates below
are the building blocks of both orders and are usable on their own.

Type expressions are classified in this order, first match wins:

====  ===============  ==================================================
 #    Kind             Rule
====  ===============  ==================================================
1     REFERENCE        ``$ref`` present
2     MAP              ``additionalProperties`` present and not ``False``,
                       no ``properties``
3     CONST            ``const`` present
4     ENUM             non-empty ``enum`` with at least one string
5     COMPOSITION      non-empty ``allOf`` / ``anyOf`` / ``oneOf``
6     ARRAY            ``type == "array"``
7     OBJECT           ``properties``, or ``type == "object"`` (an object
                       without fields resolves to ``Record<string, any>``)
8     PRIMITIVE        anything else (mapped by :func:`resolve_primitive_type`)
====  ===============  ==================================================
"""

from __future__ import annotations

import enum
from typing import Any, Union

ANY_TYPE = "any"
"""The single "dynamic/unknown" type of the generated code."""

EMPTY_OBJECT_TYPE = "Record<string, any>"
"""Type emitted for objects with neither properties nor additional properties."""

_PRIMITIVE_TYPE_MAP: dict[str, str] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}

Schema = dict[str, Any]
SchemaType = Union[str, list[str]]


class SchemaKind(str, enum.Enum):
    """Variant assigned to a schema node by :func:`classify`."""

    REFERENCE = "reference"
    MAP = "map"
    CONST = "const"
    ENUM = "enum"
    ALL_OF = "allOf"
    UNION = "union"
    ARRAY = "array"
    OBJECT = "object"
    PRIMITIVE = "primitive"
    ALIAS = "alias"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_reference(schema: Any) -> bool:
    return isinstance(schema, dict) and "$ref" in schema


def is_primitive(schema_type: Any) -> bool:
    """Whether a ``type`` value (string or list of strings) is primitive."""
    if isinstance(schema_type, list):
        return all(item in _PRIMITIVE_TYPE_MAP for item in schema_type)
    return schema_type in _PRIMITIVE_TYPE_MAP


def is_enum(schema: Schema) -> bool:
    """A non-empty ``enum`` holding at least one string value."""
    values = schema.get("enum")
    return (
        isinstance(values, list)
        and len(values) > 0
        and any(isinstance(value, str) for value in values)
    )


def is_object(schema: Schema) -> bool:
    """Non-empty ``properties`` on a node typed ``object`` (or left untyped)."""
    return schema.get("type") in (None, "object") and bool(schema.get("properties"))


def is_array(schema: Schema) -> bool:
    return schema.get("type") == "array"


def is_map(schema: Schema) -> bool:
    """An object whose only shape is ``additionalProperties``."""
    additional = schema.get("additionalProperties")
    return (
        additional is not None
        and additional is not False
        and not schema.get("properties")
    )


def _non_empty(schema: Schema, keyword: str) -> bool:
    members = schema.get(keyword)
    return isinstance(members, list) and len(members) > 0


def is_all_of(schema: Schema) -> bool:
    return _non_empty(schema, "allOf")


def is_any_of(schema: Schema) -> bool:
    return _non_empty(schema, "anyOf")


def is_one_of(schema: Schema) -> bool:
    return _non_empty(schema, "oneOf")


def is_union(schema: Schema) -> bool:
    return is_any_of(schema) or is_one_of(schema)


def is_composition(schema: Schema) -> bool:
    return is_all_of(schema) or is_union(schema)


def is_empty_object(schema: Schema) -> bool:
    """An object schema that carries no data (used for optional command bodies)."""
    return (
        schema.get("type") == "object"
        and not schema.get("properties")
        and not schema.get("additionalProperties")
    )


def composition_members(schema: Schema) -> list[Any]:
    """Return the members of a composition, preferring ``oneOf`` then ``anyOf``."""
    for keyword in ("oneOf", "anyOf", "allOf"):
        if _non_empty(schema, keyword):
            return schema[keyword]
    return []


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(schema: Any) -> SchemaKind:
    """Assign the type-expression variant of *schema* (see module table)."""
    if is_reference(schema):
        return SchemaKind.REFERENCE
    if not isinstance(schema, dict):
        return SchemaKind.PRIMITIVE
    if is_map(schema):
        return SchemaKind.MAP
    if "const" in schema:
        return SchemaKind.CONST
    if is_enum(schema):
        return SchemaKind.ENUM
    if is_all_of(schema):
        return SchemaKind.ALL_OF
    if is_union(schema):
        return SchemaKind.UNION
    if is_array(schema):
        return SchemaKind.ARRAY
    if is_object(schema) or schema.get("type") == "object":
        return SchemaKind.OBJECT
    return SchemaKind.PRIMITIVE


def classify_declaration(schema: Schema) -> SchemaKind:
    """Assign the declaration variant of a top-level component schema.

    Enums become enum declarations, objects interfaces, arrays ``Array<T>``
    aliases and ``allOf`` an extending interface; object-ness is checked
    before composition-ness.  Everything else, including ``anyOf`` /
    ``oneOf``, becomes a type alias.
    """
    if is_enum(schema):
        return SchemaKind.ENUM
    if is_object(schema):
        return SchemaKind.OBJECT
    if is_array(schema):
        return SchemaKind.ARRAY
    if is_all_of(schema):
        return SchemaKind.ALL_OF
    if is_union(schema):
        return SchemaKind.UNION
    return SchemaKind.ALIAS


# ---------------------------------------------------------------------------
# Type expression helpers
# ---------------------------------------------------------------------------


def to_array_type(type_expression: str) -> str:
    """Wrap *type_expression* as an array type, parenthesising unions/intersections."""
    if "|" in type_expression or "&" in type_expression:
        return f"({type_expression})[]"
    return f"{type_expression}[]"


def resolve_primitive_type(schema_type: SchemaType) -> str:
    """Map an OpenAPI primitive ``type`` (or list of types) to a TypeScript type."""
    if isinstance(schema_type, list):
        return " | ".join(resolve_primitive_type(item) for item in schema_type)
    return _PRIMITIVE_TYPE_MAP.get(schema_type, ANY_TYPE)
