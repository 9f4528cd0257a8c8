"""Documentation comment lines derived from OpenAPI schemas.

Functions here return plain lists of lines; the renderer turns them into
``/** ... */`` blocks.  Empty or missing entries are dropped so callers can
pass optional values straight through.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

_NUMERIC_CONSTRAINTS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")
_STRING_CONSTRAINTS = ("minLength", "maxLength", "pattern")
_ARRAY_CONSTRAINTS = ("minItems", "maxItems", "uniqueItems")


def jsdoc(descriptions: Iterable[Optional[str]]) -> list[str]:
    """Keep the non-empty string entries of *descriptions*, in order."""
    return [d for d in descriptions if isinstance(d, str) and d]


def schema_jsdoc(schema: Any, key: Optional[str] = None) -> list[str]:
    """Build the documentation lines of *schema*.

    Boolean schemas (``true`` / ``false``) have no documentation.
    Lines appear in this order: title, description, ``- key:``,
    ``- format:``, ``- default:``, ``- example:`` and the numeric, string
    and array constraint groups.

    Example::

        >>> schema_jsdoc({"type": "string", "minLength": 1})
        ['- String Constraints', '  - minLength: 1']
    """
    if not isinstance(schema, dict):
        return []
    descriptions: list[Optional[str]] = [schema.get("title"), schema.get("description")]
    if key:
        descriptions.append(f"- key: {key}")
    if schema.get("format"):
        descriptions.append(f"- format: {schema['format']}")
    descriptions.extend(_json_lines(schema, "default"))
    descriptions.extend(_json_lines(schema, "example"))
    descriptions.extend(_constraint_lines(schema, "Numeric Constraints", _NUMERIC_CONSTRAINTS))
    descriptions.extend(_constraint_lines(schema, "String Constraints", _STRING_CONSTRAINTS))
    descriptions.extend(_constraint_lines(schema, "Array Constraints", _ARRAY_CONSTRAINTS))
    return jsdoc(descriptions)


def format_value(value: Any) -> str:
    """Format a scalar the way it reads in JavaScript (``true``, ``1.5``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _json_lines(schema: dict[str, Any], name: str) -> list[str]:
    value = schema.get(name)
    if value is None or value == "" or value is False:
        return []
    if not isinstance(value, (dict, list)):
        return [f"- {name}: `{format_value(value)}`"]
    return [
        f"- {name}: ",
        "```json",
        json.dumps(value, ensure_ascii=False, separators=(",", ":")),
        "```",
    ]


def _constraint_lines(
    schema: dict[str, Any], title: str, names: tuple[str, ...]
) -> list[str]:
    lines = [f"  - {name}: {format_value(schema[name])}" for name in names if name in schema]
    if not lines:
        return []
    return [f"- {title}", *lines]
