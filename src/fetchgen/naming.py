"""Identifier case conversion for generated TypeScript declarations.

Schema keys, tag names, operation identifiers and enum values arrive in every
conceivable style (``snake_case``, ``kebab-case``, dotted keys,
``camelCase``, free text).  The helpers here tokenize such names and
re-join them as:

* :func:`pascal_case` -- type, class and enum names.
* :func:`camel_case` -- method and factory names.
* :func:`upper_snake_case` -- enum members and constants.

Tokenizing splits on separator characters (:data:`NAMING_SEPARATORS`) and on
lower-to-upper case transitions, so runs of capitals such as ``HTTP`` stay
together: ``"parseHTTPResponse"`` becomes ``["parse", "HTTPResponse"]``.
"""

from __future__ import annotations

import re
from typing import Union

NAMING_SEPARATORS = re.compile(r"[-_'\s./?;:,()\[\]{}|\\]+")

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
_DIGITS_RE = re.compile(r"^\d+$")

Name = Union[str, list[str]]


def split_name(name: str) -> list[str]:
    """Split *name* on separator characters, keeping empty parts."""
    return NAMING_SEPARATORS.split(name)


def split_camel_case(parts: list[str]) -> list[str]:
    """Split each part where an upper-case letter follows a lower-case one.

    Empty parts are dropped.

    Example::

        >>> split_camel_case(["wowExampleOrder", "HTTPStatus"])
        ['wow', 'Example', 'Order', 'HTTPStatus']
    """
    result: list[str] = []
    for part in parts:
        if not part:
            continue
        current = ""
        for index, char in enumerate(part):
            prev_is_lower = index > 0 and "a" <= part[index - 1] <= "z"
            if "A" <= char <= "Z" and prev_is_lower and current:
                result.append(current)
                current = char
            else:
                current += char
        if current:
            result.append(current)
    return result


def tokenize_name(name: Name) -> list[str]:
    """Split a name, or each element of a list of names, into word tokens."""
    if isinstance(name, list):
        tokens: list[str] = []
        for part in name:
            tokens.extend(split_camel_case(split_name(part)))
        return tokens
    return split_camel_case(split_name(name))


def pascal_case(name: Name) -> str:
    """Convert *name* to ``PascalCase``.

    Every token is capitalised and the remainder lower-cased, so
    ``"HTTP_status"`` becomes ``"HttpStatus"``.

    Args:
        name: A string or a list of strings (joined as one name).

    Returns:
        The PascalCase name, or ``""`` for empty input.
    """
    if not name:
        return ""
    words = []
    for token in tokenize_name(name):
        first, rest = token[0], token[1:]
        if first.isascii() and first.isalpha():
            first = first.upper()
        words.append(first + rest.lower())
    return "".join(words)


def camel_case(name: Name) -> str:
    """Convert *name* to ``camelCase``."""
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def upper_snake_case(name: Name) -> str:
    """Convert *name* to ``UPPER_SNAKE_CASE``.

    Example::

        >>> upper_snake_case("orderCreated")
        'ORDER_CREATED'
    """
    if not name:
        return ""
    return "_".join(token.upper() for token in tokenize_name(name))


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def quote(value: str) -> str:
    """Single-quote *value* as a TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def resolve_property_name(name: str) -> str:
    """Quote *name* unless it is a valid TypeScript identifier.

    Example::

        >>> resolve_property_name("it's")
        "'it\\\\'s'"
    """
    if is_identifier(name):
        return name
    return quote(name)


def resolve_enum_member_name(value: str) -> str:
    """Derive an enum member identifier from an enum *value*.

    All-digit values get a ``NUM_`` prefix since identifiers cannot start
    with a digit; everything else is upper-snake-cased and quoted if still
    not an identifier.
    """
    if _DIGITS_RE.match(value):
        return f"NUM_{value}"
    return resolve_property_name(upper_snake_case(value))
