"""Look up ``$ref`` targets in an OpenAPI document without expanding them.

The generator never inlines referenced schemas: a reference is resolved to the
*name* of its target (see :mod:`fetchgen.model.model_info`), and the target
body is only fetched when a convention needs to look inside it (command
bodies, event streams, condition schemas).  That keeps resolution O(1) per
reference and makes cyclic schema graphs harmless.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~fetchgen.exceptions.SchemaResolutionError`.
"""

from __future__ import annotations

from typing import Any

from fetchgen.exceptions import SchemaResolutionError
from fetchgen.models import KeySchema

COMPONENTS_PREFIX = "#/components/"
COMPONENTS_PARAMETERS_REF = f"{COMPONENTS_PREFIX}parameters/"
COMPONENTS_REQUEST_BODIES_REF = f"{COMPONENTS_PREFIX}requestBodies/"
COMPONENTS_RESPONSES_REF = f"{COMPONENTS_PREFIX}responses/"
COMPONENTS_SCHEMAS_REF = f"{COMPONENTS_PREFIX}schemas/"


def extract_component_key(reference: dict[str, Any]) -> str:
    """Return the component key of a reference (the last pointer segment).

    Example::

        >>> extract_component_key({"$ref": "#/components/schemas/example.cart.CartState"})
        'example.cart.CartState'
    """
    return _unescape(reference["$ref"].rsplit("/", 1)[-1])


def resolve_ref(ref: str, document: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the document root.

    Parses JSON Pointer references like ``#/components/schemas/Pet`` and
    navigates the document to locate the referenced value.  Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).
        document: The root OpenAPI document.

    Returns:
        The value found at the referenced path.

    Raises:
        SchemaResolutionError: If the reference is external (does not start
            with ``#/``), or if any segment in the pointer path does not
            exist in the document.
    """
    if not ref.startswith("#/"):
        raise SchemaResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled.",
            ref=ref,
        )

    current: Any = document
    for segment in ref[2:].split("/"):
        segment = _unescape(segment)
        if isinstance(current, dict):
            if segment not in current:
                raise SchemaResolutionError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found",
                    ref=ref,
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SchemaResolutionError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'",
                    ref=ref,
                ) from exc
        else:
            raise SchemaResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}",
                ref=ref,
            )
    return current


def resolve_node(node: Any, document: dict[str, Any]) -> Any:
    """Return *node* itself, or its target when it is a ``$ref`` node."""
    if isinstance(node, dict) and "$ref" in node:
        return resolve_ref(node["$ref"], document)
    return node


def get_schemas(document: dict[str, Any]) -> dict[str, Any]:
    """Return ``components.schemas`` (empty when absent)."""
    return (document.get("components") or {}).get("schemas") or {}


def extract_schema(reference: dict[str, Any], document: dict[str, Any]) -> dict[str, Any]:
    """Return the schema a ``#/components/schemas/...`` reference points to."""
    return resolve_ref(reference["$ref"], document)


def key_schema(reference: dict[str, Any], document: dict[str, Any]) -> KeySchema:
    """Pair the component key of *reference* with the schema it points to."""
    return KeySchema(
        key=extract_component_key(reference),
        schema=extract_schema(reference, document),
    )


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")
