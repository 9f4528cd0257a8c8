"""Emit the declaration of a single component schema.

:class:`TypeGenerator` picks the declaration form with
:func:`fetchgen.schemas.classify_declaration`:

* enum -- ``export enum`` with one upper-snake-case member per non-empty
  string value (two values with the same member name are a
  :class:`~fetchgen.exceptions.EnumMemberCollisionError`);
* object -- ``export interface`` with one property per schema property and
  an index signature for ``additionalProperties``;
* array -- ``export type X = Array<T>``;
* ``allOf`` of references and inline objects only -- an interface
  extending every referenced member and holding the properties of every
  inline object member (other ``allOf`` schemas become an intersection
  alias);
* anything else -- ``export type X = <resolved expression>``.

Every declaration is documented with :func:`fetchgen.source.jsdoc.schema_jsdoc`.
"""

from __future__ import annotations

from typing import Any, Optional

from fetchgen.exceptions import EnumMemberCollisionError
from fetchgen.model.type_resolver import TypeResolver, quote
from fetchgen.models import KeySchema, ModelInfo
from fetchgen.naming import resolve_enum_member_name, resolve_property_name
from fetchgen.schemas import SchemaKind, classify_declaration, is_object, is_reference
from fetchgen.source.declarations import (
    EnumMember,
    IndexSignature,
    InterfaceDeclaration,
    PropertySignature,
)
from fetchgen.source.jsdoc import schema_jsdoc
from fetchgen.source.source_file import SourceFile

ADDITIONAL_PROPERTIES_DOC = "Additional properties"


class TypeGenerator:
    """Add the declaration of *key_schema* to *source_file*.

    Args:
        model_info: Resolved name and path of the declaration.
        source_file: The ``types.ts`` file of ``model_info.path``.
        key_schema: The component key and its schema.
        document: The OpenAPI document, used to validate references.
    """

    def __init__(
        self,
        model_info: ModelInfo,
        source_file: SourceFile,
        key_schema: KeySchema,
        document: Optional[dict[str, Any]] = None,
    ) -> None:
        self.model_info = model_info
        self.source_file = source_file
        self.key_schema = key_schema
        self.resolver = TypeResolver(source_file, document)

    def generate(self) -> None:
        schema = self.key_schema.schema_
        kind = classify_declaration(schema)
        if kind == SchemaKind.ENUM:
            declaration = self._process_enum(schema)
        elif kind == SchemaKind.OBJECT:
            declaration = self._process_interface(schema)
        elif kind == SchemaKind.ARRAY:
            declaration = self._process_array(schema)
        elif kind == SchemaKind.ALL_OF and is_extendable(schema):
            declaration = self._process_intersection(schema)
        else:
            declaration = self.source_file.add_type_alias(
                self.model_info.name, self.resolver.resolve_type(schema)
            )
        declaration.docs = schema_jsdoc(schema, self.key_schema.key)

    # ------------------------------------------------------------------ #
    # Declaration forms
    # ------------------------------------------------------------------ #

    def _process_enum(self, schema: dict[str, Any]):
        members: list[EnumMember] = []
        values_by_member: dict[str, str] = {}
        for value in schema["enum"]:
            if not (isinstance(value, str) and value):
                continue
            name = resolve_enum_member_name(value)
            if name in values_by_member:
                raise EnumMemberCollisionError(
                    values_by_member[name], value, name, self.model_info.name
                )
            values_by_member[name] = value
            members.append(EnumMember(name=name, initializer=quote(value)))
        return self.source_file.add_enum(self.model_info.name, members)

    def _process_interface(self, schema: dict[str, Any]) -> InterfaceDeclaration:
        interface = self.source_file.add_interface(self.model_info.name)
        self._add_properties(interface, schema)
        additional = self.resolver.resolve_additional_properties(schema)
        if additional is not None:
            interface.index_signature = IndexSignature(
                return_type=additional, docs=[ADDITIONAL_PROPERTIES_DOC]
            )
        return interface

    def _process_array(self, schema: dict[str, Any]):
        items = schema.get("items")
        item_type = "any" if items is None else self.resolver.resolve_type(items)
        return self.source_file.add_type_alias(self.model_info.name, f"Array<{item_type}>")

    def _process_intersection(self, schema: dict[str, Any]) -> InterfaceDeclaration:
        interface = self.source_file.add_interface(self.model_info.name)
        for member in schema["allOf"]:
            if is_reference(member):
                interface.add_extends(self.resolver.resolve_type(member))
            elif is_object(member):
                self._add_properties(interface, member)
        return interface

    def _add_properties(
        self, interface: InterfaceDeclaration, schema: dict[str, Any]
    ) -> None:
        required = set(schema.get("required") or [])
        for name, property_schema in (schema.get("properties") or {}).items():
            interface.set_property(
                PropertySignature(
                    name=resolve_property_name(name),
                    type=self.resolver.resolve_type(property_schema),
                    optional=name not in required,
                    docs=[] if is_reference(property_schema) else schema_jsdoc(property_schema),
                )
            )


def is_extendable(schema: dict[str, Any]) -> bool:
    """Whether every ``allOf`` member is a reference or an inline object."""
    return all(
        is_reference(member) or (isinstance(member, dict) and is_object(member))
        for member in schema["allOf"]
    )
