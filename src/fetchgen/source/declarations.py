"""In-memory declaration model of a generated TypeScript file.

Generators never concatenate source text.  They add declarations to a
:class:`~fetchgen.source.source_file.SourceFile`, look them up again by name
(for instance to add an ``extends`` clause or a property to an existing
interface), and leave rendering to :mod:`fetchgen.source.renderer`.

Each declaration model carries a ``kind`` discriminator matching its
template under ``templates/declarations/``.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class ImportDeclaration(BaseModel):
    """``import { a, b } from 'module';`` (``import type`` when ``type_only``).

    Individual names may carry an inline ``type`` modifier, e.g.
    ``"type ApiMetadata"``.
    """

    module_specifier: str
    named_imports: list[str] = Field(default_factory=list)
    type_only: bool = False

    @property
    def is_relative(self) -> bool:
        return self.module_specifier.startswith(".")

    def has_named_import(self, name: str) -> bool:
        bare = bare_import_name(name)
        return any(bare_import_name(existing) == bare for existing in self.named_imports)


class EnumMember(BaseModel):
    name: str
    initializer: str


class EnumDeclaration(BaseModel):
    kind: Literal["enum"] = "enum"
    name: str
    exported: bool = True
    members: list[EnumMember] = Field(default_factory=list)
    docs: list[str] = Field(default_factory=list)


class PropertySignature(BaseModel):
    name: str
    type: str
    optional: bool = False
    docs: list[str] = Field(default_factory=list)


class IndexSignature(BaseModel):
    key_name: str = "key"
    key_type: str = "string"
    return_type: str
    docs: list[str] = Field(default_factory=list)


class InterfaceDeclaration(BaseModel):
    kind: Literal["interface"] = "interface"
    name: str
    exported: bool = True
    extends: list[str] = Field(default_factory=list)
    properties: list[PropertySignature] = Field(default_factory=list)
    index_signature: Optional[IndexSignature] = None
    docs: list[str] = Field(default_factory=list)

    def get_property(self, name: str) -> Optional[PropertySignature]:
        return next((p for p in self.properties if p.name == name), None)

    def add_extends(self, type_name: str) -> None:
        if type_name not in self.extends:
            self.extends.append(type_name)

    def set_property(self, prop: PropertySignature) -> PropertySignature:
        """Add *prop*, replacing an existing property of the same name in place."""
        for index, existing in enumerate(self.properties):
            if existing.name == prop.name:
                self.properties[index] = prop
                return prop
        self.properties.append(prop)
        return prop


class TypeAliasDeclaration(BaseModel):
    kind: Literal["type_alias"] = "type_alias"
    name: str
    type: str
    exported: bool = True
    docs: list[str] = Field(default_factory=list)


class VariableStatement(BaseModel):
    """A ``const`` declaration."""

    kind: Literal["variable"] = "variable"
    name: str
    initializer: str
    type: Optional[str] = None
    exported: bool = False
    docs: list[str] = Field(default_factory=list)


class Decorator(BaseModel):
    name: str
    arguments: list[str] = Field(default_factory=list)


class ParameterDeclaration(BaseModel):
    name: str
    type: str
    optional: bool = False
    decorators: list[Decorator] = Field(default_factory=list)
    scope: Optional[str] = None
    readonly: bool = False
    initializer: Optional[str] = None


class MethodDeclaration(BaseModel):
    name: str
    decorators: list[Decorator] = Field(default_factory=list)
    parameters: list[ParameterDeclaration] = Field(default_factory=list)
    return_type: Optional[str] = None
    statements: list[str] = Field(default_factory=list)
    docs: list[str] = Field(default_factory=list)


class ConstructorDeclaration(BaseModel):
    parameters: list[ParameterDeclaration] = Field(default_factory=list)


class ClassDeclaration(BaseModel):
    kind: Literal["class"] = "class"
    name: str
    exported: bool = True
    decorators: list[Decorator] = Field(default_factory=list)
    implements: list[str] = Field(default_factory=list)
    ctor: Optional[ConstructorDeclaration] = None
    methods: list[MethodDeclaration] = Field(default_factory=list)
    docs: list[str] = Field(default_factory=list)

    def get_method(self, name: str) -> Optional[MethodDeclaration]:
        return next((m for m in self.methods if m.name == name), None)

    def has_method(self, name: str) -> bool:
        return self.get_method(name) is not None


class Statement(BaseModel):
    """Verbatim source text (barrel exports, bounded-context constants)."""

    kind: Literal["statement"] = "statement"
    text: str


Declaration = Union[
    EnumDeclaration,
    InterfaceDeclaration,
    TypeAliasDeclaration,
    VariableStatement,
    ClassDeclaration,
    Statement,
]


def bare_import_name(name: str) -> str:
    return name[len("type "):] if name.startswith("type ") else name
