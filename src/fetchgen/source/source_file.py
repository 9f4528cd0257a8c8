"""A generated file under construction.

A :class:`SourceFile` is keyed by its output-relative path and owns an ordered
list of import declarations and an ordered list of declarations.  Files are
shared: every generator asking the
:class:`~fetchgen.context.GenerateContext` for the same path receives the
same instance and appends to it.

Imports are merged per module specifier and never repeat a name, no matter
how many declarations in the file refer to the same model.
"""

from __future__ import annotations

import posixpath
from typing import Optional

from fetchgen.models import ModelInfo
from fetchgen.source.declarations import (
    ClassDeclaration,
    Declaration,
    EnumDeclaration,
    EnumMember,
    ImportDeclaration,
    InterfaceDeclaration,
    Statement,
    TypeAliasDeclaration,
    VariableStatement,
    bare_import_name,
)

MODEL_FILE_NAME = "types.ts"
"""File holding the model declarations of one resolved path."""

INDEX_FILE_NAME = "index.ts"


def normalize_file_path(file_path: str) -> str:
    """Normalize an output-relative path: POSIX separators, no leading ``/`` or ``./``.

    Example::

        >>> normalize_file_path("example//cart/../cart/queryClient.ts")
        'example/cart/queryClient.ts'
    """
    normalized = posixpath.normpath(file_path.replace("\\", "/")).lstrip("/")
    return "" if normalized == "." else normalized


def model_file_path(model_info: ModelInfo) -> str:
    """Output-relative path of the ``types.ts`` file declaring *model_info*."""
    return normalize_file_path(posixpath.join(model_info.path, MODEL_FILE_NAME))


class SourceFile:
    """Declarations and imports of one generated file.

    Args:
        path: Output-relative file path (normalized by
            :func:`normalize_file_path`).
    """

    def __init__(self, path: str) -> None:
        self.path = normalize_file_path(path)
        self.imports: list[ImportDeclaration] = []
        self.declarations: list[Declaration] = []

    def __repr__(self) -> str:
        return f"SourceFile({self.path!r}, declarations={len(self.declarations)})"

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def base_name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def module_name(self) -> str:
        """File name without the ``.ts`` extension, as used in import specifiers."""
        return posixpath.splitext(self.base_name)[0]

    def is_empty(self) -> bool:
        return not self.imports and not self.declarations

    def snapshot(self) -> tuple[int, list[ImportDeclaration]]:
        """Capture the current contents, to be put back with :meth:`restore`."""
        return len(self.declarations), [imp.model_copy(deep=True) for imp in self.imports]

    def restore(self, snapshot: tuple[int, list[ImportDeclaration]]) -> None:
        """Drop everything added since *snapshot* was taken."""
        count, imports = snapshot
        del self.declarations[count:]
        self.imports = imports

    # ------------------------------------------------------------------ #
    # Imports
    # ------------------------------------------------------------------ #

    def get_import(self, module_specifier: str) -> Optional[ImportDeclaration]:
        return next(
            (imp for imp in self.imports if imp.module_specifier == module_specifier),
            None,
        )

    def add_import(
        self,
        module_specifier: str,
        named_imports: list[str],
        type_only: bool = False,
    ) -> ImportDeclaration:
        """Import *named_imports* from *module_specifier*, reusing an existing declaration.

        Names already imported from the module are skipped.  A type-only
        declaration that receives a new value import loses its ``type``
        modifier.
        """
        declaration = self.get_import(module_specifier)
        if declaration is None:
            declaration = ImportDeclaration(
                module_specifier=module_specifier, type_only=type_only
            )
            self.imports.append(declaration)
        for name in named_imports:
            if declaration.has_named_import(name):
                continue
            declaration.named_imports.append(name)
            if declaration.type_only and not type_only:
                declaration.type_only = False
        return declaration

    def add_model_import(self, model_info: ModelInfo) -> None:
        """Import the declaration described by *model_info* into this file.

        External framework types are imported from their package; generated
        models are imported from their ``types`` file with a relative
        specifier (``./types``, ``../order/types``).  Nothing is imported
        when the model is declared in this very file.
        """
        if model_info.is_external:
            self.add_import(model_info.path, [model_info.name])
            return
        target = model_file_path(model_info)
        if target == self.path:
            return
        relative = posixpath.relpath(
            posixpath.splitext(target)[0], start=self.directory or "."
        )
        if not relative.startswith("."):
            relative = "./" + relative
        self.add_import(relative, [model_info.name])

    def organize_imports(self) -> None:
        """Sort imports: packages before relative modules, names alphabetically."""
        for declaration in self.imports:
            declaration.named_imports.sort(key=bare_import_name)
        self.imports.sort(key=lambda imp: (imp.is_relative, imp.module_specifier))

    # ------------------------------------------------------------------ #
    # Declarations
    # ------------------------------------------------------------------ #

    def get_declaration(self, name: str) -> Optional[Declaration]:
        return next(
            (
                decl
                for decl in self.declarations
                if not isinstance(decl, Statement) and decl.name == name
            ),
            None,
        )

    def declaration_names(self) -> list[str]:
        return [
            decl.name for decl in self.declarations if not isinstance(decl, Statement)
        ]

    def get_interface(self, name: str) -> Optional[InterfaceDeclaration]:
        decl = self.get_declaration(name)
        return decl if isinstance(decl, InterfaceDeclaration) else None

    def get_class(self, name: str) -> Optional[ClassDeclaration]:
        decl = self.get_declaration(name)
        return decl if isinstance(decl, ClassDeclaration) else None

    def add_enum(
        self, name: str, members: list[EnumMember], exported: bool = True
    ) -> EnumDeclaration:
        return self._add(EnumDeclaration(name=name, members=members, exported=exported))

    def add_interface(self, name: str, exported: bool = True) -> InterfaceDeclaration:
        return self._add(InterfaceDeclaration(name=name, exported=exported))

    def add_type_alias(
        self, name: str, type_expression: str, exported: bool = True
    ) -> TypeAliasDeclaration:
        return self._add(
            TypeAliasDeclaration(name=name, type=type_expression, exported=exported)
        )

    def add_variable(
        self,
        name: str,
        initializer: str,
        type_name: Optional[str] = None,
        exported: bool = False,
    ) -> VariableStatement:
        return self._add(
            VariableStatement(
                name=name, initializer=initializer, type=type_name, exported=exported
            )
        )

    def add_class(self, declaration: ClassDeclaration) -> ClassDeclaration:
        return self._add(declaration)

    def add_statement(self, text: str) -> Statement:
        return self._add(Statement(text=text))

    def _add(self, declaration):
        self.declarations.append(declaration)
        return declaration
