"""Render :class:`~fetchgen.source.source_file.SourceFile` objects to TypeScript.

Rendering has two steps:

1. Every declaration is rendered through its own Jinja2 template under
   ``templates/declarations/`` (the template name is the declaration's
   ``kind``), and the file template stitches imports and declaration blocks
   together.
2. :func:`format_source` normalises whitespace: trailing blanks are
   stripped, runs of blank lines collapsed and exactly one final newline
   kept.

Small, reusable pieces of syntax (JSDoc blocks, decorators, parameter
lists) are Jinja2 filters defined here so the templates stay declarative.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from fetchgen.source.declarations import (
    Decorator,
    ImportDeclaration,
    ParameterDeclaration,
    PropertySignature,
)
from fetchgen.source.source_file import SourceFile

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``source/templates/``)."""

INDENT = "  "

_BLANK_LINES_RE = re.compile(r"\n{3,}")

_env: Optional[Environment] = None


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for TypeScript templates.

    Autoescape is disabled for ``.ts.j2`` files, which produce source code,
    not HTML.  Block trimming and lstrip keep the templates readable.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("ts.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["jsdoc"] = render_jsdoc
    env.filters["decorator"] = render_decorator
    env.filters["parameter"] = render_parameter
    env.filters["signature"] = render_signature
    env.filters["property"] = render_property
    env.filters["import_statement"] = render_import
    return env


def get_environment() -> Environment:
    global _env
    if _env is None:
        _env = _create_jinja_env()
    return _env


# ------------------------------------------------------------------ #
# Filters
# ------------------------------------------------------------------ #


def render_jsdoc(docs: list[str], indent: int = 0) -> str:
    """Render documentation lines as a JSDoc comment.

    A single line becomes ``/** line */``; anything longer becomes a block
    with one `` * `` prefixed line per entry.  Entries containing newlines
    are split.  Returns ``""`` when there is nothing to document.

    Args:
        docs: Documentation lines.
        indent: Indentation level (two spaces each) of the comment.
    """
    lines: list[str] = []
    for doc in docs:
        lines.extend(doc.replace("*/", "*\\/").splitlines() or [""])
    if not lines:
        return ""
    prefix = INDENT * indent
    if len(lines) == 1:
        return f"{prefix}/** {lines[0]} */"
    body = "\n".join(f"{prefix} * {line}".rstrip() for line in lines)
    return f"{prefix}/**\n{body}\n{prefix} */"


def render_decorator(decorator: Decorator) -> str:
    return f"@{decorator.name}({', '.join(decorator.arguments)})"


def render_parameter(parameter: ParameterDeclaration) -> str:
    """Render one parameter, e.g. ``@path('id') id: string``."""
    parts = [render_decorator(d) for d in parameter.decorators]
    if parameter.scope:
        parts.append(parameter.scope)
    if parameter.readonly:
        parts.append("readonly")
    optional = "?" if parameter.optional and parameter.initializer is None else ""
    text = f"{parameter.name}{optional}: {parameter.type}"
    if parameter.initializer is not None:
        text += f" = {parameter.initializer}"
    parts.append(text)
    return " ".join(parts)


def render_signature(parameters: list[ParameterDeclaration], indent: int = 1) -> str:
    """Render a parenthesised parameter list.

    Parameters without decorators stay on one line; decorated parameters
    are put one per line with a trailing comma.
    """
    if not parameters:
        return "()"
    rendered = [render_parameter(p) for p in parameters]
    if not any(p.decorators for p in parameters):
        return f"({', '.join(rendered)})"
    inner = INDENT * (indent + 1)
    body = "".join(f"{inner}{text},\n" for text in rendered)
    return f"(\n{body}{INDENT * indent})"


def render_property(prop: PropertySignature) -> str:
    optional = "?" if prop.optional else ""
    return f"{prop.name}{optional}: {prop.type};"


def render_import(declaration: ImportDeclaration) -> str:
    keyword = "import type" if declaration.type_only else "import"
    names = ", ".join(declaration.named_imports)
    return f"{keyword} {{ {names} }} from '{declaration.module_specifier}';"


# ------------------------------------------------------------------ #
# Files
# ------------------------------------------------------------------ #


def render_source_file(source_file: SourceFile) -> str:
    """Render *source_file* to formatted TypeScript text.

    Imports are organized first (see
    :meth:`~fetchgen.source.source_file.SourceFile.organize_imports`).
    """
    env = get_environment()
    source_file.organize_imports()
    blocks = [
        env.get_template(f"declarations/{decl.kind}.ts.j2").render(decl=decl).strip("\n")
        for decl in source_file.declarations
    ]
    text = env.get_template("source_file.ts.j2").render(
        imports=[imp for imp in source_file.imports if imp.named_imports],
        blocks=blocks,
    )
    return format_source(text)


def format_source(text: str) -> str:
    """Normalise whitespace of generated source text.

    Example::

        >>> format_source("a;  \\n\\n\\n\\nb;")
        'a;\\n\\nb;\\n'
    """
    lines = [line.rstrip() for line in text.splitlines()]
    collapsed = _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip("\n")
    return f"{collapsed}\n" if collapsed else ""
