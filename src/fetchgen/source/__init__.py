"""Generated-source model: declarations, files and their rendering.

* :mod:`~fetchgen.source.declarations` -- Pydantic models for TypeScript
  declarations.
* :mod:`~fetchgen.source.source_file` -- :class:`SourceFile`, the mutable
  per-path container generators append to.
* :mod:`~fetchgen.source.jsdoc` -- Documentation lines derived from schemas.
* :mod:`~fetchgen.source.renderer` -- Jinja2 rendering and formatting.
"""

from fetchgen.source.renderer import format_source, render_source_file
from fetchgen.source.source_file import SourceFile

__all__ = ["SourceFile", "format_source", "render_source_file"]
