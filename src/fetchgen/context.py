"""Per-run generation state shared by every generator.

A :class:`GenerateContext` is created once by
:class:`~fetchgen.generator.CodeGenerator` and handed to each
:class:`Generator`.  It owns:

* the parsed document and the aggregates resolved from it;
* the generator configuration;
* the path-keyed cache of :class:`~fetchgen.source.source_file.SourceFile`
  objects, so that every generator writing to the same path appends to the
  same file;
* the failures recorded while generating.

Nothing in the context outlives the run.
"""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from typing import Any, Optional

from fetchgen import output
from fetchgen.models import BoundedContextAggregates, GeneratorConfig, SchemaFailure
from fetchgen.source.source_file import SourceFile, normalize_file_path


class GenerateContext:
    """Shared state of one generation run.

    Args:
        document: The parsed OpenAPI document.
        output_dir: Output root the generated tree is written to.
        context_aggregates: Aggregates grouped by bounded-context alias.
        config: Generator configuration (defaults when omitted).
        current_context_alias: Document-level bounded-context alias, used as
            the directory prefix of API client files.
    """

    def __init__(
        self,
        document: dict[str, Any],
        output_dir: str,
        context_aggregates: Optional[BoundedContextAggregates] = None,
        config: Optional[GeneratorConfig] = None,
        current_context_alias: Optional[str] = None,
    ) -> None:
        self.document = document
        self.output_dir = output_dir
        self.context_aggregates: BoundedContextAggregates = context_aggregates or {}
        self.config = config or GeneratorConfig()
        self.current_context_alias = current_context_alias
        self.failures: list[SchemaFailure] = []
        self._source_files: dict[str, SourceFile] = {}

    def get_or_create_source_file(self, file_path: str) -> SourceFile:
        """Return the file for *file_path*, creating it on first use.

        Paths are normalized first, so ``"a//b.ts"`` and ``"/a/b.ts"`` name
        the same file.
        """
        key = normalize_file_path(file_path)
        source_file = self._source_files.get(key)
        if source_file is None:
            source_file = SourceFile(key)
            self._source_files[key] = source_file
        return source_file

    @property
    def source_files(self) -> list[SourceFile]:
        """All files created so far, in creation order."""
        return list(self._source_files.values())

    def context_file_path(self, *parts: str) -> str:
        """Join *parts* below the document-level context alias (if any).

        Leading slashes of *parts* are dropped, so model paths such as
        ``/order`` stay below the alias.
        """
        relative = [part.lstrip("/") for part in parts]
        return normalize_file_path(posixpath.join(self.current_context_alias or "", *relative))

    def ignored_path_parameters(self, tag_names: list[str]) -> list[str]:
        return self.config.ignored_path_parameters(tag_names)

    def record_failure(self, key: str, exc: Exception) -> SchemaFailure:
        """Log and remember that *key* could not be generated."""
        failure = SchemaFailure(key=key, reason=str(exc))
        self.failures.append(failure)
        output.error(f"Skipping {key}: {exc}")
        return failure


class Generator(ABC):
    """A generation pass over a :class:`GenerateContext`."""

    def __init__(self, context: GenerateContext) -> None:
        self.context = context

    @abstractmethod
    def generate(self) -> None:
        """Add this pass's declarations to the context's files."""
