"""Run the whole pipeline: load, resolve, generate, render, save.

:class:`CodeGenerator` is the only entry point the CLI needs::

    from fetchgen.generator import CodeGenerator
    from fetchgen.models import GeneratorOptions

    report = CodeGenerator(GeneratorOptions(input_path="openapi.json")).generate()

The passes run in a fixed order on one
:class:`~fetchgen.context.GenerateContext`: models first, then the query,
command and API clients, then the barrel ``index.ts`` files.  Rendering and
saving happen only after every pass finished, so a run either writes a
complete tree or (on a load or configuration error) nothing at all.
"""

from __future__ import annotations

import posixpath
from pathlib import Path

from fetchgen import output
from fetchgen.aggregate import AggregateResolver, resolve_context_alias
from fetchgen.client import ApiClientGenerator, CommandClientGenerator, QueryClientGenerator
from fetchgen.config import atomic_write, load_generator_config
from fetchgen.context import GenerateContext, Generator
from fetchgen.exceptions import GenerationError, SaveError
from fetchgen.model import ModelGenerator
from fetchgen.models import GenerationReport, GeneratorOptions
from fetchgen.parser import load_document, validate_openapi_version
from fetchgen.source import render_source_file
from fetchgen.source.source_file import INDEX_FILE_NAME

GENERATOR_PASSES: list[type[Generator]] = [
    ModelGenerator,
    QueryClientGenerator,
    CommandClientGenerator,
    ApiClientGenerator,
]


class CodeGenerator:
    """Generate a TypeScript client tree from one OpenAPI document.

    Args:
        options: Input location, output directory, configuration path and
            dry-run flag.
    """

    def __init__(self, options: GeneratorOptions) -> None:
        self.options = options

    def generate(self) -> GenerationReport:
        """Run every pass and (unless dry-running) write the files.

        Returns:
            A report of the files produced and the schemas skipped.

        Raises:
            DocumentLoadError: If the input cannot be loaded or is not
                OpenAPI 3.x.
            ConfigError: If the configuration file is invalid.
            SaveError: If a file cannot be written.
            GenerationError: If any schema or operation was skipped.  The
                remaining files have been written by then.
        """
        output.info("Starting code generation...")
        context = self.create_context()

        for generator_class in GENERATOR_PASSES:
            generator_class(context).generate()
        self.generate_index(context)

        rendered = render_files(context)
        report = GenerationReport(
            output_dir=self.options.output_dir,
            files={
                source_file.path: len(source_file.declarations)
                for source_file in context.source_files
                if source_file.path in rendered
            },
            failures=list(context.failures),
        )

        if self.options.dry_run:
            output.info(f"Dry run: {len(rendered)} files would be written")
        else:
            self.save(rendered)
            report.saved = True
            output.success(
                f"Generated {len(rendered)} files in {self.options.output_dir}"
            )

        if report.failures:
            raise GenerationError(
                f"{len(report.failures)} schema(s) could not be generated: "
                + ", ".join(failure.key for failure in report.failures),
                report=report,
            )
        return report

    def create_context(self) -> GenerateContext:
        output.debug(f"Loading OpenAPI document from {self.options.input_path}")
        document = load_document(self.options.input_path)
        version = validate_openapi_version(document)
        output.debug(f"OpenAPI version: {version}")

        config = load_generator_config(
            self.options.config_path, explicit=self.options.config_path is not None
        )
        resolver = AggregateResolver(document)
        context_aggregates = resolver.resolve()
        output.info(
            f"Resolved {sum(len(a) for a in context_aggregates.values())} aggregates "
            f"in {len(context_aggregates)} bounded contexts"
        )
        return GenerateContext(
            document,
            self.options.output_dir,
            context_aggregates=context_aggregates,
            config=config,
            current_context_alias=resolve_context_alias(document),
        )

    # ------------------------------------------------------------------ #
    # Barrel files
    # ------------------------------------------------------------------ #

    def generate_index(self, context: GenerateContext) -> None:
        """Add an ``index.ts`` re-exporting every file and sub-directory.

        One barrel is created per directory holding generated files, and
        per ancestor of such a directory up to the output root.
        """
        files_by_dir: dict[str, set[str]] = {}
        subdirs_by_dir: dict[str, set[str]] = {}
        for source_file in context.source_files:
            if source_file.is_empty() or source_file.base_name == INDEX_FILE_NAME:
                continue
            directory = source_file.directory
            files_by_dir.setdefault(directory, set()).add(source_file.module_name)
            while directory:
                parent = posixpath.dirname(directory)
                subdirs_by_dir.setdefault(parent, set()).add(posixpath.basename(directory))
                files_by_dir.setdefault(parent, set())
                directory = parent

        output.progress(f"Generating index files for {len(files_by_dir)} directories")
        for directory in sorted(files_by_dir):
            exports = [
                f"export * from './{name}';"
                for name in sorted(files_by_dir[directory])
                + sorted(subdirs_by_dir.get(directory, ()))
            ]
            index_file = context.get_or_create_source_file(
                posixpath.join(directory, INDEX_FILE_NAME)
            )
            index_file.add_statement("\n".join(exports))
            output.debug(f"Generated index file: {index_file.path}")

    # ------------------------------------------------------------------ #
    # Saving
    # ------------------------------------------------------------------ #

    def save(self, rendered: dict[str, str]) -> None:
        """Write *rendered* files below the output directory.

        Raises:
            SaveError: If a file cannot be written.
        """
        root = Path(self.options.output_dir)
        for relative_path, content in rendered.items():
            target = root / relative_path
            try:
                atomic_write(target, content)
            except OSError as exc:
                raise SaveError(f"Failed to write {target}: {exc}") from exc
            output.debug(f"Wrote {target}")


def render_files(context: GenerateContext) -> dict[str, str]:
    """Render every non-empty file of *context*, keyed by its path."""
    return {
        source_file.path: render_source_file(source_file)
        for source_file in context.source_files
        if not source_file.is_empty()
    }
