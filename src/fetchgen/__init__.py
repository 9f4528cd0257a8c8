"""fetchgen -- Generate typed TypeScript clients from OpenAPI 3.x documents.

This package compiles an OpenAPI document, optionally carrying the domain
aggregate conventions of a Wow service (bounded contexts, aggregates,
commands, domain events), into a source tree of model declarations and
decorator-based API, query and command clients for the
``@ahoo-wang/fetcher`` runtime.

Typical workflow::

    fetchgen generate --input http://localhost:8080/v3/api-docs \\
        --output src/generated

Modules:
    app: Typer application and CLI entry point.
    generator: The :class:`~fetchgen.generator.CodeGenerator` orchestrator.
    context: Per-run generation context and the shared source-file cache.
    models: Pydantic models shared across the entire package.
    naming: Identifier case conversion helpers.
    schemas: Schema node classification.
    config: Generator configuration loading.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.3.0"
