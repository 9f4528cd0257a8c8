"""Generate model declarations for the component schemas of a document.

:class:`ModelGenerator` walks ``components.schemas`` in declaration order and
adds one declaration per schema to the ``types.ts`` file of its resolved
path (see :mod:`fetchgen.model.model_info`).  Framework schemas and the
query/snapshot wrappers derived from each aggregate state are skipped
(:meth:`ModelGenerator.is_wow_schema`), and one ``boundedContext.ts`` file
is created per bounded context.

A schema that cannot be generated (broken reference, inline cycle, name
collision) is rolled back out of its file and recorded on the context; the
batch carries on with the next schema.
"""

from __future__ import annotations

from fetchgen import output
from fetchgen.context import GenerateContext, Generator
from fetchgen.exceptions import (
    CyclicSchemaError,
    NamingCollisionError,
    SchemaResolutionError,
)
from fetchgen.model.model_info import (
    resolve_context_declaration_name,
    resolve_model_info,
)
from fetchgen.model.type_generator import TypeGenerator
from fetchgen.model.type_resolver import quote
from fetchgen.models import KeySchema, ModelInfo
from fetchgen.naming import pascal_case
from fetchgen.parser.components import get_schemas
from fetchgen.source.source_file import model_file_path

WOW_PREFIX = "wow."
WOW_QUERY_PREFIX = "wow.api.query."
WOW_PAGED_LIST_KEY = "wow.api.query.PagedList"
PAGED_LIST_SUFFIX = "PagedList"

BOUNDED_CONTEXT_FILE_NAME = "boundedContext.ts"

AGGREGATED_SCHEMA_SUFFIXES = (
    "AggregatedCondition",
    "AggregatedDomainEventStream",
    "AggregatedDomainEventStreamPagedList",
    "AggregatedDomainEventStreamServerSentEventNonNullData",
    "AggregatedListQuery",
    "AggregatedPagedQuery",
    "AggregatedSingleQuery",
)
"""Key suffixes of query wrappers the framework package already declares."""

STATE_AGGREGATED_SUFFIXES = (
    "MaterializedSnapshot",
    "MaterializedSnapshotPagedList",
    "MaterializedSnapshotServerSentEventNonNullData",
    "PagedList",
    "ServerSentEventNonNullData",
    "Snapshot",
    "StateEvent",
)
"""Suffixes appended to an aggregate state name for its generic wrappers."""


class ModelGenerator(Generator):
    """Generate ``types.ts`` declarations for every eligible component schema."""

    def __init__(self, context: GenerateContext) -> None:
        super().__init__(context)
        self._claimed: dict[tuple[str, str], str] = {}

    def generate(self) -> None:
        schemas = get_schemas(self.context.document)
        if not schemas:
            output.info("No schemas found in OpenAPI document")
            return

        for context_alias in self.context.context_aggregates:
            self.generate_bounded_context(context_alias)

        state_type_names = self.state_aggregated_type_names()
        key_schemas = [
            KeySchema(key=key, schema=schema)
            for key, schema in schemas.items()
            if isinstance(schema, dict) and not self.is_wow_schema(key, state_type_names)
        ]
        output.progress(f"Generating models for {len(key_schemas)} schemas")
        for index, key_schema in enumerate(key_schemas, start=1):
            output.progress_with_count(
                index, len(key_schemas), f"Processing schema: {key_schema.key}", 2
            )
            self.generate_key_schema(key_schema)
        output.success("Model generation completed")

    def generate_key_schema(self, key_schema: KeySchema) -> None:
        """Generate one schema, recording (not raising) resolution failures."""
        model_info = resolve_model_info(key_schema.key)
        source_file = self.context.get_or_create_source_file(model_file_path(model_info))
        snapshot = source_file.snapshot()
        try:
            self._claim(key_schema.key, model_info)
            TypeGenerator(
                model_info, source_file, key_schema, self.context.document
            ).generate()
        except (SchemaResolutionError, CyclicSchemaError, NamingCollisionError) as exc:
            source_file.restore(snapshot)
            self.context.record_failure(key_schema.key, exc)

    def generate_bounded_context(self, context_alias: str) -> None:
        file_path = f"{context_alias}/{BOUNDED_CONTEXT_FILE_NAME}"
        output.info(f"Creating bounded context file: {file_path}")
        source_file = self.context.get_or_create_source_file(file_path)
        source_file.add_variable(
            resolve_context_declaration_name(context_alias),
            quote(context_alias),
            exported=True,
        )

    def state_aggregated_type_names(self) -> set[str]:
        """Names of the generic wrappers derived from every aggregate state."""
        names: set[str] = set()
        for aggregates in self.context.context_aggregates.values():
            for aggregate in aggregates:
                state_name = pascal_case(resolve_model_info(aggregate.state.key).name)
                names.update(state_name + suffix for suffix in STATE_AGGREGATED_SUFFIXES)
        return names

    @staticmethod
    def is_wow_schema(schema_key: str, state_type_names: set[str]) -> bool:
        """Whether *schema_key* is skipped because the framework declares it.

        ``wow.api.query.*PagedList`` keys are kept (except the generic
        ``wow.api.query.PagedList`` itself); every other ``wow.`` key is
        skipped, as are the aggregated query wrappers and the wrappers
        derived from aggregate states.
        """
        if (
            schema_key != WOW_PAGED_LIST_KEY
            and schema_key.startswith(WOW_QUERY_PREFIX)
            and schema_key.endswith(PAGED_LIST_SUFFIX)
        ):
            return False
        if schema_key.startswith(WOW_PREFIX) or schema_key.endswith(AGGREGATED_SCHEMA_SUFFIXES):
            return True
        return resolve_model_info(schema_key).name in state_type_names

    def _claim(self, schema_key: str, model_info: ModelInfo) -> None:
        slot = (model_info.path, model_info.name)
        existing = self._claimed.get(slot)
        if existing is not None:
            raise NamingCollisionError(existing, schema_key, model_info.name, model_info.path)
        self._claimed[slot] = schema_key
