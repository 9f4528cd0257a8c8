"""Generate ``queryClient.ts`` for every aggregate.

Each file declares the aggregate's default ``QueryClientOptions``, a
``DOMAIN_EVENT_TYPES`` union of its event models and an exported
``<aggregate>QueryClientFactory`` typed with the state and fields models.
"""

from __future__ import annotations

from fetchgen import output
from fetchgen.aggregate.resolver import infer_resource_attribution
from fetchgen.client.decorators import aggregate_client_file_path
from fetchgen.context import Generator
from fetchgen.model.model_info import IMPORT_WOW_PATH, resolve_model_info
from fetchgen.model.type_resolver import quote
from fetchgen.models import AggregateDefinition
from fetchgen.naming import camel_case

QUERY_CLIENT_FILE_NAME = "queryClient"
DEFAULT_QUERY_CLIENT_OPTIONS = "DEFAULT_QUERY_CLIENT_OPTIONS"
DOMAIN_EVENT_TYPES = "DOMAIN_EVENT_TYPES"
NO_EVENTS_TYPE = "never"


class QueryClientGenerator(Generator):
    """Generate one query client factory per aggregate."""

    def generate(self) -> None:
        aggregates = [
            aggregate
            for aggregates in self.context.context_aggregates.values()
            for aggregate in aggregates
        ]
        output.progress(f"Generating query clients for {len(aggregates)} aggregates")
        for index, aggregate in enumerate(aggregates, start=1):
            output.progress_with_count(
                index,
                len(aggregates),
                f"Processing query client for aggregate: {aggregate.aggregate.aggregate_name}",
                1,
            )
            self.process_query_client(aggregate)
        output.success("Query client generation completed")

    def process_query_client(self, definition: AggregateDefinition) -> None:
        aggregate = definition.aggregate
        source_file = self.context.get_or_create_source_file(
            aggregate_client_file_path(aggregate, QUERY_CLIENT_FILE_NAME)
        )
        source_file.add_import(
            IMPORT_WOW_PATH,
            ["QueryClientFactory", "QueryClientOptions", "ResourceAttributionPathSpec"],
        )
        attribution = infer_resource_attribution(list(definition.commands.values()))
        source_file.add_variable(
            DEFAULT_QUERY_CLIENT_OPTIONS,
            "{\n"
            f"  contextAlias: {quote(aggregate.context_alias)},\n"
            f"  aggregateName: {quote(aggregate.aggregate_name)},\n"
            f"  resourceAttribution: ResourceAttributionPathSpec.{attribution.value},\n"
            "}",
            type_name="QueryClientOptions",
        )

        event_names = []
        for event in definition.events.values():
            event_model = resolve_model_info(event.schema_.key)
            source_file.add_model_import(event_model)
            event_names.append(event_model.name)
        source_file.add_type_alias(
            DOMAIN_EVENT_TYPES,
            " | ".join(event_names) or NO_EVENTS_TYPE,
            exported=False,
        )

        state_model = resolve_model_info(definition.state.key)
        fields_model = resolve_model_info(definition.fields.key)
        source_file.add_model_import(state_model)
        source_file.add_model_import(fields_model)
        source_file.add_variable(
            f"{camel_case(aggregate.aggregate_name)}QueryClientFactory",
            f"new QueryClientFactory<{state_model.name}, {fields_model.name} | string, "
            f"{DOMAIN_EVENT_TYPES}>({DEFAULT_QUERY_CLIENT_OPTIONS})",
            exported=True,
        )
