"""Recognise Wow domain aggregates in an OpenAPI document.

Aggregates are declared by tags named ``<contextAlias>.<aggregateName>``.
Their members are found by structural conventions on the operations
carrying such a tag:

* **command** -- operationId ``<ctx>.<agg>.<command>`` (exactly three dot
  parts), a ``200`` response referencing ``#/components/responses/wow.CommandOk``
  and a JSON request body referencing the command schema.  Path parameters
  are the inline ``in: path`` parameters plus the shared
  ``#/components/parameters/wow.id`` when referenced.
* **state** -- operationId ending ``.snapshot_state.single`` whose ``200``
  JSON schema references the state schema.
* **events** -- operationId ending ``.event.list_query`` whose ``200`` JSON
  schema is an array of references to the event stream schema; the events
  are the ``anyOf`` members of ``properties.body.items`` of that schema.
* **fields** -- operationId ending ``.snapshot.count`` whose request body
  references a condition schema, whose ``properties.field`` references the
  fields enum.

Aggregates for which no state or no fields schema was found are dropped.

Example::

    resolver = AggregateResolver(document)
    context_aggregates = resolver.resolve()
    for alias, aggregates in context_aggregates.items():
        print(alias, [a.aggregate.aggregate_name for a in aggregates])
"""

from __future__ import annotations

from typing import Any, Optional

from fetchgen import output
from fetchgen.exceptions import SchemaResolutionError
from fetchgen.models import (
    AggregateDefinition,
    BoundedContextAggregates,
    CommandDefinition,
    EventDefinition,
    KeySchema,
    ResourceAttribution,
    TagAliasAggregate,
    TagInfo,
)
from fetchgen.parser.components import (
    COMPONENTS_PARAMETERS_REF,
    COMPONENTS_RESPONSES_REF,
    key_schema,
    resolve_ref,
)
from fetchgen.parser.operations import (
    APPLICATION_JSON,
    OperationEndpoint,
    extract_content_schema,
    extract_ok_response,
    extract_operation_ok_response_json_schema,
    extract_request_body,
    iter_operation_endpoints,
)
from fetchgen.schemas import is_reference

COMMAND_OK_RESPONSE_REF = f"{COMPONENTS_RESPONSES_REF}wow.CommandOk"
ID_PARAMETER_REF = f"{COMPONENTS_PARAMETERS_REF}wow.id"
CONTEXT_ALIAS_EXTENSION = "x-wow-context-alias"

STATE_OPERATION_SUFFIX = ".snapshot_state.single"
EVENTS_OPERATION_SUFFIX = ".event.list_query"
FIELDS_OPERATION_SUFFIX = ".snapshot.count"

TENANT_PATH_PREFIX = "tenant/{tenantId}"
OWNER_PATH_PREFIX = "owner/{ownerId}"


def is_alias_aggregate(tag_name: str) -> Optional[tuple[str, str]]:
    """Split an aggregate tag into ``(context_alias, aggregate_name)``.

    Returns ``None`` unless *tag_name* has exactly two non-empty dot parts.

    Example::

        >>> is_alias_aggregate("example.cart")
        ('example', 'cart')
        >>> is_alias_aggregate("example.cart.item") is None
        True
    """
    parts = tag_name.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def tag_to_aggregate(tag: TagInfo) -> Optional[TagAliasAggregate]:
    parts = is_alias_aggregate(tag.name)
    if parts is None:
        return None
    return TagAliasAggregate(tag=tag, context_alias=parts[0], aggregate_name=parts[1])


def tags_to_aggregates(tags: list[TagInfo]) -> dict[str, TagAliasAggregate]:
    """Map every aggregate tag name to its :class:`TagAliasAggregate`."""
    aggregates: dict[str, TagAliasAggregate] = {}
    for tag in tags:
        aggregate = tag_to_aggregate(tag)
        if aggregate is not None:
            aggregates[tag.name] = aggregate
    return aggregates


def document_tags(document: dict[str, Any]) -> list[TagInfo]:
    """Return the tags declared at the document level."""
    return [
        TagInfo(name=tag["name"], description=tag.get("description"))
        for tag in document.get("tags") or []
        if isinstance(tag, dict) and tag.get("name")
    ]


def resolve_context_alias(document: dict[str, Any]) -> Optional[str]:
    """Return the document-level bounded-context alias (``info.x-wow-context-alias``)."""
    alias = (document.get("info") or {}).get(CONTEXT_ALIAS_EXTENSION)
    return alias or None


def operation_id_to_command_name(operation_id: Optional[str]) -> Optional[str]:
    """Return the command part of ``<ctx>.<agg>.<command>``, else ``None``."""
    if not operation_id:
        return None
    parts = operation_id.split(".")
    if len(parts) != 3:
        return None
    return parts[2]


def infer_resource_attribution(commands: list[CommandDefinition]) -> ResourceAttribution:
    """Infer how an aggregate's endpoints are scoped from its command paths.

    Paths (leading ``/`` ignored) starting with ``tenant/{tenantId}`` vote
    for TENANT, those starting with ``owner/{ownerId}`` for OWNER.  TENANT
    needs a strict majority; any owner-scoped path otherwise makes it OWNER,
    and no scoped path at all NONE.
    """
    tenant_count = owner_count = 0
    for command in commands:
        path = command.path.lstrip("/")
        if path.startswith(TENANT_PATH_PREFIX):
            tenant_count += 1
        elif path.startswith(OWNER_PATH_PREFIX):
            owner_count += 1
    if tenant_count > owner_count:
        return ResourceAttribution.TENANT
    if owner_count > 0:
        return ResourceAttribution.OWNER
    return ResourceAttribution.NONE


class _AggregateBuilder:
    """Mutable accumulator for one aggregate while operations are scanned."""

    def __init__(self, aggregate: TagAliasAggregate) -> None:
        self.aggregate = aggregate
        self.commands: dict[str, CommandDefinition] = {}
        self.events: dict[str, EventDefinition] = {}
        self.state: Optional[KeySchema] = None
        self.fields: Optional[KeySchema] = None

    def build(self) -> Optional[AggregateDefinition]:
        if self.state is None or self.fields is None:
            return None
        return AggregateDefinition(
            aggregate=self.aggregate,
            commands=self.commands,
            events=self.events,
            state=self.state,
            fields=self.fields,
        )


class AggregateResolver:
    """Resolve the aggregates of *document*.

    Args:
        document: The parsed OpenAPI document.
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document
        self._builders = {
            name: _AggregateBuilder(aggregate)
            for name, aggregate in tags_to_aggregates(document_tags(document)).items()
        }
        self._build()

    @property
    def aggregate_tag_names(self) -> set[str]:
        return set(self._builders)

    def resolve(self) -> BoundedContextAggregates:
        """Return complete aggregates grouped by bounded-context alias."""
        context_aggregates: BoundedContextAggregates = {}
        for tag_name, builder in self._builders.items():
            definition = builder.build()
            if definition is None:
                output.warning(
                    f"Skipping aggregate {tag_name}: no state or fields schema found"
                )
                continue
            context_aggregates.setdefault(builder.aggregate.context_alias, []).append(definition)
        return context_aggregates

    # ------------------------------------------------------------------ #
    # Scanning
    # ------------------------------------------------------------------ #

    def _build(self) -> None:
        for endpoint in iter_operation_endpoints(self.document):
            if not any(tag in self._builders for tag in endpoint.tags):
                continue
            try:
                self._commands(endpoint)
                self._state(endpoint)
                self._events(endpoint)
                self._fields(endpoint)
            except SchemaResolutionError as exc:
                output.warning(
                    f"Ignoring operation {endpoint.operation_id or endpoint.path}: {exc}"
                )

    def _builders_for(self, endpoint: OperationEndpoint) -> list[_AggregateBuilder]:
        return [self._builders[tag] for tag in endpoint.tags if tag in self._builders]

    def _commands(self, endpoint: OperationEndpoint) -> None:
        operation = endpoint.operation
        command_name = operation_id_to_command_name(endpoint.operation_id)
        if command_name is None:
            return
        ok_response = extract_ok_response(operation)
        if not is_reference(ok_response) or ok_response["$ref"] != COMMAND_OK_RESPONSE_REF:
            return
        request_body = extract_request_body(operation, self.document)
        command_schema = extract_content_schema(request_body, APPLICATION_JSON)
        if not is_reference(command_schema):
            return

        parameters = operation.get("parameters") or []
        path_parameters = [
            p for p in parameters if not is_reference(p) and p.get("in") == "path"
        ]
        if any(is_reference(p) and p["$ref"] == ID_PARAMETER_REF for p in parameters):
            path_parameters.append(resolve_ref(ID_PARAMETER_REF, self.document))

        command = CommandDefinition(
            name=command_name,
            method=endpoint.method,
            path=endpoint.path,
            path_parameters=path_parameters,
            summary=operation.get("summary"),
            description=operation.get("description"),
            schema=key_schema(command_schema, self.document),
            operation=operation,
        )
        for builder in self._builders_for(endpoint):
            builder.commands[command_name] = command

    def _state(self, endpoint: OperationEndpoint) -> None:
        if not (endpoint.operation_id or "").endswith(STATE_OPERATION_SUFFIX):
            return
        state_schema = extract_operation_ok_response_json_schema(endpoint.operation)
        if not is_reference(state_schema):
            return
        state = key_schema(state_schema, self.document)
        for builder in self._builders_for(endpoint):
            builder.state = state

    def _events(self, endpoint: OperationEndpoint) -> None:
        if not (endpoint.operation_id or "").endswith(EVENTS_OPERATION_SUFFIX):
            return
        stream_array_schema = extract_operation_ok_response_json_schema(endpoint.operation)
        if not stream_array_schema or is_reference(stream_array_schema):
            return
        stream_ref = stream_array_schema.get("items")
        if not is_reference(stream_ref):
            return
        stream_schema = resolve_ref(stream_ref["$ref"], self.document)
        body_items = (
            ((stream_schema.get("properties") or {}).get("body") or {}).get("items") or {}
        )
        events: list[EventDefinition] = []
        for domain_event in body_items.get("anyOf") or []:
            properties = domain_event.get("properties") or {}
            name = (properties.get("name") or {}).get("const")
            body = properties.get("body")
            if not name or not is_reference(body):
                continue
            events.append(
                EventDefinition(
                    name=name,
                    title=domain_event.get("title"),
                    schema=key_schema(body, self.document),
                )
            )
        for builder in self._builders_for(endpoint):
            for event in events:
                builder.events[event.name] = event

    def _fields(self, endpoint: OperationEndpoint) -> None:
        if not (endpoint.operation_id or "").endswith(FIELDS_OPERATION_SUFFIX):
            return
        request_body = extract_request_body(endpoint.operation, self.document)
        condition_ref = extract_content_schema(request_body, APPLICATION_JSON)
        if not is_reference(condition_ref):
            return
        condition_schema = resolve_ref(condition_ref["$ref"], self.document)
        field_ref = (condition_schema.get("properties") or {}).get("field")
        if not is_reference(field_ref):
            return
        fields = key_schema(field_ref, self.document)
        for builder in self._builders_for(endpoint):
            builder.fields = fields
