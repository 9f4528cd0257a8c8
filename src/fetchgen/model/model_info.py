"""Map schema keys to the name and placement of generated declarations.

A schema key such as ``example.order.OrderCreated`` is split on dots; the
first segment that starts with an upper-case ASCII letter begins the type
name, and the segments before it form the output directory:

* ``"example.order.WowExampleOrderState"`` -> ``/example/order`` +
  ``WowExampleOrderState``
* ``"ai.AiMessage.Assistant"`` -> ``/ai`` + ``AiMessageAssistant``
* ``"Result"`` -> ``/`` + ``Result``

Keys of the shared Wow framework types are pinned by :data:`WOW_TYPE_MAPPING`
and always resolve to an import from :data:`IMPORT_WOW_PATH`, whatever the
upper-case rule would say.
"""

from __future__ import annotations

from fetchgen.models import ModelInfo
from fetchgen.naming import pascal_case, upper_snake_case
from fetchgen.parser.components import extract_component_key

IMPORT_WOW_PATH = "@ahoo-wang/fetcher-wow"

WOW_TYPE_MAPPING: dict[str, str] = {
    "wow.command.CommandResult": "CommandResult",
    "wow.command.CommandResultArray": "CommandResultArray",
    "wow.MessageHeaderSqlType": "MessageHeaderSqlType",
    "wow.api.BindingError": "BindingError",
    "wow.api.DefaultErrorInfo": "ErrorInfo",
    "wow.api.RecoverableType": "RecoverableType",
    "wow.api.command.DefaultDeleteAggregate": "DeleteAggregate",
    "wow.api.command.DefaultRecoverAggregate": "RecoverAggregate",
    "wow.api.messaging.FunctionInfoData": "FunctionInfo",
    "wow.api.messaging.FunctionKind": "FunctionKind",
    "wow.api.modeling.AggregateId": "AggregateId",
    "wow.api.query.Condition": "Condition",
    "wow.api.query.ConditionOptions": "ConditionOptions",
    "wow.api.query.ListQuery": "ListQuery",
    "wow.api.query.Operator": "Operator",
    "wow.api.query.PagedQuery": "PagedQuery",
    "wow.api.query.Pagination": "Pagination",
    "wow.api.query.Projection": "Projection",
    "wow.api.query.Sort": "FieldSort",
    "wow.api.query.Sort.Direction": "SortDirection",
    "wow.command.CommandStage": "CommandStage",
    "wow.command.SimpleWaitSignal": "WaitSignal",
    "wow.configuration.Aggregate": "Aggregate",
    "wow.configuration.BoundedContext": "BoundedContext",
    "wow.configuration.WowMetadata": "WowMetadata",
    "wow.modeling.DomainEvent": "DomainEvent",
    "wow.openapi.BatchResult": "BatchResult",
    "wow.messaging.CompensationTarget": "CompensationTarget",
}


def resolve_model_info(schema_key: str) -> ModelInfo:
    """Resolve the :class:`~fetchgen.models.ModelInfo` of *schema_key*.

    Pure and deterministic: the result depends on nothing but the key.

    Args:
        schema_key: A dot-delimited component schema key.

    Returns:
        The pinned framework type for keys in :data:`WOW_TYPE_MAPPING`,
        otherwise the name/path split described in the module docstring.
        An empty key yields ``ModelInfo(name="", path="/")``.
    """
    if not schema_key:
        return ModelInfo(name="", path="/")

    pinned = WOW_TYPE_MAPPING.get(schema_key)
    if pinned is not None:
        return ModelInfo(name=pinned, path=IMPORT_WOW_PATH)

    parts = schema_key.split(".")
    name_index = next(
        (
            index
            for index, part in enumerate(parts)
            if part and "A" <= part[0] <= "Z"
        ),
        None,
    )
    if name_index is None:
        return ModelInfo(name=pascal_case(parts), path="/")

    path_parts = parts[:name_index]
    path = "/" + "/".join(path_parts) if path_parts else "/"
    return ModelInfo(name=pascal_case(parts[name_index:]), path=path)


def resolve_reference_model_info(reference: dict) -> ModelInfo:
    """Resolve the model info of the schema a ``{"$ref": ...}`` node points to."""
    return resolve_model_info(extract_component_key(reference))


def resolve_context_declaration_name(context_alias: str) -> str:
    """Name of the constant holding a bounded-context alias.

    Example::

        >>> resolve_context_declaration_name("example")
        'EXAMPLE_BOUNDED_CONTEXT_ALIAS'
    """
    return f"{upper_snake_case(context_alias)}_BOUNDED_CONTEXT_ALIAS"
