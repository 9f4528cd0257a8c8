"""Wow aggregate discovery (tags, commands, state, events, fields)."""

from fetchgen.aggregate.resolver import (
    AggregateResolver,
    infer_resource_attribution,
    resolve_context_alias,
)

__all__ = ["AggregateResolver", "infer_resource_attribution", "resolve_context_alias"]
