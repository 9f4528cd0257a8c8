"""Canonical Pydantic models shared across all fetchgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- loaded from the generator configuration file and
the CLI flags:
    :class:`TagConfig`, :class:`GeneratorConfig`, and
    :class:`GeneratorOptions`.

**Naming and schema models** -- the resolved identity of a component schema:
    :class:`ModelInfo` and :class:`KeySchema`.

**Aggregate models** -- produced once per run by
:class:`~fetchgen.aggregate.resolver.AggregateResolver` and consumed by the
client generators:
    :class:`HTTPMethod`, :class:`ParameterLocation`,
    :class:`ResourceAttribution`, :class:`TagInfo`,
    :class:`TagAliasAggregate`, :class:`CommandDefinition`,
    :class:`EventDefinition`, and :class:`AggregateDefinition`.

Aggregate models are frozen: after the resolver hands them out nothing may
reassign their fields.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_IGNORE_PATH_PARAMETERS = ["tenantId", "ownerId"]


# --- Configuration ---


class TagConfig(BaseModel):
    """Per-tag overrides inside :class:`GeneratorConfig`."""

    model_config = ConfigDict(populate_by_name=True)

    ignore_path_parameters: Optional[list[str]] = Field(
        default=None,
        alias="ignorePathParameters",
        description="Path parameters supplied by ambient request context for this tag",
    )


class GeneratorConfig(BaseModel):
    """Generator configuration loaded from ``fetchgen.config.json`` (or YAML).

    Path parameters listed in ``ignore_path_parameters`` are left out of the
    generated method signatures because the runtime fills them in from the
    request context (tenant and owner identifiers by default). A tag entry
    replaces the global list for the operations carrying that tag.

    Example::

        {
          "ignorePathParameters": ["tenantId", "ownerId"],
          "tags": {"example.cart": {"ignorePathParameters": ["ownerId"]}}
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    ignore_path_parameters: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATH_PARAMETERS),
        alias="ignorePathParameters",
    )
    tags: dict[str, TagConfig] = Field(default_factory=dict)

    def ignored_path_parameters(self, tag_names: list[str]) -> list[str]:
        """Return the ignore list for an operation tagged with *tag_names*.

        The first tag with an explicit override wins; otherwise the global
        list applies.
        """
        for tag_name in tag_names:
            tag_config = self.tags.get(tag_name)
            if tag_config and tag_config.ignore_path_parameters is not None:
                return tag_config.ignore_path_parameters
        return self.ignore_path_parameters


class GeneratorOptions(BaseModel):
    """Options for a single :class:`~fetchgen.generator.CodeGenerator` run."""

    input_path: str = Field(description="URL, file path, or '-' for stdin")
    output_dir: str = Field(default="src/generated")
    config_path: Optional[str] = None
    dry_run: bool = False


# --- Naming ---


class ModelInfo(BaseModel):
    """Resolved name and placement of a generated declaration.

    ``path`` is either an output-relative directory such as
    ``/example/order`` or, for framework types, an external module specifier
    such as ``@ahoo-wang/fetcher-wow``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str

    @property
    def is_external(self) -> bool:
        """Whether :attr:`path` names an external package rather than a directory."""
        return self.path.startswith("@")


class KeySchema(BaseModel):
    """A component schema together with its key in ``components.schemas``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")


# --- Aggregates ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Declared in the order operations are read from a path item, which fixes
    the order of generated methods.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ResourceAttribution(str, enum.Enum):
    """How an aggregate's endpoints are scoped, emitted as ``ResourceAttributionPathSpec.<X>``."""

    TENANT = "TENANT"
    OWNER = "OWNER"
    NONE = "NONE"


class TagInfo(BaseModel):
    """An OpenAPI *Tag Object*."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None


class TagAliasAggregate(BaseModel):
    """An aggregate tag of the form ``<contextAlias>.<aggregateName>``."""

    model_config = ConfigDict(frozen=True)

    tag: TagInfo
    context_alias: str
    aggregate_name: str


class CommandDefinition(BaseModel):
    """A command endpoint of an aggregate.

    ``path_parameters`` holds the parameter objects (``$ref`` already
    resolved) that appear in ``path``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    method: HTTPMethod
    path: str
    path_parameters: list[dict[str, Any]] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    schema_: KeySchema = Field(alias="schema")
    operation: dict[str, Any] = Field(default_factory=dict)


class EventDefinition(BaseModel):
    """A domain event published by an aggregate."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    title: Optional[str] = None
    schema_: KeySchema = Field(alias="schema")


class AggregateDefinition(BaseModel):
    """Everything the client generators need to know about one aggregate.

    Constructed once per run by the aggregate resolver, only after both
    ``state`` and ``fields`` were found.
    """

    model_config = ConfigDict(frozen=True)

    aggregate: TagAliasAggregate
    commands: dict[str, CommandDefinition] = Field(default_factory=dict)
    events: dict[str, EventDefinition] = Field(default_factory=dict)
    state: KeySchema
    fields: KeySchema


BoundedContextAggregates = dict[str, list[AggregateDefinition]]
"""Aggregates grouped by bounded-context alias, in tag declaration order."""


# --- Run report ---


class SchemaFailure(BaseModel):
    """A schema (or client) that was skipped because it could not be generated."""

    key: str
    reason: str


class GenerationReport(BaseModel):
    """Outcome of a :meth:`~fetchgen.generator.CodeGenerator.generate` run."""

    output_dir: str
    files: dict[str, int] = Field(
        default_factory=dict,
        description="Output-relative file path mapped to its declaration count",
    )
    failures: list[SchemaFailure] = Field(default_factory=list)
    saved: bool = False
