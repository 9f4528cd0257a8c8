"""Generate ``commandClient.ts`` for every aggregate.

Each file holds:

* ``COMMAND_ENDPOINT_PATHS`` -- an enum of the command endpoint paths;
* ``DEFAULT_COMMAND_CLIENT_OPTIONS`` -- ``ApiMetadata`` with the bounded
  context alias as base path;
* ``<Aggregate>CommandClient`` -- methods returning ``Promise<CommandResult>``;
* ``<Aggregate>StreamCommandClient`` -- the same methods returning
  ``Promise<CommandResultEventStream>``, decorated with the event-stream
  result extractor.
"""

from __future__ import annotations

from typing import Iterable

from fetchgen import output
from fetchgen.client.decorators import (
    STREAM_RESULT_EXTRACTOR_METADATA,
    add_api_metadata_ctor,
    add_import_decorator,
    add_import_stream_result_extractor,
    add_method_decorator_import,
    add_stub_method,
    aggregate_client_file_path,
    attributes_parameter,
    client_name,
    create_decorator_class,
    path_parameter,
    request_parameter,
    resolve_method_name,
)
from fetchgen.context import Generator
from fetchgen.model.model_info import IMPORT_WOW_PATH, resolve_model_info
from fetchgen.model.type_resolver import quote
from fetchgen.models import AggregateDefinition, CommandDefinition
from fetchgen.naming import upper_snake_case
from fetchgen.parser.operations import resolve_path_parameter_type
from fetchgen.schemas import is_empty_object
from fetchgen.source.declarations import ClassDeclaration, Decorator, EnumMember
from fetchgen.source.jsdoc import jsdoc
from fetchgen.source.source_file import SourceFile

COMMAND_CLIENT_FILE_NAME = "commandClient"
COMMAND_ENDPOINT_PATHS = "COMMAND_ENDPOINT_PATHS"
DEFAULT_COMMAND_CLIENT_OPTIONS = "DEFAULT_COMMAND_CLIENT_OPTIONS"

COMMAND_CLIENT_SUFFIX = "CommandClient"
STREAM_COMMAND_CLIENT_SUFFIX = "StreamCommandClient"

COMMAND_RESULT_TYPE = "Promise<CommandResult>"
COMMAND_RESULT_STREAM_TYPE = "Promise<CommandResultEventStream>"

WOW_COMMAND_TYPES = [
    "CommandRequest",
    "CommandResult",
    "CommandResultEventStream",
    "DeleteAggregate",
    "RecoverAggregate",
]


def command_operation_id(command: CommandDefinition) -> str:
    return command.operation.get("operationId") or command.name


def endpoint_member_names(commands: Iterable[CommandDefinition]) -> dict[str, str]:
    """Map each command name to a unique ``COMMAND_ENDPOINT_PATHS`` member."""
    members: dict[str, str] = {}
    for command in commands:
        members[command.name] = resolve_method_name(
            command_operation_id(command),
            lambda name: name in members.values(),
            upper_snake_case,
        )
    return members


class CommandClientGenerator(Generator):
    """Generate the command client pair of every aggregate."""

    def generate(self) -> None:
        aggregates = [
            aggregate
            for aggregates in self.context.context_aggregates.values()
            for aggregate in aggregates
        ]
        output.progress(f"Generating command clients for {len(aggregates)} aggregates")
        for index, aggregate in enumerate(aggregates, start=1):
            output.progress_with_count(
                index,
                len(aggregates),
                f"Processing command client for aggregate: {aggregate.aggregate.aggregate_name}",
                1,
            )
            self.process_aggregate(aggregate)
        output.success("Command client generation completed")

    def process_aggregate(self, definition: AggregateDefinition) -> None:
        aggregate = definition.aggregate
        source_file = self.context.get_or_create_source_file(
            aggregate_client_file_path(aggregate, COMMAND_CLIENT_FILE_NAME)
        )
        members = endpoint_member_names(definition.commands.values())
        source_file.add_enum(
            COMMAND_ENDPOINT_PATHS,
            [
                EnumMember(name=members[command.name], initializer=quote(command.path))
                for command in definition.commands.values()
            ],
            exported=False,
        )
        source_file.add_variable(
            DEFAULT_COMMAND_CLIENT_OPTIONS,
            f"{{\n  basePath: {quote(aggregate.context_alias)},\n}}",
            type_name="ApiMetadata",
        )
        source_file.add_import(IMPORT_WOW_PATH, WOW_COMMAND_TYPES, type_only=True)
        add_import_stream_result_extractor(source_file)
        add_import_decorator(source_file)

        self.process_command_client(source_file, definition, members)
        self.process_command_client(source_file, definition, members, stream=True)
        output.debug(
            f"Generated {len(definition.commands)} commands for {aggregate.context_alias}."
            f"{aggregate.aggregate_name}"
        )

    def process_command_client(
        self,
        source_file: SourceFile,
        definition: AggregateDefinition,
        members: dict[str, str],
        stream: bool = False,
    ) -> ClassDeclaration:
        if stream:
            name = client_name(definition.aggregate, STREAM_COMMAND_CLIENT_SUFFIX)
            api_arguments = ["''", STREAM_RESULT_EXTRACTOR_METADATA]
            return_type = COMMAND_RESULT_STREAM_TYPE
        else:
            name = client_name(definition.aggregate, COMMAND_CLIENT_SUFFIX)
            api_arguments = []
            return_type = COMMAND_RESULT_TYPE
        client = create_decorator_class(name, source_file, api_arguments)
        add_api_metadata_ctor(client, DEFAULT_COMMAND_CLIENT_OPTIONS)
        for command in definition.commands.values():
            self.process_command_method(
                source_file, client, command, members[command.name], return_type
            )
        return client

    def process_command_method(
        self,
        source_file: SourceFile,
        client: ClassDeclaration,
        command: CommandDefinition,
        member: str,
        return_type: str,
    ) -> None:
        command_model = resolve_model_info(command.schema_.key)
        source_file.add_model_import(command_model)

        ignored = set(self.context.ignored_path_parameters(command.operation.get("tags") or []))
        parameters = [
            path_parameter(
                parameter["name"],
                resolve_path_parameter_type(parameter),
            )
            for parameter in command.path_parameters
            if parameter.get("name") and parameter["name"] not in ignored
        ]
        parameters.append(
            request_parameter(
                "commandRequest",
                f"CommandRequest<{command_model.name}>",
                optional=is_empty_object(command.schema_.schema_),
            )
        )
        parameters.append(attributes_parameter())

        decorator = add_method_decorator_import(source_file, command.method)
        add_stub_method(
            client,
            resolve_method_name(command_operation_id(command), client.has_method),
            Decorator(
                name=decorator,
                arguments=[f"{COMMAND_ENDPOINT_PATHS}.{member}"],
            ),
            parameters,
            return_type,
            docs=jsdoc([command.summary, command.description]),
        )
