"""Exception hierarchy for fetchgen.

All exceptions inherit from :class:`FetchgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fetchgen.exit_codes`.
The top-level error handler in :func:`fetchgen.app.main` catches
``FetchgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    FetchgenError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- DocumentLoadError      (exit 1)
    +-- ConfigError            (exit 1)
    +-- SchemaResolutionError  (exit 1)
    +-- CyclicSchemaError      (exit 1)
    +-- NamingCollisionError   (exit 1)
    |   +-- EnumMemberCollisionError
    +-- GenerationError        (exit 1)
    +-- SaveError              (exit 1)
"""

from __future__ import annotations

from typing import Any

from fetchgen.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class FetchgenError(Exception):
    """Base exception for all fetchgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`fetchgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FetchgenError):
    """Raised for invalid CLI arguments, e.g. an empty ``--input`` value."""

    exit_code = EXIT_INVALID_USAGE


class DocumentLoadError(FetchgenError):
    """Raised when the OpenAPI document cannot be fetched, read, or parsed."""


class ConfigError(FetchgenError):
    """Raised for configuration problems (missing file, invalid JSON/YAML, bad fields)."""


class SchemaResolutionError(FetchgenError):
    """Raised when a ``$ref`` points to a component that does not exist.

    Attributes:
        ref: The offending reference string.
    """

    def __init__(self, message: str, ref: str = ""):
        super().__init__(message)
        self.ref = ref


class CyclicSchemaError(FetchgenError):
    """Raised when an inline schema contains itself (not through a ``$ref``)."""


class NamingCollisionError(FetchgenError):
    """Raised when two schema keys resolve to the same declaration name and path.

    Attributes:
        first_key: The schema key that claimed the name first.
        second_key: The schema key that collided with it.
    """

    def __init__(self, first_key: str, second_key: str, name: str, path: str):
        super().__init__(
            f"Schemas '{first_key}' and '{second_key}' both resolve to "
            f"'{name}' in '{path}'"
        )
        self.first_key = first_key
        self.second_key = second_key


class EnumMemberCollisionError(NamingCollisionError):
    """Raised when two values of one enum resolve to the same member name."""

    def __init__(self, first_value: str, second_value: str, member: str, enum_name: str):
        FetchgenError.__init__(
            self,
            f"Enum values '{first_value}' and '{second_value}' of '{enum_name}' "
            f"both resolve to member '{member}'",
        )
        self.first_key = first_value
        self.second_key = second_value


class GenerationError(FetchgenError):
    """Raised at the end of a run in which one or more schemas were skipped.

    Attributes:
        report: The :class:`~fetchgen.models.GenerationReport` of the run,
            when one was produced.
    """

    def __init__(self, message: str, report: Any = None):
        super().__init__(message)
        self.report = report


class SaveError(FetchgenError):
    """Raised when a generated file cannot be written to disk."""
