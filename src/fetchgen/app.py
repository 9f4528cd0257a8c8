"""Typer application and CLI entry point for fetchgen.

The application has a single ``generate`` command.  The :func:`main`
function is the console-script entry point declared in ``pyproject.toml``:
it installs a SIGINT handler, invokes the Typer app and turns errors into
exit codes.  Unhandled exceptions are written to a crash log under the data
directory.

See Also:
    :mod:`fetchgen.generator`: The pipeline the ``generate`` command runs.
    :mod:`fetchgen.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from fetchgen import __version__
from fetchgen.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from fetchgen.output import error, print_table, success


app = typer.Typer(
    name="fetchgen",
    help="Generate TypeScript fetcher clients from OpenAPI 3.x documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"fetchgen {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~fetchgen.output.OutputManager` from the
    CLI flags.  ``--verbose`` belongs to ``generate`` and is applied there.

    Args:
        version: If ``True``, print the version string and exit.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
    """
    from fetchgen.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet))


def validate_input(value: str) -> str:
    """Check that *value* is usable as an input location.

    Accepts ``-`` (stdin), an http(s) URL with a host, or a non-blank path.

    Raises:
        InvalidUsageError: For anything else.
    """
    from urllib.parse import urlparse

    from fetchgen.exceptions import InvalidUsageError
    from fetchgen.parser.loader import is_url

    if value == "-":
        return value
    if is_url(value):
        if not urlparse(value).netloc:
            raise InvalidUsageError(f"Invalid input URL: {value!r}")
        return value
    if not value.strip():
        raise InvalidUsageError("Input must be a URL or a non-empty file path")
    return value


@app.command("generate")
def generate_command(
    input_path: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="OpenAPI document URL or file path (use '-' for stdin).",
    ),
    output_dir: str = typer.Option(
        "src/generated", "--output", "-o", help="Output directory."
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Generator config file (default: fetchgen.config.json if present).",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Generate without writing any file."
    ),
) -> None:
    """Generate model declarations and clients from an OpenAPI document.

    Args:
        input_path: URL, local file path, or ``-`` for stdin.
        output_dir: Directory the generated tree is written to.
        config_path: Generator configuration file.  When omitted,
            ``fetchgen.config.json`` is used if it exists.
        verbose: Print debug diagnostics.
        dry_run: Run every pass but only list the files that would be
            written.

    Raises:
        typer.Exit: With the error's exit code when generation fails
            (``2`` for an unusable ``--input``).

    Example::

        fetchgen generate -i http://localhost:8080/v3/api-docs -o src/generated
        fetchgen generate -i ./openapi.yaml --dry-run
    """
    from fetchgen.exceptions import FetchgenError, GenerationError
    from fetchgen.generator import CodeGenerator
    from fetchgen.models import GeneratorOptions
    from fetchgen.output import get_output

    if verbose:
        get_output().enable_verbose()

    try:
        options = GeneratorOptions(
            input_path=validate_input(input_path),
            output_dir=output_dir,
            config_path=config_path,
            dry_run=dry_run,
        )
        report = CodeGenerator(options).generate()
    except GenerationError as exc:
        if dry_run and exc.report is not None:
            _print_report(exc.report)
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except FetchgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if dry_run:
        _print_report(report)
    else:
        success("Code generation completed")


def _print_report(report: Any) -> None:  # noqa: ANN401
    """Print the files of a dry run as a table on stdout."""
    print_table(
        ["file", "declarations"],
        [[path, str(count)] for path, count in sorted(report.files.items())],
        title=f"Files to write in {report.output_dir}",
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from fetchgen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``fetchgen`` console script.

    Unhandled :class:`~fetchgen.exceptions.FetchgenError` instances cause a
    clean exit with the error's ``exit_code``.  All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from fetchgen.exceptions import FetchgenError

        if isinstance(exc, FetchgenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
