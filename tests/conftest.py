"""Shared test fixtures for fetchgen.

Provides the example OpenAPI document, a generation context built from it,
isolation of the data directory and working directory, output state
management, and the CLI runner.  These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from fetchgen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
EXAMPLE_DOCUMENT = FIXTURES_DIR / "example_openapi.json"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_document() -> dict[str, Any]:
    """Load the example document (one ``example.cart`` aggregate, one ``Order`` API tag)."""
    with open(EXAMPLE_DOCUMENT) as f:
        return json.load(f)


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """A document without tags or paths, to which tests add schemas."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Minimal", "version": "1.0.0"},
        "paths": {},
        "components": {"schemas": {}},
    }


@pytest.fixture
def generate_context(example_document: dict[str, Any]):
    """A :class:`GenerateContext` with the aggregates of the example document."""
    from fetchgen.aggregate import AggregateResolver, resolve_context_alias
    from fetchgen.context import GenerateContext

    return GenerateContext(
        example_document,
        "out",
        context_aggregates=AggregateResolver(example_document).resolve(),
        current_context_alias=resolve_context_alias(example_document),
    )


# ---------------------------------------------------------------------------
# Isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the data directory and working directory to *tmp_path*.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch the real user directory, and changes the working directory
    so the default ``fetchgen.config.json`` lookup only sees files the test
    created.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Silence generator progress for tests that only inspect generated files."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Runner for invoking ``fetchgen`` commands in-process."""
    from typer.testing import CliRunner

    return CliRunner()
