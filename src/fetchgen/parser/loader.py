"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries.  The format (JSON or YAML) is detected from
the content itself by :func:`infer_file_format`, so neither file extensions
nor ``Content-Type`` headers need to be right.

The public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`parse_content` -- Parse already-read text (also used for the
  generator configuration file).
* :func:`infer_file_format` -- Decide whether text is JSON or YAML.
* :func:`validate_openapi_version` -- Check and return the ``openapi``
  version string, rejecting Swagger 2.x and unsupported versions.
"""

from __future__ import annotations

import enum
import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from fetchgen.exceptions import DocumentLoadError


class FileFormat(str, enum.Enum):
    """Text formats an OpenAPI document or configuration file may use."""

    JSON = "json"
    YAML = "yaml"


def is_url(source: str) -> bool:
    """Whether *source* is an http(s) URL."""
    return source.startswith(("http://", "https://"))


def load_document(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        DocumentLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif is_url(source):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError("No input received from stdin")

    return parse_content(content, source="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP(S).

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        DocumentLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    if not response.text.strip():
        raise DocumentLoadError(f"Empty response body from {url}")

    return parse_content(response.text, source=url)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Args:
        path: Path to the local file.

    Returns:
        The parsed document dictionary.

    Raises:
        DocumentLoadError: If the file is missing, unreadable, empty, or cannot
            be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"Document file is empty: {path}")

    return parse_content(content, source=path)


def infer_file_format(content: str) -> FileFormat:
    """Detect whether *content* is JSON or YAML.

    Trimmed content starting with ``{`` or ``[`` is JSON; content starting
    with ``-`` (a document marker or a block sequence) or a ``%YAML``
    directive is YAML.  Anything else is JSON if it parses as JSON, and YAML
    otherwise.

    Raises:
        DocumentLoadError: If *content* is empty or blank.
    """
    trimmed = content.strip()
    if not trimmed:
        raise DocumentLoadError("Unable to infer file format: content is empty")
    if trimmed.startswith(("{", "[")):
        return FileFormat.JSON
    if trimmed.startswith(("-", "%YAML")):
        return FileFormat.YAML
    try:
        json.loads(trimmed)
    except json.JSONDecodeError:
        return FileFormat.YAML
    return FileFormat.JSON


def parse_content(content: str, source: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML, as detected by :func:`infer_file_format`.

    Args:
        content: The raw text.
        source: Where the text came from, used in error messages.

    Returns:
        The parsed mapping.

    Raises:
        DocumentLoadError: If the content cannot be parsed or its top level is
            not a mapping.
    """
    origin = f" ({source})" if source else ""
    file_format = infer_file_format(content)
    if file_format == FileFormat.JSON:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"Invalid JSON{origin}: {exc}") from exc
    else:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DocumentLoadError(f"Invalid YAML{origin}: {exc}") from exc

    if not isinstance(result, dict):
        raise DocumentLoadError(
            f"Document must be a JSON/YAML object{origin} (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Supports OpenAPI 3.x. Raises for Swagger 2.x, missing version fields, or
    other major versions.

    Args:
        document: The parsed document dictionary.

    Returns:
        The OpenAPI version string (e.g., '3.0.3', '3.1.0').

    Raises:
        DocumentLoadError: If the version is missing, unsupported, or indicates Swagger 2.x.
    """
    if "swagger" in document:
        raise DocumentLoadError(
            f"Swagger {document['swagger']} is not supported. "
            "Only OpenAPI 3.x documents are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = document.get("openapi")
    if openapi_version is None:
        raise DocumentLoadError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise DocumentLoadError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only OpenAPI 3.x documents are supported."
    )
