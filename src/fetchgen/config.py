"""Generator configuration, data directories and atomic file writes.

* **Generator config** -- :func:`load_generator_config` reads the optional
  ``fetchgen.config.json`` (JSON or YAML, detected from the content) into a
  :class:`~fetchgen.models.GeneratorConfig`.
* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fetchgen/`` on macOS and Windows.  Only the data directory is used,
  for crash logs (see :func:`get_data_dir`).
* **Atomic writes** -- :func:`atomic_write` writes through a temp file and
  renames it over the target, so an interrupted run never leaves a
  half-written generated file behind.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from fetchgen.exceptions import ConfigError, DocumentLoadError
from fetchgen.models import GeneratorConfig
from fetchgen.parser.loader import parse_content

_APP_NAME = "fetchgen"

DEFAULT_CONFIG_PATH = "fetchgen.config.json"
"""Configuration file looked up in the working directory when none is given."""


# --- Generator config ---


def load_generator_config(
    path: Optional[str] = None, explicit: bool = False
) -> GeneratorConfig:
    """Load the generator configuration.

    Args:
        path: Path to the configuration file; ``None`` uses
            :data:`DEFAULT_CONFIG_PATH`.
        explicit: Whether the user named the file.  A missing default file
            yields the default configuration; a missing explicit one is an
            error.

    Returns:
        The validated :class:`~fetchgen.models.GeneratorConfig`.

    Raises:
        ConfigError: If an explicit file is missing, or any file is
            unreadable, unparseable, or has invalid fields.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH)
    if not config_path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return GeneratorConfig()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {config_path}: {exc}") from exc
    if not content.strip():
        return GeneratorConfig()

    try:
        data = parse_content(content, source=str(config_path))
    except DocumentLoadError as exc:
        raise ConfigError(f"Invalid config file: {exc}") from exc

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/fetchgen/`` (default
    ``~/.local/share/fetchgen/``).  On macOS/Windows: ``~/.fetchgen/logs/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
