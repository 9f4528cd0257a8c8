"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~fetchgen.exceptions.FetchgenError` subclass.
CI scripts that run the generator can inspect the exit code to tell a broken
invocation apart from a broken input document.

Example::

    $ fetchgen generate --input ""
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the input was neither a URL nor a path
"""

EXIT_SUCCESS = 0
"""Generation completed and every file was written."""

EXIT_GENERIC_FAILURE = 1
"""Generation failed (unreadable input, unresolvable schema, save error)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unusable input value."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C (128 + SIGINT)."""
