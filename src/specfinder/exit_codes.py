"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specfinder.exceptions.SpecfinderError` subclass.
Shell wrappers can branch on the exit code to tell a missing token from an
unreachable repository without parsing stderr.

Example::

    $ specfinder discover octocat hello-world
    $ echo $?
    3   # EXIT_UNAUTHENTICATED -- no usable GitHub token
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_UNAUTHENTICATED = 3
"""No usable credential was available, or the source host rejected it."""

EXIT_NOT_FOUND = 4
"""The repository, branch, or file does not exist (HTTP 404)."""

EXIT_UPSTREAM_UNAVAILABLE = 5
"""The source host could not be read (network error, timeout, 403, 5xx)."""

EXIT_MALFORMED_SPEC = 7
"""The specification file could not be decoded as JSON or YAML."""
