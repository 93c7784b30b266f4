"""Exception hierarchy for specfinder.

All exceptions inherit from :class:`SpecfinderError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specfinder.exit_codes`.
The top-level error handler in :func:`specfinder.app.main` catches
``SpecfinderError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecfinderError (exit 1)
    +-- InvalidUsageError         (exit 2)
    +-- UnauthenticatedError      (exit 3)
    +-- UpstreamUnavailableError  (exit 5)
    |   +-- NotFoundError         (exit 4)
    +-- MalformedSpecError        (exit 7)
    +-- ConfigError               (exit 1)

Only call-level failures are raised. A single discovery candidate that
cannot be fetched or classified is dropped inside the scanner and never
surfaces as one of these exceptions.
"""

from __future__ import annotations

from typing import Any, Optional

from specfinder.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_SPEC,
    EXIT_NOT_FOUND,
    EXIT_UNAUTHENTICATED,
    EXIT_UPSTREAM_UNAVAILABLE,
)


class SpecfinderError(Exception):
    """Base exception for all specfinder errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specfinder.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    code: str = "error"

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    def to_dict(self) -> dict[str, Any]:
        """Render the error as the JSON error object returned to callers."""
        return {"error": self.message, "code": self.code}


class InvalidUsageError(SpecfinderError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE
    code = "invalid_usage"


class UnauthenticatedError(SpecfinderError):
    """Raised when no usable credential is available or the host rejects it (401)."""

    exit_code = EXIT_UNAUTHENTICATED
    code = "unauthenticated"


class UpstreamUnavailableError(SpecfinderError):
    """Raised when the repository tree or default branch cannot be read.

    Covers network failures, the tree-fetch timeout, access denied and 5xx
    responses from the source host.

    Args:
        message: Human-readable error description.
        status_code: HTTP status returned by the source host, if any.
        detail: Upstream error message, if the host supplied one.
    """

    exit_code = EXIT_UPSTREAM_UNAVAILABLE
    code = "upstream_unavailable"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.status_code is not None:
            data["status"] = self.status_code
        if self.detail:
            data["detail"] = self.detail
        return data


class NotFoundError(UpstreamUnavailableError):
    """Raised when the repository, branch, or file does not exist (HTTP 404)."""

    exit_code = EXIT_NOT_FOUND
    code = "not_found"


class MalformedSpecError(SpecfinderError):
    """Raised when a spec file cannot be parsed by the selected decoder.

    Carries the parser-reported position so users can fix their file.

    Args:
        message: Human-readable error description including the parser message.
        line: 1-based line of the syntax error, when known.
        column: 1-based column of the syntax error, when known.
        snippet: The offending source line, when known.
    """

    exit_code = EXIT_MALFORMED_SPEC
    code = "malformed_spec"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        snippet: Optional[str] = None,
    ):
        super().__init__(message)
        self.line = line
        self.column = column
        self.snippet = snippet

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        if self.snippet is not None:
            data["snippet"] = self.snippet
        return data


class ConfigError(SpecfinderError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
    code = "config_error"
