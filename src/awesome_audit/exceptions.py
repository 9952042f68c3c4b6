"""Exception hierarchy for awesome-audit.

All exceptions inherit from :class:`AuditError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`awesome_audit.exit_codes`.
Setup failures (:class:`ConfigError`, :class:`InputError`) abort the run.
Per-repository failures (:class:`FetchError`) are caught by the
:class:`~awesome_audit.audit.Auditor` and turned into skipped outcomes.

Subclass hierarchy::

    AuditError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 3)
    +-- InputError          (exit 4)
    +-- FetchError          (exit 1, never reaches the entry point)
    +-- CacheError          (exit 1, surfaced as FetchError by the client)
"""

from awesome_audit.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INPUT_ERROR,
    EXIT_INVALID_USAGE,
)


class AuditError(Exception):
    """Base exception for all awesome-audit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`awesome_audit.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AuditError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AuditError):
    """Raised for configuration problems (missing token, invalid project config)."""

    exit_code = EXIT_CONFIG_ERROR


class InputError(AuditError):
    """Raised when the curated list file is missing or unreadable."""

    exit_code = EXIT_INPUT_ERROR


class FetchError(AuditError):
    """Raised when a GitHub API record could not be retrieved or decoded.

    Covers transport errors, non-200 responses, JSON decode failures, empty
    payloads, and cache storage failures.
    """


class CacheError(AuditError):
    """Raised when the cache storage cannot be read or written."""
