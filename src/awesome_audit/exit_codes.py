"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~awesome_audit.exceptions.AuditError` subclass.
CI workflows can inspect the exit code to tell a broken setup apart from a
finished audit without parsing stderr.

A completed audit always exits with :data:`EXIT_SUCCESS`, even when
abandoned repositories were found; those are reported through annotations.

Example::

    $ awesome-audit check
    $ echo $?
    3   # EXIT_CONFIG_ERROR -- GH_PA_TOKEN is not set
"""

EXIT_SUCCESS = 0
"""The audit completed (individual entries may have been skipped or flagged)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""A required setting or credential is missing or invalid."""

EXIT_INPUT_ERROR = 4
"""The curated list file could not be read."""
