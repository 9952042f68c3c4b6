"""Typer application and CLI entry point for awesome-audit.

Commands:

* ``awesome-audit check`` -- audit the curated list and print status lines
  followed by GitHub Actions annotations.
* ``awesome-audit cache stats`` -- show where API responses are cached.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Expected errors (:class:`~awesome_audit.exceptions.AuditError`)
exit with their mapped code; anything else writes a crash log under the
data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from awesome_audit import __version__
from awesome_audit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="awesome-audit",
    help="Find abandoned GitHub repositories in a curated Markdown list.",
    no_args_is_help=True,
    add_completion=False,
)

cache_app = typer.Typer(no_args_is_help=True)
app.add_typer(cache_app, name="cache", help="Inspect the API response cache.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"awesome-audit {__version__}")
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
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback: installs the global output manager from CLI flags."""
    from awesome_audit.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))


def _read_list(path: str) -> str:
    from awesome_audit.exceptions import InputError

    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read list file {path}: {exc}") from exc


@app.command("check")
def check_command(
    list_path: Optional[str] = typer.Option(
        None, "--list", "-l", help="Markdown list to audit (default: README.md)."
    ),
    max_age_days: Optional[int] = typer.Option(
        None, "--max-age-days", min=0, help="Flag repositories not pushed to for this many days."
    ),
    throttle: Optional[int] = typer.Option(
        None, "--throttle", min=0, help="Seconds to wait after each uncached API request."
    ),
    level: Optional[str] = typer.Option(
        None, "--level", help="Annotation level: warning, error, or notice."
    ),
    annotation_file: Optional[str] = typer.Option(
        None, "--annotation-file", help="File name reported in annotations."
    ),
) -> None:
    """Audit the list for abandoned or archived repositories.

    Prints one line per repository (green when ok, red when skipped or
    abandoned), then one ``::warning`` annotation per list line that links
    an abandoned repository. Exits 0 once the list has been processed;
    setup problems such as a missing ``GH_PA_TOKEN`` exit non-zero.

    Example::

        GH_PA_TOKEN=... awesome-audit check --list README.md
    """
    from awesome_audit.audit import Auditor
    from awesome_audit.cache import create_cache
    from awesome_audit.client import GitHubClient
    from awesome_audit.config import resolve_settings
    from awesome_audit.exceptions import AuditError, InvalidUsageError
    from awesome_audit.models import RepoStatus
    from awesome_audit.output import debug, error, info

    try:
        if level is not None and level not in ("warning", "error", "notice"):
            raise InvalidUsageError(f"Unknown annotation level: {level}")

        settings = resolve_settings(
            list_path=list_path,
            max_age_days=max_age_days,
            throttle_seconds=throttle,
            annotation_level=level,
            annotation_file=annotation_file,
        )
        document = _read_list(settings.list_path)
        cache = create_cache(settings)
        debug(f"Cache: {cache.storage.name} at {cache.storage.location}")

        try:
            with GitHubClient(settings, cache) as client:
                report = Auditor(settings, client).run(document)
        finally:
            cache.close()
    except AuditError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(
        f"{len(report.outcomes)} repositories checked: "
        f"{report.count(RepoStatus.OK)} ok, "
        f"{report.count(RepoStatus.ABANDONED)} abandoned, "
        f"{report.count(RepoStatus.SKIPPED)} skipped."
    )


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the cache backend, its location, and the number of entries."""
    from awesome_audit.cache import create_cache
    from awesome_audit.config import resolve_settings
    from awesome_audit.exceptions import AuditError
    from awesome_audit.output import error, print_data

    try:
        cache = create_cache(resolve_settings())
        try:
            stats = cache.stats()
        finally:
            cache.close()
    except AuditError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for key, value in stats.items():
        print_data(f"{key}\t{value}")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from awesome_audit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``awesome-audit`` console script.

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
        sys.exit(130)
    except Exception as exc:
        from awesome_audit.exceptions import AuditError
        from awesome_audit.output import error

        if isinstance(exc, AuditError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
