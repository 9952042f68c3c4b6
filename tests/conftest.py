"""Shared test fixtures for awesome-audit.

Provides isolated config environments, a settings factory, output state
management, canned GitHub API records, and a CLI runner. These fixtures
are automatically discovered by pytest.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from awesome_audit.models import AuditSettings, CacheSettings
from awesome_audit.output import OutputManager, reset_output, set_output

NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner or capsys redirects those
    streams, the cached references go stale between tests.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at tmp_path, clears the GitHub environment
    variables, and changes the working directory to tmp_path.
    """
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("awesome_audit.config._is_xdg_platform", lambda: True)
    for var in ["GH_PA_TOKEN", "GH_API_HOST", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Settings and records
# ---------------------------------------------------------------------------


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., AuditSettings]:
    """Factory for AuditSettings with a tmp cache directory and no throttle."""

    def _make(**overrides: Any) -> AuditSettings:
        data: dict[str, Any] = {
            "api_host": "https://api.github.test",
            "token_source": "env:TEST_GH_TOKEN",
            "throttle_seconds": 0,
            "cache": CacheSettings(directory=str(tmp_path / "gh-cache")),
        }
        data.update(overrides)
        return AuditSettings(**data)

    return _make


@pytest.fixture
def token(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("TEST_GH_TOKEN", "ghp_test")
    return "ghp_test"


def repo_payload(
    full_name: str = "guzzle/guzzle",
    pushed_at: datetime | str | None = None,
    archived: bool = False,
    **extra: Any,
) -> dict[str, Any]:
    """Build a minimal GitHub /repos response."""
    if pushed_at is None:
        pushed_at = NOW - timedelta(days=30)
    if isinstance(pushed_at, datetime):
        pushed_at = pushed_at.strftime("%Y-%m-%dT%H:%M:%SZ")
    return {"full_name": full_name, "pushed_at": pushed_at, "archived": archived, **extra}


def api_handler(
    records: dict[str, Any], calls: list[str] | None = None
) -> Callable[[httpx.Request], httpx.Response]:
    """Serve ``/repos/<slug>`` from *records*; unknown slugs get a 404."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        slug = request.url.path.removeprefix("/repos/")
        if slug not in records:
            return httpx.Response(404, json={"message": "Not Found"})
        record = records[slug]
        if isinstance(record, str):
            return httpx.Response(200, text=record)
        return httpx.Response(200, text=json.dumps(record))

    return _handler


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless OutputManager so captured lines are exact."""
    output = OutputManager(no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
