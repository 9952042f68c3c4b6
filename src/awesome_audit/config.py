"""Configuration resolution with XDG paths and precedence handling.

This module builds the single :class:`~awesome_audit.models.AuditSettings`
instance used for a run:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.awesome-audit/`` on macOS and Windows. See :func:`get_cache_dir`
  and :func:`get_data_dir`.
* **Project config** -- an optional ``./awesome-audit.json`` holding any
  subset of :class:`~awesome_audit.models.AuditSettings` fields.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, project config, and defaults.
* **Credential resolution** -- :func:`resolve_credential` reads the API
  token from an environment variable or a file.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from awesome_audit.exceptions import ConfigError
from awesome_audit.models import AuditSettings

_APP_NAME = "awesome-audit"
_PROJECT_CONFIG_FILENAME = "awesome-audit.json"

API_HOST_ENV = "GH_API_HOST"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_cache_dir() -> Path:
    """Return the default directory for cached GitHub responses.

    On Linux/BSD: ``$XDG_CACHE_HOME/awesome-audit/`` (default
    ``~/.cache/awesome-audit/``). On macOS/Windows: ``~/.awesome-audit/cache/``.

    The directory is not created here; the cache creates it on first write.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    return _fallback_base_dir() / "cache"


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/awesome-audit/`` (default
    ``~/.local/share/awesome-audit/``). On macOS/Windows: ``~/.awesome-audit/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_cache_dir(settings: AuditSettings) -> Path:
    """Return the configured cache directory, or the XDG default."""
    if settings.cache.directory:
        return Path(settings.cache.directory).expanduser()
    return get_cache_dir()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./awesome-audit.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_settings(
    list_path: Optional[str] = None,
    max_age_days: Optional[int] = None,
    throttle_seconds: Optional[int] = None,
    annotation_level: Optional[str] = None,
    annotation_file: Optional[str] = None,
) -> AuditSettings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (the arguments of this function)
        2. Environment variables (``GH_API_HOST``)
        3. Project config (``./awesome-audit.json``)
        4. Defaults

    Raises:
        ConfigError: If the merged values fail validation.
    """
    data: dict[str, Any] = load_project_config() or {}

    env_api_host = os.environ.get(API_HOST_ENV)
    if env_api_host:
        data["api_host"] = env_api_host

    overrides = {
        "list_path": list_path,
        "max_age_seconds": max_age_days * 60 * 60 * 24 if max_age_days is not None else None,
        "throttle_seconds": throttle_seconds,
        "annotation_level": annotation_level,
        "annotation_file": annotation_file,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        settings = AuditSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc

    # Paths are joined onto api_host verbatim.
    settings.api_host = settings.api_host.rstrip("/")
    return settings


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigError: If the source can't be resolved or yields an empty value.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if not value:
            raise ConfigError(
                f"Could not retrieve the GitHub access token. "
                f"Please set the environment variable {var_name}."
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            value = path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc
        if not value:
            raise ConfigError(f"Credential file is empty: {path}")
        return value

    raise ConfigError(f"Unknown credential source format: {source}")
