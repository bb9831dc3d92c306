"""Configuration management with XDG paths and precedence resolution.

This module handles all persistent configuration for specmodel:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specmodel/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~specmodel.models.GlobalConfig`
  JSON file storing defaults (contract source, log level, cache and
  validation settings).
* **Project config** -- ``./specmodel.json`` may pin the contract for a
  repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specmodel.exceptions import ConfigError
from specmodel.models import GlobalConfig

_APP_NAME = "specmodel"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specmodel.json"

ENV_SPEC = "SPECMODEL_SPEC"
ENV_LOG_LEVEL = "SPECMODEL_LOG_LEVEL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_dir(env_var: str, default_segments: tuple[str, ...], fallback: Path) -> Path:
    if _is_xdg_platform():
        env_value = os.environ.get(env_var, "")
        base = Path(env_value) if env_value else Path.home().joinpath(*default_segments)
        path = base / _APP_NAME
    else:
        path = fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specmodel/`` (default ``~/.config/specmodel/``).
    On macOS/Windows: ``~/.specmodel/``.
    """
    return _xdg_dir("XDG_CONFIG_HOME", (".config",), _fallback_base_dir())


def get_cache_dir() -> Path:
    """Return the cache directory (fetched contracts), creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/specmodel/`` (default ``~/.cache/specmodel/``).
    On macOS/Windows: ``~/.specmodel/cache/``.
    """
    return _xdg_dir("XDG_CACHE_HOME", (".cache",), _fallback_base_dir() / "cache")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specmodel/`` (default ``~/.local/share/specmodel/``).
    On macOS/Windows: ``~/.specmodel/logs/``.
    """
    return _xdg_dir("XDG_DATA_HOME", (".local", "share"), _fallback_base_dir() / "logs")


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~specmodel.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specmodel.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or is not an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(cli_spec: Optional[str] = None) -> tuple[GlobalConfig, Optional[str]]:
    """Resolve the effective configuration and contract source.

    Precedence (high to low):
        1. CLI flag (``cli_spec``)
        2. Environment variables (``SPECMODEL_SPEC``, ``SPECMODEL_LOG_LEVEL``)
        3. Project config (``./specmodel.json``: ``spec``, ``log_level``)
        4. User config (``~/.config/specmodel/config.json``)
        5. Defaults

    Returns:
        A tuple of ``(global_config, spec_source_or_None)``.
    """
    global_cfg = load_global_config()
    spec_source = global_cfg.default_spec

    project = load_project_config()
    if project is not None:
        if project.get("spec"):
            spec_source = str(project["spec"])
        if project.get("log_level"):
            global_cfg.log_level = str(project["log_level"])

    env_spec = os.environ.get(ENV_SPEC)
    if env_spec:
        spec_source = env_spec
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        global_cfg.log_level = env_level

    if cli_spec is not None:
        spec_source = cli_spec

    return global_cfg, spec_source
