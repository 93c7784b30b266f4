"""Where specfinder keeps its settings, and how a run's settings are chosen.

Files
    ``config.json`` in the config directory holds a
    :class:`~specfinder.models.GlobalConfig`. On Linux and the BSDs the
    directory follows the XDG base-directory rules
    (``$XDG_CONFIG_HOME/specfinder``, crash logs under
    ``$XDG_DATA_HOME/specfinder``); elsewhere everything lives in
    ``~/.specfinder``. Writes go to a sibling temp file that is renamed
    into place, so an interrupted ``config set`` never leaves a truncated
    file behind.

Precedence
    :func:`resolve_config` layers, lowest first: built-in defaults, the
    global file, ``./specfinder.json`` (``api_url`` and ``token_source``
    only), ``SPECFINDER_API_URL``/``SPECFINDER_TOKEN_SOURCE``, then CLI
    flags.

Tokens
    ``SPECFINDER_TOKEN`` is taken literally when set. Otherwise
    ``token_source`` names where the GitHub token lives: ``env:VAR``,
    ``file:PATH`` or ``prompt``. :func:`resolve_token` turns every failure
    into :class:`~specfinder.exceptions.UnauthenticatedError`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from specfinder.exceptions import ConfigError, UnauthenticatedError
from specfinder.models import GlobalConfig

_APP_NAME = "specfinder"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specfinder.json"

ENV_API_URL = "SPECFINDER_API_URL"
ENV_TOKEN = "SPECFINDER_TOKEN"
ENV_TOKEN_SOURCE = "SPECFINDER_TOKEN_SOURCE"

_PROJECT_KEYS = ("api_url", "token_source")

# kind -> (XDG variable, default location under $HOME, non-XDG subdirectory)
_DIRS: dict[str, tuple[str, tuple[str, ...], Optional[str]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "data": ("XDG_DATA_HOME", (".local", "share"), "logs"),
}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_segments, fallback_sub = _DIRS[kind]
    if _is_xdg_platform():
        root = os.environ.get(env_var) or str(Path.home().joinpath(*home_segments))
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` (created on demand)."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory receiving crash logs (created on demand)."""
    return _app_dir("data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json``, or return defaults when it does not exist yet.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _atomic_write(
        _global_config_path(),
        json.dumps(config.model_dump(mode="json"), indent=2) + "\n",
    )


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./specfinder.json`` if present.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


def resolve_config(
    cli_api_url: Optional[str] = None,
    cli_token_source: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Build the effective configuration for one invocation.

    Raises:
        ConfigError: If the global or project file is invalid.
    """
    config = load_global_config()

    overrides: dict[str, Optional[str]] = {}
    project = load_project_config() or {}
    for key in _PROJECT_KEYS:
        value = project.get(key)
        if isinstance(value, str) and value:
            overrides[key] = value
    for key, env_var in (("api_url", ENV_API_URL), ("token_source", ENV_TOKEN_SOURCE)):
        if os.environ.get(env_var):
            overrides[key] = os.environ[env_var]
    for key, value in (("api_url", cli_api_url), ("token_source", cli_token_source)):
        if value is not None:
            overrides[key] = value

    for key, value in overrides.items():
        setattr(config, key, value)
    if cli_format is not None:
        config.output.format = cli_format
    return config


def resolve_credential(source: str) -> str:
    """Read a secret from ``env:VAR``, ``file:PATH`` or ``prompt``.

    File contents are stripped of surrounding whitespace. ``prompt`` needs
    an interactive stdin.

    Raises:
        ConfigError: If the source is unknown or yields nothing.
    """
    scheme, _, target = source.partition(":")

    if scheme == "env" and target:
        if target not in os.environ:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return os.environ[target]

    if scheme == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for a GitHub token: stdin is not a TTY")
        return getpass.getpass("GitHub token: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_token(config: GlobalConfig) -> str:
    """Return the GitHub token for this run.

    Raises:
        UnauthenticatedError: If no non-empty token can be obtained.
    """
    literal = os.environ.get(ENV_TOKEN, "").strip()
    if literal:
        return literal

    try:
        token = resolve_credential(config.token_source).strip()
    except ConfigError as exc:
        raise UnauthenticatedError(f"Not authenticated: {exc.message}") from exc
    if not token:
        raise UnauthenticatedError(
            f"Not authenticated: empty token (source: {config.token_source})"
        )
    return token
