"""``specfinder config`` -- inspect and edit the saved :class:`~specfinder.models.GlobalConfig`.

Keys use dot notation matching the JSON layout of ``config.json``::

    api_url                     GitHub REST root
    token_source                env:VAR | file:PATH | prompt
    request.timeout             seconds, per request
    request.tree_timeout        seconds, recursive tree listing
    request.max_concurrency     simultaneous candidate fetches
    request.verify_ssl          true | false
    output.format               auto | json | plain | rich
"""

from __future__ import annotations

from typing import Any

import typer

from specfinder.commands import fail
from specfinder.exceptions import InvalidUsageError, SpecfinderError
from specfinder.output import format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = ("true", "1", "yes", "on")


def _coerce(key: str, current: Any, raw: str) -> Any:
    """Convert *raw* to the type of the value it replaces."""
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUE_WORDS
    for kind, label in ((int, "integer"), (float, "number")):
        if isinstance(current, kind):
            try:
                return kind(raw)
            except ValueError:
                raise InvalidUsageError(f"Expected {label} for {key}, got: {raw}") from None
    return raw


def _assign(data: dict[str, Any], key: str, raw: str) -> Any:
    """Set dotted *key* inside *data* in place and return the stored value."""
    *parents, leaf = key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            raise InvalidUsageError(f"Unknown config key: {key}")
        node = child
    if leaf not in node or isinstance(node[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")
    node[leaf] = _coerce(key, node[leaf], raw)
    return node[leaf]


@config_app.command("show")
def config_show() -> None:
    """Print the saved configuration.

    Example::

        specfinder --json config show
    """
    from specfinder.config import get_config_dir, load_global_config

    try:
        config = load_global_config()
    except SpecfinderError as exc:
        fail(exc)
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. request.max_concurrency."),
    value: str = typer.Argument(help="New value; converted to the key's type."),
) -> None:
    """Change one saved setting.

    Example::

        specfinder config set token_source file:~/.github-token
        specfinder config set request.tree_timeout 30
    """
    from specfinder.config import load_global_config, save_global_config
    from specfinder.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
        stored = _assign(data, key, value)
        try:
            updated = GlobalConfig.model_validate(data)
        except ValueError as exc:
            raise InvalidUsageError(f"Validation error: {exc}") from exc
        save_global_config(updated)
    except SpecfinderError as exc:
        fail(exc)
    success(f"Set {key} = {stored}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore default settings (asks first unless ``--force``)."""
    from specfinder.config import save_global_config
    from specfinder.models import GlobalConfig

    force = bool(ctx.obj and ctx.obj.get("force"))
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
