"""Built-in CLI command groups for specfinder.

Each sub-module defines a Typer command or sub-application that is
registered on the root app in :mod:`specfinder.app`:

* :mod:`~specfinder.commands.discover` -- ``specfinder discover``
* :mod:`~specfinder.commands.extract` -- ``specfinder extract``
* :mod:`~specfinder.commands.repos` -- ``specfinder repos``
* :mod:`~specfinder.commands.config` -- ``specfinder config show|set|reset``

The helpers below are shared by every command: :func:`load_context_config`
resolves the effective configuration from the root callback's flags, and
:func:`fail` reports a :class:`~specfinder.exceptions.SpecfinderError`
and exits with its code.
"""

from __future__ import annotations

import json
from typing import NoReturn

import typer

from specfinder.exceptions import ConfigError, SpecfinderError
from specfinder.models import GlobalConfig


def load_context_config(ctx: typer.Context) -> GlobalConfig:
    """Resolve the effective config for this invocation.

    When no ``--json``/``--plain`` flag was given and the config file pins
    an output format, the global output manager is rebuilt with it.

    Raises:
        ConfigError: If a config file is invalid or names an unknown format.
    """
    from specfinder.config import resolve_config
    from specfinder.output import OutputFormat, OutputManager, set_output

    obj = ctx.obj or {}
    config = resolve_config(
        cli_api_url=obj.get("api_url"),
        cli_token_source=obj.get("token_source"),
        cli_format=obj.get("format"),
    )

    if obj.get("format") is None and config.output.format != OutputFormat.AUTO.value:
        try:
            fmt = OutputFormat(config.output.format)
        except ValueError as exc:
            raise ConfigError(f"Unknown output format: {config.output.format}") from exc
        set_output(OutputManager(format=fmt, **obj.get("output_options", {})))

    return config


def fail(exc: SpecfinderError) -> NoReturn:
    """Report *exc* and exit with its exit code.

    The message always goes to stderr; in JSON mode the error object is
    also written to stdout so scripted callers receive a parseable body.
    """
    from specfinder.output import OutputFormat, error, get_output, print_data

    error(exc.message)
    if get_output().format == OutputFormat.JSON:
        print_data(json.dumps(exc.to_dict(), indent=2, ensure_ascii=False))
    raise typer.Exit(code=exc.exit_code)


__all__ = ["fail", "load_context_config"]
