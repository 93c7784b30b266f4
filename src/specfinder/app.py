"""The ``specfinder`` command-line application.

Commands::

    specfinder discover OWNER REPO            verified specs on the default branch
    specfinder extract OWNER REPO PATH        summary of one spec file
    specfinder repos [--search TEXT]          repositories the token can see
    specfinder config show|set|reset          global settings

Global flags (``--json``, ``--api-url``, ``--token-source``, ...) go before
the command name. :func:`main` is the console-script entry point; it maps
any escaped :class:`~specfinder.exceptions.SpecfinderError` to its exit
code and writes a crash log for anything else.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from specfinder import __version__
from specfinder.commands.config import config_app
from specfinder.commands.discover import discover_command
from specfinder.commands.extract import extract_command
from specfinder.commands.repos import repos_command
from specfinder.exit_codes import EXIT_GENERIC_FAILURE

_CANCELLED_EXIT = 130

app = typer.Typer(
    name="specfinder",
    help="Find OpenAPI and Swagger documents in GitHub repositories.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.command("discover")(discover_command)
app.command("extract")(extract_command)
app.command("repos")(repos_command)
app.add_typer(config_app, name="config", help="Show or change saved settings.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"specfinder {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Send records from the ``specfinder`` logger tree to stderr via Rich.

    Dropped discovery candidates are logged at WARNING, so they show by
    default, vanish with ``--quiet`` and gain DEBUG detail with ``--verbose``.
    """
    logger = logging.getLogger("specfinder")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    )
    logger.propagate = False
    logger.setLevel(
        logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True,
        help="Print the specfinder version and exit.",
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="GitHub REST root, e.g. https://ghe.example.com/api/v3."
    ),
    token_source: Optional[str] = typer.Option(
        None, "--token-source", help="Where the GitHub token comes from: env:VAR, file:PATH or prompt."
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit results as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Emit tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request and dropped candidate."),
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask before resetting config."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write results to this file instead of stdout."
    ),
) -> None:
    """Install output and logging for this run and stash global flags in ``ctx.obj``."""
    from specfinder.output import OutputFormat, OutputManager, set_output

    fmt: Optional[OutputFormat] = None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output_options: dict[str, Any] = {
        "no_color": no_color,
        "quiet": quiet,
        "verbose": verbose,
        "output_file": output_file,
    }
    set_output(OutputManager(format=fmt or OutputFormat.AUTO, **output_options))
    _configure_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj.update(
        api_url=api_url,
        token_source=token_source,
        format=fmt.value if fmt is not None else None,
        output_options=output_options,
        force=force,
        verbose=verbose,
    )


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_CANCELLED_EXIT)


def _write_crash_log(exc: BaseException) -> str:
    """Save the traceback of *exc* under the data directory and return its path."""
    from specfinder.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text("".join(traceback.format_exception(exc)), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Console-script entry point."""
    from specfinder.exceptions import SpecfinderError
    from specfinder.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _on_sigint(signal.SIGINT, None)
    except SpecfinderError as exc:
        error(exc.message)
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
