"""Terminal rendering for specfinder commands.

Data and diagnostics never share a stream: discovered specs, extracted
summaries and JSON error objects are written to stdout (or to the ``-o``
file), while progress notes, warnings and errors go to stderr. A pipeline
such as ``specfinder --json discover acme api | jq`` therefore only ever
sees parseable JSON.

Rendering modes:

``json``
    Indented JSON, one document per call.
``plain``
    Tab-separated lines, suitable for ``cut`` and ``awk``.
``rich``
    Tables and highlighted JSON via Rich.
``auto``
    ``rich`` on an interactive terminal with colour enabled, else ``plain``.

Colour is disabled by ``--no-color``, by any value of ``NO_COLOR`` and by
``TERM=dumb``.

The CLI root callback installs one :class:`OutputManager` with
:func:`set_output`; commands reach it through :func:`get_output` or the
thin module-level helpers at the bottom of this file.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Rendering modes selectable with ``--json``/``--plain`` or ``output.format``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _to_json(data: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


class OutputManager:
    """Route command results to stdout and notices to stderr.

    Args:
        format: Requested mode; ``AUTO`` is resolved once, here.
        no_color: Strip colour and markup from both streams.
        quiet: Drop informational notices (warnings and errors still print).
        verbose: Emit ``debug`` notices.
        output_file: Write results to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        rich_stdout = self._format == OutputFormat.RICH
        self._out = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_stdout)
        self._err = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- results (stdout / output file) --------------------------------- #

    def format_response(self, data: Any) -> None:
        """Render one result document in the active mode.

        With ``output_file`` set the document is written there as JSON (or
        as text for non-container values), replacing any previous content.
        """
        if self._output_file:
            body = _to_json(data) if isinstance(data, (dict, list)) else str(data)
            with open(self._output_file, "w", encoding="utf-8") as fh:
                fh.write(body if body.endswith("\n") else body + "\n")
            return

        if self._format == OutputFormat.JSON:
            if isinstance(data, str):
                try:
                    data = json.loads(data)
                except ValueError:
                    self.print_data(data)
                    return
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            self._out.print(Syntax(_to_json(data), "json", theme="monokai", word_wrap=True))
        else:
            self._out.print(str(data))

    def print_data(self, text: str) -> None:
        """Write one line of result text; appends when redirected to a file."""
        if not self._output_file:
            print(text, file=sys.stdout, flush=True)
            return
        with open(self._output_file, "a", encoding="utf-8") as fh:
            fh.write(text if text.endswith("\n") else text + "\n")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows under *headers*: Rich table, TSV, or a list of JSON records."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._out.print(table)

    # -- notices (stderr) ------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._notify(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._notify(message, f"[green]{message}[/green]")

    def suggest(self, message: str) -> None:
        """Print a next-step hint such as the ``extract`` command for a found spec."""
        if not self._quiet:
            self._notify(f"→ {message}", f"[dim]→ {message}[/dim]")

    def warning(self, message: str) -> None:
        self._notify(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self._notify(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._notify(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _notify(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._err.print(markup)


def _plain_lines(data: Any) -> list[str]:
    """Flatten *data* to TSV lines; nested values are inlined as compact JSON."""
    if isinstance(data, dict):
        return [
            f"{key}\t{_to_json(value, None) if isinstance(value, (dict, list)) else value}"
            for key, value in data.items()
        ]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is present (even empty) or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- process-wide manager ------------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between CLI invocations)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)
