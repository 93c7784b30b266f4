"""Decode raw repository file content into a Python document tree.

This module is the I/O-free half of extraction: it takes the bytes a
source host returned for one file and turns them into JSON/YAML data.

The two public functions are:

* :func:`decode_content` -- undo the transport encoding (base64 for the
  GitHub contents API) and decode the result as UTF-8 text.
* :func:`parse_document` -- parse the text as strict JSON when the path
  ends in ``.json``, otherwise as YAML.

Both raise :class:`~specfinder.exceptions.MalformedSpecError`. When the
decoder reports a position, the error carries the 1-based line, column and
the offending source line so users can fix their file.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Optional

import yaml

from specfinder.exceptions import MalformedSpecError


def decode_content(payload: str | bytes, encoding: str = "base64") -> str:
    """Decode a transport-encoded file payload to text.

    Args:
        payload: The encoded payload as returned by the source host.
            GitHub wraps base64 content at 60 columns; embedded newlines
            are ignored.
        encoding: Transport encoding. ``"base64"`` and ``"utf-8"``
            (already plain text) are supported.

    Returns:
        The decoded UTF-8 text.

    Raises:
        MalformedSpecError: If the payload is not valid base64, is not
            UTF-8 text, or uses an unsupported encoding.
    """
    if encoding in ("utf-8", "utf8", "none", ""):
        raw = payload.encode("utf-8") if isinstance(payload, str) else payload
    elif encoding == "base64":
        try:
            raw = base64.b64decode(payload)
        except (binascii.Error, ValueError) as exc:
            raise MalformedSpecError(f"Invalid base64 content: {exc}") from exc
    else:
        raise MalformedSpecError(f"Unsupported content encoding: {encoding}")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedSpecError(f"File content is not UTF-8 text: {exc}") from exc


def is_json_path(path: str) -> bool:
    """Return True if *path* selects the strict JSON decoder."""
    return path.lower().endswith(".json")


def parse_document(text: str, path: str) -> Any:
    """Parse spec text with the decoder selected by *path*.

    Files ending in ``.json`` are parsed as strict JSON. Everything else is
    parsed as YAML, which also accepts well-formed JSON, so a JSON document
    saved with a ``.yaml`` extension still loads.

    No shape checks are applied here; the caller receives whatever the
    decoder produced (usually a dict, but possibly a list, scalar, or
    ``None`` for an empty YAML file).

    Args:
        text: The decoded file text.
        path: Repository path of the file, used only for decoder selection.

    Returns:
        The parsed document.

    Raises:
        MalformedSpecError: If the selected decoder rejects the text.
    """
    if is_json_path(path):
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedSpecError(
                f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno}, column {exc.colno})",
                line=exc.lineno,
                column=exc.colno,
                snippet=_source_line(text, exc.lineno),
            ) from exc
        except RecursionError as exc:
            raise MalformedSpecError(
                f"Invalid JSON in {path}: document is nested too deeply"
            ) from exc

    try:
        return yaml.safe_load(text)
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        problem = exc.problem or exc.context or "syntax error"
        where = f" (line {line}, column {column})" if line is not None else ""
        raise MalformedSpecError(
            f"Invalid YAML in {path}: {problem}{where}",
            line=line,
            column=column,
            snippet=_source_line(text, line),
        ) from exc
    except yaml.YAMLError as exc:
        raise MalformedSpecError(f"Invalid YAML in {path}: {exc}") from exc
    except RecursionError as exc:
        raise MalformedSpecError(
            f"Invalid YAML in {path}: document is nested too deeply"
        ) from exc


def _source_line(text: str, line: Optional[int]) -> Optional[str]:
    """Return the 1-based *line* of *text*, or None when out of range."""
    if line is None or line < 1:
        return None
    lines = text.splitlines()
    if line > len(lines):
        return None
    return lines[line - 1]
