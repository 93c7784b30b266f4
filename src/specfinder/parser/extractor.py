"""Extract a :class:`~specfinder.models.ParsedSpecSummary` from a parsed document.

Extraction is deliberately forgiving. The document is treated as a generic
key-value tree and every field falls back independently:

* ``info.title`` -- ``"API"``
* ``info.version`` -- ``"1.0.0"``
* ``info.description`` -- ``""``
* dialect tag -- the ``openapi`` value, else the ``swagger`` value, else ``None``
* ``servers`` -- ``[]``
* path count -- number of keys under ``paths``, else ``0``

Missing or falsy values take the default, and so does any section that is
not the expected shape (a string ``info``, a list ``paths``). Nothing here
raises; only :func:`~specfinder.parser.loader.parse_document` can fail.
"""

from __future__ import annotations

from typing import Any, Optional

from specfinder.models import ParsedSpecSummary, SpecInfo
from specfinder.parser.loader import parse_document

_DEFAULT_TITLE = "API"
_DEFAULT_VERSION = "1.0.0"


def extract_summary(document: Any) -> ParsedSpecSummary:
    """Build a summary from a parsed JSON/YAML document.

    Args:
        document: Whatever :func:`~specfinder.parser.loader.parse_document`
            returned. Non-mapping documents produce an all-defaults summary.

    Returns:
        The populated :class:`~specfinder.models.ParsedSpecSummary`.

    Example::

        doc = {"openapi": "3.0.0", "info": {"title": "T"}, "paths": {"/a": {}}}
        summary = extract_summary(doc)
        summary.path_count  # 1
    """
    spec = document if isinstance(document, dict) else {}

    return ParsedSpecSummary(
        info=_extract_info(spec),
        dialect=_extract_dialect(spec),
        servers=_extract_servers(spec),
        path_count=_count_paths(spec),
    )


def extract_from_text(text: str, path: str) -> ParsedSpecSummary:
    """Parse *text* with the decoder chosen by *path* and summarise it.

    Raises:
        MalformedSpecError: If the text cannot be parsed.
    """
    return extract_summary(parse_document(text, path))


def _extract_info(spec: dict[str, Any]) -> SpecInfo:
    info = spec.get("info")
    if not isinstance(info, dict):
        info = {}

    return SpecInfo(
        title=_as_text(info.get("title")) or _DEFAULT_TITLE,
        version=_as_text(info.get("version")) or _DEFAULT_VERSION,
        description=_as_text(info.get("description")) or "",
    )


def _extract_dialect(spec: dict[str, Any]) -> Optional[str]:
    return _as_text(spec.get("openapi")) or _as_text(spec.get("swagger"))


def _extract_servers(spec: dict[str, Any]) -> list[Any]:
    servers = spec.get("servers")
    if not isinstance(servers, list):
        return []
    return list(servers)


def _count_paths(spec: dict[str, Any]) -> int:
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        return 0
    return len(paths)


def _as_text(value: Any) -> Optional[str]:
    """Stringify scalar YAML values (``version: 1.2`` loads as a float)."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return None
    text = str(value)
    return text or None
