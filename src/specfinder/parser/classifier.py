"""Heuristic dialect and version detection over raw spec text.

Discovery must decide, for every candidate file, whether it really is an
API description. It does so with literal substring checks and two regular
expressions instead of a structural parse, so that slightly broken files
are still reported and unrelated JSON/YAML is cheaply rejected:

* A document is **OpenAPI** if it contains ``openapi:`` (YAML key) or
  ``"openapi"`` (JSON key); otherwise **Swagger** if it contains
  ``swagger:`` or ``"swagger"``; otherwise it is not a spec.
* The version is the first dotted triple after an ``openapi`` key, else the
  first dotted pair after a ``swagger`` key, else ``"1.0.0"``.

The version patterns accept an optional quote between the key and the
colon so JSON documents (``"openapi": "3.0.1"``) recover their version too.
"""

from __future__ import annotations

import re
from typing import Optional

from specfinder.models import DetectedSpec, SpecDialect

DEFAULT_VERSION = "1.0.0"

_OPENAPI_TOKENS = ("openapi:", '"openapi"')
_SWAGGER_TOKENS = ("swagger:", '"swagger"')

_OPENAPI_VERSION_RE = re.compile(r"""openapi["']?:\s*['"]?(\d+\.\d+\.\d+)""", re.IGNORECASE)
_SWAGGER_VERSION_RE = re.compile(r"""swagger["']?:\s*['"]?(\d+\.\d+)""", re.IGNORECASE)


def detect_dialect(text: str) -> Optional[SpecDialect]:
    """Return the dialect declared by *text*, or None if it is not a spec.

    OpenAPI wins when both tokens appear.
    """
    if any(token in text for token in _OPENAPI_TOKENS):
        return SpecDialect.OPENAPI
    if any(token in text for token in _SWAGGER_TOKENS):
        return SpecDialect.SWAGGER
    return None


def detect_version(text: str) -> str:
    """Recover the spec version token from *text*.

    The OpenAPI pattern is tried first regardless of the detected dialect.

    Returns:
        ``"3.0.1"``-style for OpenAPI, ``"2.0"``-style for Swagger, or
        :data:`DEFAULT_VERSION` when neither pattern matches.
    """
    match = _OPENAPI_VERSION_RE.search(text)
    if match is None:
        match = _SWAGGER_VERSION_RE.search(text)
    if match is None:
        return DEFAULT_VERSION
    return match.group(1)


def classify_candidate(path: str, text: str) -> Optional[DetectedSpec]:
    """Classify one candidate file's decoded content.

    Args:
        path: Repository path of the candidate.
        text: Decoded file content.

    Returns:
        A :class:`~specfinder.models.DetectedSpec`, or ``None`` when the
        text contains neither dialect token (an expected false positive of
        the filename heuristic).
    """
    dialect = detect_dialect(text)
    if dialect is None:
        return None
    return DetectedSpec(
        name=path.rsplit("/", 1)[-1],
        path=path,
        type=dialect,
        version=detect_version(text),
    )
