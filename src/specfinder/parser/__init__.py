"""Spec parsing -- decode file content, classify it, and extract a summary.

Typical usage::

    from specfinder.parser import decode_content, extract_from_text

    text = decode_content(payload)
    summary = extract_from_text(text, "api/openapi.yaml")

Sub-modules:

* :mod:`~specfinder.parser.loader` -- transport decoding and JSON/YAML parsing.
* :mod:`~specfinder.parser.classifier` -- substring/regex dialect and version
  heuristics used by discovery.
* :mod:`~specfinder.parser.extractor` -- tolerant metadata extraction into a
  :class:`~specfinder.models.ParsedSpecSummary`.
"""

from specfinder.parser.classifier import classify_candidate, detect_dialect, detect_version
from specfinder.parser.extractor import extract_from_text, extract_summary
from specfinder.parser.loader import decode_content, parse_document

__all__ = [
    "classify_candidate",
    "decode_content",
    "detect_dialect",
    "detect_version",
    "extract_from_text",
    "extract_summary",
    "parse_document",
]
