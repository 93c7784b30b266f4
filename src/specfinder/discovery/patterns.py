"""Filename patterns that make a repository file a discovery candidate.

A blob is a candidate when its final path segment ends in one of::

    openapi.(yaml|yml|json)
    swagger.(yaml|yml|json)
    api.(yaml|yml|json)
    oas.(yaml|yml|json)

Matching is case-insensitive and anchored only at the end, so
``OpenAPI.YAML``, ``petstore-openapi.json`` and ``myapi.yml`` all qualify.
Being a candidate says nothing about the content; see
:mod:`specfinder.parser.classifier` for the verification step.
"""

from __future__ import annotations

import re

from specfinder.models import EntryKind, TreeEntry

SPEC_FILENAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"openapi\.(yaml|yml|json)$", re.IGNORECASE),
    re.compile(r"swagger\.(yaml|yml|json)$", re.IGNORECASE),
    re.compile(r"api\.(yaml|yml|json)$", re.IGNORECASE),
    re.compile(r"oas\.(yaml|yml|json)$", re.IGNORECASE),
)


def is_candidate_path(path: str) -> bool:
    """Return True if the final segment of *path* matches a spec filename pattern."""
    name = path.rsplit("/", 1)[-1]
    return any(pattern.search(name) for pattern in SPEC_FILENAME_PATTERNS)


def list_candidates(entries: list[TreeEntry]) -> list[TreeEntry]:
    """Filter a tree listing down to candidate blobs, preserving listing order.

    Directory and submodule entries are always excluded. No cap is applied
    to the number of candidates.
    """
    return [
        entry
        for entry in entries
        if entry.kind == EntryKind.BLOB and is_candidate_path(entry.path)
    ]
