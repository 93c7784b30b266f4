"""Tests for specfinder.discovery.patterns."""

from __future__ import annotations

import pytest

from specfinder.discovery.patterns import is_candidate_path, list_candidates
from specfinder.models import EntryKind, TreeEntry


@pytest.mark.parametrize(
    "path",
    [
        "openapi.yaml",
        "openapi.yml",
        "openapi.json",
        "swagger.json",
        "docs/api.yaml",
        "spec/oas.yml",
        "OpenAPI.YAML",
        "services/billing/petstore-openapi.json",
        "myapi.yml",
    ],
)
def test_candidate_paths(path: str) -> None:
    assert is_candidate_path(path)


@pytest.mark.parametrize(
    "path",
    [
        "README.md",
        "openapi.yaml.bak",
        "openapi.txt",
        "api.yaml/README.md",
        "swagger.xml",
        "package.json",
    ],
)
def test_non_candidate_paths(path: str) -> None:
    assert not is_candidate_path(path)


def test_list_candidates_keeps_blobs_in_order() -> None:
    entries = [
        TreeEntry(path="docs", kind=EntryKind.TREE),
        TreeEntry(path="docs/swagger.json", kind=EntryKind.BLOB),
        TreeEntry(path="README.md", kind=EntryKind.BLOB),
        TreeEntry(path="api.yaml", kind=EntryKind.TREE),
        TreeEntry(path="vendor/oas.yml", kind=EntryKind.COMMIT),
        TreeEntry(path="openapi.yaml", kind=EntryKind.BLOB),
    ]
    assert [e.path for e in list_candidates(entries)] == [
        "docs/swagger.json",
        "openapi.yaml",
    ]


def test_list_candidates_from_wire_items() -> None:
    items = [
        {"path": "api/openapi.json", "type": "blob", "sha": "abc", "size": 120, "mode": "100644"},
        {"path": "api", "type": "tree", "sha": "def", "mode": "040000"},
    ]
    entries = [TreeEntry.model_validate(item) for item in items]
    candidates = list_candidates(entries)
    assert len(candidates) == 1
    assert candidates[0].name == "openapi.json"


def test_list_candidates_empty() -> None:
    assert list_candidates([]) == []
