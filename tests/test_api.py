"""Tests for specfinder.api -- library entry points end to end."""

from __future__ import annotations

import asyncio

import pytest

from specfinder import api
from specfinder.exceptions import (
    InvalidUsageError,
    MalformedSpecError,
    NotFoundError,
    UnauthenticatedError,
    UpstreamUnavailableError,
)
from specfinder.models import GlobalConfig, SpecDialect

PETSTORE = 'openapi: "3.0.3"\ninfo:\n  title: Petstore API\n  version: "1.4.0"\npaths:\n  /pets: {}\n'
LEGACY = '{"swagger": "2.0", "info": {"title": "Legacy"}, "paths": {"/o": {}}}'


class TestDiscoverSpecs:
    def test_discovers_through_github_client(self, fake_github) -> None:
        fake = fake_github(
            files={
                "services/openapi.yaml": PETSTORE,
                "legacy/swagger.json": LEGACY,
                "config/api.json": '{"retries": 3}',
                "README.md": "openapi: 3.0.0",
            },
            default_branch="trunk",
        )
        specs = api.discover_specs_sync("acme", "platform", token="good-token")

        assert [(s.path, s.type, s.version) for s in specs] == [
            ("services/openapi.yaml", SpecDialect.OPENAPI, "3.0.3"),
            ("legacy/swagger.json", SpecDialect.SWAGGER, "2.0"),
        ]
        assert set(fake.content_refs()) == {"trunk"}

    def test_no_token(self, fake_github) -> None:
        fake = fake_github(files={"openapi.yaml": PETSTORE})
        with pytest.raises(UnauthenticatedError):
            api.discover_specs_sync("acme", "platform", token=None)
        assert fake.requests == []

    def test_rejected_token(self, fake_github) -> None:
        fake_github(files={"openapi.yaml": PETSTORE})
        with pytest.raises(UnauthenticatedError):
            api.discover_specs_sync("acme", "platform", token="stale-token")

    def test_tree_failure(self, fake_github) -> None:
        fake_github(files={"openapi.yaml": PETSTORE}, tree_status=503)
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            api.discover_specs_sync("acme", "platform", token="good-token")
        assert exc_info.value.status_code == 503

    def test_with_supplied_client(self, make_host) -> None:
        host = make_host(files={"oas.yml": PETSTORE})
        specs = asyncio.run(api.discover_specs("acme", "platform", client=host))
        assert [s.name for s in specs] == ["oas.yml"]

    def test_config_concurrency_applies(self, make_host) -> None:
        host = make_host(
            files={f"s{i}/openapi.yaml": PETSTORE for i in range(5)}, delay=0.01
        )
        config = GlobalConfig.model_validate({"request": {"max_concurrency": 2}})
        asyncio.run(api.discover_specs("acme", "platform", config=config, client=host))
        assert host.max_in_flight == 2


class TestExtractSpecSummary:
    def test_extracts_at_default_branch(self, fake_github) -> None:
        fake = fake_github(files={"services/openapi.yaml": PETSTORE}, default_branch="trunk")
        summary = api.extract_spec_summary_sync(
            "acme", "platform", "services/openapi.yaml", token="good-token"
        )
        assert summary.info.title == "Petstore API"
        assert summary.dialect == "3.0.3"
        assert summary.path_count == 1
        assert fake.content_refs() == ["trunk"]

    def test_explicit_ref_skips_branch_lookup(self, fake_github) -> None:
        fake = fake_github(files={"swagger.json": LEGACY})
        summary = api.extract_spec_summary_sync(
            "acme", "platform", "swagger.json", ref="v2", token="good-token"
        )
        assert summary.dialect == "2.0"
        assert fake.content_refs() == ["v2"]
        assert all(r.url.path != "/repos/acme/platform" for r in fake.requests)

    def test_missing_file(self, fake_github) -> None:
        fake_github(files={})
        with pytest.raises(NotFoundError):
            api.extract_spec_summary_sync(
                "acme", "platform", "openapi.yaml", ref="main", token="good-token"
            )

    def test_malformed_file(self, fake_github, broken_yaml: str) -> None:
        fake_github(files={"openapi.yaml": broken_yaml})
        with pytest.raises(MalformedSpecError) as exc_info:
            api.extract_spec_summary_sync(
                "acme", "platform", "openapi.yaml", token="good-token"
            )
        assert exc_info.value.line == 4

    def test_yaml_in_json_file_is_malformed(self, make_host) -> None:
        host = make_host(files={"openapi.json": "openapi: 3.0.0\n"})
        with pytest.raises(MalformedSpecError, match="Invalid JSON"):
            asyncio.run(
                api.extract_spec_summary("acme", "platform", "openapi.json", client=host)
            )

    def test_repeat_calls_refetch(self, make_host) -> None:
        host = make_host(files={"openapi.yaml": PETSTORE})
        for _ in range(2):
            asyncio.run(
                api.extract_spec_summary("acme", "platform", "openapi.yaml", client=host)
            )
        assert len(host.fetched) == 2


def test_list_repositories(fake_github) -> None:
    fake = fake_github(files={})
    repos = api.list_repositories_sync("good-token")
    assert [r.full_name for r in repos] == ["acme/platform", "acme/site"]
    assert fake.requests[0].url.path == "/user"


@pytest.mark.parametrize("owner, repo", [("", "platform"), ("acme", "  ")])
def test_blank_identifiers_are_rejected(make_host, owner: str, repo: str) -> None:
    host = make_host(files={"openapi.yaml": PETSTORE})
    with pytest.raises(InvalidUsageError, match="Missing required"):
        asyncio.run(api.discover_specs(owner, repo, client=host))
    assert host.fetched == []


def test_blank_path_is_rejected(make_host) -> None:
    host = make_host()
    with pytest.raises(InvalidUsageError, match="path"):
        asyncio.run(api.extract_spec_summary("acme", "platform", " ", client=host))
