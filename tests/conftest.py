"""Shared test fixtures for specfinder.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, faking a source host, and
running CLI commands. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import asyncio
import base64
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from specfinder.client.base import SourceHostClient
from specfinder.client.github import GitHubClient
from specfinder.exceptions import NotFoundError
from specfinder.models import EntryKind, FileContent, GlobalConfig, TreeEntry
from specfinder.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is forced on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec text fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_yaml() -> str:
    return (FIXTURES_DIR / "petstore_openapi.yaml").read_text(encoding="utf-8")


@pytest.fixture
def legacy_swagger_json() -> str:
    return (FIXTURES_DIR / "legacy_swagger.json").read_text(encoding="utf-8")


@pytest.fixture
def not_a_spec_json() -> str:
    return (FIXTURES_DIR / "not_a_spec_api.json").read_text(encoding="utf-8")


@pytest.fixture
def broken_yaml() -> str:
    return (FIXTURES_DIR / "broken_indent.yaml").read_text(encoding="utf-8")


def encode(text: str) -> str:
    """Base64-encode *text* the way the GitHub contents API does."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


# ---------------------------------------------------------------------------
# In-memory source host
# ---------------------------------------------------------------------------


class FakeSourceHost(SourceHostClient):
    """Source host backed by dicts, recording calls and peak concurrency.

    Args:
        files: Blob path -> decoded text. Every file also appears in the tree.
        default_ref: Branch returned by :meth:`resolve_default_ref`.
        extra_entries: Additional tree entries (directories, submodules)
            appended after the files.
        failures: Path -> exception raised by :meth:`get_file_content`.
        raw_payloads: Path -> already-encoded payload (bypasses ``files``).
        tree_error: Exception raised by :meth:`list_tree_recursive`.
        delay: Seconds each content fetch sleeps, to exercise concurrency.
    """

    def __init__(
        self,
        files: Optional[dict[str, str]] = None,
        default_ref: str = "main",
        extra_entries: Optional[list[TreeEntry]] = None,
        failures: Optional[dict[str, Exception]] = None,
        raw_payloads: Optional[dict[str, str]] = None,
        tree_error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.files = dict(files or {})
        self.default_ref = default_ref
        self.extra_entries = list(extra_entries or [])
        self.failures = dict(failures or {})
        self.raw_payloads = dict(raw_payloads or {})
        self.tree_error = tree_error
        self.delay = delay
        self.fetched: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve_default_ref(self, owner: str, repo: str) -> str:
        return self.default_ref

    async def list_tree_recursive(
        self, owner: str, repo: str, ref: str
    ) -> list[TreeEntry]:
        if self.tree_error is not None:
            raise self.tree_error
        paths = list(self.files) + [p for p in self.raw_payloads if p not in self.files]
        entries = [TreeEntry(path=p, kind=EntryKind.BLOB) for p in paths]
        return entries + self.extra_entries

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> FileContent:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            self.fetched.append((path, ref))
            if path in self.failures:
                raise self.failures[path]
            if path in self.raw_payloads:
                return FileContent(path=path, content=self.raw_payloads[path])
            if path not in self.files:
                raise NotFoundError(f"File not found or is a directory: {path}")
            return FileContent(path=path, content=encode(self.files[path]))
        finally:
            self.in_flight -= 1


@pytest.fixture
def make_host() -> Callable[..., FakeSourceHost]:
    """Factory for :class:`FakeSourceHost` instances."""

    def _make(**kwargs: Any) -> FakeSourceHost:
        return FakeSourceHost(**kwargs)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at *tmp_path*, clears SPECFINDER_* and
    GITHUB_TOKEN variables, and changes into *tmp_path* so no project
    config leaks in.
    """
    monkeypatch.setattr("specfinder.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SPECFINDER_API_URL",
        "SPECFINDER_TOKEN",
        "SPECFINDER_TOKEN_SOURCE",
        "GITHUB_TOKEN",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# GitHub REST fake over httpx.MockTransport
# ---------------------------------------------------------------------------


class FakeGitHub:
    """Route table for a tiny GitHub REST fake served over MockTransport."""

    def __init__(
        self,
        files: dict[str, str],
        default_branch: str = "main",
        tree_status: int = 200,
    ) -> None:
        self.files = files
        self.default_branch = default_branch
        self.tree_status = tree_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.headers.get("Authorization") != "Bearer good-token":
            return httpx.Response(401, json={"message": "Bad credentials"})
        if path == "/repos/acme/platform":
            return httpx.Response(200, json={"default_branch": self.default_branch})
        if path.startswith("/repos/acme/platform/git/trees/"):
            if self.tree_status != 200:
                return httpx.Response(self.tree_status, json={"message": "Server Error"})
            tree = [{"path": "docs", "type": "tree"}]
            tree += [{"path": p, "type": "blob"} for p in self.files]
            return httpx.Response(200, json={"tree": tree, "truncated": False})
        prefix = "/repos/acme/platform/contents/"
        if path.startswith(prefix):
            file_path = path[len(prefix):]
            if file_path not in self.files:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json={"type": "file", "encoding": "base64", "content": encode(self.files[file_path])},
            )
        if path == "/user":
            return httpx.Response(200, json={"login": "octocat"})
        if path == "/user/repos":
            return httpx.Response(
                200,
                json=[
                    {"id": 1, "name": "platform", "full_name": "acme/platform"},
                    {"id": 2, "name": "site", "full_name": "acme/site", "description": "Docs"},
                ],
            )
        return httpx.Response(404, json={"message": "Not Found"})

    def content_refs(self) -> list[str]:
        return [
            r.url.params["ref"] for r in self.requests if "/contents/" in r.url.path
        ]


@pytest.fixture
def fake_github(monkeypatch: pytest.MonkeyPatch):
    """Install a FakeGitHub behind every client built by specfinder.api."""

    def install(**kwargs: Any) -> FakeGitHub:
        fake = FakeGitHub(**kwargs)

        def build(token: Optional[str], config: GlobalConfig) -> GitHubClient:
            return GitHubClient(
                token,
                api_url=config.api_url,
                request=config.request,
                transport=httpx.MockTransport(fake),
            )

        monkeypatch.setattr("specfinder.api._build_client", build)
        return fake

    return install


