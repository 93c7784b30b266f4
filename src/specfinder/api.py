"""Library entry points for discovery and extraction.

These are the two inbound operations of specfinder:

* :func:`discover_specs` -- ``discover(owner, repo)``: the verified specs
  in the repository's default branch.
* :func:`extract_spec_summary` -- ``extract(owner, repo, path, ref)``: the
  summary of one file.

Both are coroutines that open a fresh :class:`~specfinder.client.GitHubClient`
per call unless a client is passed in, in which case the caller owns its
lifecycle. The ``*_sync`` variants wrap them with :func:`asyncio.run` for
scripts and the CLI.

Example::

    from specfinder.api import discover_specs_sync

    for spec in discover_specs_sync("octocat", "hello-world", token):
        print(spec.path, spec.type.value, spec.version)
"""

from __future__ import annotations

import asyncio
from typing import Optional

from specfinder.client.base import SourceHostClient
from specfinder.client.github import GitHubClient
from specfinder.discovery.scanner import scan_repository
from specfinder.exceptions import InvalidUsageError
from specfinder.models import (
    DetectedSpec,
    GlobalConfig,
    ParsedSpecSummary,
    RepositorySummary,
)
from specfinder.parser.extractor import extract_from_text
from specfinder.parser.loader import decode_content


def _build_client(token: Optional[str], config: GlobalConfig) -> GitHubClient:
    return GitHubClient(token, api_url=config.api_url, request=config.request)


def _require(**fields: Optional[str]) -> None:
    """Reject blank identifiers before any request is made."""
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise InvalidUsageError(f"Missing required parameter(s): {', '.join(missing)}")


async def discover_specs(
    owner: str,
    repo: str,
    token: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
    client: Optional[SourceHostClient] = None,
) -> list[DetectedSpec]:
    """Discover the API descriptions in *owner*/*repo*.

    Args:
        owner: Repository owner.
        repo: Repository name.
        token: GitHub token; required unless *client* is given.
        config: Effective configuration (defaults when ``None``).
        client: An already-entered source-host client to use instead of
            building a :class:`~specfinder.client.GitHubClient`.

    Returns:
        The verified specs; possibly empty.

    Raises:
        InvalidUsageError: If *owner* or *repo* is blank.
        UnauthenticatedError: If no token is available or it is rejected.
        UpstreamUnavailableError: If the tree cannot be listed.
    """
    _require(owner=owner, repo=repo)
    config = config or GlobalConfig()
    if client is not None:
        return await scan_repository(
            client, owner, repo, max_concurrency=config.request.max_concurrency
        )
    async with _build_client(token, config) as github:
        return await scan_repository(
            github, owner, repo, max_concurrency=config.request.max_concurrency
        )


async def extract_spec_summary(
    owner: str,
    repo: str,
    path: str,
    ref: Optional[str] = None,
    token: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
    client: Optional[SourceHostClient] = None,
) -> ParsedSpecSummary:
    """Fetch one file and extract its :class:`~specfinder.models.ParsedSpecSummary`.

    Args:
        owner: Repository owner.
        repo: Repository name.
        path: Repository path of the spec file.
        ref: Branch, tag, or commit; the default branch when ``None``.
        token: GitHub token; required unless *client* is given.
        config: Effective configuration (defaults when ``None``).
        client: An already-entered source-host client.

    Raises:
        InvalidUsageError: If *owner*, *repo* or *path* is blank.
        UnauthenticatedError: If no token is available or it is rejected.
        NotFoundError: If the file does not exist or is a directory.
        UpstreamUnavailableError: If the file cannot be fetched.
        MalformedSpecError: If the content cannot be decoded or parsed.
    """
    _require(owner=owner, repo=repo, path=path)
    config = config or GlobalConfig()
    if client is not None:
        return await _fetch_and_extract(client, owner, repo, path, ref)
    async with _build_client(token, config) as github:
        return await _fetch_and_extract(github, owner, repo, path, ref)


async def _fetch_and_extract(
    client: SourceHostClient,
    owner: str,
    repo: str,
    path: str,
    ref: Optional[str],
) -> ParsedSpecSummary:
    if not ref:
        ref = await client.resolve_default_ref(owner, repo)
    payload = await client.get_file_content(owner, repo, path, ref)
    text = decode_content(payload.content, payload.encoding)
    return extract_from_text(text, path)


async def list_repositories(
    token: Optional[str],
    config: Optional[GlobalConfig] = None,
) -> list[RepositorySummary]:
    """List the repositories visible to *token*, most recently updated first.

    The token is checked against ``/user`` first so an expired token fails
    with :class:`~specfinder.exceptions.UnauthenticatedError` rather than
    an empty listing.
    """
    config = config or GlobalConfig()
    async with _build_client(token, config) as github:
        await github.get_authenticated_user()
        return await github.list_repositories()


def discover_specs_sync(
    owner: str,
    repo: str,
    token: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> list[DetectedSpec]:
    """Blocking wrapper around :func:`discover_specs`."""
    return asyncio.run(discover_specs(owner, repo, token=token, config=config))


def extract_spec_summary_sync(
    owner: str,
    repo: str,
    path: str,
    ref: Optional[str] = None,
    token: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> ParsedSpecSummary:
    """Blocking wrapper around :func:`extract_spec_summary`."""
    return asyncio.run(
        extract_spec_summary(owner, repo, path, ref=ref, token=token, config=config)
    )


def list_repositories_sync(
    token: Optional[str],
    config: Optional[GlobalConfig] = None,
) -> list[RepositorySummary]:
    """Blocking wrapper around :func:`list_repositories`."""
    return asyncio.run(list_repositories(token, config=config))
