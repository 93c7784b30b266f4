"""GitHub REST client -- the shipped :class:`~specfinder.client.base.SourceHostClient`.

This module provides :class:`GitHubClient`, a thin async wrapper around
:class:`httpx.AsyncClient` that speaks the handful of GitHub REST endpoints
specfinder needs:

- ``GET /repos/{owner}/{repo}`` -- default branch resolution.
- ``GET /repos/{owner}/{repo}/git/trees/{ref}?recursive=1`` -- full tree
  listing, under its own (longer) timeout.
- ``GET /repos/{owner}/{repo}/contents/{path}?ref=`` -- one file's
  base64-encoded content.
- ``GET /user`` and ``GET /user/repos`` -- token check and repository
  listing for the ``repos`` command.

Every call sends the bearer token supplied at construction. HTTP errors are
mapped onto the specfinder exception hierarchy: 401 becomes
:class:`~specfinder.exceptions.UnauthenticatedError`, 404 becomes
:class:`~specfinder.exceptions.NotFoundError`, and everything else
(403, 5xx, timeouts, connection failures) becomes
:class:`~specfinder.exceptions.UpstreamUnavailableError`. No request is
retried; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from specfinder import __version__
from specfinder.client.base import SourceHostClient
from specfinder.exceptions import (
    NotFoundError,
    UnauthenticatedError,
    UpstreamUnavailableError,
)
from specfinder.models import FileContent, RepositorySummary, RequestConfig, TreeEntry

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
"""Public GitHub REST API root."""

_API_VERSION = "2022-11-28"
_REPOS_PER_PAGE = 100
_MAX_REPO_PAGES = 10


class GitHubClient(SourceHostClient):
    """Async GitHub REST client with bearer auth and typed error mapping.

    Must be used as an async context manager so that the underlying
    transport is opened and closed around one logical call.

    Args:
        token: GitHub OAuth or personal access token.
        api_url: API root, overridable for GitHub Enterprise.
        request: Timeout and TLS settings. ``tree_timeout`` applies to the
            recursive tree listing, ``timeout`` to everything else.
        transport: Optional custom transport (``httpx.MockTransport`` in tests).

    Raises:
        UnauthenticatedError: Immediately, if *token* is empty.

    Example::

        async with GitHubClient(token) as client:
            ref = await client.resolve_default_ref("octocat", "hello-world")
    """

    def __init__(
        self,
        token: Optional[str],
        api_url: str = DEFAULT_API_URL,
        request: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not token:
            raise UnauthenticatedError("Not authenticated: no GitHub token available")
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._request = request or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> GitHubClient:
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": _API_VERSION,
                "User-Agent": f"specfinder/{__version__}",
            },
            timeout=self._request.timeout,
            verify=self._request.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # SourceHostClient operations
    # ------------------------------------------------------------------ #

    async def resolve_default_ref(self, owner: str, repo: str) -> str:
        data = await self._get_json(
            f"/repos/{_segment(owner)}/{_segment(repo)}",
            what=f"repository {owner}/{repo}",
            not_found=f"Repository or branch not found: {owner}/{repo}",
        )
        branch = data.get("default_branch") if isinstance(data, dict) else None
        if not branch:
            raise UpstreamUnavailableError(
                f"Repository {owner}/{repo} did not report a default branch"
            )
        return str(branch)

    async def list_tree_recursive(
        self, owner: str, repo: str, ref: str
    ) -> list[TreeEntry]:
        data = await self._get_json(
            f"/repos/{_segment(owner)}/{_segment(repo)}/git/trees/{_segment(ref)}",
            params={"recursive": "1"},
            timeout=self._request.tree_timeout,
            what=f"tree of {owner}/{repo}@{ref}",
            not_found=f"Repository or branch not found: {owner}/{repo}@{ref}",
        )
        items = data.get("tree") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise UpstreamUnavailableError(
                f"Unexpected tree listing for {owner}/{repo}@{ref}"
            )
        if data.get("truncated"):
            logger.warning(
                "Tree listing for %s/%s@%s was truncated by GitHub; "
                "some files will not be scanned",
                owner, repo, ref,
            )

        entries: list[TreeEntry] = []
        for item in items:
            try:
                entries.append(TreeEntry.model_validate(item))
            except ValidationError:
                logger.debug("Skipping unrecognised tree item: %r", item)
        return entries

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> FileContent:
        data = await self._get_json(
            f"/repos/{_segment(owner)}/{_segment(repo)}/contents/{quote(path, safe='/')}",
            params={"ref": ref},
            what=f"{path} in {owner}/{repo}@{ref}",
        )
        if isinstance(data, list) or not isinstance(data, dict):
            raise NotFoundError(f"File not found or is a directory: {path}")
        if data.get("type", "file") != "file" or "content" not in data:
            raise NotFoundError(f"File not found or is a directory: {path}")

        encoding = str(data.get("encoding") or "base64")
        if encoding == "none":
            # The contents API omits bodies above 1 MB.
            raise UpstreamUnavailableError(
                f"File is too large to fetch through the contents API: {path}"
            )
        content = data["content"] or ""
        if not isinstance(content, str):
            raise UpstreamUnavailableError(f"Unexpected contents response for {path}")
        return FileContent(path=path, content=content, encoding=encoding)

    # ------------------------------------------------------------------ #
    # Account operations
    # ------------------------------------------------------------------ #

    async def get_authenticated_user(self) -> dict[str, Any]:
        data = await self._get_json("/user", what="authenticated user")
        if not isinstance(data, dict):
            raise UpstreamUnavailableError("Unexpected response for authenticated user")
        return data

    async def list_repositories(
        self,
        per_page: int = _REPOS_PER_PAGE,
        max_pages: int = _MAX_REPO_PAGES,
    ) -> list[RepositorySummary]:
        """List repositories visible to the token, most recently updated first.

        Pages through ``/user/repos`` until a short page is returned or
        *max_pages* pages have been read.

        Returns:
            The repositories in the order GitHub returned them.
        """
        repositories: list[RepositorySummary] = []
        for page in range(1, max_pages + 1):
            data = await self._get_json(
                "/user/repos",
                params={
                    "page": page,
                    "per_page": per_page,
                    "sort": "updated",
                    "direction": "desc",
                },
                what="repository list",
            )
            if not isinstance(data, list):
                raise UpstreamUnavailableError("Unexpected repository list response")
            repositories.extend(RepositorySummary.model_validate(item) for item in data)
            if len(data) < per_page:
                break
        return repositories

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _get_json(
        self,
        url: str,
        what: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
        not_found: Optional[str] = None,
    ) -> Any:
        """GET *url*, map failures to typed errors, and decode the JSON body."""
        assert self._client is not None, "Client not initialised -- use as async context manager"

        logger.debug("GET %s params=%s", url, params)
        try:
            response = await self._client.get(
                url,
                params=params,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailableError(f"Timed out fetching {what}") from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailableError(f"Failed to fetch {what}: {exc}") from exc

        self._map_response_error(response, what, not_found)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError(f"Invalid JSON returned for {what}") from exc

    def _map_response_error(
        self, response: httpx.Response, what: str, not_found: Optional[str] = None
    ) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            body = response.json()
            detail = body.get("message") if isinstance(body, dict) else str(body)
        except ValueError:
            detail = response.text[:200] if response.text else None

        if status == 401:
            raise UnauthenticatedError("Invalid or expired GitHub token")
        if status == 404:
            raise NotFoundError(
                not_found or f"Not found: {what}", status_code=status, detail=detail
            )
        raise UpstreamUnavailableError(
            f"HTTP {status} fetching {what}", status_code=status, detail=detail
        )


def _segment(value: str) -> str:
    """Percent-encode one URL path segment (branch names may contain ``/``)."""
    return quote(value, safe="")
