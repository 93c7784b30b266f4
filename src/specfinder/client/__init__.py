"""Source-host clients for specfinder.

Provides the abstract :class:`SourceHostClient` interface and the
:class:`GitHubClient` implementation backed by :class:`httpx.AsyncClient`.

Example::

    from specfinder.client import GitHubClient

    async with GitHubClient(token) as client:
        ref = await client.resolve_default_ref("octocat", "hello-world")
        tree = await client.list_tree_recursive("octocat", "hello-world", ref)
"""

from specfinder.client.base import SourceHostClient
from specfinder.client.github import GitHubClient

__all__ = ["SourceHostClient", "GitHubClient"]
