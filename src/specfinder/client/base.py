"""Abstract source-host interface used by discovery and extraction.

Discovery needs exactly three read operations from whatever hosts the
repository; :class:`SourceHostClient` names them so the scanner never
depends on a concrete provider. :class:`~specfinder.client.github.GitHubClient`
is the shipped implementation; tests substitute in-memory fakes.

All methods are coroutines and every implementation must be usable as an
async context manager.

See Also:
    :mod:`specfinder.discovery.scanner` for the consumer of this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from specfinder.models import FileContent, TreeEntry


class SourceHostClient(ABC):
    """Read-only access to a source repository host.

    Implementations own their transport and must release it in
    :meth:`__aexit__`. Credentials are supplied at construction; this
    interface never refreshes them.
    """

    async def __aenter__(self) -> SourceHostClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    @abstractmethod
    async def resolve_default_ref(self, owner: str, repo: str) -> str:
        """Return the repository's default branch name.

        Raises:
            UnauthenticatedError: If the credential is rejected.
            NotFoundError: If the repository does not exist or is not visible.
            UpstreamUnavailableError: On network, timeout, or server failures.
        """
        ...

    @abstractmethod
    async def list_tree_recursive(
        self, owner: str, repo: str, ref: str
    ) -> list[TreeEntry]:
        """Return every node of the repository tree at *ref*, in host order.

        Raises:
            UpstreamUnavailableError: If the tree cannot be listed in full
                (including the tree-fetch timeout).
        """
        ...

    @abstractmethod
    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> FileContent:
        """Return the transport-encoded content of the blob at *path*.

        Raises:
            NotFoundError: If *path* does not exist or is a directory.
            UpstreamUnavailableError: On network, timeout, or server failures.
        """
        ...
