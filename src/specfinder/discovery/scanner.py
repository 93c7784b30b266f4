"""Repository-wide spec discovery.

:func:`scan_repository` runs the two discovery stages against any
:class:`~specfinder.client.base.SourceHostClient`:

1. **Tree scan** -- resolve the default branch, list the full recursive
   tree at that ref, and keep the blobs whose filename matches a spec
   pattern (:func:`~specfinder.discovery.patterns.list_candidates`).
2. **Verification** -- fetch every candidate concurrently, decode it, and
   classify it with :func:`~specfinder.parser.classifier.classify_candidate`.

Failures travel on two separate channels. Anything that stops the tree
from being listed propagates as an exception and fails the call. A
candidate that cannot be fetched, is not a blob, does not decode, or
classifies as neither dialect yields ``None`` from its task and is simply
left out of the result.

Candidate tasks are joined with :func:`asyncio.gather` under an
:class:`asyncio.Semaphore`; the gathered list keeps candidate order and is
the only place results are collected.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from specfinder.client.base import SourceHostClient
from specfinder.discovery.patterns import list_candidates
from specfinder.exceptions import SpecfinderError
from specfinder.models import DetectedSpec, RepositoryRef, TreeEntry
from specfinder.parser.classifier import classify_candidate
from specfinder.parser.loader import decode_content

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


async def resolve_repository(
    client: SourceHostClient, owner: str, repo: str
) -> RepositoryRef:
    """Resolve *owner*/*repo* to a :class:`~specfinder.models.RepositoryRef`."""
    ref = await client.resolve_default_ref(owner, repo)
    return RepositoryRef(owner=owner, name=repo, default_branch_ref=ref)


async def scan_repository(
    client: SourceHostClient,
    owner: str,
    repo: str,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[DetectedSpec]:
    """Discover OpenAPI/Swagger documents in a repository's default branch.

    Args:
        client: An entered source-host client.
        owner: Repository owner (user or organisation).
        repo: Repository name.
        max_concurrency: Upper bound on simultaneous candidate fetches.

    Returns:
        The verified specs, in the relative order of the tree listing. An
        empty list when no candidate survives verification.

    Raises:
        UnauthenticatedError: If the host rejects the credential while
            resolving the branch or listing the tree.
        UpstreamUnavailableError: If the branch cannot be resolved or the
            tree cannot be listed (including timeouts).
    """
    repository = await resolve_repository(client, owner, repo)
    entries = await client.list_tree_recursive(
        owner, repo, repository.default_branch_ref
    )
    candidates = list_candidates(entries)
    logger.debug(
        "%s@%s: %d tree entries, %d candidates",
        repository.full_name,
        repository.default_branch_ref,
        len(entries),
        len(candidates),
    )
    if not candidates:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    outcomes = await asyncio.gather(
        *(
            _verify_candidate(client, repository, candidate, semaphore)
            for candidate in candidates
        )
    )
    return [spec for spec in outcomes if spec is not None]


async def _verify_candidate(
    client: SourceHostClient,
    repository: RepositoryRef,
    candidate: TreeEntry,
    semaphore: asyncio.Semaphore,
) -> Optional[DetectedSpec]:
    """Fetch and classify one candidate; ``None`` means drop it."""
    async with semaphore:
        try:
            payload = await client.get_file_content(
                repository.owner,
                repository.name,
                candidate.path,
                repository.default_branch_ref,
            )
            text = decode_content(payload.content, payload.encoding)
        except SpecfinderError as exc:
            logger.warning("Skipping candidate %s: %s", candidate.path, exc)
            return None
        except Exception as exc:
            logger.warning(
                "Skipping candidate %s: unexpected %s: %s",
                candidate.path,
                type(exc).__name__,
                exc,
            )
            return None

    spec = classify_candidate(candidate.path, text)
    if spec is None:
        logger.debug("Candidate %s is not an API description", candidate.path)
    return spec
