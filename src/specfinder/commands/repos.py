"""Repos command -- list repositories the token can see.

Mirrors the repository picker of the dashboard: repositories are listed
most recently updated first (at most 1000), optionally narrowed by a
case-insensitive search over name, full name and description.
"""

from __future__ import annotations

from typing import Optional

import typer

from specfinder.commands import fail, load_context_config
from specfinder.exceptions import SpecfinderError
from specfinder.models import RepositorySummary
from specfinder.output import OutputFormat, format_response, get_output


def filter_repositories(
    repositories: list[RepositorySummary], query: Optional[str]
) -> list[RepositorySummary]:
    """Keep repositories whose name, full name or description contains *query*."""
    if query is None or not query.strip():
        return repositories
    needle = query.strip().lower()
    return [
        r
        for r in repositories
        if needle in r.name.lower()
        or needle in r.full_name.lower()
        or needle in r.description.lower()
    ]


def repos_command(
    ctx: typer.Context,
    search: Optional[str] = typer.Option(
        None, "--search", "-s", help="Only show repositories matching this text."
    ),
) -> None:
    """List GitHub repositories visible to the configured token.

    Example::

        specfinder repos
        specfinder repos --search petstore
    """
    from specfinder.api import list_repositories_sync
    from specfinder.config import resolve_token

    try:
        config = load_context_config(ctx)
        token = resolve_token(config)
        repositories = list_repositories_sync(token, config=config)
    except SpecfinderError as exc:
        fail(exc)

    repositories = filter_repositories(repositories, search)

    output = get_output()
    if output.format == OutputFormat.RICH:
        rows = [
            [r.full_name, r.default_branch, r.language or "-", str(r.stargazers_count)]
            for r in repositories
        ]
        output.print_table(
            ["Repository", "Default branch", "Language", "Stars"],
            rows,
            title=f"Repositories ({len(rows)})",
        )
    else:
        format_response([r.model_dump(mode="json") for r in repositories])
