"""Extract command -- summarise one spec file from a repository."""

from __future__ import annotations

from typing import Optional

import typer

from specfinder.commands import fail, load_context_config
from specfinder.exceptions import SpecfinderError
from specfinder.output import format_response


def extract_command(
    ctx: typer.Context,
    owner: str = typer.Argument(help="Repository owner (user or organisation)."),
    repo: str = typer.Argument(help="Repository name."),
    path: str = typer.Argument(help="Path of the spec file inside the repository."),
    ref: Optional[str] = typer.Option(
        None, "--ref", "-r", help="Branch, tag, or commit (default branch if omitted)."
    ),
) -> None:
    """Extract title, version, servers and path count from a spec file.

    ``.json`` files are parsed as strict JSON, everything else as YAML.
    A file that cannot be parsed exits with code 7 and reports the line
    and column of the syntax error.

    Example::

        specfinder extract octocat hello-world api/openapi.yaml
        specfinder extract octocat hello-world swagger.json --ref v2
    """
    from specfinder.api import extract_spec_summary_sync
    from specfinder.config import resolve_token

    try:
        config = load_context_config(ctx)
        token = resolve_token(config)
        summary = extract_spec_summary_sync(
            owner, repo, path, ref=ref, token=token, config=config
        )
    except SpecfinderError as exc:
        fail(exc)

    format_response(summary.model_dump(mode="json", by_alias=True))
