"""Discover command -- list the API descriptions in a repository.

``specfinder discover OWNER REPO`` scans the repository's default branch
and prints every file that was verified to be an OpenAPI or Swagger
document. Files whose name matched but whose content did not are silently
left out; only a failure to read the repository tree is an error.
"""

from __future__ import annotations

import typer

from specfinder.commands import fail, load_context_config
from specfinder.exceptions import SpecfinderError
from specfinder.output import OutputFormat, format_response, get_output, info, suggest


def discover_command(
    ctx: typer.Context,
    owner: str = typer.Argument(help="Repository owner (user or organisation)."),
    repo: str = typer.Argument(help="Repository name."),
) -> None:
    """Find OpenAPI/Swagger specs in a GitHub repository.

    Example::

        specfinder discover octocat hello-world
        specfinder --json discover octocat hello-world
    """
    from specfinder.api import discover_specs_sync
    from specfinder.config import resolve_token

    try:
        config = load_context_config(ctx)
        token = resolve_token(config)
        specs = discover_specs_sync(owner, repo, token=token, config=config)
    except SpecfinderError as exc:
        fail(exc)

    output = get_output()
    if output.format == OutputFormat.RICH:
        rows = [[s.name, s.path, s.type.value, s.version] for s in specs]
        output.print_table(
            ["Name", "Path", "Type", "Version"],
            rows,
            title=f"{owner}/{repo} -- Specs ({len(rows)})",
        )
    else:
        format_response([s.model_dump(mode="json") for s in specs])

    if not specs:
        info(f"No OpenAPI or Swagger specs found in {owner}/{repo}.")
    else:
        suggest(f"specfinder extract {owner} {repo} {specs[0].path}")
