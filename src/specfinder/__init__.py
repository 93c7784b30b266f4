"""specfinder -- discover OpenAPI/Swagger specs in GitHub repositories.

This package scans a repository's full file tree for files that look like
API descriptions (``openapi.yaml``, ``swagger.json``, ``api.yml``,
``oas.json``, ...), verifies each one really is an OpenAPI or Swagger
document, and extracts a normalised summary (title, version, dialect,
servers, path count) from any single file.

Typical workflow::

    export GITHUB_TOKEN=...
    specfinder discover octocat hello-world
    specfinder extract octocat hello-world api/openapi.yaml

Modules:
    api: Async and synchronous library entry points.
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
