"""Canonical Pydantic models shared across all specfinder modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Repository and spec models** -- produced by the source-host client, the
discovery scanner, and the spec extractor:
    :class:`RepositoryRef`, :class:`EntryKind`, :class:`TreeEntry`,
    :class:`SpecDialect`, :class:`DetectedSpec`, :class:`SpecInfo`,
    :class:`ParsedSpecSummary`, :class:`FileContent`, and
    :class:`RepositorySummary`.

All models use Pydantic v2. Models returned to callers as JSON keep the
field names of the dashboard API they were taken from; where a Python name
would clash or read poorly an alias carries the wire name, and callers
should serialise with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Config ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every call against the source host."""

    timeout: float = Field(default=10.0, description="Per-request timeout in seconds")
    tree_timeout: float = Field(
        default=15.0, description="Timeout in seconds for the recursive tree fetch"
    )
    max_concurrency: int = Field(
        default=8, ge=1, description="Maximum concurrent candidate fetches per scan"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specfinder/config.json``.

    Loaded and saved by :func:`~specfinder.config.load_global_config` and
    :func:`~specfinder.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specfinder.config.resolve_config`
    for the full precedence chain.
    """

    api_url: str = Field(
        default="https://api.github.com", description="Base URL of the source-host API"
    )
    token_source: str = Field(
        default="env:GITHUB_TOKEN",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Repository ---


class RepositoryRef(BaseModel):
    """Identifies one scan target at one resolved reference.

    ``default_branch_ref`` is resolved once at the start of a discovery call
    and every file fetched during that call is read at this reference.
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    default_branch_ref: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class EntryKind(str, enum.Enum):
    """Node types returned by a recursive tree listing.

    ``COMMIT`` marks submodule entries; like ``TREE`` they are never
    candidates.
    """

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


class TreeEntry(BaseModel):
    """One node from a full recursive repository listing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    path: str
    kind: EntryKind = Field(alias="type")
    sha: Optional[str] = None
    size: Optional[int] = None

    @property
    def name(self) -> str:
        """Final path segment."""
        return self.path.rsplit("/", 1)[-1]


class RepositorySummary(BaseModel):
    """One repository from the authenticated user's repository listing."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str
    description: str = ""
    default_branch: str = "main"
    updated_at: Optional[str] = None
    language: str = ""
    stargazers_count: int = 0

    @field_validator("description", "language", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


# --- Specs ---


class SpecDialect(str, enum.Enum):
    """Which API description generation a document declares itself as."""

    OPENAPI = "openapi"
    SWAGGER = "swagger"


class DetectedSpec(BaseModel):
    """A discovery candidate that was verified to be a specification.

    ``version`` is the heuristic version token recovered from the raw text
    (``3.0.1`` for OpenAPI, ``2.0`` for Swagger), or ``"1.0.0"`` when none
    could be recovered.
    """

    name: str
    path: str
    type: SpecDialect
    version: str = "1.0.0"


class SpecInfo(BaseModel):
    """The ``info`` block of a :class:`ParsedSpecSummary`."""

    title: str = "API"
    version: str = "1.0.0"
    description: str = ""


class ParsedSpecSummary(BaseModel):
    """Normalised summary extracted from one specification file.

    Serialised with ``by_alias=True`` the dialect tag is emitted as
    ``openapi`` and the path count as ``paths``.

    See Also:
        :func:`~specfinder.parser.extractor.extract_summary`: Builds this model.
    """

    model_config = ConfigDict(populate_by_name=True)

    info: SpecInfo = Field(default_factory=SpecInfo)
    dialect: Optional[str] = Field(
        default=None,
        alias="openapi",
        description="Value of the document's openapi key, else its swagger key",
    )
    servers: list[Any] = Field(default_factory=list)
    path_count: int = Field(default=0, alias="paths")


class FileContent(BaseModel):
    """One file's payload as returned by the source host.

    ``content`` is still transport-encoded; decode it with
    :func:`~specfinder.parser.loader.decode_content`.
    """

    path: str
    content: str
    encoding: str = "base64"
