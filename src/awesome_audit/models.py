"""Canonical Pydantic models shared across all awesome-audit modules.

The models fall into two groups:

**Configuration models** -- built once at startup by
:func:`~awesome_audit.config.resolve_settings` and passed explicitly to
every component:
    :class:`CacheSettings`, :class:`RequestSettings`, and
    :class:`AuditSettings`.

**Audit models** -- produced while scanning the list and evaluating
GitHub records:
    :class:`RepoRecord`, :class:`ReferenceOccurrence`, :class:`Annotation`,
    :class:`RepoStatus`, :class:`SkipReason`, :class:`RepoOutcome`, and
    :class:`AuditReport`.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Four years, ignoring leap days.
DEFAULT_MAX_AGE_SECONDS = 60 * 60 * 24 * 365 * 4
DEFAULT_API_HOST = "https://api.github.com"


# --- Configuration models ---


class CacheSettings(BaseModel):
    """GitHub response cache settings."""

    backend: Literal["files", "diskcache", "memory"] = Field(
        default="files",
        description="Storage backend: files (one file per key), diskcache, memory",
    )
    directory: Optional[str] = Field(
        default=None, description="Cache directory; defaults to the XDG cache dir"
    )
    ttl_seconds: int = Field(default=3600, description="Freshness window for API responses")


class RequestSettings(BaseModel):
    """HTTP settings applied to every GitHub API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    user_agent: str = Field(default="awesome-audit", description="User-Agent header")


class AuditSettings(BaseModel):
    """Effective configuration for one audit run.

    See :func:`~awesome_audit.config.resolve_settings` for the precedence
    chain that produces an instance.
    """

    list_path: str = Field(default="README.md", description="Path to the curated Markdown list")
    annotation_file: Optional[str] = Field(
        default=None,
        description="File name reported in annotations; defaults to list_path",
    )
    link_host: str = Field(default="github.com", description="Host whose links are audited")
    api_host: str = Field(default=DEFAULT_API_HOST, description="GitHub API base URL")
    token_source: str = Field(
        default="env:GH_PA_TOKEN", description="Credential source for the API token"
    )
    max_age_seconds: int = Field(
        default=DEFAULT_MAX_AGE_SECONDS,
        description="A repository whose last push is older than this is abandoned",
    )
    throttle_seconds: int = Field(
        default=1, description="Delay after every uncached API request"
    )
    annotation_level: str = Field(default="warning", description="Annotation severity token")
    cache: CacheSettings = Field(default_factory=CacheSettings)
    request: RequestSettings = Field(default_factory=RequestSettings)

    @property
    def annotation_target(self) -> str:
        """File name written into ``file=`` of every annotation."""
        return self.annotation_file or self.list_path


# --- Audit models ---


class RepoRecord(BaseModel):
    """The subset of a GitHub ``/repos/{owner}/{name}`` response the audit reads.

    Validation is strict: ``"true"`` is not accepted for ``archived`` and a
    number is not accepted for ``pushed_at``. Unknown fields are ignored.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    full_name: str
    pushed_at: str
    archived: bool


class ReferenceOccurrence(BaseModel):
    """A line of the list document that contains a given URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    line: int


class Annotation(BaseModel):
    """A GitHub Actions workflow command flagging one list line."""

    model_config = ConfigDict(frozen=True)

    level: str
    file: str
    line: int
    last_push: datetime
    archived: bool

    @property
    def message(self) -> str:
        return (
            f"Abandoned repository, last push at '{self.last_push:%Y-%m-%d}' "
            f"(archived: {'yes' if self.archived else 'no'})"
        )

    def render(self) -> str:
        """Format as ``::<level> file=<file>,line=<n>,col=0::<message>``."""
        return f"::{self.level} file={self.file},line={self.line},col=0::{self.message}"


class RepoStatus(str, enum.Enum):
    """Classification of a single list entry."""

    OK = "ok"
    ABANDONED = "abandoned"
    SKIPPED = "skipped"


class SkipReason(str, enum.Enum):
    """Why an entry could not be classified."""

    UNPARSEABLE_URL = "unparseable_url"
    FETCH_FAILED = "fetch_failed"
    MISSING_FIELD = "missing_field"
    INVALID_TIMESTAMP = "invalid_timestamp"


class RepoOutcome(BaseModel):
    """Result of auditing one URL found in the list."""

    url: str
    status: RepoStatus
    slug: Optional[str] = None
    full_name: Optional[str] = None
    last_push: Optional[datetime] = None
    archived: Optional[bool] = None
    skip_reason: Optional[SkipReason] = None
    message: str = ""
    annotations: list[Annotation] = Field(default_factory=list)


class AuditReport(BaseModel):
    """All outcomes of one audit pass, in document order."""

    outcomes: list[RepoOutcome] = Field(default_factory=list)

    @property
    def annotations(self) -> list[Annotation]:
        return [a for outcome in self.outcomes for a in outcome.annotations]

    def count(self, status: RepoStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)
