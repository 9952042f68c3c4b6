"""Abandoned-repository audit of the curated list.

A repository is considered abandoned when either

- its last push is older than ``settings.max_age_seconds``, or
- it has been marked as archived on GitHub.

:class:`Auditor` walks every GitHub link in the document strictly in
order, one API lookup at a time. Each link ends as a
:class:`~awesome_audit.models.RepoOutcome`; any per-link problem (a URL
that is not a repository, a failed fetch, a malformed record) produces a
skipped outcome and the audit moves on. Status lines are printed as each
link is resolved, and all annotations are printed together once the whole
list has been processed.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any, Callable, Optional, Protocol

from pydantic import ValidationError

from awesome_audit.exceptions import FetchError
from awesome_audit.models import (
    Annotation,
    AuditReport,
    AuditSettings,
    RepoOutcome,
    RepoRecord,
    RepoStatus,
    SkipReason,
)
from awesome_audit.output import OutputManager, get_output
from awesome_audit.scanner import find_occurrences, find_urls, parse_repo_slug


class RecordFetcher(Protocol):
    def fetch(
        self, path: str, query: Any = None, throttle_seconds: int = 0
    ) -> dict[str, Any]: ...


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def is_abandoned(last_push: datetime, archived: bool, now: datetime, max_age_seconds: int) -> bool:
    return archived or (now - last_push).total_seconds() > max_age_seconds


def _skipped(url: str, reason: SkipReason, message: str, slug: Optional[str] = None) -> RepoOutcome:
    return RepoOutcome(
        url=url, status=RepoStatus.SKIPPED, slug=slug, skip_reason=reason, message=message
    )


def _missing_field(error: ValidationError) -> str:
    loc = error.errors()[0]["loc"]
    return str(loc[0]) if loc else "?"


def evaluate(
    url: str,
    slug: str,
    payload: dict[str, Any],
    document: str,
    settings: AuditSettings,
    now: datetime,
) -> RepoOutcome:
    """Classify one fetched repository record.

    Pure function: returns an ``ok``, ``abandoned``, or ``skipped``
    outcome and never raises for malformed records.
    """
    try:
        record = RepoRecord.model_validate(payload)
    except ValidationError as exc:
        field = _missing_field(exc)
        return _skipped(
            url, SkipReason.MISSING_FIELD, f" - {url} has no '{field}' field.", slug=slug
        )

    last_push = parse_timestamp(record.pushed_at)
    if last_push is None:
        return _skipped(
            url,
            SkipReason.INVALID_TIMESTAMP,
            f" - {url} has an invalid 'pushed_at' field.",
            slug=slug,
        )

    if not is_abandoned(last_push, record.archived, now, settings.max_age_seconds):
        return RepoOutcome(
            url=url,
            status=RepoStatus.OK,
            slug=slug,
            full_name=record.full_name,
            last_push=last_push,
            archived=record.archived,
            message=f" - {record.full_name} ok.",
        )

    annotations = [
        Annotation(
            level=settings.annotation_level,
            file=settings.annotation_target,
            line=occurrence.line,
            last_push=last_push,
            archived=record.archived,
        )
        for occurrence in find_occurrences(url, document)
    ]
    state = "archived" if record.archived else "active"
    return RepoOutcome(
        url=url,
        status=RepoStatus.ABANDONED,
        slug=slug,
        full_name=record.full_name,
        last_push=last_push,
        archived=record.archived,
        message=f" - {record.full_name} last pushed at {last_push:%Y-%m-%d} (status: {state})",
        annotations=annotations,
    )


class Auditor:
    """Runs the abandoned-repository audit over one list document.

    Args:
        settings: Run settings.
        client: Anything with a :meth:`~awesome_audit.client.GitHubClient.fetch`
            method.
        output: Where status and annotation lines go; defaults to the
            global output manager.
        clock: Returns the current time as a POSIX timestamp.
    """

    def __init__(
        self,
        settings: AuditSettings,
        client: RecordFetcher,
        output: Optional[OutputManager] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._client = client
        self._output = output
        self._clock = clock

    @property
    def output(self) -> OutputManager:
        return self._output or get_output()

    def run(self, document: str) -> AuditReport:
        """Audit every GitHub link in *document* and print the results.

        Prints one status line per link as it is resolved, then all
        annotations in document order of the links that produced them.
        A URL linked more than once is looked up once; its status line is
        repeated for every link but each line is annotated only once.
        """
        report = AuditReport()
        urls = find_urls(self._settings.link_host, document)
        self.output.debug(f"Found {len(urls)} {self._settings.link_host} links")

        first_outcomes: dict[str, RepoOutcome] = {}
        for url in urls:
            if url in first_outcomes:
                # Every line holding this URL was annotated by its first link.
                outcome = first_outcomes[url].model_copy(update={"annotations": []})
            else:
                outcome = first_outcomes[url] = self.check(url, document)
            report.outcomes.append(outcome)
            if outcome.status == RepoStatus.OK:
                self.output.status_ok(outcome.message)
            else:
                self.output.status_failed(outcome.message)

        for annotation in report.annotations:
            self.output.print_data(annotation.render())
        return report

    def check(self, url: str, document: str) -> RepoOutcome:
        """Resolve a single link to an outcome."""
        slug = parse_repo_slug(url, self._settings.link_host)
        if not slug:
            return _skipped(url, SkipReason.UNPARSEABLE_URL, f"Could not parse repo URL: {url}")

        try:
            payload = self._client.fetch(
                f"/repos/{slug}", throttle_seconds=self._settings.throttle_seconds
            )
        except FetchError as exc:
            return _skipped(
                url,
                SkipReason.FETCH_FAILED,
                f" - {slug} could not be fetched from GitHub: {exc}",
                slug=slug,
            )

        now = datetime.fromtimestamp(self._clock(), tz=UTC)
        return evaluate(url, slug, payload, document, self._settings, now)
