"""Link extraction from the curated Markdown list.

Only Markdown link targets are considered: ``[name](https://github.com/owner/repo)``.
Bare URLs in prose are ignored.
"""

from __future__ import annotations

import re
from typing import Optional

from awesome_audit.models import ReferenceOccurrence


def _link_pattern(host: str) -> re.Pattern[str]:
    return re.compile(r"\((https?://" + re.escape(host) + r"/[^\s]+)\)", re.IGNORECASE)


def find_urls(host: str, document: str) -> list[str]:
    """Return every Markdown link target on *host*, in document order.

    A URL linked several times is returned once per link. Scheme and host
    match case-insensitively.

    Example::

        >>> find_urls("github.com", "- [Guzzle](https://github.com/guzzle/guzzle) HTTP")
        ['https://github.com/guzzle/guzzle']
    """
    return _link_pattern(host).findall(document)


def find_occurrence_lines(url: str, document: str) -> list[int]:
    """Return the 1-indexed numbers of all lines containing *url*."""
    return [
        number
        for number, line in enumerate(document.split("\n"), start=1)
        if url in line
    ]


def find_occurrences(url: str, document: str) -> list[ReferenceOccurrence]:
    return [
        ReferenceOccurrence(url=url, line=line)
        for line in find_occurrence_lines(url, document)
    ]


def parse_repo_slug(url: str, host: str) -> Optional[str]:
    """Extract ``owner/name`` from a repository URL.

    Returns ``None`` unless the URL ends with exactly two path segments
    after *host*; links to files, issues, or organisations are rejected.
    """
    match = re.search(re.escape(host) + r"/([^/]+/[^/]+)$", url, re.IGNORECASE)
    if match is None:
        return None
    return match.group(1)
