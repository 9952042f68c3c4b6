"""Tests for Markdown link extraction and line mapping."""

from __future__ import annotations

import pytest

from awesome_audit.models import ReferenceOccurrence
from awesome_audit.scanner import (
    find_occurrence_lines,
    find_occurrences,
    find_urls,
    parse_repo_slug,
)

DOCUMENT = """# Awesome PHP

## HTTP
* [Guzzle](https://github.com/guzzle/guzzle) - A HTTP client.
* [Buzz](https://github.com/kriswallsmith/Buzz) - Another HTTP client.
* [Docs](https://docs.guzzlephp.org/en/latest/) - Not on GitHub.
* Plain mention of https://github.com/not/linked is ignored.

## Testing
* [Guzzle again](https://github.com/guzzle/guzzle) - Listed twice.
* [Insecure](http://GitHub.com/old/project) - Old scheme and casing.
"""


class TestFindUrls:
    def test_finds_links_in_document_order(self) -> None:
        assert find_urls("github.com", DOCUMENT) == [
            "https://github.com/guzzle/guzzle",
            "https://github.com/kriswallsmith/Buzz",
            "https://github.com/guzzle/guzzle",
            "http://GitHub.com/old/project",
        ]

    def test_other_hosts_are_ignored(self) -> None:
        assert find_urls("docs.guzzlephp.org", DOCUMENT) == [
            "https://docs.guzzlephp.org/en/latest/"
        ]

    def test_bare_urls_are_not_links(self) -> None:
        assert "https://github.com/not/linked" not in find_urls("github.com", DOCUMENT)

    def test_host_is_matched_literally(self) -> None:
        assert find_urls("github.com", "[x](https://githubXcom/a/b)") == []

    def test_link_requires_a_path(self) -> None:
        assert find_urls("github.com", "[GitHub](https://github.com)") == []

    def test_several_links_on_one_line(self) -> None:
        line = "[a](https://github.com/a/a) and [b](https://github.com/b/b)"
        assert find_urls("github.com", line) == [
            "https://github.com/a/a",
            "https://github.com/b/b",
        ]

    def test_empty_document(self) -> None:
        assert find_urls("github.com", "") == []


class TestFindOccurrenceLines:
    def test_every_line_containing_url(self) -> None:
        assert find_occurrence_lines("https://github.com/guzzle/guzzle", DOCUMENT) == [4, 10]

    def test_lines_are_one_indexed(self) -> None:
        assert find_occurrence_lines("x", "x\ny\nx") == [1, 3]

    def test_substring_match(self) -> None:
        # A URL that prefixes a longer one matches both lines.
        document = "(https://github.com/a/b)\n(https://github.com/a/bc)"
        assert find_occurrence_lines("https://github.com/a/b", document) == [1, 2]

    def test_no_match(self) -> None:
        assert find_occurrence_lines("https://github.com/x/y", DOCUMENT) == []

    def test_find_occurrences(self) -> None:
        assert find_occurrences("x", "x\ny\nx") == [
            ReferenceOccurrence(url="x", line=1),
            ReferenceOccurrence(url="x", line=3),
        ]


class TestParseRepoSlug:
    @pytest.mark.parametrize(
        ("url", "slug"),
        [
            ("https://github.com/guzzle/guzzle", "guzzle/guzzle"),
            ("http://GitHub.com/old/project", "old/project"),
            ("https://github.com/php-fig/http-message.git", "php-fig/http-message.git"),
        ],
    )
    def test_repository_urls(self, url: str, slug: str) -> None:
        assert parse_repo_slug(url, "github.com") == slug

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/guzzle",
            "https://github.com/guzzle/guzzle/",
            "https://github.com/guzzle/guzzle/tree/master",
            "https://github.com/guzzle/guzzle/blob/master/README.md",
        ],
    )
    def test_non_repository_urls(self, url: str) -> None:
        assert parse_repo_slug(url, "github.com") is None
