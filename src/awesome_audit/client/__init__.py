"""GitHub API access for awesome-audit.

Exports :class:`GitHubClient`, the cached and throttled client used by
the :class:`~awesome_audit.audit.Auditor` to look up repositories.
"""

from awesome_audit.client.github import GitHubClient

__all__ = ["GitHubClient"]
