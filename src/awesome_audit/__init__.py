"""awesome-audit -- find abandoned GitHub repositories in a curated Markdown list.

The audit scans an "awesome list" for GitHub repository links, looks each
repository up through the GitHub REST API, and flags those that are
archived or have not been pushed to for a long time. Findings are printed
as GitHub Actions annotations so they show up inline on the list file.

Typical CI usage::

    GH_PA_TOKEN=${{ secrets.GITHUB_TOKEN }} awesome-audit check --list README.md

Modules:
    app: Typer application and CLI entry point.
    audit: The abandoned-repository rules and the audit driver.
    cache: TTL-based memoizing cache for API responses.
    client: Cached, throttled GitHub API client.
    scanner: Markdown link extraction and line mapping.
    models: Pydantic models shared across the package.
    config: Settings precedence, XDG paths, credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr output with Rich colouring.
"""

__version__ = "0.1.0"
