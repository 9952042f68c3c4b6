"""Synchronous GitHub REST API client with response caching and throttling.

This module provides :class:`GitHubClient`, the only component that talks
to the network. It wraps :class:`httpx.Client` and layers on:

- **Token auth** -- the access token is resolved once, when the client is
  constructed, so a missing credential aborts the run before any
  repository is processed.
- **Response caching** -- every GET goes through
  :class:`~awesome_audit.cache.DiskCache`, keyed by the full request URL.
- **Throttling** -- after each request that actually hit the network the
  client sleeps for a fixed delay to stay under the API rate limit.
  Cache hits are never delayed.

Redirects are not followed. Every failure (transport, malformed URL,
non-200 status, cache storage, JSON decoding, empty payload) is raised as
:class:`~awesome_audit.exceptions.FetchError`.
There are no retries.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

import httpx

from awesome_audit.cache import DiskCache
from awesome_audit.config import resolve_credential
from awesome_audit.exceptions import CacheError, FetchError
from awesome_audit.models import AuditSettings
from awesome_audit.output import get_output

_CACHE_NAMESPACE = "ghresponse."


class GitHubClient:
    """Cached, throttled GET client for the GitHub REST API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        settings: Run settings; ``api_host``, ``token_source``,
            ``cache.ttl_seconds`` and ``request`` are used.
        cache: Cache for raw response bodies.
        transport: Optional httpx transport, used by tests to mock the API.
        sleep: Called with the throttle delay after each uncached request.

    Raises:
        ConfigError: If the access token cannot be resolved.

    Example::

        with GitHubClient(settings, cache) as client:
            repo = client.fetch("/repos/guzzle/guzzle", throttle_seconds=1)
    """

    def __init__(
        self,
        settings: AuditSettings,
        cache: DiskCache,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._transport = transport
        self._sleep = sleep
        self._token = resolve_credential(settings.token_source)
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> GitHubClient:
        request = self._settings.request
        self._client = httpx.Client(
            timeout=request.timeout,
            follow_redirects=False,
            transport=self._transport,
            headers={
                "User-Agent": request.user_agent,
                "Accept": "application/vnd.github+json",
                "Authorization": f"token {self._token}",
            },
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def build_url(self, path: str, query: Optional[Mapping[str, str]] = None) -> str:
        """Join ``api_host``, *path* and the URL-encoded *query*."""
        url = f"{self._settings.api_host}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def fetch(
        self,
        path: str,
        query: Optional[Mapping[str, str]] = None,
        throttle_seconds: int = 0,
    ) -> dict[str, Any]:
        """GET *path* and return the decoded JSON object.

        The raw body is cached for ``settings.cache.ttl_seconds``. When the
        body had to be downloaded, the call sleeps *throttle_seconds*
        before returning.

        Raises:
            FetchError: On transport errors, a status other than 200, cache
                storage failures, undecodable JSON, or an empty or
                non-object payload.
        """
        url = self.build_url(path, query)
        output = get_output()
        downloaded = False

        def _download() -> str:
            nonlocal downloaded
            body = self._get(url)
            downloaded = True
            if throttle_seconds > 0:
                self._sleep(throttle_seconds)
            return body

        try:
            body = self._cache.get_or_compute(
                _CACHE_NAMESPACE + url, _download, self._settings.cache.ttl_seconds
            )
        except CacheError as exc:
            raise FetchError(f"Could not fetch from GitHub, cache error: {exc}") from exc

        output.debug(f"{'Fetched' if downloaded else 'Cache hit'}: GET {url}")
        return _decode(body)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get(self, url: str) -> str:
        assert self._client is not None, "Client not initialised -- use as context manager"

        try:
            response = self._client.get(url)
        except httpx.InvalidURL as exc:
            raise FetchError(f"Could not fetch from GitHub, invalid URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not fetch from GitHub, transport error: {exc}") from exc

        if response.status_code != 200:
            raise FetchError(
                f"Could not fetch from GitHub, Unexpected HTTP code: {response.status_code}"
            )
        return response.text


def _decode(body: Any) -> dict[str, Any]:
    """Decode a cached or freshly downloaded response body."""
    if not isinstance(body, str):
        raise FetchError("Could not fetch from GitHub, cached payload is not a response body")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise FetchError(f"Could not fetch from GitHub, JSON decode error: {exc}") from exc

    if data is None or data == {} or data == []:
        raise FetchError("Could not fetch from GitHub, No data received")
    if not isinstance(data, dict):
        raise FetchError(
            f"Could not fetch from GitHub, expected a JSON object but got {type(data).__name__}"
        )
    return data
