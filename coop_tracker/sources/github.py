"""GitHub-hosted internship listing, fetched over HTTP.

Default: https://github.com/SimplifyJobs/Summer2026-Internships
A single uncached GET per pull; retries belong to whoever schedules pulls.
"""
from __future__ import annotations

import requests

from coop_tracker.errors import FetchError
from coop_tracker.log import get_logger
from coop_tracker.sources.base import DocumentSource

log = get_logger(__name__)

DEFAULT_USER_AGENT = "coop-tracker"


def fetch_document(
    source_url: str,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    headers = {
        "User-Agent": user_agent,
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }
    try:
        r = requests.get(source_url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(
            f"Failed to fetch {source_url}: {exc}",
            reason=exc.__class__.__name__,
            url=source_url,
        ) from exc

    if not r.ok:
        raise FetchError(
            f"Failed to fetch {source_url}: {r.status_code} {r.reason}",
            status_code=r.status_code,
            reason=r.reason,
            url=source_url,
        )

    log.debug("Fetched %s (%d bytes)", source_url, len(r.content))
    return r.text


class GitHubPageSource(DocumentSource):
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch(self) -> str:
        return fetch_document(self.url, timeout=self.timeout, user_agent=self.user_agent)
