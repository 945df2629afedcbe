from .base import DocumentSource
from .github import GitHubPageSource, fetch_document
from .local import LocalFileSource

from coop_tracker.config import PullSettings
from coop_tracker.log import get_logger

log = get_logger(__name__)

__all__ = [
    "DocumentSource", "GitHubPageSource", "LocalFileSource",
    "fetch_document", "get_source",
]


def get_source(
    location: str,
    settings: PullSettings,
    timeout: float | None = None,
) -> DocumentSource:
    if location.lower().startswith(("http://", "https://")):
        log.debug("Using remote source %s", location)
        return GitHubPageSource(
            location,
            timeout=timeout if timeout is not None else settings.fetch_timeout,
            user_agent=settings.user_agent,
        )
    log.debug("Using local file source %s", location)
    return LocalFileSource(location)
