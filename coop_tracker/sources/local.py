"""Saved listing document on disk, for offline runs and fixtures."""
from __future__ import annotations

from pathlib import Path

from coop_tracker.errors import FetchError
from coop_tracker.log import get_logger
from coop_tracker.sources.base import DocumentSource

log = get_logger(__name__)


class LocalFileSource(DocumentSource):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def fetch(self) -> str:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FetchError(
                f"Failed to read {self.path}: {exc}",
                reason=exc.__class__.__name__,
                url=str(self.path),
            ) from exc
        log.info("Loaded listing from %s", self.path.name)
        return text
