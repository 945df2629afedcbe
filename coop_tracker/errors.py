"""Errors surfaced by a pull."""
from __future__ import annotations


class CoopTrackerError(Exception):
    """Base error for the ingestion pipeline."""


class FetchError(CoopTrackerError):
    """The source document could not be retrieved."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.url = url


class StoreError(CoopTrackerError):
    """A storage transaction failed and was rolled back."""


class ReconciliationError(CoopTrackerError):
    """A create/update batch failed; earlier batches stay committed."""

    def __init__(
        self,
        message: str,
        *,
        batches_completed: int = 0,
        inserted: int = 0,
        updated: int = 0,
    ) -> None:
        super().__init__(message)
        self.batches_completed = batches_completed
        self.inserted = inserted
        self.updated = updated


class SweepError(ReconciliationError):
    """The close/reopen sweep failed after all batches committed."""
