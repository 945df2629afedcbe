"""Merge a parsed pull into the job store.

Create/update runs in fixed-size batches, each committed atomically; a failed
batch leaves earlier batches in place. Once every batch has committed, one
sweep closes OPEN postings missing from the pull and reopens CLOSED ones that
came back. Records in downstream tracking states (APPLIED, OFFER, ...) are
only ever touched through their descriptive fields.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

from coop_tracker.errors import ReconciliationError, StoreError, SweepError
from coop_tracker.log import get_logger
from coop_tracker.models import ParsedJob, PullResult, STATUS_CLOSED, STATUS_OPEN
from coop_tracker.store import JobStore, StatusFilter

log = get_logger(__name__)

DEFAULT_BATCH_SIZE = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _batches(items: Sequence[ParsedJob], size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


def reconcile(
    parsed_jobs: Sequence[ParsedJob],
    store: JobStore,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    now: Callable[[], datetime] = _utcnow,
) -> PullResult:
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    # One timestamp for the whole run: every record created here shares it.
    started_at = now()
    result = PullResult(total_parsed_count=len(parsed_jobs))
    create_defaults = {"status": STATUS_OPEN, "first_seen_at": started_at}

    for batch_no, batch in enumerate(_batches(parsed_jobs, batch_size)):
        inserted = updated = 0
        try:
            with store.transaction():
                for job in batch:
                    existing = store.find_by_key(job.url)
                    fields = {**job.descriptive_fields(), "last_seen_at": started_at}
                    store.upsert(job.url, fields, create_defaults)
                    if existing is None:
                        inserted += 1
                    else:
                        updated += 1
        except StoreError as exc:
            log.error("Batch %d failed, %d batch(es) committed: %s", batch_no + 1, batch_no, exc)
            raise ReconciliationError(
                f"Batch {batch_no + 1} failed: {exc}",
                batches_completed=batch_no,
                inserted=result.inserted_count,
                updated=result.updated_count,
            ) from exc
        result.inserted_count += inserted
        result.updated_count += updated
        log.debug("Batch %d committed: +%d new, %d updated", batch_no + 1, inserted, updated)

    seen_urls = frozenset(job.url for job in parsed_jobs)
    try:
        with store.transaction():
            result.closed_count = store.bulk_set_status(
                StatusFilter(status=STATUS_OPEN, urls=seen_urls, present=False),
                STATUS_CLOSED,
            )
            result.reopened_count = store.bulk_set_status(
                StatusFilter(status=STATUS_CLOSED, urls=seen_urls, present=True),
                STATUS_OPEN,
            )
    except StoreError as exc:
        log.error("Status sweep failed after all batches committed: %s", exc)
        raise SweepError(
            f"Status sweep failed: {exc}",
            batches_completed=-(-len(parsed_jobs) // batch_size),
            inserted=result.inserted_count,
            updated=result.updated_count,
        ) from exc

    log.info(
        "Reconciled %d job(s): inserted=%d updated=%d closed=%d reopened=%d",
        result.total_parsed_count, result.inserted_count, result.updated_count,
        result.closed_count, result.reopened_count,
    )
    return result
