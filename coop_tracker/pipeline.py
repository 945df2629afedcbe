"""
One pull: fetch listing → extract job tables → build records → reconcile.

Only reconciliation writes to shared state. A FetchError aborts the pull
before anything is parsed; a ReconciliationError may leave earlier batches
committed, so a failed pull means "store may have partially advanced".
"""
from __future__ import annotations

from typing import Iterable

from coop_tracker.builder import build_all
from coop_tracker.config import DEFAULT_CATEGORY, DEFAULT_DECORATIVE_SYMBOLS, PullSettings, load_settings
from coop_tracker.extractor import extract_job_tables
from coop_tracker.log import get_logger
from coop_tracker.models import ParsedJob, PullResult
from coop_tracker.reconciler import reconcile
from coop_tracker.sources import get_source
from coop_tracker.store import JobStore, open_store

log = get_logger(__name__)


def parse_document(
    text: str,
    *,
    exclude_markers: Iterable[str] = (),
    symbols: Iterable[str] = DEFAULT_DECORATIVE_SYMBOLS,
    default_category: str = DEFAULT_CATEGORY,
) -> list[ParsedJob]:
    tables = list(extract_job_tables(text, default_category=default_category))
    jobs = build_all(tables, exclude_markers=exclude_markers, symbols=symbols)
    log.info("Parsed %d job(s) from %d job table(s)", len(jobs), len(tables))
    return jobs


def run_pull(
    source_url: str | None = None,
    timeout: float | None = None,
    *,
    store: JobStore | None = None,
    settings: PullSettings | None = None,
) -> PullResult:
    settings = settings or load_settings()
    location = source_url or settings.source_url
    source = get_source(location, settings, timeout=timeout)

    log.info("Pulling listing from %s", location)
    text = source.fetch()

    jobs = parse_document(
        text,
        exclude_markers=settings.exclude_markers,
        symbols=settings.decorative_symbols,
        default_category=settings.default_category,
    )
    if not jobs:
        log.warning("No jobs parsed from %s; every OPEN posting will be closed", location)

    if store is not None:
        return reconcile(jobs, store, batch_size=settings.batch_size)

    db = open_store(settings.db_path)
    try:
        return reconcile(jobs, db, batch_size=settings.batch_size)
    finally:
        db.close()
