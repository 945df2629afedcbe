"""
Run pulls on a fixed interval.

Usage:
  - One pull (for cron): python -m coop_tracker.run_daily --once
      e.g. 0 * * * * cd /path/to/project && .venv/bin/python -m coop_tracker.run_daily --once
  - Or keep it running: python -m coop_tracker.run_daily
      Interval from PULL_INTERVAL_MINUTES (default 60).

Pulls are not serialized across processes; run one scheduler per store.
"""
from __future__ import annotations

import sys
import time

from coop_tracker.config import ensure_dirs, get_env
from coop_tracker.errors import CoopTrackerError, FetchError
from coop_tracker.log import get_logger
from coop_tracker.models import PullResult
from coop_tracker.pipeline import run_pull
from coop_tracker.retry import retry

log = get_logger(__name__)

DEFAULT_INTERVAL_MINUTES = 60


def interval_seconds() -> float:
    raw = get_env("PULL_INTERVAL_MINUTES", str(DEFAULT_INTERVAL_MINUTES))
    try:
        minutes = float(raw)
    except ValueError:
        log.warning("Invalid PULL_INTERVAL_MINUTES=%r, using %d", raw, DEFAULT_INTERVAL_MINUTES)
        minutes = DEFAULT_INTERVAL_MINUTES
    return max(minutes, 1.0) * 60


@retry(max_attempts=3, base_delay=5.0, max_delay=120.0, retryable=(FetchError,))
def pull_with_retry() -> PullResult:
    return run_pull()


def run_once() -> PullResult | None:
    ensure_dirs()
    try:
        result = pull_with_retry()
    except CoopTrackerError as exc:
        log.error("Pull failed (store may have partially advanced): %s", exc)
        return None
    log.info("Pull summary: %s", result.as_dict())
    return result


def main() -> None:
    wait = interval_seconds()
    log.info("Scheduler: pulling every %.0f minute(s)", wait / 60)
    while True:
        started = time.monotonic()
        run_once()
        elapsed = time.monotonic() - started
        time.sleep(max(wait - elapsed, 0))


if __name__ == "__main__":
    if "--once" in sys.argv:
        sys.exit(0 if run_once() is not None else 1)
    main()
