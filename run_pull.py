#!/usr/bin/env python3
"""Entry point to run one pull of the internship listing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from coop_tracker.config import ensure_dirs, load_settings
from coop_tracker.errors import FetchError, ReconciliationError
from coop_tracker.log import get_logger

log = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch the internship listing and sync the local catalog.")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--url", type=str, default=None, help="Override the listing URL.")
    src.add_argument("--file", type=str, default=None, help="Read a saved Markdown/HTML listing instead.")
    p.add_argument("--timeout", type=float, default=None, help="Fetch timeout in seconds.")
    p.add_argument("--db", type=str, default=None, help="SQLite catalog path.")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    if args.db:
        settings.db_path = Path(args.db).expanduser()
    else:
        ensure_dirs()

    from coop_tracker.pipeline import run_pull

    try:
        result = run_pull(args.file or args.url, args.timeout, settings=settings)
    except FetchError as exc:
        log.error("Fetch failed: %s", exc)
        return 1
    except ReconciliationError as exc:
        log.error(
            "Reconciliation failed after %d batch(es); store may have partially advanced: %s",
            exc.batches_completed, exc,
        )
        return 1

    log.info("Pull complete.")
    log.info("  Parsed: %d", result.total_parsed_count)
    log.info("  Inserted: %d", result.inserted_count)
    log.info("  Updated: %d", result.updated_count)
    log.info("  Closed: %d", result.closed_count)
    log.info("  Reopened: %d", result.reopened_count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
