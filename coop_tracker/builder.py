"""Turn raw table rows into ParsedJob records."""
from __future__ import annotations

from typing import Iterable
from urllib.parse import urlparse

from coop_tracker.config import DEFAULT_DECORATIVE_SYMBOLS
from coop_tracker.log import get_logger
from coop_tracker.models import ParsedJob, RawCell, TableContext
from coop_tracker.normalize import normalize, normalize_location, parse_age

log = get_logger(__name__)

CONTINUATION_MARKER = "\u21b3"  # "same company as the row above"


def is_absolute_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _cell(row: tuple[RawCell, ...], idx: int | None) -> RawCell | None:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _first_url(cell: RawCell | None) -> str:
    if cell is None:
        return ""
    for href in cell.links:
        url = normalize(href, ())
        if is_absolute_url(url):
            return url
    return ""


def _is_excluded(row: tuple[RawCell, ...], exclude_markers: Iterable[str]) -> bool:
    blob = " ".join(c.text for c in row)
    return any(marker and marker in blob for marker in exclude_markers)


def build_records(
    table: TableContext,
    *,
    seen: set[str] | None = None,
    exclude_markers: Iterable[str] = (),
    symbols: Iterable[str] = DEFAULT_DECORATIVE_SYMBOLS,
) -> list[ParsedJob]:
    """Build jobs for one table.

    ``seen`` holds URLs already emitted; pass the same set for every table of
    a pull so duplicates are dropped document-wide (first occurrence wins).
    Rows missing company, role or URL are dropped without raising.
    """
    if seen is None:
        seen = set()
    symbols = tuple(symbols)
    exclude_markers = tuple(exclude_markers)
    cols = table.columns
    age_idx = cols.get("age")

    jobs: list[ParsedJob] = []
    dropped: dict[str, int] = {}
    last_company = ""

    def drop(reason: str) -> None:
        dropped[reason] = dropped.get(reason, 0) + 1

    for row in table.rows:
        company_cell = _cell(row, cols["company"])
        company = normalize(company_cell.text if company_cell else "", symbols)
        if company == CONTINUATION_MARKER:
            company = last_company
        if not company:
            drop("no company")
            continue
        last_company = company

        if exclude_markers and _is_excluded(row, exclude_markers):
            drop("excluded")
            continue

        role_cell = _cell(row, cols["role"])
        role = normalize(role_cell.text if role_cell else "", symbols)
        if not role:
            drop("no role")
            continue

        url = _first_url(_cell(row, cols["application"]))
        if not url:
            drop("no url")
            continue

        if url in seen:
            drop("duplicate")
            continue
        seen.add(url)

        location_cell = _cell(row, cols["location"])
        location = (
            normalize_location(location_cell.html, location_cell.text, symbols)
            if location_cell else ""
        )

        age: str | None = None
        age_minutes: int | None = None
        age_cell = _cell(row, age_idx)
        if age_cell is not None:
            age = normalize(age_cell.text, symbols) or None
            age_minutes = parse_age(age)

        jobs.append(
            ParsedJob(
                company=company,
                role=role,
                location=location,
                category=table.category,
                url=url,
                age=age,
                age_minutes=age_minutes,
            )
        )

    if dropped:
        log.debug("[%s] kept %d row(s), dropped %s", table.category, len(jobs), dropped)
    return jobs


def build_all(
    tables: Iterable[TableContext],
    *,
    exclude_markers: Iterable[str] = (),
    symbols: Iterable[str] = DEFAULT_DECORATIVE_SYMBOLS,
) -> list[ParsedJob]:
    seen: set[str] = set()
    exclude_markers = tuple(exclude_markers)
    symbols = tuple(symbols)
    out: list[ParsedJob] = []
    for table in tables:
        out.extend(
            build_records(table, seen=seen, exclude_markers=exclude_markers, symbols=symbols)
        )
    return out
