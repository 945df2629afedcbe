"""Locate job tables in a rendered listing and map their columns.

The listing is a README maintained by hand, so nothing about column order or
table count is stable. Tables are classified by header text alone through
``COLUMN_MATCHERS``; supporting a new header variant means adding one label
there.
"""
from __future__ import annotations

import re
from typing import Callable, Iterator

import markdown
from bs4 import BeautifulSoup, Tag

from coop_tracker.config import DEFAULT_CATEGORY
from coop_tracker.log import get_logger
from coop_tracker.models import RawCell, TableContext
from coop_tracker.normalize import normalize

log = get_logger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("company", "role", "location", "application")

_HEADING_SUFFIX_RE = re.compile(
    r"\s*\b(?:(?:new\s+grad|internship|co-?op)\s+)?(?:roles?|positions?|internships?)\s*$",
    re.IGNORECASE,
)
_HEADING_PREFIX_RE = re.compile(r"^[^\w(]+")
_ABSOLUTE_HREF_RE = re.compile(r"^https?://", re.IGNORECASE)
_CLOSING_BR_RE = re.compile(r"</br\s*>", re.IGNORECASE)
_HTML_PAGE_RE = re.compile(r"<(?:!doctype\b|html\b)", re.IGNORECASE)
_PIPE_DELIMITER_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)+\|?\s*$", re.MULTILINE)


def _equals(*labels: str) -> Callable[[str], bool]:
    return lambda header: header in labels


def _contains(*keywords: str) -> Callable[[str], bool]:
    return lambda header: any(k in header for k in keywords)


COLUMN_MATCHERS: dict[str, Callable[[str], bool]] = {
    "company": _equals("company", "company name", "employer"),
    "role": _equals("role", "position", "title", "job title"),
    "location": _equals("location", "locations"),
    "application": _contains("application", "apply", "link"),
    "age": _equals("age", "date posted", "posted"),
}


def _looks_like_html(body: str) -> bool:
    """True for full pages and for bare HTML fragments that carry their own tables.

    READMEs often open with an HTML banner or comment before the pipe tables,
    so a leading ``<`` alone is not enough to skip Markdown rendering.
    """
    head = body.lstrip()
    if _HTML_PAGE_RE.match(head):
        return True
    if not head.startswith("<") or _PIPE_DELIMITER_RE.search(body):
        return False
    return BeautifulSoup(body, "html.parser").find("table") is not None


def render_document(text: str) -> BeautifulSoup:
    """Parse HTML pages as-is; render anything else as Markdown first."""
    # html.parser drops "</br>", which HTML5 treats as a line break
    body = _CLOSING_BR_RE.sub("<br>", text or "")
    if not _looks_like_html(body):
        body = markdown.markdown(body, extensions=["tables"])
    return BeautifulSoup(body, "html.parser")


def resolve_columns(headers: list[str]) -> dict[str, int] | None:
    """Map semantic column names to positions, or ``None`` for non-job tables.

    The first header satisfying each matcher wins. All of
    ``REQUIRED_COLUMNS`` must resolve; ``age`` is optional.
    """
    normalized = [normalize(h).lower() for h in headers]
    columns: dict[str, int] = {}
    for name, matches in COLUMN_MATCHERS.items():
        for idx, header in enumerate(normalized):
            if matches(header):
                columns[name] = idx
                break
    if any(name not in columns for name in REQUIRED_COLUMNS):
        return None
    return columns


def is_job_table(headers: list[str]) -> bool:
    return resolve_columns(headers) is not None


def clean_category(heading: str | None, default: str = DEFAULT_CATEGORY) -> str:
    """Turn a section heading into a category label.

    >>> clean_category("💻 Software Engineering Internship Roles")
    'Software Engineering'
    """
    text = normalize(heading)
    text = _HEADING_PREFIX_RE.sub("", text)
    text = _HEADING_SUFFIX_RE.sub("", text)
    text = normalize(text.replace(",", ""))
    return text or default


def _header_cells(table: Tag) -> list[Tag]:
    head_row = table.select_one("thead tr")
    if head_row is not None:
        cells = head_row.find_all("th")
        if cells:
            return cells
    for tr in table.find_all("tr"):
        cells = tr.find_all("th")
        if cells:
            return cells
    return []


def _to_raw_cell(td: Tag) -> RawCell:
    links = tuple(
        a["href"].strip()
        for a in td.find_all("a", href=True)
        if _ABSOLUTE_HREF_RE.match(a["href"].strip())
    )
    return RawCell(text=td.get_text(), html=td.decode_contents(), links=links)


def _body_rows(table: Tag) -> list[tuple[RawCell, ...]]:
    rows: list[tuple[RawCell, ...]] = []
    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue
        cells = tr.find_all("td", recursive=False)
        if not cells:
            continue
        rows.append(tuple(_to_raw_cell(td) for td in cells))
    return rows


def _nearest_heading(table: Tag) -> str | None:
    heading = table.find_previous(["h2", "h3"])
    return heading.get_text() if heading is not None else None


def extract_job_tables(
    document: str | BeautifulSoup,
    *,
    default_category: str = DEFAULT_CATEGORY,
) -> Iterator[TableContext]:
    """Yield a ``TableContext`` for every table that looks like a job table.

    Tables without headers or without the required columns (tables of
    contents, legends) are skipped without error.
    """
    soup = document if isinstance(document, BeautifulSoup) else render_document(document)

    tables = soup.find_all("table")
    skipped = 0
    for table in tables:
        headers = [th.get_text() for th in _header_cells(table)]
        if not headers:
            skipped += 1
            continue
        columns = resolve_columns(headers)
        if columns is None:
            log.debug("Skipping non-job table with headers %s", [normalize(h) for h in headers])
            skipped += 1
            continue

        yield TableContext(
            headers=[normalize(h) for h in headers],
            category=clean_category(_nearest_heading(table), default_category),
            rows=_body_rows(table),
            columns=columns,
        )

    log.debug("Scanned %d table(s), skipped %d", len(tables), skipped)
