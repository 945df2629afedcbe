"""Text cleanup and relative-age parsing for listing cells.

Everything here is a pure function over strings. The cell markup coming out
of the listing is authored by hand, so the helpers never raise on odd input:
an empty or missing value simply normalizes to ``""`` (or ``None`` for ages).
"""
from __future__ import annotations

import html
import re
from typing import Iterable

from coop_tracker.config import DEFAULT_DECORATIVE_SYMBOLS

_WS_RE = re.compile(r"\s+")
_BR_RE = re.compile(r"</?br\s*/?\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_VARIATION_SELECTOR = "\ufe0f"

# "mo" must be tried before "m" so "2mo" reads as months, not minutes.
_AGE_GROUP_RE = re.compile(r"^(\d+)(mo|d|h|m)", re.IGNORECASE)
_UNIT_MINUTES: dict[str, int] = {
    "mo": 30 * 24 * 60,
    "d": 24 * 60,
    "h": 60,
    "m": 1,
}


def normalize(raw: str | None, symbols: Iterable[str] = DEFAULT_DECORATIVE_SYMBOLS) -> str:
    """Strip decorative symbols, collapse whitespace runs, trim."""
    text = raw or ""
    for sym in symbols:
        if sym:
            text = text.replace(sym, "")
    text = text.replace(_VARIATION_SELECTOR, "")
    return _WS_RE.sub(" ", text).strip()


def normalize_location(
    cell_html: str | None,
    cell_text: str | None,
    symbols: Iterable[str] = DEFAULT_DECORATIVE_SYMBOLS,
) -> str:
    """Normalize a location cell, keeping multiple entries apart with ``"; "``.

    Explicit ``<br>`` breaks in the markup win; otherwise newlines in the
    plain text are treated as entry separators.
    """
    if cell_html and _BR_RE.search(cell_html):
        with_separators = _BR_RE.sub("; ", cell_html)
        without_tags = _TAG_RE.sub(" ", with_separators)
        text = normalize(html.unescape(without_tags), symbols)
    else:
        text = normalize(re.sub(r"\n+", "; ", (cell_text or "").strip()), symbols)
    # "A; ; B" shows up when a break sits next to another break or tag
    parts = [p.strip() for p in text.split(";")]
    return "; ".join(p for p in parts if p)


def parse_age(token: str | None) -> int | None:
    """Convert a relative-age token like ``"2d 4h"`` to minutes.

    Each whitespace-separated group is read as ``<int><unit>``; anything after
    the unit inside a group is ignored, so ``"3days"`` still counts as 3d.
    Upstream formatting drifts often enough that partial credit beats
    rejecting the whole token. Returns ``None`` when no group matches, which
    is distinct from a parsed ``0``.
    """
    text = normalize(token, ()).rstrip("+").strip()
    if not text:
        return None

    total = 0
    matched = False
    for group in text.split(" "):
        m = _AGE_GROUP_RE.match(group)
        if not m:
            continue
        matched = True
        total += int(m.group(1)) * _UNIT_MINUTES[m.group(2).lower()]
    return total if matched else None
