"""Data models for parsed postings and persisted job records."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

STATUS_OPEN = "OPEN"
STATUS_CLOSED = "CLOSED"
# Owned by downstream tracking; the pipeline never writes these.
TRACKING_STATUSES: tuple[str, ...] = ("APPLIED", "INTERVIEWING", "OFFER", "REJECTED")

DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "company", "role", "location", "category", "age", "age_minutes",
)


@dataclass(frozen=True)
class RawCell:
    """One table cell as found in the rendered document."""

    text: str
    html: str = ""
    links: tuple[str, ...] = ()


@dataclass
class TableContext:
    headers: list[str]
    category: str
    rows: list[tuple[RawCell, ...]]
    columns: dict[str, int] = field(default_factory=dict)


@dataclass
class ParsedJob:
    company: str
    role: str
    location: str
    category: str
    url: str
    age: str | None = None
    age_minutes: int | None = None

    def descriptive_fields(self) -> dict:
        return {name: getattr(self, name) for name in DESCRIPTIVE_FIELDS}


@dataclass
class JobRecord:
    id: int
    company: str
    role: str
    location: str
    category: str
    url: str
    age: str | None
    age_minutes: int | None
    status: str
    first_seen_at: datetime
    last_seen_at: datetime


@dataclass
class PullResult:
    inserted_count: int = 0
    updated_count: int = 0
    total_parsed_count: int = 0
    closed_count: int = 0
    reopened_count: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "insertedCount": self.inserted_count,
            "updatedCount": self.updated_count,
            "totalParsedCount": self.total_parsed_count,
            "closedCount": self.closed_count,
            "reopenedCount": self.reopened_count,
        }
