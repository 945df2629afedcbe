from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from coop_tracker.models import ParsedJob
from coop_tracker.store import SqliteJobStore

LISTING_MARKDOWN = """\
# Summer 2026 Tech Internships

| Section | Link |
| ------- | ---- |
| Software | [jump](#software) |

## 💻 Software Engineering Internship Roles

| Company | Role | Location | Application | Age |
| ------- | ---- | -------- | ----------- | --- |
| **Acme** | Software Engineer Intern | Seattle, WA | [Apply](https://acme.com/jobs/1) | 2d |
| ↳ | Backend Intern 🔥 | Remote | [Apply](https://acme.com/jobs/2) | 5d+ |
| Globex | Platform Intern | Austin, TX | [Apply](https://globex.com/jobs/9) | 1mo |
| Initech | Missing Link Intern | Dallas, TX | 🔒 | 4d |

## Quant Internship Roles

| Location | Company | Role | Apply | Age |
| -------- | ------- | ---- | ----- | --- |
| Chicago, IL | Hooli | Quant Intern | [Apply](https://hooli.com/q/1) | 3d 4h |
| Chicago, IL | Hooli | Quant Intern Again | [Apply](https://acme.com/jobs/1) | 1d |
"""

LISTING_HTML = """\
<h2>🤖 Data Science, AI &amp; Machine Learning Internship Roles</h2>
<table>
<thead>
<tr><th>Company</th><th>Role</th><th>Location</th><th>Application</th><th>Age</th></tr>
</thead>
<tbody>
<tr>
<td><strong><a href="https://simplify.jobs/c/Acme">Acme</a></strong></td>
<td>ML Intern 🛂</td>
<td>New York<br>Remote</td>
<td><a href="https://acme.com/apply/1"><img alt="Apply"></a> <a href="https://simplify.jobs/p/1"><img alt="Simplify"></a></td>
<td>3d</td>
</tr>
<tr>
<td>↳</td>
<td>Data Intern</td>
<td>Boston, MA</td>
<td><a href="/relative/apply">Apply</a> <a href="https://acme.com/apply/2">Apply</a></td>
<td>5h</td>
</tr>
<tr>
<td>Closed Co</td>
<td>Research Intern</td>
<td>San Francisco, CA</td>
<td>🔒</td>
<td>0d</td>
</tr>
</tbody>
</table>
"""

BANNER_README = """\
<div align="center">
  <img src="https://example.com/banner.png" alt="Summer 2026 Internships">
</div>

## 💻 Software Engineering Internship Roles

| Company | Role | Location | Application | Age |
| ------- | ---- | -------- | ----------- | --- |
| Acme | Software Engineer Intern | New York</br>Remote | [Apply](https://acme.com/jobs/1) | 2d |
| Globex | Platform Intern | Austin, TX | [Apply](https://globex.com/jobs/9) | 1mo |
"""

COMMENT_README = """\
<!-- Please make edits through the contribution form -->

# Internships

| Company | Role | Location | Link |
| --- | --- | --- | --- |
| Globex | Data Intern | Austin, TX | [Apply](https://globex.com/jobs/3) |
"""

EMBEDDED_TABLE_README = """\
# Summer 2026 Internships

## Quant Internship Roles

<table>
<thead>
<tr><th>Company</th><th>Role</th><th>Location</th><th>Application</th><th>Age</th></tr>
</thead>
<tbody>
<tr><td>Hooli</td><td>Quant Intern</td><td>Chicago, IL</br>New York, NY</td><td><a href="https://hooli.com/q/7">Apply</a></td><td>1d</td></tr>
</tbody>
</table>
"""


class FixedClock:
    """Callable clock that advances only when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def make_job(n: int, **overrides) -> ParsedJob:
    values = {
        "company": f"Company {n}",
        "role": f"Intern {n}",
        "location": "Remote",
        "category": "Software Engineering",
        "url": f"https://jobs.example.com/{n}",
        "age": "1d",
        "age_minutes": 1440,
    }
    values.update(overrides)
    return ParsedJob(**values)


@pytest.fixture
def store():
    s = SqliteJobStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def listing_markdown() -> str:
    return LISTING_MARKDOWN


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def banner_readme() -> str:
    return BANNER_README


@pytest.fixture
def comment_readme() -> str:
    return COMMENT_README


@pytest.fixture
def embedded_table_readme() -> str:
    return EMBEDDED_TABLE_README
