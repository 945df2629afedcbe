from __future__ import annotations

import pytest

from coop_tracker.extractor import (
    clean_category,
    extract_job_tables,
    is_job_table,
    render_document,
    resolve_columns,
)


def test_markdown_listing_yields_only_job_tables(listing_markdown) -> None:
    tables = list(extract_job_tables(listing_markdown))

    assert len(tables) == 2
    assert [t.category for t in tables] == ["Software Engineering", "Quant"]
    assert tables[0].headers == ["Company", "Role", "Location", "Application", "Age"]
    assert len(tables[0].rows) == 4


def test_reordered_headers_map_by_text(listing_markdown) -> None:
    quant = list(extract_job_tables(listing_markdown))[1]

    assert quant.columns == {"company": 1, "role": 2, "location": 0, "application": 3, "age": 4}
    first = quant.rows[0]
    assert first[quant.columns["company"]].text.strip() == "Hooli"
    assert first[quant.columns["location"]].text.strip() == "Chicago, IL"
    assert first[quant.columns["application"]].links == ("https://hooli.com/q/1",)


def test_html_listing_keeps_markup_and_absolute_links(listing_html) -> None:
    (table,) = list(extract_job_tables(listing_html))

    assert table.category == "Data Science AI & Machine Learning"
    app = table.rows[0][table.columns["application"]]
    assert app.links == ("https://acme.com/apply/1", "https://simplify.jobs/p/1")
    assert "<br" in table.rows[0][table.columns["location"]].html
    # relative hrefs never reach the builder
    assert table.rows[1][table.columns["application"]].links == ("https://acme.com/apply/2",)


def test_table_without_location_is_skipped() -> None:
    html = """
    <h2>Roles</h2>
    <table>
      <thead><tr><th>Company</th><th>Role</th><th>Application</th></tr></thead>
      <tbody><tr><td>Acme</td><td>Intern</td><td><a href="https://a.co/1">x</a></td></tr></tbody>
    </table>
    """
    assert list(extract_job_tables(html)) == []


def test_table_without_headers_is_skipped() -> None:
    html = "<table><tr><td>Acme</td><td>Intern</td></tr></table>"
    assert list(extract_job_tables(html)) == []


def test_missing_heading_uses_default_category() -> None:
    html = """
    <table>
      <tr><th>Company</th><th>Role</th><th>Location</th><th>Link</th></tr>
      <tr><td>Acme</td><td>Intern</td><td>Remote</td><td><a href="https://a.co/1">x</a></td></tr>
    </table>
    """
    (table,) = list(extract_job_tables(html))
    assert table.category == "Software Engineering"
    assert "age" not in table.columns
    assert len(table.rows) == 1


def test_default_category_is_configurable() -> None:
    html = """
    <table>
      <tr><th>Company</th><th>Role</th><th>Location</th><th>Link</th></tr>
    </table>
    """
    (table,) = list(extract_job_tables(html, default_category="Other"))
    assert table.category == "Other"


def test_resolve_columns_predicates() -> None:
    assert resolve_columns(["Company", "Role", "Location", "Apply Here"]) == {
        "company": 0, "role": 1, "location": 2, "application": 3,
    }
    assert resolve_columns(["Company", "Role", "Location"]) is None
    assert not is_job_table(["Section", "Link"])
    assert is_job_table([" COMPANY ", "Position", "Locations", "Application/Link", "Date Posted"])


def test_clean_category() -> None:
    assert clean_category("💻 Software Engineering Internship Roles") == "Software Engineering"
    assert clean_category("📈 Quantitative Finance Internship Roles") == "Quantitative Finance"
    assert clean_category("Hardware Engineering, Embedded Roles") == "Hardware Engineering Embedded"
    assert clean_category("Internship Roles") == "Software Engineering"
    assert clean_category(None) == "Software Engineering"
    assert clean_category("   ", default="Misc") == "Misc"


def test_banner_prefixed_readme_is_rendered_as_markdown(banner_readme) -> None:
    (table,) = list(extract_job_tables(banner_readme))

    assert table.category == "Software Engineering"
    assert len(table.rows) == 2
    assert table.rows[0][table.columns["application"]].links == ("https://acme.com/jobs/1",)


def test_comment_prefixed_readme_is_rendered_as_markdown(comment_readme) -> None:
    (table,) = list(extract_job_tables(comment_readme, default_category="Other"))

    assert table.category == "Other"
    assert table.rows[0][table.columns["company"]].text.strip() == "Globex"


def test_raw_html_table_inside_markdown_survives_rendering(embedded_table_readme) -> None:
    (table,) = list(extract_job_tables(embedded_table_readme))

    assert table.category == "Quant"
    assert table.rows[0][table.columns["application"]].links == ("https://hooli.com/q/7",)


def test_closing_br_tag_is_kept_as_a_line_break() -> None:
    html = (
        "<table><tr><th>Company</th><th>Role</th><th>Location</th><th>Link</th></tr>"
        "<tr><td>Acme</td><td>Intern</td><td>New York</br>Remote</td>"
        '<td><a href="https://a.co/1">x</a></td></tr></table>'
    )
    (table,) = list(extract_job_tables(html))

    location = table.rows[0][table.columns["location"]]
    assert "<br" in location.html
    assert "New York" in location.html and "Remote" in location.html


@pytest.mark.parametrize(
    "text",
    [
        "<!DOCTYPE html><html><body><h2>Roles</h2></body></html>",
        "<html><body><p>no tables here</p></body></html>",
    ],
)
def test_full_html_pages_skip_markdown(text) -> None:
    soup = render_document(text)
    assert soup.find("body") is not None


def test_html_fragment_without_table_is_rendered_as_markdown() -> None:
    soup = render_document("<p>intro</p>\n\n## Roles\n")
    assert soup.find("h2").get_text() == "Roles"
