"""Tests for the structural parser (raw HTML → table model)."""

from __future__ import annotations

from metalrates.scraper.models import ParsedPage
from metalrates.scraper.parser import extract_numbers, parse_tables


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_RATES_HTML = """\
<!DOCTYPE html>
<html>
<head><title> Narnoli Corporation </title></head>
<body>
  <table class="rates main" border="1">
    <tr class="head"><th>Product</th><th>M-Rate</th><th>Premium</th><th>Sell</th></tr>
    <tr class="odd">
      <td>Gold 99.50 Auction GST 3</td><td><b>6500</b></td><td>100</td><td>50</td>
    </tr>
  </table>
  <table id="spot">
    <tr><td>Silver Spot</td><td>78</td><td>80</td></tr>
  </table>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# extract_numbers
# ---------------------------------------------------------------------------

class TestExtractNumbers:
    def test_integers_and_decimals_in_order(self) -> None:
        assert extract_numbers("Gold 99.50 GST 3") == (99.5, 3.0)

    def test_duplicates_preserved(self) -> None:
        assert extract_numbers("78 / 78") == (78.0, 78.0)

    def test_no_thousands_separator_handling(self) -> None:
        assert extract_numbers("1,234.50") == (1.0, 234.5)

    def test_no_numbers(self) -> None:
        assert extract_numbers("Product") == ()

    def test_sign_is_not_part_of_token(self) -> None:
        assert extract_numbers("-12.5") == (12.5,)


# ---------------------------------------------------------------------------
# parse_tables
# ---------------------------------------------------------------------------

class TestParseTables:
    def test_returns_parsed_page_with_title(self) -> None:
        page = parse_tables(_RATES_HTML)
        assert isinstance(page, ParsedPage)
        assert page.title == "Narnoli Corporation"

    def test_tables_in_document_order(self) -> None:
        page = parse_tables(_RATES_HTML)
        assert [t.id for t in page.tables] == ["table_0", "table_1"]
        assert page.tables[1].attributes == {"id": "spot"}

    def test_headers_from_first_row(self) -> None:
        page = parse_tables(_RATES_HTML)
        assert page.tables[0].headers == ("Product", "M-Rate", "Premium", "Sell")

    def test_header_row_is_kept_as_a_row(self) -> None:
        table = parse_tables(_RATES_HTML).tables[0]
        assert len(table.rows) == 2
        assert [r.index for r in table.rows] == [0, 1]
        assert table.rows[0].cells[0].text == "Product"

    def test_cell_text_markup_and_numbers(self) -> None:
        row = parse_tables(_RATES_HTML).tables[0].rows[1]
        assert row.cells[0].text == "Gold 99.50 Auction GST 3"
        assert row.cells[0].numbers == (99.5, 3.0)
        assert row.cells[1].html == "<b>6500</b>"
        assert row.cells[1].text == "6500"
        assert row.cells[1].numbers == (6500.0,)

    def test_multi_valued_attributes_are_joined(self) -> None:
        table = parse_tables(_RATES_HTML).tables[0]
        assert table.attributes["class"] == "rates main"
        assert table.attributes["border"] == "1"
        assert table.rows[1].class_name == "odd"

    def test_row_count(self) -> None:
        assert parse_tables(_RATES_HTML).row_count == 3

    def test_no_tables(self) -> None:
        page = parse_tables("<html><head><title>Empty</title></head><body><p>hi</p></body></html>")
        assert page.tables == ()
        assert page.row_count == 0

    def test_missing_title_is_empty_string(self) -> None:
        assert parse_tables("<table><tr><td>x</td></tr></table>").title == ""

    def test_empty_rows_are_not_dropped(self) -> None:
        page = parse_tables("<table><tr></tr><tr><td>a</td></tr></table>")
        rows = page.tables[0].rows
        assert len(rows) == 2
        assert rows[0].cells == ()
        assert page.tables[0].headers == ()

    def test_malformed_html_does_not_raise(self) -> None:
        page = parse_tables("<table><tr><td>Gold 999<td>6000</table><p><b>unclosed")
        assert len(page.tables) == 1
        assert len(page.tables[0].rows) == 1

    def test_empty_document(self) -> None:
        page = parse_tables("")
        assert page.tables == ()
        assert page.title == ""
