"""Structural parser: raw HTML → generic table model.

The parser is a faithful transcription of every ``<table>`` on the page.  It
never drops rows or cells; deciding what is relevant is the classifier's job,
which keeps the heuristics swappable without re-parsing.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Tag

from metalrates.scraper.models import ParsedPage, RawCell, RawRow, RawTable

# Integers and plain decimals; no sign, no thousands separators.
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def extract_numbers(text: str) -> tuple[float, ...]:
    """Return every numeric token in *text*, left to right, duplicates kept."""
    return tuple(float(match) for match in _NUMBER_RE.findall(text))


def _attributes(tag: Tag) -> dict[str, str]:
    """Flatten a tag's attributes; multi-valued ones (``class``) are space-joined."""
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        attrs[name] = " ".join(value) if isinstance(value, (list, tuple)) else str(value)
    return attrs


def _cell(tag: Tag) -> RawCell:
    text = tag.get_text().strip()
    return RawCell(
        text=text,
        html=tag.decode_contents(),
        numbers=extract_numbers(text),
        attributes=_attributes(tag),
    )


def _table(tag: Tag, index: int) -> RawTable:
    rows: list[RawRow] = []
    for row_index, tr in enumerate(tag.find_all("tr")):
        cells = tuple(_cell(td) for td in tr.find_all(["td", "th"]))
        rows.append(
            RawRow(
                cells=cells,
                index=row_index,
                class_name=_attributes(tr).get("class", ""),
            )
        )

    headers = tuple(cell.text for cell in rows[0].cells) if rows else ()
    return RawTable(
        id=f"table_{index}",
        headers=headers,
        rows=tuple(rows),
        attributes=_attributes(tag),
    )


def _title(soup: BeautifulSoup) -> str:
    if soup.title is None:
        return ""
    return soup.title.get_text().strip()


def parse_tables(html: str) -> ParsedPage:
    """Parse *html* into a :class:`ParsedPage`.

    Uses the permissive built-in ``html.parser`` backend, so malformed markup
    produces a partial tree instead of an exception.
    """
    soup = BeautifulSoup(html, "html.parser")
    tables = tuple(_table(tag, index) for index, tag in enumerate(soup.find_all("table")))
    return ParsedPage(title=_title(soup), tables=tables)
