"""Page-structure diagnostics for when the source site changes its layout.

``analyze_structure`` summarises what the raw HTML looks like (tables, rows,
keyword hits, large numbers) and ``render_report`` turns that summary and a
scrape result into a Markdown report with fixed troubleshooting advice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from metalrates.scraper.models import ParsedPage, ScrapeResult
from metalrates.scraper.parser import parse_tables

KEYWORDS = ("gold", "silver", "rate", "price", "auction", "spot", "bid", "ask")
TAGS = ("table", "tr", "td", "th")

_PREVIEW_CHARS = 50
_SAMPLE_CHARS = 500
_LARGE_NUMBER_RE = re.compile(r"\d{3,6}")
_MAX_LARGE_NUMBERS = 10


@dataclass
class StructureReport:
    """A snapshot of a fetched page's shape."""

    html_length: int
    table_count: int
    row_count: int
    title: str = ""
    row_previews: list[list[str]] = field(default_factory=list)
    keyword_counts: dict[str, int] = field(default_factory=dict)
    tag_counts: dict[str, int] = field(default_factory=dict)
    large_numbers: list[int] = field(default_factory=list)
    html_sample: str = ""


def _row_previews(page: ParsedPage) -> list[list[str]]:
    previews: list[list[str]] = []
    for table in page.tables:
        for row in table.rows:
            previews.append([cell.text[:_PREVIEW_CHARS] for cell in row.cells])
    return previews


def _large_numbers(html: str) -> list[int]:
    """Unique 3–6 digit runs in the markup, largest first."""
    unique = {int(match) for match in _LARGE_NUMBER_RE.findall(html)}
    return sorted(unique, reverse=True)[:_MAX_LARGE_NUMBERS]


def analyze_structure(html: str) -> StructureReport:
    page = parse_tables(html)
    lowered = html.lower()
    return StructureReport(
        html_length=len(html),
        table_count=len(page.tables),
        row_count=page.row_count,
        title=page.title,
        row_previews=_row_previews(page),
        keyword_counts={keyword: lowered.count(keyword) for keyword in KEYWORDS},
        tag_counts={
            tag: len(re.findall(rf"<{tag}[\s>]", lowered)) for tag in TAGS
        },
        large_numbers=_large_numbers(html),
        html_sample=html[:_SAMPLE_CHARS],
    )


def recommendations(report: StructureReport, result: Optional[ScrapeResult] = None) -> list[str]:
    advice: list[str] = []

    if report.html_length == 0:
        advice.append("Check network connectivity and the fetch intermediaries")

    if report.table_count == 0:
        advice.append("Website structure may have changed - tables not found")
        advice.append("Try alternative selectors (div, span, etc.)")

    if report.table_count > 0 and result is not None and not result.auction_rates:
        advice.append("Tables found but no gold auction rates parsed")
        advice.append("Check table structure and parsing logic")

    if result is not None and not result.is_success:
        advice.append("Review errors and adjust parsing strategy")

    if not advice:
        advice.append("Data fetching appears to be working correctly")

    return advice


def render_report(report: StructureReport, result: Optional[ScrapeResult] = None) -> str:
    """Render *report* (and optionally the matching *result*) as Markdown."""
    lines = [
        "# Rate Page Diagnostics",
        "",
        f"**Title:** {report.title or '(none)'}",
        f"**HTML Length:** {report.html_length} characters",
        f"**Tables Found:** {report.table_count}",
        f"**Rows Found:** {report.row_count}",
    ]

    if result is not None:
        lines += [
            "",
            "## Parsing Results",
            f"- Status: {result.status.value}",
            f"- Gold Auction Rates: {len(result.auction_rates)}",
            f"- Market Rates: {len(result.market_rates)}",
            f"- Spot Rates: {len(result.spot_rates)}",
            "",
            "## Errors",
            f"- {result.message}" if result.message else "None",
        ]

    lines += ["", "## Keyword Frequency"]
    lines += [f"- {keyword}: {count}" for keyword, count in report.keyword_counts.items()]

    lines += ["", "## Tags"]
    lines += [f"- <{tag}>: {count}" for tag, count in report.tag_counts.items()]

    if report.large_numbers:
        lines += ["", "## Large Numbers", ", ".join(str(n) for n in report.large_numbers)]

    if report.row_previews:
        lines += ["", "## Rows"]
        lines += [
            f"{index + 1}. [{' | '.join(cells)}]"
            for index, cells in enumerate(report.row_previews)
        ]

    lines += ["", "## HTML Sample", "```", report.html_sample or "Not available", "```"]
    lines += ["", "## Recommendations"]
    lines += [f"- {line}" for line in recommendations(report, result)]

    return "\n".join(lines)
