"""Utilities for rendering scrape results in the CLI."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from metalrates.scraper.models import ScrapeResult


def _fmt(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def _table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> List[str]:
    """Render a plain-text table with left-aligned columns."""
    rows = [list(r) for r in rows]
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def _line(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    lines = [_line(headers), _line(["-" * w for w in widths])]
    lines.extend(_line(row) for row in rows)
    return lines


def render_result(result: ScrapeResult) -> str:
    """Render a :class:`ScrapeResult` as human-readable text.

    Error results and empty successes get different messages: the first means
    no data could be fetched, the second that the page had nothing we
    recognise.
    """
    stamp = result.fetched_at.strftime("%Y-%m-%d %H:%M:%S %Z")

    if not result.is_success:
        return f"❌ Rates unavailable ({stamp}): {result.message}\nTry again later."

    if result.is_empty:
        return f"⚠️  Site reachable but no recognisable rates found ({stamp})."

    lines = [f"📈 Rates fetched {stamp}"]

    if result.auction_rates:
        lines += ["", "🥇 Gold auction"]
        lines += _table(
            ["Product", "GST", "Extra min.", "M-Rate", "Premium", "Sell"],
            (
                [r.product, r.gst or "-", r.extra_minimum or "-",
                 _fmt(r.m_rate), _fmt(r.premium), _fmt(r.sell)]
                for r in result.auction_rates
            ),
        )

    if result.market_rates:
        lines += ["", "📊 Market"]
        lines += _table(
            ["Product", "Category", "Bid", "Ask", "High", "Low"],
            (
                [r.product, r.category.value, _fmt(r.bid), _fmt(r.ask), _fmt(r.high), _fmt(r.low)]
                for r in result.market_rates
            ),
        )

    if result.spot_rates:
        lines += ["", "💰 Spot"]
        lines += _table(
            ["Product", "Bid", "Ask", "High", "Low"],
            (
                [r.product, _fmt(r.bid), _fmt(r.ask), _fmt(r.high), _fmt(r.low)]
                for r in result.spot_rates
            ),
        )

    return "\n".join(lines)
