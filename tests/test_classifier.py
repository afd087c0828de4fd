"""Tests for the row classifier."""

from __future__ import annotations

import pytest

from metalrates.scraper.classifier import (
    RowKind,
    classify_row,
    is_auction_row,
    is_market_row,
    is_spot_row,
)
from metalrates.scraper.models import RawCell, RawRow
from metalrates.scraper.parser import extract_numbers


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _row(*texts: str, index: int = 0) -> RawRow:
    cells = tuple(RawCell(text=t, html=t, numbers=extract_numbers(t)) for t in texts)
    return RawRow(cells=cells, index=index)


# ---------------------------------------------------------------------------
# classify_row
# ---------------------------------------------------------------------------

class TestClassifyRow:
    def test_auction_row(self) -> None:
        row = _row("Gold 99.50 Auction GST 3 Extra Minimum 500", "6500", "100", "50")
        assert classify_row(row) is RowKind.AUCTION

    def test_incidental_gst_is_not_auction(self) -> None:
        row = _row("Gold Current GST", "6000", "6010")
        assert classify_row(row) is RowKind.MARKET

    def test_auction_requires_numbers(self) -> None:
        row = _row("Gold Auction GST", "closed", "-")
        assert classify_row(row) is RowKind.NONE

    @pytest.mark.parametrize(
        "label",
        ["Silver 999", "Gold Current", "Silver 925 bar", "Gold 22k"],
    )
    def test_market_rows(self, label: str) -> None:
        assert classify_row(_row(label, "6000", "6010")) is RowKind.MARKET

    def test_gold_without_market_terms_is_none(self) -> None:
        assert classify_row(_row("Gold rate", "6000", "6010")) is RowKind.NONE

    def test_spot_row(self) -> None:
        assert classify_row(_row("Silver Spot", "78", "80")) is RowKind.SPOT

    def test_gold_spot_goes_to_spot_not_market(self) -> None:
        assert classify_row(_row("Gold Spot 999", "2350", "2352")) is RowKind.SPOT

    def test_spot_requires_numbers(self) -> None:
        assert classify_row(_row("Silver Spot", "n/a", "n/a")) is RowKind.NONE

    def test_short_rows_rejected_before_keywords(self) -> None:
        assert classify_row(_row("Gold 99.50 Auction GST 3", "6500")) is RowKind.NONE
        assert classify_row(_row("Silver Spot")) is RowKind.NONE
        assert classify_row(RawRow(cells=(), index=0)) is RowKind.NONE

    def test_header_row_is_none(self) -> None:
        assert classify_row(_row("Product", "Bid", "Ask", "High", "Low")) is RowKind.NONE

    def test_numbers_in_label_only_still_count(self) -> None:
        row = _row("Silver Spot 78.5", "-", "-")
        assert classify_row(row) is RowKind.SPOT


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

_SAMPLE_ROWS = [
    _row("Gold 99.50 Auction GST 3 Extra Minimum 500", "6500", "100", "50"),
    _row("Gold GST 3 Extra 22 Current", "6000", "6010", "6020"),
    _row("Silver 999", "78000", "78100"),
    _row("Silver Spot", "78", "80"),
    _row("INR Spot", "83.1", "83.2"),
    _row("Product", "Bid", "Ask"),
    _row("Platinum", "3000", "3010"),
]


class TestClassifierProperties:
    @pytest.mark.parametrize("row", _SAMPLE_ROWS)
    def test_classification_is_idempotent(self, row: RawRow) -> None:
        assert classify_row(row) is classify_row(row)

    @pytest.mark.parametrize("row", _SAMPLE_ROWS)
    def test_result_is_first_matching_rule(self, row: RawRow) -> None:
        text = row.label
        checks = [
            (RowKind.AUCTION, is_auction_row(text, row)),
            (RowKind.MARKET, is_market_row(text, row)),
            (RowKind.SPOT, is_spot_row(text, row)),
        ]
        expected = next((kind for kind, matched in checks if matched), RowKind.NONE)
        assert classify_row(row) is expected

    def test_auction_wins_when_market_also_matches(self) -> None:
        row = _SAMPLE_ROWS[1]
        assert is_auction_row(row.label, row)
        assert is_market_row(row.label, row)
        assert classify_row(row) is RowKind.AUCTION
