"""Row classifier: decides which kind of quote a table row holds, if any.

Rate rows on the source page are never labelled structurally, so the decision
rests on keywords in the first cell plus the presence of numbers anywhere in
the row.  Rules are checked in a fixed order (auction, market, spot) because
auction labels also mention "gold" and would otherwise read as market rows.
"""

from __future__ import annotations

import re
from enum import Enum

from metalrates.scraper.models import RawRow

MIN_CELLS = 3

AUCTION_KEYWORDS = ("auction", "99.50", "gst", "extra", "minimum")
AUCTION_MIN_KEYWORDS = 2

_DIGIT_RUN_RE = re.compile(r"\d{2,}")


class RowKind(str, Enum):
    AUCTION = "auction"
    MARKET = "market"
    SPOT = "spot"
    NONE = "none"


def is_auction_row(text: str, row: RawRow) -> bool:
    """Gold label carrying at least two auction keywords, with numbers in the row."""
    if "gold" not in text:
        return False
    hits = sum(1 for keyword in AUCTION_KEYWORDS if keyword in text)
    return hits >= AUCTION_MIN_KEYWORDS and row.has_numbers()


def is_market_row(text: str, row: RawRow) -> bool:
    """Gold/silver label, not auction or spot, tagged by "current" or a purity code."""
    if "gold" not in text and "silver" not in text:
        return False
    if "auction" in text or "spot" in text:
        return False
    has_market_terms = (
        "current" in text
        or "999" in text
        or "925" in text
        or _DIGIT_RUN_RE.search(text) is not None
    )
    return has_market_terms and row.has_numbers()


def is_spot_row(text: str, row: RawRow) -> bool:
    return "spot" in text and row.has_numbers()


def classify_row(row: RawRow) -> RowKind:
    """Return the kind of quote *row* most likely holds.

    Rows with fewer than three cells are rejected before any keyword check.
    """
    if len(row.cells) < MIN_CELLS:
        return RowKind.NONE

    text = row.label
    if is_auction_row(text, row):
        return RowKind.AUCTION
    if is_market_row(text, row):
        return RowKind.MARKET
    if is_spot_row(text, row):
        return RowKind.SPOT
    return RowKind.NONE
