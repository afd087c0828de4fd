"""Field extraction: map a classified row's numbers onto named rate fields.

None of the source cells say which number is which, so every extractor sorts
the row's numeric tokens and assigns them by position.  Each positional rule
lives in its own ``assign_*`` function so it can be tuned or tested without
touching the orchestration.

Every function here is pure and returns ``None`` rather than raising when a
row does not carry enough numbers.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional, Union

from metalrates.scraper.classifier import RowKind
from metalrates.scraper.models import (
    AuctionRate,
    MarketCategory,
    MarketRate,
    RateSource,
    RawRow,
    SpotRate,
    utc_now,
)

AUCTION_MIN_NUMBERS = 3
MARKET_MIN_NUMBERS = 1
SPOT_MIN_NUMBERS = 2

_GST_RE = re.compile(r"gst\s*(\d+\.?\d*)", re.IGNORECASE)
_EXTRA_MINIMUM_RE = re.compile(r"extra\s+minimum\s+(\d+)", re.IGNORECASE)

RateRecord = Union[AuctionRate, MarketRate, SpotRate]


# ---------------------------------------------------------------------------
# Number collection
# ---------------------------------------------------------------------------

def row_numbers(row: RawRow) -> list[float]:
    """Every numeric token in *row*, cell by cell, left to right."""
    numbers: list[float] = []
    for cell in row.cells:
        numbers.extend(cell.numbers)
    return numbers


def auction_numbers(row: RawRow) -> list[float]:
    """Numbers used for an auction quote.

    Auction labels embed their own figures (purity, GST, extra minimum), which
    would otherwise compete with the quoted prices.  The value cells after the
    label are used when they hold enough numbers on their own; otherwise the
    whole row is used.
    """
    value_numbers: list[float] = []
    for cell in row.cells[1:]:
        value_numbers.extend(cell.numbers)
    if len(value_numbers) >= AUCTION_MIN_NUMBERS:
        return value_numbers
    return row_numbers(row)


# ---------------------------------------------------------------------------
# Positional heuristics
# ---------------------------------------------------------------------------

def assign_auction_fields(numbers: list[float]) -> Optional[tuple[float, float, float]]:
    """Return ``(sell, m_rate, premium)`` by magnitude.

    Largest is ``sell``, second largest is ``m_rate``, smallest is ``premium``.
    This silently mis-assigns if the site ever quotes a premium above the base
    rate; the ordering is kept as-is until a real page shows otherwise.
    """
    if len(numbers) < AUCTION_MIN_NUMBERS:
        return None
    ordered = sorted(numbers, reverse=True)
    return ordered[0], ordered[1], ordered[-1]


def assign_market_fields(numbers: list[float]) -> Optional[dict[str, float]]:
    """Return ``bid``/``ask``/``high``/``low`` from ascending positions."""
    if len(numbers) < MARKET_MIN_NUMBERS:
        return None
    ordered = sorted(numbers)
    if len(ordered) >= 4:
        return {"low": ordered[0], "bid": ordered[1], "ask": ordered[2], "high": ordered[-1]}
    if len(ordered) >= 2:
        return {"bid": ordered[0], "ask": ordered[1], "high": ordered[-1], "low": ordered[0]}
    only = ordered[0]
    return {"bid": only, "ask": only, "high": only, "low": only}


def assign_spot_fields(numbers: list[float]) -> Optional[dict[str, float]]:
    if len(numbers) < SPOT_MIN_NUMBERS:
        return None
    ordered = sorted(numbers)
    return {"bid": ordered[0], "ask": ordered[1], "high": ordered[-1], "low": ordered[0]}


# ---------------------------------------------------------------------------
# Label parsing
# ---------------------------------------------------------------------------

def extract_gst(text: str) -> str:
    match = _GST_RE.search(text)
    return match.group(1) if match else ""


def extract_extra_minimum(text: str) -> str:
    match = _EXTRA_MINIMUM_RE.search(text)
    return match.group(1) if match else ""


def market_category(text: str) -> MarketCategory:
    """Bucket a product label by metal and purity."""
    label = text.lower()

    if "gold" in label:
        if "99.5" in label:
            return MarketCategory.GOLD_995
        if "auction" in label:
            return MarketCategory.GOLD_AUCTION
        return MarketCategory.GOLD_CURRENT

    if "silver" in label:
        if "999" in label:
            return MarketCategory.SILVER_999
        return MarketCategory.SILVER_CURRENT

    return MarketCategory.OTHER


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

def _product(row: RawRow) -> str:
    return row.cells[0].text if row.cells else ""


def extract_auction_rate(
    row: RawRow,
    table_index: int,
    row_index: int,
    last_updated: Optional[datetime] = None,
) -> Optional[AuctionRate]:
    fields = assign_auction_fields(auction_numbers(row))
    if fields is None:
        return None
    sell, m_rate, premium = fields
    product = _product(row)
    return AuctionRate(
        id=f"gold_auction_{table_index}_{row_index}",
        product=product,
        gst=extract_gst(product),
        extra_minimum=extract_extra_minimum(product),
        m_rate=m_rate,
        premium=premium,
        sell=sell,
        last_updated=last_updated or utc_now(),
    )


def extract_market_rate(
    row: RawRow,
    table_index: int,
    row_index: int,
    last_updated: Optional[datetime] = None,
) -> Optional[MarketRate]:
    fields = assign_market_fields(row_numbers(row))
    if fields is None:
        return None
    product = _product(row)
    return MarketRate(
        id=f"market_{table_index}_{row_index}",
        product=product,
        category=market_category(product),
        last_updated=last_updated or utc_now(),
        source=RateSource.EXTERNAL,
        **fields,
    )


def extract_spot_rate(
    row: RawRow,
    table_index: int,
    row_index: int,
    last_updated: Optional[datetime] = None,
) -> Optional[SpotRate]:
    fields = assign_spot_fields(row_numbers(row))
    if fields is None:
        return None
    return SpotRate(
        id=f"spot_{table_index}_{row_index}",
        product=_product(row),
        last_updated=last_updated or utc_now(),
        **fields,
    )


_EXTRACTORS = {
    RowKind.AUCTION: extract_auction_rate,
    RowKind.MARKET: extract_market_rate,
    RowKind.SPOT: extract_spot_rate,
}


def extract_record(
    kind: RowKind,
    row: RawRow,
    table_index: int,
    row_index: int,
    last_updated: Optional[datetime] = None,
) -> Optional[RateRecord]:
    """Dispatch to the extractor for *kind*; ``RowKind.NONE`` yields ``None``."""
    extractor = _EXTRACTORS.get(kind)
    if extractor is None:
        return None
    return extractor(row, table_index, row_index, last_updated)
