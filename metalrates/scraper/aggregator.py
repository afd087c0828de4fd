"""Aggregator: drive fetch → parse → classify → extract and build a result.

This is the error boundary of the engine.  Fetch and parse failures come back
as a ``ScrapeResult`` with ``status == ERROR``; rows that cannot be classified
or extracted are skipped without being reported.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from metalrates.config import settings
from metalrates.scraper.classifier import RowKind, classify_row
from metalrates.scraper.extractor import extract_record
from metalrates.scraper.fetcher import FetchedPage, FetchExhausted, fetch_html
from metalrates.scraper.models import (
    AuctionRate,
    MarketRate,
    ParsedPage,
    ScrapeDebug,
    ScrapeResult,
    ScrapeStatus,
    SpotRate,
    utc_now,
)
from metalrates.scraper.parser import parse_tables

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], FetchedPage]


def build_result(
    page: ParsedPage,
    *,
    source_url: str,
    intermediary: Optional[str] = None,
    fetched_at: Optional[datetime] = None,
) -> ScrapeResult:
    """Classify and extract every row of *page* into a successful result.

    Tables and rows are visited in document order and records keep that order.
    An empty result is still a success.
    """
    fetched_at = fetched_at or utc_now()
    auction_rates: list[AuctionRate] = []
    market_rates: list[MarketRate] = []
    spot_rates: list[SpotRate] = []

    for table_index, table in enumerate(page.tables):
        logger.debug("processing %s with %d rows", table.id, len(table.rows))
        for row_index, row in enumerate(table.rows):
            kind = classify_row(row)
            if kind is RowKind.NONE:
                continue

            record = extract_record(kind, row, table_index, row_index, fetched_at)
            if record is None:
                logger.debug(
                    "skipped %s row %d of %s: not enough numbers", kind.value, row_index, table.id
                )
                continue

            if kind is RowKind.AUCTION:
                auction_rates.append(record)
            elif kind is RowKind.MARKET:
                market_rates.append(record)
            else:
                spot_rates.append(record)

    logger.info(
        "extracted %d auction, %d market, %d spot rates from %d tables",
        len(auction_rates),
        len(market_rates),
        len(spot_rates),
        len(page.tables),
    )

    return ScrapeResult(
        status=ScrapeStatus.SUCCESS,
        fetched_at=fetched_at,
        auction_rates=tuple(auction_rates),
        market_rates=tuple(market_rates),
        spot_rates=tuple(spot_rates),
        debug=ScrapeDebug(
            table_count=len(page.tables),
            row_count=page.row_count,
            title_of_page=page.title,
            source_url=source_url,
            intermediary=intermediary,
        ),
    )


def scrape_rates(url: Optional[str] = None, *, fetch: Fetcher = fetch_html) -> ScrapeResult:
    """Run the full pipeline against *url* (``settings.target_url`` by default).

    Never raises: every failure while fetching or parsing becomes an error
    result with a human-readable ``message``.
    """
    url = url or settings.target_url
    try:
        fetched = fetch(url)
        page = parse_tables(fetched.html)
    except FetchExhausted as exc:
        logger.warning("scrape of %s failed: %s", url, exc)
        return ScrapeResult.error(str(exc))
    except Exception as exc:
        logger.exception("unexpected error while scraping %s", url)
        return ScrapeResult.error(str(exc) or type(exc).__name__)

    logger.info(
        "parsed %r: %d tables, %d rows", page.title, len(page.tables), page.row_count
    )
    return build_result(page, source_url=url, intermediary=fetched.intermediary)
