"""Scraper package — fetch, parse, classify and extract metal rates."""

from metalrates.scraper.aggregator import build_result, scrape_rates
from metalrates.scraper.classifier import RowKind, classify_row
from metalrates.scraper.fetcher import FetchExhausted, MetalRatesError, fetch_html
from metalrates.scraper.models import (
    AuctionRate,
    MarketCategory,
    MarketRate,
    ScrapeResult,
    ScrapeStatus,
    SpotRate,
)
from metalrates.scraper.parser import parse_tables

__all__ = [
    "fetch_html",
    "parse_tables",
    "classify_row",
    "build_result",
    "scrape_rates",
    "RowKind",
    "FetchExhausted",
    "MetalRatesError",
    "AuctionRate",
    "MarketCategory",
    "MarketRate",
    "SpotRate",
    "ScrapeResult",
    "ScrapeStatus",
]
