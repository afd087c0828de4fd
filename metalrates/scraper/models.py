"""Data models for the rate-extraction pipeline.

Two families live here:

* the generic table model produced by the parser (:class:`RawTable`,
  :class:`RawRow`, :class:`RawCell`), which only exists for the duration of a
  single scrape pass, and
* the typed rate records and the :class:`ScrapeResult` wrapper, which are the
  only thing callers ever see.  ``ScrapeResult`` round-trips through JSON so it
  can be cached as one blob.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Generic table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawCell:
    """One ``<td>``/``<th>`` as found on the page."""

    text: str
    html: str
    numbers: tuple[float, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RawRow:
    cells: tuple[RawCell, ...]
    index: int
    class_name: str = ""

    @property
    def label(self) -> str:
        """Lowercased text of the first cell, or empty string for an empty row."""
        return self.cells[0].text.lower() if self.cells else ""

    def has_numbers(self) -> bool:
        return any(cell.numbers for cell in self.cells)


@dataclass(frozen=True)
class RawTable:
    id: str
    headers: tuple[str, ...]
    rows: tuple[RawRow, ...]
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ParsedPage:
    """Parser output: the page title plus every table in document order."""

    title: str
    tables: tuple[RawTable, ...] = ()

    @property
    def row_count(self) -> int:
        return sum(len(table.rows) for table in self.tables)


# ---------------------------------------------------------------------------
# Rate records
# ---------------------------------------------------------------------------

class MarketCategory(str, Enum):
    GOLD_995 = "gold_995"
    GOLD_AUCTION = "gold_auction"
    GOLD_CURRENT = "gold_current"
    SILVER_999 = "silver_999"
    SILVER_CURRENT = "silver_current"
    OTHER = "other"


class RateSource(str, Enum):
    EXTERNAL = "external"
    MANUAL = "manual"


class ScrapeStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class AuctionRate:
    """A gold auction quote.

    ``sell`` is whichever extracted value was largest.  That ordering is an
    assumption about the source page, not something the markup guarantees.
    """

    id: str
    product: str
    gst: str
    extra_minimum: str
    m_rate: float
    premium: float
    sell: float
    last_updated: datetime


@dataclass(frozen=True)
class MarketRate:
    id: str
    product: str
    category: MarketCategory
    last_updated: datetime
    bid: Optional[float] = None
    ask: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    source: RateSource = RateSource.EXTERNAL


@dataclass(frozen=True)
class SpotRate:
    id: str
    product: str
    bid: float
    ask: float
    high: float
    low: float
    last_updated: datetime


@dataclass(frozen=True)
class ScrapeDebug:
    table_count: int
    row_count: int
    title_of_page: str
    source_url: str
    intermediary: Optional[str] = None


@dataclass(frozen=True)
class ScrapeResult:
    """The sole artifact handed to callers.

    ``status == ERROR`` means no data could be obtained; ``SUCCESS`` with empty
    collections means the page was reachable but held nothing recognisable.
    """

    status: ScrapeStatus
    fetched_at: datetime
    auction_rates: tuple[AuctionRate, ...] = ()
    market_rates: tuple[MarketRate, ...] = ()
    spot_rates: tuple[SpotRate, ...] = ()
    message: Optional[str] = None
    debug: Optional[ScrapeDebug] = None

    @property
    def is_success(self) -> bool:
        return self.status is ScrapeStatus.SUCCESS

    @property
    def is_empty(self) -> bool:
        return not (self.auction_rates or self.market_rates or self.spot_rates)

    @classmethod
    def error(cls, message: str, fetched_at: datetime | None = None) -> ScrapeResult:
        return cls(
            status=ScrapeStatus.ERROR,
            fetched_at=fetched_at or utc_now(),
            message=message,
        )

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict (enums as values, datetimes as ISO-8601)."""
        return _jsonable(asdict(self))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScrapeResult:
        debug = data.get("debug")
        return cls(
            status=ScrapeStatus(data["status"]),
            fetched_at=datetime.fromisoformat(data["fetched_at"]),
            auction_rates=tuple(
                AuctionRate(**{**item, "last_updated": datetime.fromisoformat(item["last_updated"])})
                for item in data.get("auction_rates", [])
            ),
            market_rates=tuple(
                MarketRate(
                    **{
                        **item,
                        "category": MarketCategory(item["category"]),
                        "source": RateSource(item.get("source", RateSource.EXTERNAL.value)),
                        "last_updated": datetime.fromisoformat(item["last_updated"]),
                    }
                )
                for item in data.get("market_rates", [])
            ),
            spot_rates=tuple(
                SpotRate(**{**item, "last_updated": datetime.fromisoformat(item["last_updated"])})
                for item in data.get("spot_rates", [])
            ),
            message=data.get("message"),
            debug=ScrapeDebug(**debug) if debug else None,
        )

    @classmethod
    def from_json(cls, raw: str) -> ScrapeResult:
        return cls.from_dict(json.loads(raw))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value
