"""Single-slot cache for the last successful scrape.

The cache keeps one JSON blob under a fixed key in a small key-value store.
Freshness is measured against an injectable clock so tests can move time
without sleeping.

Usage::

    from metalrates.cache import JsonFileStorage, RatesCache

    cache = RatesCache(JsonFileStorage(settings.cache_path))
    result = cache.get()          # None when missing, stale or unreadable
"""

from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path
from typing import Callable, Optional, Protocol

from metalrates.config import settings
from metalrates.scraper.models import ScrapeResult

logger = logging.getLogger(__name__)

CACHE_KEY = "metal_rates_cache"

Clock = Callable[[], float]


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------

class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Per-process storage; lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """String values kept in one JSON object on disk.

    A missing or corrupt file reads as empty; it is overwritten on the next
    ``set``.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("ignoring unreadable cache file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


# ---------------------------------------------------------------------------
# Rates cache
# ---------------------------------------------------------------------------

class RatesCache:
    """Holds at most one :class:`ScrapeResult` plus the time it was stored."""

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        *,
        freshness: Optional[float] = None,
        clock: Clock = time.time,
        key: str = CACHE_KEY,
    ) -> None:
        self._storage = storage if storage is not None else MemoryStorage()
        self._freshness = (
            freshness if freshness is not None else settings.cache_freshness_seconds
        )
        self._clock = clock
        self._key = key

    @property
    def freshness(self) -> float:
        return self._freshness

    def _read(self) -> Optional[tuple[float, ScrapeResult]]:
        raw = self._storage.get(self._key)
        if raw is None:
            return None
        try:
            entry = json.loads(raw)
            if not isinstance(entry, dict) or not isinstance(entry.get("result"), dict):
                raise ValueError("cache entry is not a result mapping")
            cached_at = float(entry["cached_at"])
            if not math.isfinite(cached_at):
                raise ValueError(f"non-finite timestamp {cached_at!r}")
            return cached_at, ScrapeResult.from_dict(entry["result"])
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("discarding unreadable cache entry: %s", exc)
            return None

    def cached_at(self) -> Optional[float]:
        entry = self._read()
        return entry[0] if entry else None

    def get(self) -> Optional[ScrapeResult]:
        """Return the cached result if it is younger than the freshness window."""
        entry = self._read()
        if entry is None:
            logger.debug("cache miss")
            return None

        cached_at, result = entry
        age = self._clock() - cached_at
        if age >= self._freshness:
            logger.debug("cache stale (%.1fs old)", age)
            return None

        logger.debug("cache hit (%.1fs old)", age)
        return result

    def set(self, result: ScrapeResult) -> None:
        """Replace the cached entry with *result*, stamped with the current time."""
        entry = {"cached_at": self._clock(), "result": result.to_dict()}
        self._storage.set(self._key, json.dumps(entry))

    def clear(self) -> None:
        self._storage.delete(self._key)
