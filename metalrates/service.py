"""Public rates service: cache wrapper around the scrape pipeline.

``RatesService`` is what presentation code talks to.  It prefers a fresh cached
result, stores only successful scrapes, and collapses concurrent pipeline runs
for the same target URL into one in-flight fetch shared by every caller.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from functools import lru_cache
from typing import Callable, Optional

from metalrates.cache import JsonFileStorage, RatesCache
from metalrates.config import settings
from metalrates.scraper.aggregator import scrape_rates
from metalrates.scraper.models import ScrapeResult

logger = logging.getLogger(__name__)

Scraper = Callable[[str], ScrapeResult]


class RatesService:
    def __init__(
        self,
        cache: Optional[RatesCache] = None,
        *,
        url: Optional[str] = None,
        scrape: Scraper = scrape_rates,
    ) -> None:
        self.cache = cache if cache is not None else RatesCache()
        self.url = url or settings.target_url
        self._scrape = scrape
        self._lock = threading.Lock()
        self._in_flight: dict[str, tuple[Future, bool]] = {}

    # ------------------------------------------------------------------
    # Pipeline execution
    # ------------------------------------------------------------------
    def _run_pipeline(self, *, store: bool = False) -> ScrapeResult:
        """Run the scrape once per target URL, however many threads ask at once.

        The first caller becomes the leader and scrapes; callers arriving while
        it is running wait on the same future and receive the same result.
        With ``store`` the leader caches a successful result before it leaves
        the in-flight table, so a later cache miss cannot start a second scrape.
        """
        with self._lock:
            entry = self._in_flight.get(self.url)
            leader = entry is None
            if leader:
                future = Future()
                self._in_flight[self.url] = (future, store)

        if not leader:
            future, leader_stores = entry
            logger.debug("joining in-flight scrape of %s", self.url)
            result = future.result()
            if store and not leader_stores:
                self._store(result)
            return result

        try:
            result = self._scrape(self.url)
            if store:
                self._store(result)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._in_flight.pop(self.url, None)

    def _store(self, result: ScrapeResult) -> None:
        if result.is_success:
            self.cache.set(result)
        else:
            logger.warning("not caching failed scrape: %s", result.message)

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------
    def fetch_live_rates(self) -> ScrapeResult:
        """Scrape now, ignoring the cache entirely."""
        return self._run_pipeline()

    def get_rates_with_cache(self) -> ScrapeResult:
        """Return a fresh cached result, or scrape and cache on success."""
        cached = self.cache.get()
        if cached is not None:
            logger.info("using cached rates from %s", cached.fetched_at.isoformat())
            return cached

        logger.info("fetching fresh rates")
        return self._run_pipeline(store=True)

    def force_refresh(self) -> ScrapeResult:
        """Scrape regardless of cache freshness; cache the result on success."""
        return self._run_pipeline(store=True)


@lru_cache
def get_rates_service() -> RatesService:
    """Process-wide service backed by a JSON file in the workspace."""
    return RatesService(RatesCache(JsonFileStorage(settings.cache_path)))


def fetch_live_rates() -> ScrapeResult:
    return get_rates_service().fetch_live_rates()


def get_rates_with_cache() -> ScrapeResult:
    return get_rates_service().get_rates_with_cache()
