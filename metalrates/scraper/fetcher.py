"""HTTP fetcher that walks a fixed, ordered list of intermediaries.

The target site has no API and is sometimes only reachable through a public
proxy, so every fetch tries the intermediaries in order and returns the first
successful response.  There is no retry and no backoff: exhausting the list is
an ordinary outcome that the aggregator turns into an error result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import quote

import httpx

from metalrates.config import settings

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
}


class MetalRatesError(Exception):
    """Base class for errors raised by the metalrates engine."""


class FetchExhausted(MetalRatesError):
    """Every intermediary failed for *url*.

    ``attempts`` holds one ``(intermediary name, reason)`` pair per attempt, in
    the order they were tried.
    """

    def __init__(self, url: str, attempts: Sequence[tuple[str, str]]) -> None:
        self.url = url
        self.attempts = list(attempts)
        details = "; ".join(f"{name}: {reason}" for name, reason in self.attempts)
        super().__init__(
            f"Failed to fetch {url} through all {len(self.attempts)} intermediaries"
            + (f" ({details})" if details else "")
        )


@dataclass(frozen=True)
class Intermediary:
    """A URL template a request is routed through.

    ``prefix`` is prepended to the target URL, percent-encoded when ``encode``
    is set.  An empty prefix means a direct request.
    """

    name: str
    prefix: str = ""
    encode: bool = True

    def build_url(self, target: str) -> str:
        if not self.prefix:
            return target
        return self.prefix + (quote(target, safe="") if self.encode else target)


DEFAULT_INTERMEDIARIES: tuple[Intermediary, ...] = (
    Intermediary("direct"),
    Intermediary("allorigins", "https://api.allorigins.win/raw?url="),
    Intermediary("corsproxy", "https://corsproxy.io/?"),
)


@dataclass(frozen=True)
class FetchedPage:
    """The raw HTTP response for a target URL, plus the route that worked."""

    url: str
    html: str
    status_code: int
    intermediary: str


def fetch_html(
    url: str,
    intermediaries: Sequence[Intermediary] = DEFAULT_INTERMEDIARIES,
    timeout: Optional[float] = None,
) -> FetchedPage:
    """Fetch *url* through the first intermediary that answers with a 2xx.

    Args:
        url: Absolute URL of the page to fetch.
        intermediaries: Routes to try, in order.
        timeout: Per-request timeout in seconds.  Defaults to
            ``settings.request_timeout``.

    Raises:
        FetchExhausted: If every intermediary errored or returned a non-2xx
            status.
    """
    attempts: list[tuple[str, str]] = []

    with httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=timeout if timeout is not None else settings.request_timeout,
        follow_redirects=True,
    ) as client:
        for intermediary in intermediaries:
            request_url = intermediary.build_url(url)
            try:
                response = client.get(request_url)
            except httpx.HTTPError as exc:
                logger.info("intermediary %s failed: %r", intermediary.name, exc)
                attempts.append((intermediary.name, f"{type(exc).__name__}: {exc}"))
                continue

            if not response.is_success:
                logger.info(
                    "intermediary %s returned HTTP %s", intermediary.name, response.status_code
                )
                attempts.append((intermediary.name, f"HTTP {response.status_code}"))
                continue

            html = response.text
            logger.info(
                "fetched %d characters from %s via %s", len(html), url, intermediary.name
            )
            return FetchedPage(
                url=url,
                html=html,
                status_code=response.status_code,
                intermediary=intermediary.name,
            )

    raise FetchExhausted(url, attempts)
