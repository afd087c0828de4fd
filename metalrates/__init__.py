"""metalrates — live bullion rate extraction from an unstructured rates page.

Presentation code only needs the two functions re-exported here::

    from metalrates import get_rates_with_cache

    result = get_rates_with_cache()
    if result.is_success:
        ...
"""

from metalrates.service import RatesService, fetch_live_rates, get_rates_with_cache

__all__ = ["fetch_live_rates", "get_rates_with_cache", "RatesService"]
