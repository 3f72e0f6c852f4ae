"""Upstream quote fetching with an explicit degraded mode.

``QuoteFetcher.fetch_price`` makes one request to the upstream quote service
per call. When that request fails for any reason (transport error, timeout,
non-2xx status, a payload with no recognizable price) the fetcher switches to
its degraded mode: it logs the failure and substitutes a price from
``FALLBACK_PRICES``, or a pseudo-random price when the symbol is not in the
table. Prices served this way are placeholders, not market data.
"""
import asyncio
import logging
import math
import random
from typing import Any, Optional

import httpx

from .config import settings
from .schemas import Quote

logger = logging.getLogger(__name__)

# Example prices served in degraded mode
FALLBACK_PRICES = {
    "AAPL": 189.84,
    "AMZN": 178.22,
    "GOOG": 141.80,
    "GOOGL": 140.93,
    "META": 484.10,
    "MSFT": 415.50,
    "NFLX": 610.36,
    "NVDA": 875.28,
    "TSLA": 175.79,
}

RANDOM_PRICE_RANGE = (10.0, 500.0)

# Nested paths tried after the top-level latestPrice field, before price
_NESTED_PRICE_PATHS = (
    ("quote", "latestPrice"),
    ("quote", "price"),
    ("last", "price"),
)


def _as_price(value: Any) -> Optional[float]:
    """Coerce *value* to a usable price, or return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except (ValueError, OverflowError):
        # Non-numeric text, or an integer too large for a float
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def extract_price(payload: Any) -> Optional[float]:
    """Pull the first recognizable price out of an upstream payload.

    Accepts a bare number or numeric string, an object with ``latestPrice``,
    an object with a nested last-price field, or an object with ``price``.
    """
    if not isinstance(payload, dict):
        return _as_price(payload)

    price = _as_price(payload.get("latestPrice"))
    if price is not None:
        return price

    for outer, inner in _NESTED_PRICE_PATHS:
        nested = payload.get(outer)
        if isinstance(nested, dict):
            price = _as_price(nested.get(inner))
            if price is not None:
                return price

    return _as_price(payload.get("price"))


def _decode_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        # Some upstreams answer with a plain-text number
        return response.text


class QuoteFetcher:
    """Resolve ticker symbols to prices through the upstream quote service."""

    def __init__(
        self,
        url_template: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.url_template = url_template or settings.QUOTE_API_URL
        self.timeout = timeout if timeout is not None else settings.QUOTE_TIMEOUT
        self._transport = transport
        self._rng = rng or random.Random()

    def fallback_quote(self, symbol: str, reason: str) -> Quote:
        """Degraded mode: a table price, or a random one for unknown symbols."""
        if symbol in FALLBACK_PRICES:
            price = FALLBACK_PRICES[symbol]
        else:
            price = round(self._rng.uniform(*RANDOM_PRICE_RANGE), 2)
        logger.warning("Quote for %s unavailable (%s); serving fallback price %.2f", symbol, reason, price)
        return Quote(symbol=symbol, price=price, fallback=True)

    async def _request(self, url: str) -> Any:
        async with httpx.AsyncClient(
            follow_redirects=True, timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return _decode_payload(response)

    async def fetch_price(self, symbol: str) -> Quote:
        """Fetch the price for *symbol*. Never raises on upstream failure."""
        try:
            url = self.url_template.format(symbol=symbol)
            # httpx timeouts bound each phase; wait_for bounds the whole call
            payload = await asyncio.wait_for(self._request(url), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return self.fallback_quote(symbol, f"timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            return self.fallback_quote(symbol, f"upstream status {e.response.status_code}")
        except httpx.HTTPError as e:
            return self.fallback_quote(symbol, f"HTTP error: {e}")
        except Exception as e:
            return self.fallback_quote(symbol, f"unexpected error: {e!r}")

        price = extract_price(payload)
        if price is None:
            return self.fallback_quote(symbol, "no price in upstream response")

        logger.debug("Fetched %s at %.2f", symbol, price)
        return Quote(symbol=symbol, price=round(price, 2))
