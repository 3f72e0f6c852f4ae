"""Stock price request handling: symbol parsing, likes and response shaping."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from .likes import LikeLedger
from .quotes import QuoteFetcher
from .schemas import RelativeStockData, StockData

logger = logging.getLogger(__name__)

MAX_SYMBOLS = 2


# --- Utilities ---
def normalize_symbol(symbol: str) -> str:
    """Trim and uppercase a ticker symbol."""
    return symbol.strip().upper()


def is_truthy(value: Optional[str]) -> bool:
    """Interpret the ``like`` query value; only "true" (any case) counts."""
    return value is not None and value.strip().lower() == "true"


def parse_symbols(raw: List[str]) -> Dict[str, Any]:
    """Validate and normalize the requested ``stock`` values."""
    symbols = [normalize_symbol(s) for s in raw]
    if not symbols or not all(symbols):
        return {"error": "Stock query parameter is required"}
    if len(symbols) > MAX_SYMBOLS:
        return {"error": f"At most {MAX_SYMBOLS} stock symbols may be compared"}
    return {"symbols": symbols}


def client_address(
    forwarded_for: Optional[str], peer_host: Optional[str], trust_proxy: bool
) -> str:
    """Pick the address a visitor is identified by."""
    if trust_proxy and forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer_host or "unknown"


# --- Stock Price Handler ---
async def handle_stock_prices(
    symbols: List[str],
    like: bool,
    visitor_id: str,
    fetcher: QuoteFetcher,
    ledger: LikeLedger,
) -> Dict[str, Any]:
    """Fetch prices, record likes and shape the ``stockData`` payload.

    *symbols* must already be normalized and hold one or two entries.
    """
    quotes = await asyncio.gather(*(fetcher.fetch_price(s) for s in symbols))

    if like:
        for symbol in symbols:
            if ledger.record_like(symbol, visitor_id):
                logger.info("New like for %s", symbol)

    likes = [ledger.count_likes(s) for s in symbols]

    if len(symbols) == 1:
        quote = quotes[0]
        data = StockData(stock=quote.symbol, price=quote.price, likes=likes[0])
        return {"stockData": data.model_dump()}

    rel = likes[0] - likes[1]
    return {
        "stockData": [
            RelativeStockData(stock=quotes[0].symbol, price=quotes[0].price, rel_likes=rel).model_dump(),
            RelativeStockData(stock=quotes[1].symbol, price=quotes[1].price, rel_likes=-rel).model_dump(),
        ]
    }
