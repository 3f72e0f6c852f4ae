"""Stock price API endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..handlers import client_address, handle_stock_prices, is_truthy, parse_symbols
from ..likes import LikeLedger, anonymize_address
from ..quotes import QuoteFetcher
from ..schemas import ErrorResponse, StockPricesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Stock"])


# --- Dependencies ---
def get_fetcher(request: Request) -> QuoteFetcher:
    return request.app.state.fetcher


def get_ledger(request: Request) -> LikeLedger:
    return request.app.state.ledger


def get_visitor_id(request: Request) -> str:
    """Anonymized id of the caller, derived once per request."""
    address = client_address(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
        request.app.state.settings.TRUST_PROXY,
    )
    return anonymize_address(address)


@router.get(
    "/stock-prices",
    response_model=StockPricesResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.get("/stock-prices/", include_in_schema=False)
async def get_stock_prices(
    request: Request,
    like: Optional[str] = None,
    fetcher: QuoteFetcher = Depends(get_fetcher),
    ledger: LikeLedger = Depends(get_ledger),
    visitor_id: str = Depends(get_visitor_id),
):
    """Price and likes for one stock, or prices and relative likes for two."""
    parsed = parse_symbols(request.query_params.getlist("stock"))
    if "error" in parsed:
        return JSONResponse(parsed, status_code=400)

    try:
        return await handle_stock_prices(
            parsed["symbols"], is_truthy(like), visitor_id, fetcher, ledger
        )
    except Exception:
        logger.exception("Failed to build stock data for %s", parsed["symbols"])
        return JSONResponse({"error": "Unable to fetch stock data"}, status_code=500)
