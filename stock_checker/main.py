"""Stock Price Checker - Main Application."""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, settings as default_settings
from .likes import LikeLedger
from .logging_setup import setup_logging
from .quotes import QuoteFetcher
from .routers import stock_router

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "X-DNS-Prefetch-Control": "off",
    "Content-Security-Policy": "default-src 'self'; script-src 'self'; style-src 'self'",
    "X-Powered-By": "PHP 7.4",
}


def create_app(
    settings: Optional[Settings] = None,
    fetcher: Optional[QuoteFetcher] = None,
    ledger: Optional[LikeLedger] = None,
) -> FastAPI:
    """Build the application and wire the quote fetcher and like ledger onto it."""
    settings = settings or default_settings

    app = FastAPI(
        title="Stock Price Checker",
        description="Stock quotes with per-visitor likes and two-stock comparison",
        version=__version__,
    )
    app.state.settings = settings
    app.state.fetcher = fetcher or QuoteFetcher(settings.QUOTE_API_URL, settings.QUOTE_TIMEOUT)
    app.state.ledger = ledger or LikeLedger()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Runs outside the http middleware stack, so headers are added here
        return JSONResponse(
            {"error": "Internal server error"}, status_code=500, headers=SECURITY_HEADERS
        )

    app.include_router(stock_router)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    def root():
        """Root endpoint with API info."""
        return {
            "name": "Stock Price Checker",
            "version": __version__,
            "endpoints": {
                "stock_prices": "/api/stock-prices?stock={symbol}[&stock={symbol}][&like=true]",
                "health": "/health",
            },
        }

    logger.info(
        "Quote upstream: %s (timeout %.1fs), trust proxy: %s",
        settings.QUOTE_API_URL,
        settings.QUOTE_TIMEOUT,
        settings.TRUST_PROXY,
    )
    return app


def run():
    import uvicorn

    setup_logging(default_settings.LOG_LEVEL)
    uvicorn.run(
        "stock_checker.main:create_app",
        factory=True,
        host=default_settings.HOST,
        port=default_settings.PORT,
        server_header=False,
        proxy_headers=default_settings.TRUST_PROXY,
    )


if __name__ == "__main__":
    run()
