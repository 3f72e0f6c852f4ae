import httpx
import pytest
from fastapi.testclient import TestClient

from stock_checker.config import Settings
from stock_checker.likes import LikeLedger
from stock_checker.main import create_app
from stock_checker.quotes import QuoteFetcher

QUOTE_URL = "http://quotes.test/stock/{symbol}/quote"

UPSTREAM_PRICES = {
    "GOOG": 2750.123,
    "MSFT": 299.5,
}


class FakeUpstream:
    """Answers quote requests from UPSTREAM_PRICES and counts calls."""

    def __init__(self, prices=None, status_code=200):
        self.prices = dict(UPSTREAM_PRICES if prices is None else prices)
        self.status_code = status_code
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        symbol = request.url.path.split("/")[2]
        self.calls.append(symbol)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "upstream down"})
        if symbol not in self.prices:
            return httpx.Response(200, json="Unknown symbol")
        return httpx.Response(200, json={"symbol": symbol, "latestPrice": self.prices[symbol]})


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def ledger():
    return LikeLedger()


@pytest.fixture
def make_client(ledger):
    def _make(upstream, ledger=ledger, **overrides):
        settings = Settings(QUOTE_API_URL=QUOTE_URL, QUOTE_TIMEOUT=1.0, **overrides)
        fetcher = QuoteFetcher(QUOTE_URL, 1.0, transport=httpx.MockTransport(upstream))
        app = create_app(settings=settings, fetcher=fetcher, ledger=ledger)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, upstream):
    return make_client(upstream)
