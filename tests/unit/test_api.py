"""
Unit Tests for the HTTP API

The scanner is swapped through FastAPI dependency overrides, so no exchange is
contacted. The lifespan is not entered (TestClient is not used as a context
manager).

Run with:
    pytest tests/unit/test_api.py -v
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app import main
from app.main import app, get_scanner
from core.exchange_manager import ExchangeManager
from core.schemas import FundingRate, NormalizedQuote, VenueSnapshot
from services.scanner import ArbitrageScanner


class StubAdapter:
    def __init__(self, name, quotes, rates=()):
        self.name = name
        self.quotes = quotes
        self.rates = list(rates)

    async def fetch_snapshot(self):
        return VenueSnapshot(venue=self.name, quotes=self.quotes), True

    async def fetch_funding_rates(self):
        return self.rates, True


class FailingScanner:
    async def get_arbitrage_opportunities(self):
        raise RuntimeError("pipeline broke")

    async def get_funding_rates(self, exchange=None):
        raise RuntimeError("pipeline broke")


def quote(symbol, spot, futures=0.0, funding=0.0):
    return NormalizedQuote(symbol=symbol, spot_price=spot, futures_price=futures, funding_rate=funding)


def make_scanner():
    settlement = datetime(2024, 1, 1, 16, 0, tzinfo=timezone.utc)
    adapters = [
        StubAdapter(
            "binance",
            {"BTCUSDT": quote("BTCUSDT", 100.0, 101.0, 0.0001)},
            [FundingRate(symbol="BTCUSDT", venue="binance", funding_rate=0.0001,
                         next_settlement_time=settlement, mark_price=101.0)]
        ),
        StubAdapter(
            "okx",
            {"BTCUSDT": quote("BTCUSDT", 99.0)},
            [FundingRate(symbol="BTC-USDT", venue="okx", funding_rate=-0.0003, next_settlement_time=settlement)]
        ),
    ]
    return ArbitrageScanner(ExchangeManager(adapters), max_opportunities=100)


@pytest.fixture
def client():
    app.dependency_overrides[get_scanner] = make_scanner
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_scanner] = FailingScanner
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestArbitrageEndpoint:
    """Tests for GET /api/arbitrage"""

    def test_returns_ranked_opportunities(self, client):
        response = client.get("/api/arbitrage")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"opportunities", "timestamp", "summary"}
        assert body["summary"] == {
            "total": 2,
            "spotFutures": 1,
            "crossExchange": 1,
            "highProfitability": 1,
        }

        first = body["opportunities"][0]
        assert first["kind"] == "cross-exchange"
        assert first["venueA"] == "okx"
        assert first["venueB"] == "binance"
        assert first["direction"] == "buy-venue-a-sell-venue-b"
        assert first["spreadPercent"] == pytest.approx(1.0101, abs=1e-4)

        second = body["opportunities"][1]
        assert second["kind"] == "spot-futures"
        assert second["direction"] == "long-spot-short-futures"
        assert second["tier"] == "medium"
        assert "annualizedReturn" in second
        assert "degradedFields" not in second

    def test_timestamp_is_milliseconds(self, client):
        body = client.get("/api/arbitrage").json()
        assert body["timestamp"] > 1_600_000_000_000

    def test_cache_control_header(self, client):
        response = client.get("/api/arbitrage")
        assert response.headers["cache-control"] == "public, max-age=30"

    def test_pipeline_failure_is_500(self, failing_client):
        response = failing_client.get("/api/arbitrage")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch arbitrage opportunities"}


class TestFundingRatesEndpoint:
    """Tests for GET /api/funding-rates"""

    def test_all_venues_sorted_by_magnitude(self, client):
        response = client.get("/api/funding-rates")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [r["venue"] for r in body["data"]] == ["okx", "binance"]
        assert body["data"][0]["symbol"] == "BTC-USDT"
        assert body["data"][0]["markPrice"] == 0.0
        assert "nextSettlementTime" in body["data"][0]
        assert response.headers["cache-control"] == "public, max-age=30"

    def test_exchange_filter(self, client):
        body = client.get("/api/funding-rates", params={"exchange": "binance"}).json()
        assert [r["symbol"] for r in body["data"]] == ["BTCUSDT"]

    def test_unknown_exchange_is_400(self, client):
        response = client.get("/api/funding-rates", params={"exchange": "kraken"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["data"] == []
        assert "kraken" in body["error"]
        assert "timestamp" in body

    def test_pipeline_failure_is_500(self, failing_client):
        response = failing_client.get("/api/funding-rates")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to fetch funding rates"
        assert body["data"] == []


class TestSystemEndpoints:
    """Tests for /, /exchanges and unknown routes"""

    def test_root(self):
        body = TestClient(app).get("/").json()
        assert body["status"] == "operational"
        assert body["exchanges"] == ["binance", "okx", "bybit"]

    def test_exchanges(self):
        assert TestClient(app).get("/exchanges").json() == {"exchanges": ["binance", "okx", "bybit"]}

    def test_health_reports_degraded(self, monkeypatch):
        async def fake_health():
            return {"binance": True, "okx": False, "bybit": True}

        monkeypatch.setattr(main.manager, "health_check_all", fake_health)

        body = TestClient(app).get("/health").json()

        assert body == {"status": "degraded", "exchanges": {"binance": True, "okx": False, "bybit": True}}

    def test_unknown_route(self):
        response = TestClient(app).get("/nope")
        assert response.status_code == 404
        assert response.json()["detail"] == "Not found"
