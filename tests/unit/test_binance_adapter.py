"""
Unit Tests for the Binance Venue Adapter

These tests verify that BinanceExchange:
- Keeps USDT spot symbols and merges premium index rows by symbol
- Uses markPrice and lastFundingRate for the derivatives side
- Degrades to a spot-only snapshot when the futures host fails
- Returns an empty snapshot when spot fails
- Builds capped funding entries from the premium index

Run with:
    pytest tests/unit/test_binance_adapter.py -v
"""

from datetime import datetime, timezone

import pytest

from core.config import VenueConfig
from core.exceptions import ExchangeProtocolError, ExchangeTransportError
from exchanges.binance import BinanceExchange
from exchanges.binance.api_client import BinanceAPIClient


SPOT_TICKERS = [
    {"symbol": "BTCUSDT", "price": "100.00"},
    {"symbol": "ETHUSDT", "price": "50.00"},
    {"symbol": "ETHBTC", "price": "0.05"},
    {"symbol": "XRPUSDT", "price": "garbage"},
]

PREMIUM_INDEX = [
    {"symbol": "BTCUSDT", "markPrice": "101.00", "lastFundingRate": "0.00010000", "nextFundingTime": 1704124800000},
    {"symbol": "ETHUSDT", "markPrice": "49.50", "lastFundingRate": None, "nextFundingTime": 0},
    {"symbol": "SOLUSDT", "markPrice": "20.00", "lastFundingRate": "-0.0002", "nextFundingTime": 1704124800000},
]


# ============================================
# Fixtures
# ============================================

def make_config(**overrides):
    values = dict(
        name="binance",
        base_url="https://spot.test",
        futures_base_url="https://futures.test",
        funding_limit=100
    )
    values.update(overrides)
    return VenueConfig(**values)


def attach_fake_client(adapter, monkeypatch, spot=SPOT_TICKERS, premium=PREMIUM_INDEX):
    """Give the adapter an 'open' client whose _get replays canned payloads."""
    calls = []

    async def fake_get(path, params=None, base_url=None):
        calls.append((path, base_url))
        if path == BinanceAPIClient.SPOT_TICKER_PATH:
            payload = spot
        elif path == BinanceAPIClient.PREMIUM_INDEX_PATH:
            payload = premium
        else:
            payload = {}
        if isinstance(payload, Exception):
            raise payload
        return payload

    adapter.client = adapter.create_client()
    adapter.client.session = object()
    monkeypatch.setattr(adapter.client, "_get", fake_get)
    return calls


@pytest.fixture
def adapter():
    return BinanceExchange(config=make_config())


# ============================================
# Tests for fetch_snapshot
# ============================================

class TestFetchSnapshot:
    """Tests for BinanceExchange.fetch_snapshot"""

    @pytest.mark.asyncio
    async def test_merges_spot_and_futures(self, adapter, monkeypatch):
        calls = attach_fake_client(adapter, monkeypatch)

        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is True
        assert snapshot.venue == "binance"
        assert set(snapshot.quotes) == {"BTCUSDT", "ETHUSDT", "XRPUSDT"}

        btc = snapshot.quotes["BTCUSDT"]
        assert btc.spot_price == 100.0
        assert btc.futures_price == 101.0
        assert btc.funding_rate == 0.0001
        assert btc.degraded_fields == frozenset()

        assert (BinanceAPIClient.PREMIUM_INDEX_PATH, "https://futures.test") in calls

    @pytest.mark.asyncio
    async def test_futures_only_symbols_are_ignored(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch)
        snapshot, _ = await adapter.fetch_snapshot()
        assert "SOLUSDT" not in snapshot.quotes

    @pytest.mark.asyncio
    async def test_unparseable_fields_are_degraded(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch)
        snapshot, _ = await adapter.fetch_snapshot()

        xrp = snapshot.quotes["XRPUSDT"]
        assert xrp.spot_price == 0.0
        assert xrp.is_degraded("spot_price")

        eth = snapshot.quotes["ETHUSDT"]
        assert eth.futures_price == 49.5
        assert eth.funding_rate == 0.0
        assert eth.is_degraded("funding_rate")
        assert "degradedFields" not in eth.model_dump(by_alias=True)

    @pytest.mark.asyncio
    async def test_spot_without_futures_row_keeps_zero_futures(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch, premium=[])
        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is True
        assert snapshot.quotes["BTCUSDT"].futures_price == 0.0

    @pytest.mark.asyncio
    async def test_futures_failure_gives_spot_only(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch, premium=ExchangeTransportError("binance", "Timeout"))

        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is False
        assert snapshot.quotes["BTCUSDT"].spot_price == 100.0
        assert snapshot.quotes["BTCUSDT"].futures_price == 0.0

    @pytest.mark.asyncio
    async def test_spot_failure_gives_empty_snapshot(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch, spot=ExchangeProtocolError("binance", "HTTP 418", status=418))

        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is False
        assert snapshot.venue == "binance"
        assert snapshot.is_empty

    @pytest.mark.asyncio
    async def test_non_list_payload_gives_empty_snapshot(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch, spot={"code": -1121, "msg": "Invalid symbol."})

        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is False
        assert snapshot.is_empty

    @pytest.mark.asyncio
    async def test_uses_short_lived_client_when_not_initialized(self, monkeypatch):
        async def fake_get(self, path, params=None, base_url=None):
            return SPOT_TICKERS if path == BinanceAPIClient.SPOT_TICKER_PATH else PREMIUM_INDEX

        monkeypatch.setattr(BinanceAPIClient, "_get", fake_get)
        adapter = BinanceExchange(config=make_config())

        snapshot, ok = await adapter.fetch_snapshot()

        assert ok is True
        assert adapter.client is None
        assert snapshot.quotes["BTCUSDT"].futures_price == 101.0


# ============================================
# Tests for fetch_funding_rates
# ============================================

class TestFetchFundingRates:
    """Tests for BinanceExchange.fetch_funding_rates"""

    @pytest.mark.asyncio
    async def test_builds_funding_entries(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch)

        rates, ok = await adapter.fetch_funding_rates()

        assert ok is True
        assert [r.symbol for r in rates] == ["BTCUSDT", "ETHUSDT", "SOLUSDT"]
        btc = rates[0]
        assert btc.venue == "binance"
        assert btc.funding_rate == 0.0001
        assert btc.mark_price == 101.0
        assert btc.next_settlement_time == datetime(2024, 1, 1, 16, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_missing_settlement_time_falls_back(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch)

        rates, _ = await adapter.fetch_funding_rates()

        assert rates[1].next_settlement_time > datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_respects_funding_limit(self, monkeypatch):
        adapter = BinanceExchange(config=make_config(funding_limit=2))
        attach_fake_client(adapter, monkeypatch)

        rates, ok = await adapter.fetch_funding_rates()

        assert ok is True
        assert len(rates) == 2

    @pytest.mark.asyncio
    async def test_failure_gives_empty_list(self, adapter, monkeypatch):
        attach_fake_client(adapter, monkeypatch, premium=ExchangeTransportError("binance", "refused"))

        assert await adapter.fetch_funding_rates() == ([], False)


class TestHealthCheck:
    """Tests for BinanceExchange.health_check"""

    @pytest.mark.asyncio
    async def test_healthy(self, adapter, monkeypatch):
        calls = attach_fake_client(adapter, monkeypatch)

        assert await adapter.health_check() is True
        assert calls == [(BinanceAPIClient.PING_PATH, None)]

    def test_repr(self, adapter):
        assert repr(adapter) == "<BinanceExchange(name='binance')>"
