"""
Bybit REST API Client

This module provides an async HTTP client for the Bybit v5 market API.

API Documentation:
    https://bybit-exchange.github.io/docs/v5/intro

Endpoints Used:
    GET /v5/market/tickers?category=spot    - Spot tickers
    GET /v5/market/tickers?category=linear  - USDT perpetual tickers (mark price + funding)
    GET /v5/market/time                     - Health check

Every response is wrapped in an envelope:
    {"retCode": 0, "retMsg": "OK", "result": {"category": "spot", "list": [...]}}

A response is valid only if "retCode" equals the integer 0.

Usage:
    async with BybitAPIClient(settings.venue_config("bybit")) as client:
        linear = await client.get_tickers("linear")
"""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import ExchangeProtocolError
from core.http_client import BaseAPIClient


RawNumber = Optional[Union[str, int, float]]


# ============================================
# Raw Payload Models
# ============================================

class BybitResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: List[Any] = Field(default_factory=list, alias="list")


class BybitEnvelope(BaseModel):
    """Common Bybit response wrapper."""

    model_config = ConfigDict(extra="ignore")

    retCode: int
    retMsg: str = ""
    result: Optional[BybitResult] = None


class BybitTicker(BaseModel):
    """
    Row of GET /v5/market/tickers

    Response Format (linear):
        {
          "symbol": "BTCUSDT",
          "lastPrice": "67012.10",
          "markPrice": "67040.50",
          "fundingRate": "0.0001",
          "nextFundingTime": "1704124800000",
          ...
        }

    Spot rows carry "symbol" and "lastPrice" only.
    """

    model_config = ConfigDict(extra="ignore")

    symbol: str
    lastPrice: RawNumber = None
    markPrice: RawNumber = None
    fundingRate: RawNumber = None
    nextFundingTime: RawNumber = None


class BybitAPIClient(BaseAPIClient):
    """
    Async HTTP client for Bybit public market endpoints.

    Example:
        >>> async with BybitAPIClient(config) as client:
        ...     spot = await client.get_tickers("spot")
    """

    exchange = "bybit"
    API_KEY_HEADER = "X-BAPI-API-KEY"

    TICKERS_PATH = "/v5/market/tickers"
    TIME_PATH = "/v5/market/time"

    async def get_tickers(self, category: str) -> List[BybitTicker]:
        """
        Fetch tickers for a product category.

        Args:
            category: "spot" or "linear"

        Raises:
            ExchangeProtocolError: If retCode is not 0 or the result list is missing
        """
        raw = await self._get(self.TICKERS_PATH, {"category": category})
        envelope = self._parse_envelope(BybitEnvelope, raw, self.TICKERS_PATH)

        if envelope.retCode != 0:
            raise ExchangeProtocolError(
                self.exchange, f"{self.TICKERS_PATH} returned retCode {envelope.retCode}: {envelope.retMsg}"
            )
        if envelope.result is None:
            raise ExchangeProtocolError(self.exchange, f"{self.TICKERS_PATH} returned no result")

        return self._parse_rows(BybitTicker, envelope.result.items, self.TICKERS_PATH)
