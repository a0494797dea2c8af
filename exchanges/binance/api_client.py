"""
Binance REST API Client

This module provides an async HTTP client for the two Binance listings the
scanner needs. Binance serves spot and USD-M futures from different hosts:

    Spot:    https://api.binance.com   GET /api/v3/ticker/price
    Futures: https://fapi.binance.com  GET /fapi/v1/premiumIndex

API Documentation:
    https://binance-docs.github.io/apidocs/spot/en/
    https://binance-docs.github.io/apidocs/futures/en/

Both endpoints return a bare JSON array (no envelope). Rows are validated
through the pydantic models below before the adapter normalizes them.

Usage:
    async with BinanceAPIClient(settings.venue_config("binance")) as client:
        spot = await client.get_spot_tickers()
        premium = await client.get_premium_index()
"""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict

from core.http_client import BaseAPIClient


RawNumber = Optional[Union[str, int, float]]


# ============================================
# Raw Payload Models
# ============================================

class BinanceSpotTicker(BaseModel):
    """
    Row of GET /api/v3/ticker/price

    Response Format:
        [{"symbol": "BTCUSDT", "price": "67012.10000000"}, ...]
    """

    model_config = ConfigDict(extra="ignore")

    symbol: str
    price: RawNumber = None


class BinancePremiumIndex(BaseModel):
    """
    Row of GET /fapi/v1/premiumIndex

    Response Format:
        [
          {
            "symbol": "BTCUSDT",
            "markPrice": "67040.50000000",
            "indexPrice": "67015.21",
            "lastFundingRate": "0.00010000",
            "nextFundingTime": 1704124800000,
            "time": 1704110400000
          }
        ]
    """

    model_config = ConfigDict(extra="ignore")

    symbol: str
    markPrice: RawNumber = None
    lastFundingRate: RawNumber = None
    nextFundingTime: RawNumber = None


class BinanceAPIClient(BaseAPIClient):
    """
    Async HTTP client for Binance spot and USD-M futures public endpoints.

    Example:
        >>> async with BinanceAPIClient(config) as client:
        ...     tickers = await client.get_spot_tickers()
        ...     print(f"Fetched {len(tickers)} spot tickers")
    """

    exchange = "binance"
    API_KEY_HEADER = "X-MBX-APIKEY"

    SPOT_TICKER_PATH = "/api/v3/ticker/price"
    PREMIUM_INDEX_PATH = "/fapi/v1/premiumIndex"
    PING_PATH = "/api/v3/ping"

    @property
    def futures_base_url(self) -> str:
        return self.config.futures_base_url or self.config.base_url

    async def get_spot_tickers(self) -> List[BinanceSpotTicker]:
        """Fetch last prices for every spot symbol."""
        data = await self._get(self.SPOT_TICKER_PATH)
        return self._parse_rows(BinanceSpotTicker, data, self.SPOT_TICKER_PATH)

    async def get_premium_index(self) -> List[BinancePremiumIndex]:
        """
        Fetch mark price and funding info for every USD-M perpetual.

        Used both for spot-futures merging and for the funding-rate listing.
        """
        data = await self._get(self.PREMIUM_INDEX_PATH, base_url=self.futures_base_url)
        return self._parse_rows(BinancePremiumIndex, data, self.PREMIUM_INDEX_PATH)
