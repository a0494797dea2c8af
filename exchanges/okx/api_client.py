"""
OKX REST API Client

This module provides an async HTTP client for the OKX v5 public market API.

API Documentation:
    https://www.okx.com/docs-v5/en/

Endpoints Used:
    GET /api/v5/market/tickers?instType=SPOT      - Spot tickers
    GET /api/v5/market/tickers?instType=SWAP      - Perpetual swap tickers
    GET /api/v5/public/funding-rate?instType=SWAP - Funding rates
    GET /api/v5/public/time                       - Health check

Every response is wrapped in an envelope:
    {"code": "0", "msg": "", "data": [...]}

A response is valid only if "code" equals the literal string "0".

Usage:
    async with OKXAPIClient(settings.venue_config("okx")) as client:
        spot = await client.get_tickers("SPOT")
"""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import ExchangeProtocolError
from core.http_client import BaseAPIClient


RawNumber = Optional[Union[str, int, float]]

SUCCESS_CODE = "0"


# ============================================
# Raw Payload Models
# ============================================

class OKXEnvelope(BaseModel):
    """Common OKX response wrapper."""

    model_config = ConfigDict(extra="ignore")

    code: str
    msg: str = ""
    data: List[Any] = Field(default_factory=list)


class OKXTicker(BaseModel):
    """
    Row of GET /api/v5/market/tickers

    Response Format:
        {"instId": "BTC-USDT", "last": "67012.1", "askPx": "...", "bidPx": "...", ...}
        {"instId": "BTC-USDT-SWAP", "last": "67040.5", ...}
    """

    model_config = ConfigDict(extra="ignore")

    instId: str
    last: RawNumber = None
    fundingRate: RawNumber = None


class OKXFundingRate(BaseModel):
    """
    Row of GET /api/v5/public/funding-rate

    Response Format:
        {"instId": "BTC-USDT-SWAP", "fundingRate": "0.0001", "nextFundingTime": "1704124800000", ...}
    """

    model_config = ConfigDict(extra="ignore")

    instId: str
    fundingRate: RawNumber = None
    nextFundingTime: RawNumber = None


class OKXAPIClient(BaseAPIClient):
    """
    Async HTTP client for OKX public market endpoints.

    Example:
        >>> async with OKXAPIClient(config) as client:
        ...     swaps = await client.get_tickers("SWAP")
    """

    exchange = "okx"
    API_KEY_HEADER = "OK-ACCESS-KEY"

    TICKERS_PATH = "/api/v5/market/tickers"
    FUNDING_RATE_PATH = "/api/v5/public/funding-rate"
    TIME_PATH = "/api/v5/public/time"

    async def _get_data(self, path: str, params: dict) -> List[Any]:
        """
        GET an enveloped endpoint and return its "data" list.

        Raises:
            ExchangeProtocolError: If "code" is not "0"
        """
        raw = await self._get(path, params)
        envelope = self._parse_envelope(OKXEnvelope, raw, path)

        if envelope.code != SUCCESS_CODE:
            raise ExchangeProtocolError(self.exchange, f"{path} returned code {envelope.code}: {envelope.msg}")

        return envelope.data

    async def get_tickers(self, inst_type: str) -> List[OKXTicker]:
        """
        Fetch tickers for an instrument type.

        Args:
            inst_type: "SPOT" or "SWAP"
        """
        data = await self._get_data(self.TICKERS_PATH, {"instType": inst_type})
        return self._parse_rows(OKXTicker, data, self.TICKERS_PATH)

    async def get_funding_rates(self) -> List[OKXFundingRate]:
        """Fetch current funding rates for perpetual swaps."""
        data = await self._get_data(self.FUNDING_RATE_PATH, {"instType": "SWAP"})
        return self._parse_rows(OKXFundingRate, data, self.FUNDING_RATE_PATH)
