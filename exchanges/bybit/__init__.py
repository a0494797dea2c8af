"""
Bybit Venue Adapter

Symbol mapping:
    - Spot symbols ending in "USDT" are already canonical ("BTCUSDT")
    - Linear (USDT perpetual) rows match spot records by identical symbol

Field extraction:
    - spot_price    <- spot ticker "lastPrice"
    - futures_price <- linear ticker "markPrice"
    - funding_rate  <- linear ticker "fundingRate" (0 when absent)

Funding listing:
    linear tickers; rows whose raw "fundingRate" is missing or zero are
    skipped (spot/futures merging keeps them); next settlement falls back to
    now + 8h when "nextFundingTime" is unusable.
"""

from typing import Dict, List

from core.exchange_interface import VenueAdapter
from core.schemas import FundingRate, NormalizedQuote
from core.utils.numbers import safe_float, safe_price
from core.utils.time import parse_settlement_time
from .api_client import BybitAPIClient, BybitTicker


QUOTE_ASSET = "USDT"


class BybitExchange(VenueAdapter):
    """Bybit spot + linear perpetual adapter."""

    name = "bybit"
    HEALTH_PATH = BybitAPIClient.TIME_PATH

    def create_client(self) -> BybitAPIClient:
        return BybitAPIClient(self.config, logger=self.logger)

    async def _fetch_spot(self, client: BybitAPIClient) -> List[BybitTicker]:
        return await client.get_tickers("spot")

    async def _fetch_futures(self, client: BybitAPIClient) -> List[BybitTicker]:
        return await client.get_tickers("linear")

    async def _fetch_funding(self, client: BybitAPIClient) -> List[BybitTicker]:
        return await client.get_tickers("linear")

    def normalize_spot(self, rows: List[BybitTicker]) -> Dict[str, NormalizedQuote]:
        quotes: Dict[str, NormalizedQuote] = {}
        for row in rows:
            if row.symbol.endswith(QUOTE_ASSET):
                quotes[row.symbol] = NormalizedQuote.from_spot(row.symbol, safe_price(row.lastPrice))
        return quotes

    def merge_futures(self, quotes: Dict[str, NormalizedQuote], rows: List[BybitTicker]) -> None:
        for row in rows:
            quote = quotes.get(row.symbol)
            if quote is not None:
                quotes[row.symbol] = quote.with_futures(
                    safe_price(row.markPrice),
                    safe_float(row.fundingRate)
                )

    def normalize_funding(self, rows: List[BybitTicker]) -> List[FundingRate]:
        rates = []
        for row in rows:
            funding = safe_float(row.fundingRate)
            # Missing, unparseable or exactly zero: not a funding signal
            if funding.degraded or funding.value == 0:
                continue

            rates.append(FundingRate(
                symbol=row.symbol,
                venue=self.name,
                funding_rate=funding.value,
                next_settlement_time=parse_settlement_time(row.nextFundingTime),
                mark_price=safe_price(row.markPrice).value
            ))
        return rates
