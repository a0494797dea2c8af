"""
Binance Venue Adapter

Symbol mapping:
    - Spot symbols ending in "USDT" are already canonical ("BTCUSDT")
    - Futures rows match spot records by identical symbol string

Field extraction:
    - spot_price    <- spot ticker "price"
    - futures_price <- premium index "markPrice"
    - funding_rate  <- premium index "lastFundingRate"

Funding listing:
    premium index rows, symbol as-is, mark price reported, next settlement
    from "nextFundingTime" (ms).
"""

from typing import Dict, List

from core.exchange_interface import VenueAdapter
from core.schemas import FundingRate, NormalizedQuote
from core.utils.numbers import safe_float, safe_price
from core.utils.time import parse_settlement_time
from .api_client import BinanceAPIClient, BinancePremiumIndex, BinanceSpotTicker


QUOTE_ASSET = "USDT"


class BinanceExchange(VenueAdapter):
    """
    Binance spot + USD-M futures adapter.

    Example:
        >>> exchange = BinanceExchange()
        >>> snapshot, ok = await exchange.fetch_snapshot()
        >>> snapshot.quotes["BTCUSDT"].futures_price
    """

    name = "binance"
    HEALTH_PATH = BinanceAPIClient.PING_PATH

    def create_client(self) -> BinanceAPIClient:
        return BinanceAPIClient(self.config, logger=self.logger)

    async def _fetch_spot(self, client: BinanceAPIClient) -> List[BinanceSpotTicker]:
        return await client.get_spot_tickers()

    async def _fetch_futures(self, client: BinanceAPIClient) -> List[BinancePremiumIndex]:
        return await client.get_premium_index()

    async def _fetch_funding(self, client: BinanceAPIClient) -> List[BinancePremiumIndex]:
        return await client.get_premium_index()

    def normalize_spot(self, rows: List[BinanceSpotTicker]) -> Dict[str, NormalizedQuote]:
        quotes: Dict[str, NormalizedQuote] = {}
        for row in rows:
            if row.symbol.endswith(QUOTE_ASSET):
                quotes[row.symbol] = NormalizedQuote.from_spot(row.symbol, safe_price(row.price))
        return quotes

    def merge_futures(self, quotes: Dict[str, NormalizedQuote], rows: List[BinancePremiumIndex]) -> None:
        for row in rows:
            quote = quotes.get(row.symbol)
            if quote is not None:
                quotes[row.symbol] = quote.with_futures(
                    safe_price(row.markPrice),
                    safe_float(row.lastFundingRate)
                )

    def normalize_funding(self, rows: List[BinancePremiumIndex]) -> List[FundingRate]:
        return [
            FundingRate(
                symbol=row.symbol,
                venue=self.name,
                funding_rate=safe_float(row.lastFundingRate).value,
                next_settlement_time=parse_settlement_time(row.nextFundingTime),
                mark_price=safe_price(row.markPrice).value
            )
            for row in rows
        ]
