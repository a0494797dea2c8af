"""
OKX Venue Adapter

Symbol mapping:
    - Spot "BTC-USDT"       -> "BTCUSDT"  (hyphen removed)
    - Swap "BTC-USDT-SWAP"  -> "BTCUSDT"  ("-USDT-SWAP" stripped, "USDT" appended)
    - Anything else (e.g., "BTC-USDC", "BTC-USD-SWAP") is ignored

Field extraction:
    - spot_price    <- spot ticker "last"
    - futures_price <- swap ticker "last"
    - funding_rate  <- swap ticker "fundingRate" (0 when absent)

Funding listing:
    /api/v5/public/funding-rate rows; symbol is the instrument id with the
    "-SWAP" suffix stripped ("BTC-USDT"); OKX does not report a mark price here.
"""

from typing import Dict, List, Optional

from core.exchange_interface import VenueAdapter
from core.schemas import FundingRate, NormalizedQuote
from core.utils.numbers import safe_float, safe_price
from core.utils.time import parse_settlement_time
from .api_client import OKXAPIClient, OKXFundingRate, OKXTicker


SPOT_SUFFIX = "-USDT"
SWAP_SUFFIX = "-USDT-SWAP"


def spot_to_canonical(inst_id: str) -> Optional[str]:
    """
    Map an OKX spot instrument id to the canonical symbol.

    Example:
        >>> spot_to_canonical("BTC-USDT")
        'BTCUSDT'
        >>> spot_to_canonical("BTC-USDC") is None
        True
    """
    if not inst_id.endswith(SPOT_SUFFIX):
        return None
    return inst_id[:-len(SPOT_SUFFIX)] + "USDT"


def swap_to_canonical(inst_id: str) -> Optional[str]:
    """
    Map an OKX USDT-margined swap id to the canonical symbol.

    Example:
        >>> swap_to_canonical("ETH-USDT-SWAP")
        'ETHUSDT'
    """
    if not inst_id.endswith(SWAP_SUFFIX):
        return None
    return inst_id[:-len(SWAP_SUFFIX)] + "USDT"


def strip_swap_suffix(inst_id: str) -> str:
    """'BTC-USDT-SWAP' -> 'BTC-USDT'"""
    if inst_id.endswith("-SWAP"):
        return inst_id[:-len("-SWAP")]
    return inst_id


class OKXExchange(VenueAdapter):
    """OKX spot + perpetual swap adapter."""

    name = "okx"
    HEALTH_PATH = OKXAPIClient.TIME_PATH

    def create_client(self) -> OKXAPIClient:
        return OKXAPIClient(self.config, logger=self.logger)

    async def _fetch_spot(self, client: OKXAPIClient) -> List[OKXTicker]:
        return await client.get_tickers("SPOT")

    async def _fetch_futures(self, client: OKXAPIClient) -> List[OKXTicker]:
        return await client.get_tickers("SWAP")

    async def _fetch_funding(self, client: OKXAPIClient) -> List[OKXFundingRate]:
        return await client.get_funding_rates()

    def normalize_spot(self, rows: List[OKXTicker]) -> Dict[str, NormalizedQuote]:
        quotes: Dict[str, NormalizedQuote] = {}
        for row in rows:
            symbol = spot_to_canonical(row.instId)
            if symbol:
                quotes[symbol] = NormalizedQuote.from_spot(symbol, safe_price(row.last))
        return quotes

    def merge_futures(self, quotes: Dict[str, NormalizedQuote], rows: List[OKXTicker]) -> None:
        for row in rows:
            symbol = swap_to_canonical(row.instId)
            if symbol and symbol in quotes:
                quotes[symbol] = quotes[symbol].with_futures(
                    safe_price(row.last),
                    safe_float(row.fundingRate)
                )

    def normalize_funding(self, rows: List[OKXFundingRate]) -> List[FundingRate]:
        return [
            FundingRate(
                symbol=strip_swap_suffix(row.instId),
                venue=self.name,
                funding_rate=safe_float(row.fundingRate).value,
                next_settlement_time=parse_settlement_time(row.nextFundingTime),
                mark_price=0.0
            )
            for row in rows
        ]
