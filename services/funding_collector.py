"""
Funding Rate Collector

Collects current funding rates from one or all configured venues, merges them
and orders them by |funding_rate|, largest first. Each venue contributes at
most its configured limit; a failing venue contributes nothing.
"""

import asyncio
import logging
from typing import List, Optional

from core.exchange_manager import ExchangeManager
from core.logging import get_logger
from core.schemas import FundingRate


class FundingRateCollector:

    def __init__(self, manager: ExchangeManager, logger: Optional[logging.Logger] = None) -> None:
        self._manager = manager
        self._logger = logger or get_logger(__name__)

    async def collect(self, venue_filter: Optional[str] = None) -> List[FundingRate]:
        """
        Args:
            venue_filter: Venue name (case-insensitive). None queries every venue.

        Raises:
            UnknownExchangeError: If venue_filter names an unconfigured venue
        """
        if venue_filter:
            adapters = [self._manager.get_exchange(venue_filter)]
        else:
            adapters = self._manager.adapters()

        results = await asyncio.gather(
            *(adapter.fetch_funding_rates() for adapter in adapters),
            return_exceptions=True
        )

        merged: List[FundingRate] = []
        for adapter, result in zip(adapters, results):
            if isinstance(result, Exception):
                self._logger.error(f"{adapter.name}: funding adapter raised: {result!r}")
                continue

            rates, ok = result
            if not ok:
                self._logger.warning(f"{adapter.name}: no funding rates this cycle")
            merged.extend(rates)

        merged.sort(key=lambda r: abs(r.funding_rate), reverse=True)
        self._logger.info(f"Collected {len(merged)} funding rate(s) from {len(adapters)} venue(s)")
        return merged
