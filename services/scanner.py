"""
Arbitrage Scanner - Query Interface

The two read operations consumed by the presentation layer. Each call runs an
independent, self-contained cycle: aggregate -> detect -> rank for
opportunities, or collect for funding rates. Nothing is cached between calls.

Usage:
    scanner = ArbitrageScanner(manager)
    response = await scanner.get_arbitrage_opportunities()
    funding = await scanner.get_funding_rates("okx")
"""

import logging
from typing import Optional

from core.config import settings
from core.exchange_manager import ExchangeManager
from core.logging import get_logger
from core.schemas import ArbitrageResponse, FundingRatesResponse
from core.utils.time import current_utc_timestamp
from services.aggregator import MarketAggregator
from services.funding_collector import FundingRateCollector
from services.opportunity_detector import detect_all
from services.ranker import rank_opportunities


class ArbitrageScanner:
    """
    Entry point for both queries.

    Attributes:
        aggregator: Collects one snapshot per venue
        funding_collector: Collects funding rates
        max_opportunities: Truncation limit for ranked opportunities
    """

    def __init__(
        self,
        manager: ExchangeManager,
        max_opportunities: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ) -> None:
        self._logger = logger or get_logger(__name__)
        self.manager = manager
        self.aggregator = MarketAggregator(manager, logger=self._logger)
        self.funding_collector = FundingRateCollector(manager, logger=self._logger)
        self.max_opportunities = max_opportunities or settings.max_opportunities

    async def get_arbitrage_opportunities(self) -> ArbitrageResponse:
        """
        Run one aggregation cycle and return the ranked opportunities.

        Venue failures only shrink the result; any exception raised here is a
        pipeline failure for the caller to map onto an error response.
        """
        snapshots = await self.aggregator.collect_all()
        spot_futures, cross_exchange = detect_all(snapshots)

        self._logger.info(
            f"Detected {len(spot_futures)} spot-futures and "
            f"{len(cross_exchange)} cross-exchange opportunities"
        )

        ranked = rank_opportunities(spot_futures, cross_exchange, self.max_opportunities)
        return ArbitrageResponse(
            opportunities=ranked.opportunities,
            timestamp=current_utc_timestamp(milliseconds=True),
            summary=ranked.summary
        )

    async def get_funding_rates(self, exchange: Optional[str] = None) -> FundingRatesResponse:
        """
        Collect funding rates from one venue or all of them.

        Raises:
            UnknownExchangeError: If `exchange` is not configured
        """
        rates = await self.funding_collector.collect(exchange)
        return FundingRatesResponse(
            success=True,
            data=rates,
            timestamp=current_utc_timestamp(milliseconds=True)
        )
