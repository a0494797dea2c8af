"""
Market Aggregator

Runs every configured venue adapter concurrently and returns one VenueSnapshot
per venue, in configured order. A venue that fails contributes an empty
snapshot; it is never dropped from the sequence and never cancels the others.
"""

import asyncio
import logging
from typing import List, Optional

from core.exchange_manager import ExchangeManager
from core.logging import get_logger
from core.schemas import VenueSnapshot


class MarketAggregator:
    """
    Join-all collector over an ExchangeManager.

    Example:
        >>> aggregator = MarketAggregator(manager)
        >>> snapshots = await aggregator.collect_all()
        >>> [s.venue for s in snapshots]
        ['binance', 'okx', 'bybit']
    """

    def __init__(self, manager: ExchangeManager, logger: Optional[logging.Logger] = None) -> None:
        self._manager = manager
        self._logger = logger or get_logger(__name__)

    async def collect_all(self) -> List[VenueSnapshot]:
        adapters = self._manager.adapters()
        results = await asyncio.gather(
            *(adapter.fetch_snapshot() for adapter in adapters),
            return_exceptions=True
        )

        snapshots: List[VenueSnapshot] = []
        healthy = 0
        for adapter, result in zip(adapters, results):
            # Adapters do not raise; an exception here is a bug in one adapter only
            if isinstance(result, Exception):
                self._logger.error(f"{adapter.name}: adapter raised: {result!r}")
                snapshots.append(VenueSnapshot.empty(adapter.name))
                continue

            snapshot, ok = result
            if ok:
                healthy += 1
            else:
                self._logger.warning(f"{adapter.name}: degraded ({len(snapshot.quotes)} quotes)")
            snapshots.append(snapshot)

        self._logger.info(f"Aggregated {len(snapshots)} venue(s), {healthy} fully ok")
        return snapshots
