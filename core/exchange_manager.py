"""
Exchange Manager - Central Registry for Venue Adapters

This module provides a centralized manager for all venue adapters.

Design Benefits:
    - Single source of truth for the configured venues and their order
    - Centralized lifecycle management (initialize/shutdown)
    - Adapters are injectable, so tests can register fakes

Ordering:
    The registry preserves the configured order (ENABLED_EXCHANGES). The
    aggregator and the cross-exchange detector rely on it to form each
    unordered venue pair exactly once.

Example Usage:
    manager = ExchangeManager()
    await manager.initialize_all()

    okx = manager.get_exchange("okx")
    snapshot, ok = await okx.fetch_snapshot()

    await manager.shutdown_all()
"""

from typing import Dict, List, Optional, Sequence, Type

from core.config import settings
from core.exceptions import UnknownExchangeError
from core.exchange_interface import VenueAdapter
from core.logging import logger


def _adapter_classes() -> Dict[str, Type[VenueAdapter]]:
    # Each exchange module imports from core, so import lazily
    from exchanges.binance import BinanceExchange
    from exchanges.bybit import BybitExchange
    from exchanges.okx import OKXExchange

    return {
        "binance": BinanceExchange,
        "okx": OKXExchange,
        "bybit": BybitExchange,
    }


class ExchangeManager:
    """
    Central Manager for Venue Adapters

    Attributes:
        exchanges: Ordered mapping of venue name to adapter instance
                   Example: {"binance": BinanceExchange(), "okx": OKXExchange(), ...}

    Example:
        >>> manager = ExchangeManager()
        >>> manager.list_exchanges()
        ['binance', 'okx', 'bybit']
    """

    def __init__(self, adapters: Optional[Sequence[VenueAdapter]] = None):
        """
        Register venue adapters.

        Args:
            adapters: Explicit adapters in aggregation order. When omitted, one
                      adapter per entry of settings.exchanges_list is built from
                      its VenueConfig.
        """
        if adapters is None:
            classes = _adapter_classes()
            adapters = [
                classes[name](settings.venue_config(name))
                for name in settings.exchanges_list
                if name in classes
            ]

        self.exchanges: Dict[str, VenueAdapter] = {}
        for adapter in adapters:
            if adapter.name in self.exchanges:
                raise ValueError(f"Exchange '{adapter.name}' registered twice")
            self.exchanges[adapter.name] = adapter

        logger.info(
            f"ExchangeManager initialized with {len(self.exchanges)} exchange(s): "
            f"{', '.join(self.exchanges.keys())}"
        )

    # ============================================
    # Exchange Retrieval Methods
    # ============================================

    def get_exchange(self, name: str) -> VenueAdapter:
        """
        Get a venue adapter by name.

        Args:
            name: Exchange name (case-insensitive)

        Raises:
            UnknownExchangeError: If the exchange is not configured
        """
        name = name.lower()

        if name not in self.exchanges:
            logger.warning(f"Exchange '{name}' not found. Available: {', '.join(self.exchanges)}")
            raise UnknownExchangeError(name, list(self.exchanges))

        return self.exchanges[name]

    def has_exchange(self, name: str) -> bool:
        return name.lower() in self.exchanges

    def list_exchanges(self) -> List[str]:
        """Configured venue names, in aggregation order."""
        return list(self.exchanges.keys())

    def adapters(self) -> List[VenueAdapter]:
        """Configured adapters, in aggregation order."""
        return list(self.exchanges.values())

    # ============================================
    # Lifecycle Management
    # ============================================

    async def initialize_all(self) -> None:
        """Open API sessions for all adapters. A failing adapter does not stop the others."""
        logger.info("Initializing all exchanges...")

        for name, exchange in self.exchanges.items():
            try:
                await exchange.initialize()
            except Exception as e:
                logger.error(f"✗ Failed to initialize {name}: {e}")

        logger.info("All exchanges initialized")

    async def shutdown_all(self) -> None:
        """Close API sessions for all adapters."""
        logger.info("Shutting down all exchanges...")

        for name, exchange in self.exchanges.items():
            try:
                await exchange.shutdown()
            except Exception as e:
                logger.error(f"✗ Error shutting down {name}: {e}")

        logger.info("All exchanges shut down")

    # ============================================
    # Health Check Methods
    # ============================================

    async def health_check_all(self) -> Dict[str, bool]:
        """
        Check health status of all exchanges.

        Returns:
            Dict[str, bool]: venue name -> reachable
        """
        health_status = {}
        for name, exchange in self.exchanges.items():
            health_status[name] = await exchange.health_check()
            logger.debug(f"{name}: {'healthy' if health_status[name] else 'unhealthy'}")
        return health_status

    def __repr__(self) -> str:
        return f"<ExchangeManager(exchanges={list(self.exchanges.keys())})>"

    def __len__(self) -> int:
        return len(self.exchanges)
