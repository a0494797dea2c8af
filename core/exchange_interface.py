"""
Venue Adapter Interface - Abstract Contract for All Exchanges

This module defines the abstract base class that every venue adapter implements.
An adapter turns one exchange's spot and derivatives listings into a
VenueSnapshot of NormalizedQuotes, and its funding listing into FundingRates.

Contract:
    fetch_snapshot()       -> (VenueSnapshot, ok)
    fetch_funding_rates()  -> (List[FundingRate], ok)

    Neither method raises. On timeout, connection error, non-success status or
    an unexpected payload the adapter logs the failure and returns an empty
    contribution with ok=False, so one venue's outage only reduces coverage.

Template:
    The base class runs the two listings concurrently and handles failure
    isolation. Subclasses implement the venue-specific pieces:

    class OKXExchange(VenueAdapter):
        name = "okx"

        def create_client(self): ...
        async def _fetch_spot(self, client): ...
        async def _fetch_futures(self, client): ...
        def normalize_spot(self, rows): ...
        def merge_futures(self, quotes, rows): ...
        async def _fetch_funding(self, client): ...
        def normalize_funding(self, rows): ...
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from core.config import VenueConfig, settings
from core.http_client import BaseAPIClient
from core.logging import get_logger
from core.schemas import FundingRate, NormalizedQuote, VenueSnapshot


class VenueAdapter(ABC):
    """
    Abstract Base Class for Venue Adapters

    Class Attributes:
        name: Unique identifier for the exchange (lowercase, e.g., "binance", "okx")
        HEALTH_PATH: Lightweight public endpoint used by health_check()

    Attributes:
        config: Explicit VenueConfig (URLs, API key, timeout, funding limit)
        client: Long-lived API client, set by initialize()
        logger: Injected logger (defaults to "arbscan.exchanges.<name>")
    """

    name: str
    HEALTH_PATH: str = "/"

    def __init__(self, config: Optional[VenueConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or settings.venue_config(self.name)
        self.logger = logger or get_logger(f"exchanges.{self.name}")
        self.client: Optional[BaseAPIClient] = None

    # ============================================
    # Venue-specific hooks
    # ============================================

    @abstractmethod
    def create_client(self) -> BaseAPIClient:
        """Build (but do not open) this venue's API client."""
        ...

    @abstractmethod
    async def _fetch_spot(self, client: BaseAPIClient) -> List[Any]:
        """Fetch and validate the raw spot listing."""
        ...

    @abstractmethod
    async def _fetch_futures(self, client: BaseAPIClient) -> List[Any]:
        """Fetch and validate the raw derivatives listing."""
        ...

    @abstractmethod
    def normalize_spot(self, rows: List[Any]) -> Dict[str, NormalizedQuote]:
        """Map spot rows to canonical symbols."""
        ...

    @abstractmethod
    def merge_futures(self, quotes: Dict[str, NormalizedQuote], rows: List[Any]) -> None:
        """Fill futures price and funding rate into existing spot records, in place."""
        ...

    @abstractmethod
    async def _fetch_funding(self, client: BaseAPIClient) -> List[Any]:
        """Fetch and validate the raw funding listing."""
        ...

    @abstractmethod
    def normalize_funding(self, rows: List[Any]) -> List[FundingRate]:
        """Convert funding rows (already capped) to FundingRate entries."""
        ...

    # ============================================
    # Lifecycle
    # ============================================

    async def initialize(self) -> None:
        """Open a long-lived API client session."""
        if self.client is None:
            self.client = self.create_client()
            await self.client.__aenter__()
            self.logger.info(f"✓ {self.name} adapter initialized")

    async def shutdown(self) -> None:
        """Close the API client session."""
        if self.client is not None:
            await self.client.__aexit__(None, None, None)
            self.client = None
            self.logger.info(f"✓ {self.name} adapter shut down")

    @asynccontextmanager
    async def _client_session(self) -> AsyncIterator[BaseAPIClient]:
        """Yield the long-lived client, or a short-lived one if not initialized."""
        if self.client is not None and self.client.session is not None:
            yield self.client
        else:
            async with self.create_client() as client:
                yield client

    # ============================================
    # Public contract
    # ============================================

    async def fetch_snapshot(self) -> Tuple[VenueSnapshot, bool]:
        """
        Collect spot and derivatives listings and merge them into a snapshot.

        Returns:
            (VenueSnapshot, ok). ok is False when any listing failed.

        Failure handling:
            - Spot listing failed: empty snapshot (futures rows have nothing to attach to)
            - Only derivatives failed: spot-only snapshot, still useful for cross-exchange
        """
        try:
            async with self._client_session() as client:
                spot, futures = await asyncio.gather(
                    self._fetch_spot(client),
                    self._fetch_futures(client),
                    return_exceptions=True
                )

            if isinstance(spot, Exception):
                self.logger.warning(f"{self.name}: spot listing failed: {spot}")
                return VenueSnapshot.empty(self.name), False

            quotes = self.normalize_spot(spot)
            ok = True

            if isinstance(futures, Exception):
                self.logger.warning(f"{self.name}: derivatives listing failed, spot only: {futures}")
                ok = False
            else:
                self.merge_futures(quotes, futures)

            self.logger.info(f"{self.name}: {len(quotes)} quotes fetched")
            return VenueSnapshot(venue=self.name, quotes=quotes), ok

        except Exception as e:
            self.logger.error(f"{self.name}: snapshot failed: {e}")
            return VenueSnapshot.empty(self.name), False

    async def fetch_funding_rates(self) -> Tuple[List[FundingRate], bool]:
        """
        Collect up to config.funding_limit funding entries from this venue.

        Returns:
            (entries, ok). On failure: ([], False).
        """
        try:
            async with self._client_session() as client:
                rows = await self._fetch_funding(client)

            rates = self.normalize_funding(rows[:self.config.funding_limit])
            self.logger.info(f"{self.name}: {len(rates)} funding rates parsed")
            return rates, True

        except Exception as e:
            self.logger.error(f"{self.name}: funding rates failed: {e}")
            return [], False

    async def health_check(self) -> bool:
        """Check that the venue's public API is reachable. Never raises."""
        try:
            async with self._client_session() as client:
                return await client.ping(self.HEALTH_PATH)
        except Exception as e:
            self.logger.error(f"{self.name}: health check failed: {e}")
            return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"
