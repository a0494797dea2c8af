"""
Normalized Data Schemas

This module defines Pydantic models for all market data and signal types.
These schemas provide a unified, exchange-agnostic data format.

Key Principle:
    Regardless of which exchange the data comes from (Binance, OKX, Bybit),
    it gets normalized into these standardized schemas before any opportunity
    detection runs. Venue-specific payload models live next to each API client.

Models:
    - NormalizedQuote: Spot price, perpetual price and funding rate for one symbol on one venue
    - VenueSnapshot: All quotes collected from one venue in one aggregation cycle
    - ArbitrageOpportunity: A spot-futures or cross-exchange signal
    - FundingRate: Current funding rate and next settlement for a perpetual
    - OpportunitySummary / ArbitrageResponse / FundingRatesResponse: Query payloads

Serialization:
    Field names are snake_case in Python and camelCase on the wire
    (spot_price -> spotPrice, venue_a -> venueA).
"""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.utils.numbers import ParsedFloat


# ============================================
# Base Model
# ============================================

class CamelModel(BaseModel):
    """
    Base model for all outward-facing schemas.

    Accepts both snake_case names and camelCase aliases on input and is
    immutable once built: every snapshot, opportunity and funding entry is
    created for one cycle and never modified afterwards.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )


# ============================================
# Enumerations
# ============================================

class OpportunityKind(str, Enum):
    """Class of arbitrage signal."""

    SPOT_FUTURES = "spot-futures"
    CROSS_EXCHANGE = "cross-exchange"


class Direction(str, Enum):
    """Trade legs implied by an opportunity."""

    LONG_SPOT_SHORT_FUTURES = "long-spot-short-futures"
    SHORT_SPOT_LONG_FUTURES = "short-spot-long-futures"
    BUY_VENUE_A_SELL_VENUE_B = "buy-venue-a-sell-venue-b"


class Tier(str, Enum):
    """Coarse profitability bucket derived from spread magnitude."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ============================================
# Normalized Market Data
# ============================================

class NormalizedQuote(CamelModel):
    """
    Spot and perpetual prices for one canonical symbol on one venue.

    Attributes:
        symbol: Canonical pair (e.g., "BTCUSDT")
        spot_price: Last spot price (0 = unknown)
        futures_price: Perpetual mark/last price (0 = unknown)
        funding_rate: Current funding rate as decimal (0.0001 = 0.01%)
        degraded_fields: Fields that fell back to 0 because the raw value was
            missing or unparseable. Internal only, never serialized.

    Example:
        >>> quote = NormalizedQuote(symbol="BTCUSDT", spot_price=67000.0)
        >>> quote = quote.with_futures(ParsedFloat(67100.0, False), ParsedFloat(0.0001, False))
        >>> quote.futures_price
        67100.0
    """

    symbol: str = Field(..., description="Canonical trading pair", examples=["BTCUSDT"])
    spot_price: float = Field(0.0, ge=0, description="Spot price (0 = unknown)")
    futures_price: float = Field(0.0, ge=0, description="Perpetual price (0 = unknown)")
    funding_rate: float = Field(0.0, description="Funding rate as decimal")
    degraded_fields: FrozenSet[str] = Field(default_factory=frozenset, exclude=True)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Ensure symbol is uppercase"""
        return v.upper()

    @classmethod
    def from_spot(cls, symbol: str, spot: ParsedFloat) -> "NormalizedQuote":
        """Start a quote from a spot listing row."""
        degraded = frozenset({"spot_price"}) if spot.degraded else frozenset()
        return cls(symbol=symbol, spot_price=spot.value, degraded_fields=degraded)

    def with_futures(self, futures: ParsedFloat, funding: ParsedFloat) -> "NormalizedQuote":
        """Return a copy filled in with the derivatives side of the record."""
        degraded = set(self.degraded_fields) - {"futures_price", "funding_rate"}
        if futures.degraded:
            degraded.add("futures_price")
        if funding.degraded:
            degraded.add("funding_rate")

        return self.model_copy(update={
            "futures_price": futures.value,
            "funding_rate": funding.value,
            "degraded_fields": frozenset(degraded),
        })

    def is_degraded(self, field: str) -> bool:
        """True when `field` is a fallback zero rather than a real value."""
        return field in self.degraded_fields


class VenueSnapshot(CamelModel):
    """
    All quotes collected from one venue during one aggregation cycle.

    An empty `quotes` mapping means the venue failed or returned nothing;
    the snapshot is still present so downstream code sees every venue.
    """

    venue: str = Field(..., description="Venue identifier (lowercase)", examples=["binance", "okx", "bybit"])
    quotes: Dict[str, NormalizedQuote] = Field(default_factory=dict)

    @field_validator("venue")
    @classmethod
    def validate_venue(cls, v: str) -> str:
        """Ensure venue is lowercase"""
        return v.lower()

    @classmethod
    def empty(cls, venue: str) -> "VenueSnapshot":
        return cls(venue=venue)

    @property
    def is_empty(self) -> bool:
        return not self.quotes


# ============================================
# Signals
# ============================================

class ArbitrageOpportunity(CamelModel):
    """
    A single arbitrage signal.

    For spot-futures opportunities:
        price_a = spot price, price_b = futures price, venue_b absent,
        spread_percent signed (positive = futures above spot).

    For cross-exchange opportunities:
        price_a = buy price on venue_a (cheaper), price_b = sell price on venue_b,
        spread_percent and spread_value are absolute magnitudes.

    Example:
        >>> opp = ArbitrageOpportunity(
        ...     symbol="BTCUSDT",
        ...     kind=OpportunityKind.SPOT_FUTURES,
        ...     price_a=100.0,
        ...     price_b=101.0,
        ...     spread_percent=1.0,
        ...     spread_value=1.0,
        ...     venue_a="binance",
        ...     direction=Direction.LONG_SPOT_SHORT_FUTURES,
        ...     annualized_return=12.0,
        ...     funding_rate=0.0001,
        ...     tier=Tier.MEDIUM
        ... )
    """

    symbol: str
    kind: OpportunityKind
    price_a: float = Field(..., ge=0, description="Spot price, or buy price for cross-exchange")
    price_b: float = Field(..., ge=0, description="Futures price, or sell price for cross-exchange")
    spread_percent: float
    spread_value: float
    venue_a: str
    venue_b: Optional[str] = None
    direction: Direction
    annualized_return: Optional[float] = None
    funding_rate: Optional[float] = None
    tier: Tier


class FundingRate(CamelModel):
    """
    Current funding rate for a perpetual contract on one venue.

    Funding Rate Explained:
        - Positive rate: Longs pay shorts
        - Negative rate: Shorts pay longs
        - Settled every 8 hours on Binance, OKX and Bybit

    Attributes:
        symbol: Venue's perpetual identifier, normalized (e.g., "BTCUSDT", "BTC-USDT")
        venue: Source venue
        funding_rate: Current funding rate as decimal
        next_settlement_time: When the next funding payment settles (UTC)
        mark_price: Current mark price (0 when the venue does not report it)
    """

    symbol: str
    venue: str
    funding_rate: float
    next_settlement_time: datetime
    mark_price: float = Field(0.0, ge=0)


# ============================================
# Query Payloads
# ============================================

class OpportunitySummary(CamelModel):
    """Counts reported next to the ranked opportunities."""

    total: int = Field(..., ge=0, description="Number of opportunities returned")
    spot_futures: int = Field(..., ge=0, description="Spot-futures opportunities detected")
    cross_exchange: int = Field(..., ge=0, description="Cross-exchange opportunities detected")
    high_profitability: int = Field(..., ge=0, description="High-tier opportunities returned")


class ArbitrageResponse(CamelModel):
    """Payload of the "get arbitrage opportunities" query."""

    opportunities: List[ArbitrageOpportunity]
    timestamp: int = Field(..., description="Response time in epoch milliseconds")
    summary: OpportunitySummary


class FundingRatesResponse(CamelModel):
    """Payload of the "get funding rates" query."""

    success: bool
    data: List[FundingRate]
    timestamp: int = Field(..., description="Response time in epoch milliseconds")
