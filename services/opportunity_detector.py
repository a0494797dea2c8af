"""
Opportunity Detector

Pure functions over already-fetched VenueSnapshots. No I/O, no state: the same
snapshots always produce the same opportunities, in the same order.

Spot-futures basis (per venue):
    spread_value   = futures - spot
    spread_percent = spread_value / spot * 100
    emitted when |spread_percent| > 0.1

Cross-exchange spread (per unordered venue pair, in snapshot order):
    spread_value   = price_a - price_b
    spread_percent = spread_value / price_b * 100
    emitted when |spread_percent| > 0.2, then reported from the cheaper venue's side
"""

from itertools import combinations
from typing import List, Sequence, Tuple

from core.schemas import ArbitrageOpportunity, Direction, OpportunityKind, Tier, VenueSnapshot


SPOT_FUTURES_MIN_SPREAD = 0.1
CROSS_EXCHANGE_MIN_SPREAD = 0.2

SPOT_FUTURES_HIGH_TIER = 1.0
SPOT_FUTURES_MEDIUM_TIER = 0.5
CROSS_EXCHANGE_HIGH_TIER = 0.8
CROSS_EXCHANGE_MEDIUM_TIER = 0.4

# Funding settles every 8 hours
FUNDING_SETTLEMENTS_PER_DAY = 3
DAYS_PER_YEAR = 365


def classify_tier(spread_percent: float, high: float, medium: float) -> Tier:
    magnitude = abs(spread_percent)
    if magnitude > high:
        return Tier.HIGH
    if magnitude > medium:
        return Tier.MEDIUM
    return Tier.LOW


def annualized_return(spread_percent: float, funding_rate: float) -> float:
    """
    Rough yearly yield of a basis trade: the spread captured once plus funding
    collected at every settlement. An estimate, not a guaranteed return.
    """
    return abs(spread_percent) + funding_rate * 100 * DAYS_PER_YEAR * FUNDING_SETTLEMENTS_PER_DAY


def detect_spot_futures(snapshot: VenueSnapshot) -> List[ArbitrageOpportunity]:
    """
    Find spot vs perpetual basis opportunities on one venue.

    Only quotes with both a positive spot and a positive futures price are considered.
    """
    opportunities = []

    for symbol, quote in snapshot.quotes.items():
        if quote.spot_price <= 0 or quote.futures_price <= 0:
            continue

        spread_value = quote.futures_price - quote.spot_price
        spread_percent = spread_value / quote.spot_price * 100

        if abs(spread_percent) <= SPOT_FUTURES_MIN_SPREAD:
            continue

        direction = (
            Direction.LONG_SPOT_SHORT_FUTURES if spread_percent > 0
            else Direction.SHORT_SPOT_LONG_FUTURES
        )

        opportunities.append(ArbitrageOpportunity(
            symbol=symbol,
            kind=OpportunityKind.SPOT_FUTURES,
            price_a=quote.spot_price,
            price_b=quote.futures_price,
            spread_percent=spread_percent,
            spread_value=spread_value,
            venue_a=snapshot.venue,
            direction=direction,
            annualized_return=annualized_return(spread_percent, quote.funding_rate),
            funding_rate=quote.funding_rate,
            tier=classify_tier(spread_percent, SPOT_FUTURES_HIGH_TIER, SPOT_FUTURES_MEDIUM_TIER)
        ))

    return opportunities


def detect_cross_exchange(first: VenueSnapshot, second: VenueSnapshot) -> List[ArbitrageOpportunity]:
    """
    Compare spot prices of the symbols both venues list.

    The raw comparison uses `first` as side A. The result is then normalized so
    venue_a is always the cheaper venue (buy there, sell on venue_b) and the
    spread is reported as a magnitude.
    """
    opportunities = []

    for symbol, quote_a in first.quotes.items():
        quote_b = second.quotes.get(symbol)
        if quote_b is None:
            continue

        price_a = quote_a.spot_price
        price_b = quote_b.spot_price
        if price_a <= 0 or price_b <= 0:
            continue

        spread_value = price_a - price_b
        spread_percent = spread_value / price_b * 100

        if abs(spread_percent) <= CROSS_EXCHANGE_MIN_SPREAD:
            continue

        # A above B: buy on B, sell on A
        if spread_percent > 0:
            buy_venue, buy_price, sell_venue, sell_price = second.venue, price_b, first.venue, price_a
        else:
            buy_venue, buy_price, sell_venue, sell_price = first.venue, price_a, second.venue, price_b

        opportunities.append(ArbitrageOpportunity(
            symbol=symbol,
            kind=OpportunityKind.CROSS_EXCHANGE,
            price_a=buy_price,
            price_b=sell_price,
            spread_percent=abs(spread_percent),
            spread_value=abs(spread_value),
            venue_a=buy_venue,
            venue_b=sell_venue,
            direction=Direction.BUY_VENUE_A_SELL_VENUE_B,
            tier=classify_tier(spread_percent, CROSS_EXCHANGE_HIGH_TIER, CROSS_EXCHANGE_MEDIUM_TIER)
        ))

    return opportunities


def detect_all(
    snapshots: Sequence[VenueSnapshot]
) -> Tuple[List[ArbitrageOpportunity], List[ArbitrageOpportunity]]:
    """
    Run both detectors over an aggregation cycle.

    Returns:
        (spot_futures, cross_exchange). Every unordered venue pair is compared
        exactly once, in snapshot order (3 venues -> 3 pairs).
    """
    spot_futures: List[ArbitrageOpportunity] = []
    for snapshot in snapshots:
        spot_futures.extend(detect_spot_futures(snapshot))

    cross_exchange: List[ArbitrageOpportunity] = []
    for first, second in combinations(snapshots, 2):
        cross_exchange.extend(detect_cross_exchange(first, second))

    return spot_futures, cross_exchange
