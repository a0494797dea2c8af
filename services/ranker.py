"""
Opportunity Ranker

Merges both opportunity classes, orders them by spread magnitude and truncates
the result. Ties keep their input order (spot-futures first, then
cross-exchange in pair order) because Python's sort is stable.
"""

from typing import List, NamedTuple, Sequence

from core.schemas import ArbitrageOpportunity, OpportunitySummary, Tier


DEFAULT_LIMIT = 100


class RankedOpportunities(NamedTuple):
    opportunities: List[ArbitrageOpportunity]
    summary: OpportunitySummary


def rank(opportunities: Sequence[ArbitrageOpportunity], limit: int = DEFAULT_LIMIT) -> List[ArbitrageOpportunity]:
    """Sort descending by |spread_percent| and keep the first `limit`."""
    ordered = sorted(opportunities, key=lambda o: abs(o.spread_percent), reverse=True)
    return ordered[:limit]


def rank_opportunities(
    spot_futures: Sequence[ArbitrageOpportunity],
    cross_exchange: Sequence[ArbitrageOpportunity],
    limit: int = DEFAULT_LIMIT
) -> RankedOpportunities:
    """
    Rank both classes together and summarize.

    Summary:
        total              - opportunities returned (after truncation)
        spot_futures       - spot-futures opportunities detected (before truncation)
        cross_exchange     - cross-exchange opportunities detected (before truncation)
        high_profitability - high-tier opportunities among those returned
    """
    ranked = rank([*spot_futures, *cross_exchange], limit)

    summary = OpportunitySummary(
        total=len(ranked),
        spot_futures=len(spot_futures),
        cross_exchange=len(cross_exchange),
        high_profitability=sum(1 for o in ranked if o.tier == Tier.HIGH)
    )
    return RankedOpportunities(ranked, summary)
