from typing import Optional

from providers.base import SearchProvider
from .models import ItemDescription, Condition
from .query import build_search_query, extract_keywords, STOP_WORDS
from .estimator import (
    PriceEstimate,
    PriceRange,
    ComparableItem,
    PriceEstimator,
    get_condition_multiplier
)
from .manual import estimate_manual, condition_label
from .profit import ProfitAnalysis, analyze_resale, calculate_ebay_fees, estimate_shipping


async def estimate_price(
    item: ItemDescription,
    provider: Optional[SearchProvider] = None,
    source: str = "ebay",
    fallback_to_manual: bool = False
) -> PriceEstimate:
    """
    Price an item from marketplace data or the manual heuristics.

    With fallback_to_manual, a market estimate without a suggested price is
    replaced by the manual one.
    """
    if source == "manual" or provider is None:
        return estimate_manual(item)

    estimate = await PriceEstimator(provider).estimate(item)
    if estimate.suggested is None and fallback_to_manual:
        return estimate_manual(item)
    return estimate


__all__ = [
    'ItemDescription',
    'Condition',
    'build_search_query',
    'extract_keywords',
    'STOP_WORDS',
    'PriceEstimate',
    'PriceRange',
    'ComparableItem',
    'PriceEstimator',
    'get_condition_multiplier',
    'estimate_manual',
    'condition_label',
    'ProfitAnalysis',
    'analyze_resale',
    'calculate_ebay_fees',
    'estimate_shipping',
    'estimate_price'
]
