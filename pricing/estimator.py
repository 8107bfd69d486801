"""
Price Estimator - Suggest a resale price from comparable listings

Queries a search provider once for listings similar to the item, takes the
median of their prices, adjusts it for the item's condition and reports how
much evidence backed the number. Pricing is best-effort: every failure comes
back as a low-confidence estimate instead of an exception.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, List, Any

from providers.base import SearchProvider, SearchOptions, Listing
from .models import ItemDescription, Rating
from .query import build_search_query

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20
COMPARABLE_LIMIT = 5
HIGH_CONFIDENCE_SAMPLES = 5

CONDITION_MULTIPLIERS = {
    'excellent': 1.0,
    'good': 0.85,
    'fair': 0.65,
    'poor': 0.35,
}
DEFAULT_CONDITION_MULTIPLIER = 0.75
DEFAULT_RATING = "good"  # assumed when the item has no condition

# estimate sources
SOURCE_OK = "ok"
SOURCE_NO_RESULTS = "no_results"
SOURCE_NO_VALID_PRICES = "no_valid_prices"
SOURCE_ERROR = "error"


@dataclass(frozen=True)
class PriceRange:
    min: float
    max: float
    median: float
    average: float

    def to_dict(self) -> dict:
        return {
            'min': self.min,
            'max': self.max,
            'median': self.median,
            'average': self.average
        }


@dataclass(frozen=True)
class ComparableItem:
    """A listing as shown next to the estimate"""
    title: str
    price: float
    url: str
    condition: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'price': self.price,
            'url': self.url,
            'condition': self.condition
        }


@dataclass(frozen=True)
class PriceEstimate:
    """Suggested resale price and the evidence behind it"""
    suggested: Optional[int]
    confidence: str  # low, medium, high
    source: str
    reason: Optional[str] = None
    price_range: Optional[PriceRange] = None
    sample_size: Optional[int] = None
    search_query: Optional[str] = None
    comparable_items: List[ComparableItem] = field(default_factory=list)

    @classmethod
    def unavailable(cls, reason: str, source: str) -> "PriceEstimate":
        return cls(suggested=None, confidence="low", reason=reason, source=source)

    def to_dict(self) -> dict:
        """camelCase dict; fields that were never set are left out"""
        data: dict = {
            'suggested': self.suggested,
            'confidence': self.confidence,
        }
        if self.price_range is not None:
            data['priceRange'] = self.price_range.to_dict()
        if self.sample_size is not None:
            data['sampleSize'] = self.sample_size
        if self.search_query is not None:
            data['searchQuery'] = self.search_query
        if self.comparable_items:
            data['comparableItems'] = [item.to_dict() for item in self.comparable_items]
        data['source'] = self.source
        if self.reason is not None:
            data['reason'] = self.reason
        return data


def get_condition_multiplier(condition: Rating) -> float:
    """Convert a condition label to a price multiplier (0.75 if unrecognized)"""
    if not isinstance(condition, str):
        return DEFAULT_CONDITION_MULTIPLIER
    return CONDITION_MULTIPLIERS.get(condition.strip().lower(), DEFAULT_CONDITION_MULTIPLIER)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_price(value: Any) -> Optional[float]:
    """
    Usable price as float, None when missing, non-numeric or not positive.

    The whole value must be a number: "12.99 USD" is rejected rather than
    read as 12.99. Browse API prices are plain decimal strings.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def listing_price(listing: Listing) -> Optional[float]:
    if listing.price is None:
        return None
    return parse_price(listing.price.value)


def summarize_prices(prices: List[float]) -> PriceRange:
    """
    Price statistics over a non-empty list.

    The median is the upper median: p[n // 2] of the sorted prices, so
    [10, 20, 30, 40] gives 30, not 25.
    """
    ordered = sorted(prices)
    n = len(ordered)
    return PriceRange(
        min=ordered[0],
        max=ordered[-1],
        median=ordered[n // 2],
        average=sum(ordered) / n
    )


def to_comparable(listing: Listing) -> ComparableItem:
    price = listing_price(listing)
    return ComparableItem(
        title=listing.title,
        price=price if price is not None else 0.0,
        url=listing.url,
        condition=listing.condition
    )


class PriceEstimator:
    """Estimate resale prices from a marketplace search provider"""

    def __init__(self, provider: SearchProvider, search_limit: int = SEARCH_LIMIT):
        self.provider = provider
        self.search_limit = search_limit

    async def estimate(self, item: ItemDescription) -> PriceEstimate:
        """Price an item. Never raises; failures come back with source="error"."""
        query = ""
        try:
            query = build_search_query(item)
            listings = await self.provider.search(query, SearchOptions(limit=self.search_limit))
            return self.estimate_from_listings(query, listings, item.rating or DEFAULT_RATING)
        except Exception as e:
            logger.error("Price estimation failed for %r: %s", query, e)
            return PriceEstimate.unavailable(reason=str(e), source=SOURCE_ERROR)

    def estimate_from_listings(
        self,
        query: str,
        listings: List[Listing],
        rating: Rating = None
    ) -> PriceEstimate:
        if not listings:
            logger.info("No similar items found for %r", query)
            return PriceEstimate.unavailable(
                reason=f'No similar items found for "{query}"',
                source=SOURCE_NO_RESULTS
            )

        prices = [p for p in (listing_price(listing) for listing in listings) if p is not None]
        if not prices:
            logger.info("No valid prices among %d listings for %r", len(listings), query)
            return PriceEstimate.unavailable(
                reason="No valid prices found",
                source=SOURCE_NO_VALID_PRICES
            )

        price_range = summarize_prices(prices)
        sample_size = len(prices)
        suggested = round_half_up(price_range.median * get_condition_multiplier(rating))
        comparables = listings[:min(COMPARABLE_LIMIT, sample_size)]

        logger.info(
            "Suggested $%d for %r from %d prices (median $%.2f)",
            suggested, query, sample_size, price_range.median
        )

        return PriceEstimate(
            suggested=suggested,
            confidence="high" if sample_size >= HIGH_CONFIDENCE_SAMPLES else "medium",
            source=SOURCE_OK,
            price_range=price_range,
            sample_size=sample_size,
            search_query=query,
            comparable_items=[to_comparable(listing) for listing in comparables]
        )
