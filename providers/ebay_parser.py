"""
eBay Parser - Turns Browse API item_summary responses into Listings

The Browse API returns a JSON document with an `itemSummaries` array. Only
the fields needed for price comparison are kept; prices are passed through
untouched so the estimator decides what counts as a usable price.
"""

from typing import List, Optional

from .base import Listing, Price

# eBay condition IDs used by the conditionIds filter
CONDITION_IDS = {
    'new': '1000',
    'like_new': '1500',
    'excellent': '2000',
    'very_good': '2500',
    'good': '3000',
    'acceptable': '4000',
    'for_parts': '7000',
}


def condition_filter(condition: Optional[str]) -> Optional[str]:
    """
    Build the Browse API filter for a condition name or ID.

    "good" -> "conditionIds:{3000}", "1500" -> "conditionIds:{1500}"
    Unknown names give None (no filter).
    """
    if not condition:
        return None

    key = condition.strip().lower().replace(' ', '_').replace('-', '_')
    condition_id = CONDITION_IDS.get(key)
    if condition_id is None and key.isdigit():
        condition_id = key

    if condition_id is None:
        return None
    return f"conditionIds:{{{condition_id}}}"


def parse_item_summaries(data: dict) -> List[Listing]:
    """Parse a search response body. Missing itemSummaries means no results."""
    listings = []

    for summary in data.get('itemSummaries') or []:
        listing = parse_item_summary(summary)
        if listing:
            listings.append(listing)

    return listings


def parse_item_summary(summary: dict) -> Optional[Listing]:
    """Parse a single item summary, None if it has no title"""
    if not isinstance(summary, dict):
        return None

    title = summary.get('title')
    if not title:
        return None

    price = None
    price_obj = summary.get('price')
    if isinstance(price_obj, dict):
        price = Price(
            value=price_obj.get('value'),
            currency=price_obj.get('currency', 'USD')
        )

    image = summary.get('image')
    image_url = image.get('imageUrl') if isinstance(image, dict) else None

    return Listing(
        title=title,
        price=price,
        url=summary.get('itemWebUrl', ''),
        condition=summary.get('condition'),
        item_id=summary.get('itemId'),
        image_url=image_url
    )
