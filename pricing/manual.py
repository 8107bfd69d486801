"""
Manual price estimate

Category/brand heuristics for when no marketplace data is available.
"""

from typing import Dict

from .estimator import PriceEstimate, PriceRange, get_condition_multiplier, round_half_up
from .models import ItemDescription, Rating

DEFAULT_BASE_PRICE = 20
NOT_USABLE_MULTIPLIER = 0.6
KNOWN_MODEL_MULTIPLIER = 1.1

CATEGORY_BASE_PRICES: Dict[str, float] = {
    'electronics': 45,
    'tools': 25,
    'furniture': 35,
    'clothing': 15,
    'footwear': 25,
    'automotive': 40,
    'books': 8,
    'sporting goods': 20,
    'toys': 12,
    'jewelry': 35,
    'home & garden': 18,
    'collectibles': 25,
    'art': 50,
    'musical instruments': 75,
}

BRAND_MULTIPLIERS: Dict[str, Dict[str, float]] = {
    'electronics': {
        'Apple': 2.5, 'Samsung': 1.8, 'Sony': 1.6, 'Microsoft': 1.7,
        'Nintendo': 1.9, 'HP': 1.2, 'Dell': 1.1, 'Generic': 0.6,
    },
    'tools': {
        'DeWalt': 1.8, 'Milwaukee': 1.7, 'Makita': 1.6, 'Craftsman': 1.3,
        'Ryobi': 1.1, 'Generic': 0.7,
    },
    'furniture': {
        'West Elm': 1.5, 'IKEA': 0.8, 'Pottery Barn': 1.6,
        'Restoration Hardware': 2.0, 'CB2': 1.4, 'Generic': 0.9,
    },
    'clothing': {
        'Nike': 1.8, 'Adidas': 1.7, "Levi's": 1.4, 'Gucci': 3.0,
        'Coach': 2.2, 'Generic': 0.8,
    },
    'footwear': {
        'Nike': 2.0, 'Jordan': 2.5, 'Adidas': 1.8, 'Converse': 1.3,
        'Vans': 1.2, 'Generic': 0.7,
    },
    'automotive': {
        'OEM': 1.5, 'AC Delco': 1.3, 'Bosch': 1.4, 'Motorcraft': 1.3,
        'Generic': 0.8,
    },
}


def condition_label(rating: Rating) -> str:
    """1-10 scores to labels; labels pass through lower-cased"""
    if isinstance(rating, bool):
        return 'fair'
    if isinstance(rating, (int, float)):
        if rating >= 8:
            return 'excellent'
        elif rating >= 6:
            return 'good'
        elif rating >= 4:
            return 'fair'
        return 'poor'
    if isinstance(rating, str) and rating.strip():
        return rating.strip().lower()
    return 'good'


def estimate_manual(item: ItemDescription) -> PriceEstimate:
    """Heuristic estimate from category, brand and condition"""
    category = (item.category or '').lower()
    price = CATEGORY_BASE_PRICES.get(category, DEFAULT_BASE_PRICE)

    brand_multiplier = BRAND_MULTIPLIERS.get(category, {}).get(item.brand or '')
    if brand_multiplier:
        price *= brand_multiplier

    label = condition_label(item.rating)
    price *= get_condition_multiplier(label)

    if not item.usable_as_is:
        price *= NOT_USABLE_MULTIPLIER

    if item.model and item.model != 'Unknown':
        price *= KNOWN_MODEL_MULTIPLIER

    suggested = round_half_up(price)

    return PriceEstimate(
        suggested=suggested,
        confidence="medium",
        source="manual",
        reason=f"Based on {category or 'general'} category pricing ({label} condition)",
        price_range=PriceRange(
            min=round_half_up(suggested * 0.7),
            max=round_half_up(suggested * 1.4),
            median=suggested,
            average=suggested
        )
    )
