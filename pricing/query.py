"""
Search query construction for comparable listings

Turns an ItemDescription into a short marketplace query: brand, then the
model tokens the brand doesn't already cover, then the category, with a
couple of description keywords when nothing more specific is known.
"""

import re
from typing import List

from .models import ItemDescription

PLACEHOLDER_BRANDS = ('Unknown', 'Generic')
PLACEHOLDER_MODEL = 'Unknown'
GENERIC_CATEGORY = 'furniture'

MIN_BRAND_LENGTH = 3
MIN_KEYWORD_LENGTH = 4
DESCRIPTION_KEYWORDS = 2

STOP_WORDS = frozenset([
    # articles and conjunctions
    'the', 'a', 'an', 'and', 'or', 'but',
    # prepositions
    'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by', 'from', 'into',
    'over', 'under', 'about',
    # auxiliary verbs
    'is', 'are', 'was', 'were', 'has', 'have', 'been', 'being', 'does',
    # filler from condition write-ups
    'shows', 'some', 'signs', 'side', 'very', 'this', 'that', 'there',
    'appears', 'overall', 'minor', 'item',
])

_SPLIT_RE = re.compile(r'[\s,.-]+')


def extract_keywords(text: str, limit: int = 3) -> List[str]:
    """Pull the first `limit` informative words out of free text"""
    words = _SPLIT_RE.split(text.lower())
    keywords = [
        word for word in words
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]
    return keywords[:limit]


def build_search_query(item: ItemDescription) -> str:
    """Build the marketplace query. Empty string means no usable query."""
    terms: List[str] = []

    brand = item.brand
    if brand and brand not in PLACEHOLDER_BRANDS and len(brand) >= MIN_BRAND_LENGTH:
        terms.append(brand)

    model = item.model
    if model and model != PLACEHOLDER_MODEL:
        # skip tokens an earlier term already covers ("Bamboo" brand, "bamboo" model)
        new_tokens = [
            token for token in model.lower().split()
            if not any(token in existing.lower() for existing in terms)
        ]
        if new_tokens:
            terms.append(' '.join(new_tokens))

    category = item.category
    if category and (category != GENERIC_CATEGORY or not terms):
        terms.append(category)

    if len(terms) == 1 and item.description:
        terms.extend(extract_keywords(item.description)[:DESCRIPTION_KEYWORDS])

    return ' '.join(terms)
