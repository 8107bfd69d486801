"""
Resale profit analysis

Estimates what the seller actually keeps after eBay fees and shipping.
"""

from dataclasses import dataclass
from typing import Optional

from .estimator import PriceEstimate
from .models import ItemDescription

FINAL_VALUE_FEE_PERCENT = 13.25
HIGH_VALUE_FEE_PERCENT = 3.5  # vehicles and other sales over $1000
HIGH_VALUE_THRESHOLD = 1000
HIGH_VALUE_FEE_CAP = 900
PAYMENT_FEE_PERCENT = 2.9
PAYMENT_FEE_FIXED = 0.30

DEFAULT_SHIPPING = 12.0

SHIPPING_BY_CATEGORY = {
    'books': 5, 'book': 5,
    'clothing': 8, 'apparel': 8, 'clothes': 8,
    'footwear': 12, 'shoes': 12, 'sneakers': 12, 'boots': 15,
    'tool': 15,
    'sporting goods': 18, 'sports': 18, 'fitness': 20,
    'toys': 10, 'toy': 10, 'games': 10,
    'jewelry': 5, 'watches': 6, 'accessories': 6,
    'auto parts': 25, 'car parts': 25,
    'home & garden': 15, 'home': 15, 'garden': 18, 'kitchen': 12,
    'art': 15, 'collectibles': 10, 'antiques': 20,
    'music': 8, 'cds': 5, 'vinyl': 8,
}

# local pickup only
NO_SHIPPING_CATEGORIES = ('automobile', 'car', 'vehicle', 'motorcycle', 'boat')


def calculate_ebay_fees(sale_price: float) -> float:
    """Final value fee plus payment processing, rounded to cents"""
    if not sale_price:
        return 0.0

    if sale_price > HIGH_VALUE_THRESHOLD:
        final_value_fee = min(sale_price * HIGH_VALUE_FEE_PERCENT / 100, HIGH_VALUE_FEE_CAP)
    else:
        final_value_fee = sale_price * FINAL_VALUE_FEE_PERCENT / 100

    payment_fee = sale_price * PAYMENT_FEE_PERCENT / 100 + PAYMENT_FEE_FIXED
    return round(final_value_fee + payment_fee, 2)


def _mentions(text: str, *words: str) -> bool:
    return any(word in text for word in words)


def estimate_shipping(item: ItemDescription) -> float:
    """Rough shipping cost by category, with size hints from model/description"""
    category = (item.category or '').lower()
    brand = (item.brand or '').lower()
    model = (item.model or '').lower()
    description = (item.description or '').lower()

    if category in NO_SHIPPING_CATEGORIES:
        return 0.0

    if category == 'electronics':
        if _mentions(model, 'phone', 'galaxy'):
            return 8.0
        if _mentions(model, 'macbook', 'laptop'):
            return 15.0
        if _mentions(brand, 'nintendo', 'playstation', 'xbox'):
            return 18.0
        return 12.0

    if category in ('tools', 'tool'):
        if _mentions(model, 'drill', 'saw') or 'power' in description:
            return 20.0
        return 15.0

    if category == 'furniture':
        if _mentions(description, 'side table', 'end table', 'nightstand', 'small'):
            return 25.0
        if _mentions(description, 'chair', 'coffee table'):
            return 35.0
        if _mentions(description, 'sofa', 'couch', 'dining', 'dresser'):
            return 75.0
        return 35.0

    if category == 'automotive':
        if _mentions(description, 'filter', 'bulb', 'sensor'):
            return 10.0
        if _mentions(description, 'alternator', 'starter', 'radiator'):
            return 35.0
        if _mentions(description, 'bumper', 'hood', 'door'):
            return 85.0
        if _mentions(description, 'wheel', 'tire'):
            return 45.0
        return 25.0

    if category == 'musical instruments':
        if _mentions(model, 'piano', 'keyboard', 'drum'):
            return 45.0
        if _mentions(model, 'guitar', 'bass'):
            return 25.0
        return 15.0

    return float(SHIPPING_BY_CATEGORY.get(category, DEFAULT_SHIPPING))


@dataclass
class ProfitAnalysis:
    """Net proceeds of selling an item at the suggested price"""
    sale_price: float
    shipping_cost: float
    fees: float

    @property
    def net_profit(self) -> float:
        return self.sale_price - self.fees - self.shipping_cost

    @property
    def margin_percent(self) -> float:
        if self.sale_price <= 0:
            return 0
        return (self.net_profit / self.sale_price) * 100

    @property
    def is_profitable(self) -> bool:
        return self.net_profit > 0

    def to_dict(self) -> dict:
        return {
            'sale_price': round(self.sale_price, 2),
            'shipping': round(self.shipping_cost, 2),
            'fees': round(self.fees, 2),
            'net_profit': round(self.net_profit, 2),
            'margin_percent': round(self.margin_percent, 1),
            'is_profitable': self.is_profitable
        }

    def summary(self) -> str:
        emoji = "💰" if self.is_profitable else "📉"
        return (
            f"{emoji} Sell: ${self.sale_price:.2f} - "
            f"Fees: ${self.fees:.2f} - "
            f"Ship: ${self.shipping_cost:.2f} → "
            f"Net: ${self.net_profit:.2f} ({self.margin_percent:.0f}%)"
        )


def analyze_resale(estimate: PriceEstimate, item: ItemDescription) -> Optional[ProfitAnalysis]:
    """Profit analysis for an estimate, None when there is no suggested price"""
    if estimate.suggested is None:
        return None

    sale_price = float(estimate.suggested)
    return ProfitAnalysis(
        sale_price=sale_price,
        shipping_cost=estimate_shipping(item),
        fees=calculate_ebay_fees(sale_price)
    )
