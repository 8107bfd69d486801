from dataclasses import dataclass
from typing import Optional, Union

Rating = Union[str, int, float, None]


@dataclass(frozen=True)
class Condition:
    """Physical condition of the item being priced"""
    rating: Rating = None  # label ("good") or 1-10 score
    usable_as_is: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class ItemDescription:
    """What we know about the item. Every field is optional."""
    brand: Optional[str] = None
    model: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    condition: Optional[Condition] = None

    @property
    def rating(self) -> Rating:
        return self.condition.rating if self.condition else None

    @property
    def usable_as_is(self) -> bool:
        return self.condition.usable_as_is if self.condition else True

    @classmethod
    def from_dict(cls, data: dict) -> "ItemDescription":
        """Build from an analysis dict (camelCase or snake_case keys)"""
        condition = data.get('condition')
        if isinstance(condition, dict):
            usable = condition.get('usableAsIs', condition.get('usable_as_is', True))
            condition = Condition(
                rating=condition.get('rating'),
                usable_as_is=usable is not False,
                description=condition.get('description')
            )
        elif condition is not None:
            condition = Condition(rating=condition)

        return cls(
            brand=data.get('brand'),
            model=data.get('model'),
            category=data.get('category'),
            description=data.get('description'),
            condition=condition
        )
