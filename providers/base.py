from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Union


class ProviderError(Exception):
    """Raised when a search provider cannot return listings"""


@dataclass(frozen=True)
class Price:
    """Marketplace price as returned by the provider (value is not trusted)"""
    value: Union[str, float, int, None]
    currency: str = "USD"


@dataclass(frozen=True)
class Listing:
    """A comparable marketplace listing"""
    title: str
    price: Optional[Price]
    url: str
    condition: Optional[str] = None
    item_id: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class SearchOptions:
    limit: int = 20
    category_id: Optional[str] = None
    condition: Optional[str] = None


class SearchProvider(ABC):
    """Base class for all marketplace search providers"""

    def __init__(self):
        self.name = "base"

    @abstractmethod
    async def search(self, query: str, options: SearchOptions) -> List[Listing]:
        """Search for listings matching query"""
        pass


class StaticProvider(SearchProvider):
    """Serves a fixed list of listings. Useful for demos and offline pricing."""

    def __init__(self, listings: List[Listing]):
        super().__init__()
        self.name = "static"
        self.listings = list(listings)
        self.queries: List[str] = []

    async def search(self, query: str, options: SearchOptions) -> List[Listing]:
        self.queries.append(query)
        return self.listings[:options.limit]
