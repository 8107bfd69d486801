from .base import SearchProvider, SearchOptions, Listing, Price, ProviderError, StaticProvider
from .config import EbayConfig, ConfigError
from .ebay_auth import EbayTokenManager, AuthError
from .ebay import EbayBrowseProvider

__all__ = [
    'SearchProvider',
    'SearchOptions',
    'Listing',
    'Price',
    'ProviderError',
    'StaticProvider',
    'EbayConfig',
    'ConfigError',
    'EbayTokenManager',
    'AuthError',
    'EbayBrowseProvider'
]
