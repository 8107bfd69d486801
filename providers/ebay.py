import logging
from typing import List, Optional

import httpx

from .base import SearchProvider, SearchOptions, Listing, ProviderError
from .config import EbayConfig
from .ebay_auth import EbayTokenManager
from .ebay_parser import parse_item_summaries, condition_filter

logger = logging.getLogger(__name__)

SEARCH_PATH = "/buy/browse/v1/item_summary/search"


class EbayBrowseProvider(SearchProvider):
    """Searches active eBay listings through the Browse API"""

    def __init__(
        self,
        config: EbayConfig,
        token_manager: Optional[EbayTokenManager] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__()
        self.name = "ebay"
        self.config = config
        self.http_client = http_client
        self.token_manager = token_manager or EbayTokenManager(config, http_client=http_client)

    async def search(self, query: str, options: SearchOptions) -> List[Listing]:
        """Search eBay for listings matching query"""
        token = await self.token_manager.get_token()

        params = {
            'q': query,
            'limit': str(options.limit),
        }
        if options.category_id:
            params['category_ids'] = options.category_id
        filter_str = condition_filter(options.condition)
        if filter_str:
            params['filter'] = filter_str

        headers = {
            'Authorization': f'Bearer {token}',
            'X-EBAY-C-MARKETPLACE-ID': self.config.marketplace_id,
        }

        url = f"{self.config.api_url}{SEARCH_PATH}"
        logger.info("Searching eBay for: %s", query)

        try:
            if self.http_client is not None:
                response = await self.http_client.get(url, params=params, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"Search failed: {e}") from e

        if response.status_code == 401:
            self.token_manager.invalidate()

        if response.status_code != 200:
            raise ProviderError(f"Search failed: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Search failed: malformed response ({e})") from e
        if not isinstance(data, dict):
            raise ProviderError("Search failed: malformed response")

        listings = parse_item_summaries(data)
        logger.info("eBay returned %d listings for: %s", len(listings), query)
        return listings
