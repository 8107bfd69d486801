"""
eBay configuration

Passed explicitly to the token manager and the Browse provider. Nothing here
is global: build one with EbayConfig(...) or EbayConfig.from_env().
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SCOPE = "https://api.ebay.com/oauth/api_scope"

API_URLS = {
    "production": "https://api.ebay.com",
    "sandbox": "https://api.sandbox.ebay.com",
}


class ConfigError(ValueError):
    """Missing or invalid eBay configuration"""


@dataclass(frozen=True)
class EbayConfig:
    client_id: str = ""
    client_secret: str = ""
    environment: str = "production"
    marketplace_id: str = "EBAY_US"
    scope: str = DEFAULT_SCOPE
    refresh_token: Optional[str] = None
    timeout: float = 15.0

    @property
    def api_url(self) -> str:
        return API_URLS.get(self.environment, API_URLS["production"])

    @property
    def token_url(self) -> str:
        return f"{self.api_url}/identity/v1/oauth2/token"

    def validate(self) -> "EbayConfig":
        if not self.client_id or not self.client_secret:
            raise ConfigError("EBAY_CLIENT_ID and EBAY_CLIENT_SECRET are required")
        if self.environment not in API_URLS:
            raise ConfigError(f"Unknown eBay environment: {self.environment}")
        return self

    @classmethod
    def from_env(cls) -> "EbayConfig":
        """Load from .env and .env.local (the latter wins)"""
        load_dotenv(".env")
        load_dotenv(".env.local", override=True)

        timeout = os.getenv("EBAY_TIMEOUT", "")
        try:
            timeout = float(timeout) if timeout else 15.0
        except ValueError:
            raise ConfigError(f"EBAY_TIMEOUT must be a number, got {timeout!r}")

        return cls(
            client_id=os.getenv("EBAY_CLIENT_ID", ""),
            client_secret=os.getenv("EBAY_CLIENT_SECRET", ""),
            environment=os.getenv("EBAY_ENVIRONMENT", "production").lower(),
            marketplace_id=os.getenv("EBAY_MARKETPLACE_ID", "EBAY_US"),
            refresh_token=os.getenv("EBAY_REFRESH_TOKEN") or None,
            timeout=timeout,
        )
