"""
eBay OAuth token management

Application tokens come from the client credentials grant; when a refresh
token is configured the refresh_token grant is used instead. The cached
token carries its own expiry timestamp which is checked on every use.
"""

import base64
import logging
import time
from typing import Callable, Optional

import httpx

from .base import ProviderError
from .config import EbayConfig

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 7200
EXPIRY_MARGIN = 60  # seconds shaved off eBay's expires_in


class AuthError(ProviderError):
    """Token request rejected or unusable"""


class EbayTokenManager:
    """Fetches and caches an eBay access token"""

    def __init__(
        self,
        config: EbayConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time
    ):
        self.config = config
        self.http_client = http_client
        self.clock = clock
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at

    @property
    def is_valid(self) -> bool:
        return self._token is not None and self.clock() < self._expires_at

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0.0

    async def get_token(self) -> str:
        """Return the cached token, requesting a new one once it has expired"""
        if self.is_valid:
            return self._token

        data = self._grant()
        response = await self._post(data)

        if response.status_code != 200:
            raise AuthError(f"Token request failed: {response.status_code} - {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthError("Token request failed: malformed response") from e
        if not isinstance(payload, dict):
            raise AuthError("Token request failed: malformed response")

        token = payload.get("access_token")
        if not token:
            raise AuthError("Token request failed: no access_token in response")

        try:
            expires_in = int(payload.get("expires_in", DEFAULT_EXPIRES_IN))
        except (TypeError, ValueError) as e:
            raise AuthError(f"Token request failed: bad expires_in {payload.get('expires_in')!r}") from e
        self._token = token
        self._expires_at = self.clock() + max(expires_in - EXPIRY_MARGIN, 0)

        logger.info("eBay %s token acquired, expires in %ds", data["grant_type"], expires_in)
        return token

    def _grant(self) -> dict:
        if self.config.refresh_token:
            return {
                "grant_type": "refresh_token",
                "refresh_token": self.config.refresh_token,
                "scope": self.config.scope,
            }
        return {
            "grant_type": "client_credentials",
            "scope": self.config.scope,
        }

    def _headers(self) -> dict:
        credentials = f"{self.config.client_id}:{self.config.client_secret}"
        encoded = base64.b64encode(credentials.encode()).decode()
        return {
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": f"Basic {encoded}",
        }

    async def _post(self, data: dict) -> httpx.Response:
        try:
            if self.http_client is not None:
                return await self.http_client.post(
                    self.config.token_url, headers=self._headers(), data=data
                )
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                return await client.post(
                    self.config.token_url, headers=self._headers(), data=data
                )
        except httpx.HTTPError as e:
            raise AuthError(f"Token request failed: {e}") from e
