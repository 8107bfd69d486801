"""
Tests for the eBay Browse provider, token manager and response parser.

HTTP is served by httpx.MockTransport; nothing leaves the process.
"""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from pricing import ItemDescription, Condition, PriceEstimator
from providers import (
    EbayConfig,
    EbayBrowseProvider,
    EbayTokenManager,
    SearchOptions,
    ProviderError,
    AuthError,
    ConfigError
)
from providers.ebay_parser import parse_item_summaries, parse_item_summary, condition_filter

CONFIG = EbayConfig(client_id="app-id", client_secret="cert-id")

SEARCH_BODY = {
    "total": 3,
    "itemSummaries": [
        {
            "itemId": "v1|111|0",
            "title": "Bamboo Side Table",
            "price": {"value": "45.00", "currency": "USD"},
            "itemWebUrl": "https://www.ebay.com/itm/111",
            "condition": "Used",
            "image": {"imageUrl": "https://i.ebayimg.com/111.jpg"},
        },
        {
            "itemId": "v1|222|0",
            "title": "Bamboo End Table",
            "price": {"value": "60.00", "currency": "USD"},
            "itemWebUrl": "https://www.ebay.com/itm/222",
            "condition": "Pre-owned",
        },
        {
            "itemId": "v1|333|0",
            "title": "Small Bamboo Table",
            "price": {"value": "30.00", "currency": "USD"},
            "itemWebUrl": "https://www.ebay.com/itm/333",
        },
    ],
}


class FakeEbay:
    """Routes token and search requests, recording what was asked"""

    def __init__(self, search_status=200, search_body=None, token_status=200, expires_in=7200):
        self.search_status = search_status
        self.search_body = SEARCH_BODY if search_body is None else search_body
        self.token_status = token_status
        self.expires_in = expires_in
        self.token_requests = []
        self.search_requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/identity/v1/oauth2/token":
            self.token_requests.append(request)
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_client")
            return httpx.Response(200, json={
                "access_token": f"token-{len(self.token_requests)}",
                "expires_in": self.expires_in,
                "token_type": "Application Access Token",
            })

        self.search_requests.append(request)
        if self.search_status != 200:
            return httpx.Response(self.search_status, text="Internal error")
        return httpx.Response(200, json=self.search_body)


def run_search(fake, query="bamboo side table", options=None, config=CONFIG, clock=None, searches=1):
    """Run one or more searches against the fake; returns (results, provider)"""

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake)) as client:
            manager = EbayTokenManager(config, http_client=client, clock=clock or (lambda: 1000.0))
            provider = EbayBrowseProvider(config, token_manager=manager, http_client=client)
            results = []
            for _ in range(searches):
                results.append(await provider.search(query, options or SearchOptions()))
            return results, provider

    return asyncio.run(go())


class TestEbayConfig:

    def test_urls(self):
        assert CONFIG.api_url == "https://api.ebay.com"
        assert CONFIG.token_url == "https://api.ebay.com/identity/v1/oauth2/token"

        sandbox = EbayConfig(client_id="a", client_secret="b", environment="sandbox")
        assert sandbox.token_url == "https://api.sandbox.ebay.com/identity/v1/oauth2/token"

    def test_validate_requires_credentials(self):
        with pytest.raises(ConfigError):
            EbayConfig().validate()

    def test_validate_rejects_unknown_environment(self):
        with pytest.raises(ConfigError):
            EbayConfig(client_id="a", client_secret="b", environment="staging").validate()

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("EBAY_CLIENT_ID", "env-id")
        monkeypatch.setenv("EBAY_CLIENT_SECRET", "env-secret")
        monkeypatch.setenv("EBAY_ENVIRONMENT", "Sandbox")
        monkeypatch.setenv("EBAY_TIMEOUT", "5")
        monkeypatch.delenv("EBAY_REFRESH_TOKEN", raising=False)

        config = EbayConfig.from_env()

        assert config.client_id == "env-id"
        assert config.environment == "sandbox"
        assert config.timeout == 5.0
        assert config.refresh_token is None
        assert config.validate() is config

    def test_from_env_bad_timeout(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("EBAY_TIMEOUT", "soon")
        with pytest.raises(ConfigError):
            EbayConfig.from_env()


class TestParser:

    def test_parse_summaries(self):
        listings = parse_item_summaries(SEARCH_BODY)

        assert [l.title for l in listings] == ["Bamboo Side Table", "Bamboo End Table", "Small Bamboo Table"]
        assert listings[0].price.value == "45.00"
        assert listings[0].price.currency == "USD"
        assert listings[0].url == "https://www.ebay.com/itm/111"
        assert listings[0].image_url == "https://i.ebayimg.com/111.jpg"
        assert listings[2].condition is None

    def test_no_summaries(self):
        assert parse_item_summaries({"total": 0}) == []
        assert parse_item_summaries({"itemSummaries": None}) == []

    def test_summary_without_title_skipped(self):
        assert parse_item_summary({"price": {"value": "10"}}) is None
        assert parse_item_summary("garbage") is None

    def test_missing_price_kept_as_none(self):
        listing = parse_item_summary({"title": "Lamp", "itemWebUrl": "https://www.ebay.com/itm/9"})
        assert listing.price is None

    @pytest.mark.parametrize("condition, expected", [
        ("good", "conditionIds:{3000}"),
        ("Like New", "conditionIds:{1500}"),
        ("for-parts", "conditionIds:{7000}"),
        ("2500", "conditionIds:{2500}"),
        ("mint", None),
        (None, None),
    ])
    def test_condition_filter(self, condition, expected):
        assert condition_filter(condition) == expected


class TestTokenManager:

    def test_client_credentials_request(self):
        fake = FakeEbay()
        run_search(fake)

        request = fake.token_requests[0]
        body = parse_qs(request.content.decode())
        assert body["grant_type"] == ["client_credentials"]
        assert body["scope"] == ["https://api.ebay.com/oauth/api_scope"]
        assert request.headers["Authorization"].startswith("Basic ")

    def test_refresh_token_grant(self):
        fake = FakeEbay()
        config = EbayConfig(client_id="a", client_secret="b", refresh_token="refresh-123")
        run_search(fake, config=config)

        body = parse_qs(fake.token_requests[0].content.decode())
        assert body["grant_type"] == ["refresh_token"]
        assert body["refresh_token"] == ["refresh-123"]

    def test_token_is_cached_until_expiry(self):
        fake = FakeEbay()
        run_search(fake, searches=3)

        assert len(fake.token_requests) == 1
        assert all(r.headers["Authorization"] == "Bearer token-1" for r in fake.search_requests)

    def test_expired_token_is_replaced(self):
        fake = FakeEbay(expires_in=120)
        now = {"t": 1000.0}

        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(fake)) as client:
                manager = EbayTokenManager(CONFIG, http_client=client, clock=lambda: now["t"])
                first = await manager.get_token()
                assert manager.expires_at == 1060.0
                now["t"] = 1059.0
                still = await manager.get_token()
                now["t"] = 1060.0
                second = await manager.get_token()
                return first, still, second

        first, still, second = asyncio.run(go())

        assert first == still == "token-1"
        assert second == "token-2"
        assert len(fake.token_requests) == 2

    def test_token_failure(self):
        fake = FakeEbay(token_status=401)
        with pytest.raises(AuthError, match="Token request failed: 401 - invalid_client"):
            run_search(fake)
        assert fake.search_requests == []

    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json=["token"]),
        httpx.Response(200, json={"access_token": "t", "expires_in": "soon"}),
    ])
    def test_malformed_token_response(self, response):
        async def go():
            transport = httpx.MockTransport(lambda request: response)
            async with httpx.AsyncClient(transport=transport) as client:
                manager = EbayTokenManager(CONFIG, http_client=client)
                with pytest.raises(AuthError, match="Token request failed"):
                    await manager.get_token()
                return manager

        manager = asyncio.run(go())
        assert not manager.is_valid

    def test_invalidate(self):
        manager = EbayTokenManager(CONFIG)
        manager.invalidate()
        assert not manager.is_valid


class TestEbayBrowseProvider:

    def test_search_params(self):
        fake = FakeEbay()
        options = SearchOptions(limit=20, category_id="20488", condition="good")
        run_search(fake, options=options)

        request = fake.search_requests[0]
        assert request.url.path == "/buy/browse/v1/item_summary/search"
        assert request.url.params["q"] == "bamboo side table"
        assert request.url.params["limit"] == "20"
        assert request.url.params["category_ids"] == "20488"
        assert request.url.params["filter"] == "conditionIds:{3000}"
        assert request.headers["X-EBAY-C-MARKETPLACE-ID"] == "EBAY_US"

    def test_optional_params_omitted(self):
        fake = FakeEbay()
        run_search(fake)

        params = fake.search_requests[0].url.params
        assert "category_ids" not in params
        assert "filter" not in params

    def test_returns_listings(self):
        results, _ = run_search(FakeEbay())
        assert len(results[0]) == 3

    def test_server_error(self):
        with pytest.raises(ProviderError, match="Search failed: 500 - Internal error"):
            run_search(FakeEbay(search_status=500))

    def test_unauthorized_invalidates_token(self):
        fake = FakeEbay(search_status=401)

        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(fake)) as client:
                manager = EbayTokenManager(CONFIG, http_client=client, clock=lambda: 1000.0)
                provider = EbayBrowseProvider(CONFIG, token_manager=manager, http_client=client)
                with pytest.raises(ProviderError):
                    await provider.search("lamp", SearchOptions())
                return manager

        manager = asyncio.run(go())
        assert not manager.is_valid

    def test_transport_error(self):
        def handler(request):
            if request.url.path.endswith("/token"):
                return httpx.Response(200, json={"access_token": "t", "expires_in": 7200})
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderError, match="connection refused"):
            run_search(handler)

    def test_malformed_body(self):
        def handler(request):
            if request.url.path.endswith("/token"):
                return httpx.Response(200, json={"access_token": "t", "expires_in": 7200})
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(ProviderError, match="malformed response"):
            run_search(handler)


class TestEstimatorWithEbay:

    def _estimate(self, fake, item):
        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(fake)) as client:
                provider = EbayBrowseProvider(CONFIG, http_client=client)
                return await PriceEstimator(provider).estimate(item)

        return asyncio.run(go())

    def test_bamboo_table(self):
        fake = FakeEbay()
        item = ItemDescription(
            category="furniture",
            brand="Unknown",
            model="Bamboo side table",
            condition=Condition(rating="good"),
            description="The side table shows some signs of wear, including scratches"
        )

        result = self._estimate(fake, item)

        assert fake.search_requests[0].url.params["q"] == "bamboo side table table wear"
        assert result.source == "ok"
        assert result.sample_size == 3
        assert result.price_range.median == 45.0
        # 45 * 0.85 = 38.25
        assert result.suggested == 38
        assert result.comparable_items[0].price == 45.0

    def test_provider_failure_becomes_estimate(self):
        result = self._estimate(FakeEbay(search_status=503), ItemDescription(category="tools"))

        assert result.suggested is None
        assert result.confidence == "low"
        assert result.source == "error"
        assert result.reason.startswith("Search failed: 503")
