"""
Pytest configuration and shared fixtures
Provides common test fixtures for all test modules
"""

import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis_aioredis

from catalog_engine.database.settings_storage import InMemorySettingsStorage
from catalog_engine.models.catalog import AvailabilityPatch, SearchData, SearchResponse
from catalog_engine.services.catalog.session import build_catalog_session
from catalog_engine.services.clients.availability_client import AvailabilityService
from catalog_engine.services.clients.cart_client import CartService
from catalog_engine.services.clients.search_client import SearchService
from catalog_engine.services.config.configuration_service import ConfigurationService


def make_product(index: int, **overrides) -> Dict[str, Any]:
    """Raw search-service product record"""
    product = {
        "product_id": index,
        "external_id": f"EXT-{index:04d}",
        "sku": f"SKU{index}",
        "name": f"Drill {index}",
        "brand_name": "Acme" if index % 2 else "Bosch",
        "series_name": "Pro",
        "price": {"base": 120.0, "final": 100.0, "has_special": True},
        "available": True,
        "status": "active",
        "min_sale": 1,
        "unit": "шт",
    }
    product.update(overrides)
    return product


class FakeSearchService(SearchService):
    """
    In-memory search collaborator

    Honors page/limit and brand_name; records every parameter bag it receives.
    Set `hold` to an asyncio.Event to park the next call until it is set.
    """

    def __init__(self, total: int = 45):
        self.catalog = [make_product(i) for i in range(1, total + 1)]
        self.calls: List[Dict[str, Any]] = []
        self.fail: Optional[Exception] = None
        self.unsuccessful = False
        self.hold: Optional[asyncio.Event] = None

    async def search(self, params: Dict[str, Any]) -> SearchResponse:
        self.calls.append(dict(params))

        gate, self.hold = self.hold, None
        if gate is not None:
            await gate.wait()

        if self.fail is not None:
            raise self.fail
        if self.unsuccessful:
            return SearchResponse(success=False, error="index unavailable")

        items = self.catalog
        if params.get("brand_name"):
            items = [p for p in items if p["brand_name"] == params["brand_name"]]

        start = (params["page"] - 1) * params["limit"]
        page = items[start:start + params["limit"]]
        return SearchResponse(success=True, data=SearchData.model_validate({"products": page, "total": len(items)}))


class FakeAvailabilityService(AvailabilityService):
    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.cache_clears = 0
        self.cleared_cities: List[Optional[int]] = []
        self.fail: Optional[Exception] = None

    async def load_availability(self, product_ids: List[str], city_id: int) -> List[AvailabilityPatch]:
        self.calls.append({"product_ids": list(product_ids), "city_id": city_id})
        if self.fail is not None:
            raise self.fail
        return [AvailabilityPatch(product_id=pid, quantity=7, delivery_text="Завтра") for pid in product_ids]

    def clear_cache(self, city_id: Optional[int] = None) -> None:
        self.cache_clears += 1
        self.cleared_cities.append(city_id)


@pytest.fixture
def config_service():
    """ConfigurationService over the packaged catalog config, fresh cache per test"""
    service = ConfigurationService()
    service.load_config.cache_clear()
    return service


@pytest.fixture
def settings_storage():
    return InMemorySettingsStorage(ttl=120)


@pytest.fixture
def search_service():
    return FakeSearchService()


@pytest.fixture
def availability_service():
    return FakeAvailabilityService()


@pytest.fixture
def cart_service():
    cart = AsyncMock(spec=CartService)
    cart.add_to_cart = AsyncMock(return_value=None)
    return cart


@pytest.fixture
def make_session(settings_storage, search_service, cart_service, availability_service, config_service):
    """Factory building a wired catalog session over the fake collaborators"""

    def _make(view_mode: str = "grid", url: str = "/shop", client_id: str = "client-1", **kwargs):
        return build_catalog_session(
            view_mode,
            client_id,
            settings_storage,
            search_service,
            cart=cart_service,
            availability=availability_service,
            url=url,
            config_service=config_service,
            session_id=kwargs.pop("session_id", "session-1"),
            **kwargs,
        )

    return _make


@pytest_asyncio.fixture
async def fake_redis_client():
    """Provide a fakeredis asyncio client for Redis-backed tests."""
    client = fakeredis_aioredis.FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture
def mock_transport_factory():
    """Build an httpx.AsyncClient whose requests are answered by a handler"""

    def _factory(handler, base_url: str = "https://shop.test"):
        return httpx.AsyncClient(base_url=base_url, transport=httpx.MockTransport(handler))

    return _factory


# Auto-use fixtures
@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset singleton instances before each test
    Ensures test isolation
    """
    import catalog_engine.database.settings_storage as storage_module
    import catalog_engine.services.catalog.session as session_module
    import catalog_engine.services.config.configuration_service as config_module

    config_module._config_service = None
    session_module._registry = None
    original_redis = storage_module._redis_settings_storage
    original_memory = storage_module._in_memory_settings_storage

    yield

    config_module._config_service = None
    session_module._registry = None
    storage_module._redis_settings_storage = original_redis
    storage_module._in_memory_settings_storage = original_memory
