"""
Unit tests for PersistenceAdapter typed reads and session filters
"""

import pytest

from catalog_engine.database.persistence_adapter import PersistenceAdapter
from catalog_engine.database.settings_storage import SettingKey


@pytest.fixture
def adapter(settings_storage):
    return PersistenceAdapter(settings_storage, client_id="client-1", session_id="session-1")


@pytest.mark.asyncio
async def test_get_int_with_missing_value(adapter):
    assert await adapter.get_int(SettingKey.PAGE_SIZE, 20) == 20


@pytest.mark.asyncio
async def test_get_int_with_malformed_value(adapter, caplog):
    await adapter.set(SettingKey.PAGE_SIZE, "twenty")

    assert await adapter.get_int(SettingKey.PAGE_SIZE, 20) == 20
    assert "Malformed stored value" in caplog.text


@pytest.mark.asyncio
async def test_get_int_outside_allowed_set(adapter):
    await adapter.set(SettingKey.PAGE_SIZE, 37)

    assert await adapter.get_int(SettingKey.PAGE_SIZE, 20, allowed=[10, 20, 50, 100]) == 20


@pytest.mark.asyncio
async def test_get_choice(adapter):
    await adapter.set(SettingKey.SORT, "name")
    assert await adapter.get_choice(SettingKey.SORT, "relevance", allowed=["relevance", "name"]) == "name"

    await adapter.set(SettingKey.SORT, "chaos")
    assert await adapter.get_choice(SettingKey.SORT, "relevance", allowed=["relevance", "name"]) == "relevance"


@pytest.mark.asyncio
async def test_filters_drop_empty_values(adapter, settings_storage):
    await settings_storage.replace_session_filters("session-1", {"brand_name": "Acme", "category": ""})

    assert await adapter.get_filters() == {"brand_name": "Acme"}


@pytest.mark.asyncio
async def test_clear_session(adapter):
    await adapter.save_filters({"brand_name": "Acme"})

    await adapter.clear_session()

    assert await adapter.get_filters() == {}
