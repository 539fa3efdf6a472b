"""
Unit tests for catalog settings storage backends
"""

import pytest

from catalog_engine.database import settings_storage
from catalog_engine.database.settings_storage import (
    InMemorySettingsStorage,
    RedisSettingsStorage,
    SettingKey,
)


class TestInMemorySettingsStorage:

    @pytest.mark.asyncio
    async def test_durable_settings_roundtrip(self):
        storage = InMemorySettingsStorage()

        await storage.set_setting("client-1", SettingKey.PAGE_SIZE, "50")

        assert await storage.get_setting("client-1", SettingKey.PAGE_SIZE) == "50"
        assert await storage.get_setting("client-1", SettingKey.SORT) is None
        assert await storage.get_setting("client-2", SettingKey.PAGE_SIZE) is None

    @pytest.mark.asyncio
    async def test_replace_prunes_stale_filters(self):
        storage = InMemorySettingsStorage()
        await storage.replace_session_filters("s1", {"brand_name": "Acme", "series_name": "Pro"})

        await storage.replace_session_filters("s1", {"series_name": "Max"})

        assert await storage.get_session_filters("s1") == {"series_name": "Max"}

    @pytest.mark.asyncio
    async def test_session_entries_expire(self):
        storage = InMemorySettingsStorage(ttl=10)
        await storage.replace_session_filters("s1", {"brand_name": "Acme"})

        # Age the entry past the TTL
        stored_at, filters = storage._sessions["s1"]
        storage._sessions["s1"] = (stored_at - 11, filters)

        assert await storage.get_session_filters("s1") == {}
        assert "s1" not in storage._sessions

    @pytest.mark.asyncio
    async def test_rejects_unsafe_identifiers(self):
        storage = InMemorySettingsStorage()

        with pytest.raises(ValueError):
            await storage.set_setting("client:*", SettingKey.SORT, "name")
        with pytest.raises(ValueError):
            await storage.get_session_filters("")


class TestRedisSettingsStorage:

    @pytest.mark.asyncio
    async def test_durable_settings_have_no_ttl(self, fake_redis_client):
        storage = RedisSettingsStorage(fake_redis_client, ttl=120)

        await storage.set_setting("client-1", SettingKey.CITY_ID, "4")

        assert await storage.get_setting("client-1", SettingKey.CITY_ID) == "4"
        assert await fake_redis_client.ttl("catalog:settings:client:client-1") == -1

    @pytest.mark.asyncio
    async def test_replace_prunes_stale_filters(self, fake_redis_client):
        storage = RedisSettingsStorage(fake_redis_client, ttl=120)
        await storage.replace_session_filters("s1", {"brand_name": "Acme", "category": "drills"})

        await storage.replace_session_filters("s1", {"category": "saws"})

        assert await storage.get_session_filters("s1") == {"category": "saws"}
        assert 0 < await fake_redis_client.ttl("catalog:settings:session:s1") <= 120

    @pytest.mark.asyncio
    async def test_replace_with_nothing_clears_session(self, fake_redis_client):
        storage = RedisSettingsStorage(fake_redis_client, ttl=120)
        await storage.replace_session_filters("s1", {"brand_name": "Acme"})

        await storage.replace_session_filters("s1", {})

        assert await storage.get_session_filters("s1") == {}

    @pytest.mark.asyncio
    async def test_delete_session(self, fake_redis_client):
        storage = RedisSettingsStorage(fake_redis_client)
        await storage.replace_session_filters("s1", {"brand_name": "Acme"})

        await storage.delete_session("s1")

        assert await fake_redis_client.exists("catalog:settings:session:s1") == 0


class TestGlobalStorage:

    def test_falls_back_to_memory_without_client(self):
        storage = settings_storage.init_settings_storage(None, ttl=60)

        assert isinstance(storage, InMemorySettingsStorage)
        assert settings_storage.get_settings_storage() is storage

    @pytest.mark.asyncio
    async def test_uses_redis_when_available(self, fake_redis_client, monkeypatch):
        monkeypatch.setenv("ENABLE_REDIS_CACHING", "true")

        storage = settings_storage.init_settings_storage(fake_redis_client, ttl=60)

        assert isinstance(storage, RedisSettingsStorage)
        assert settings_storage.get_settings_storage() is storage

    @pytest.mark.asyncio
    async def test_disabled_flag_forces_memory(self, fake_redis_client, monkeypatch):
        monkeypatch.setenv("ENABLE_REDIS_CACHING", "false")

        storage = settings_storage.init_settings_storage(fake_redis_client, ttl=60)

        assert isinstance(storage, InMemorySettingsStorage)
