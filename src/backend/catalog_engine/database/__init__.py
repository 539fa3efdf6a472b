"""Database package - Redis connection and settings storage"""

from .database import (
    RedisManager,
    redis_manager,
    init_redis,
    get_redis_client,
    close_redis,
)

from .persistence_adapter import PersistenceAdapter

from .settings_storage import (
    SettingKey,
    SettingsStorage,
    InMemorySettingsStorage,
    RedisSettingsStorage,
    get_settings_storage,
    init_settings_storage,
)

__all__ = [
    "RedisManager",
    "redis_manager",
    "init_redis",
    "get_redis_client",
    "close_redis",
    "PersistenceAdapter",
    "SettingKey",
    "SettingsStorage",
    "InMemorySettingsStorage",
    "RedisSettingsStorage",
    "get_settings_storage",
    "init_settings_storage",
]
