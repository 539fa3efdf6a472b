"""
Catalog settings storage with Redis and in-memory backends.

Two scopes are stored:
- Durable settings (per client): page size, sort key, view preference, city fallback.
  Closed key vocabulary, survives across sessions.
- Session settings (per catalog session): one entry per active structured filter.
  Expires with the session TTL.
"""

from __future__ import annotations

import logging
import os
import re
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# Allow alphanumeric, hyphens, underscores (safe for Redis keys)
_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,100}$")


class SettingKey(str, Enum):
    """Closed vocabulary of durable settings"""
    PAGE_SIZE = "itemsPerPage"
    SORT = "productSort"
    VIEW_MODE = "productView"
    CITY_ID = "selected_city_id"


def _validate_identifier(identifier: str, field_name: str = "identifier") -> str:
    """
    Validate client/session identifiers for Redis key construction.

    Raises:
        ValueError: If identifier is empty or contains unsafe characters
    """
    if not identifier:
        raise ValueError(f"{field_name} cannot be empty")

    if not isinstance(identifier, str):
        raise ValueError(f"{field_name} must be a string, got {type(identifier).__name__}")

    if not _ID_PATTERN.match(identifier):
        raise ValueError(
            f"{field_name} contains invalid characters. "
            f"Only alphanumeric, hyphens, and underscores allowed (max 100 chars)"
        )

    return identifier


class SettingsStorage(ABC):
    """Backend interface shared by the Redis and in-memory implementations"""

    @abstractmethod
    async def get_setting(self, client_id: str, key: SettingKey) -> Optional[str]:
        ...

    @abstractmethod
    async def set_setting(self, client_id: str, key: SettingKey, value: str) -> None:
        ...

    @abstractmethod
    async def get_session_filters(self, session_id: str) -> Dict[str, str]:
        ...

    @abstractmethod
    async def replace_session_filters(self, session_id: str, filters: Dict[str, str]) -> None:
        """Write every filter and remove previously stored keys no longer present"""
        ...

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        ...


class InMemorySettingsStorage(SettingsStorage):
    """
    In-memory fallback when Redis is unavailable or disabled.

    Session entries expire lazily on access once older than the TTL.
    """

    def __init__(self, ttl: int = 86400):
        self.ttl = ttl
        self._settings: Dict[str, Dict[str, str]] = {}
        self._sessions: Dict[str, Tuple[float, Dict[str, str]]] = {}

    async def get_setting(self, client_id: str, key: SettingKey) -> Optional[str]:
        return self._settings.get(_validate_identifier(client_id, "client_id"), {}).get(key.value)

    async def set_setting(self, client_id: str, key: SettingKey, value: str) -> None:
        client_id = _validate_identifier(client_id, "client_id")
        self._settings.setdefault(client_id, {})[key.value] = str(value)
        logger.debug("Saved setting %s for client %s in memory", key.value, client_id)

    async def get_session_filters(self, session_id: str) -> Dict[str, str]:
        session_id = _validate_identifier(session_id, "session_id")
        entry = self._sessions.get(session_id)
        if entry is None:
            return {}

        stored_at, filters = entry
        if self.ttl > 0 and time.monotonic() - stored_at > self.ttl:
            self._sessions.pop(session_id, None)
            logger.debug("Session %s settings expired", session_id)
            return {}

        return dict(filters)

    async def replace_session_filters(self, session_id: str, filters: Dict[str, str]) -> None:
        session_id = _validate_identifier(session_id, "session_id")
        self._sessions[session_id] = (time.monotonic(), dict(filters))

    async def delete_session(self, session_id: str) -> None:
        self._sessions.pop(_validate_identifier(session_id, "session_id"), None)


class RedisSettingsStorage(SettingsStorage):
    """
    Redis-backed settings storage.

    Layout:
    - {namespace}:client:{client_id}  hash of durable settings (no TTL)
    - {namespace}:session:{session_id} hash of filter key/value pairs (TTL refreshed on write)
    """

    def __init__(self, redis_client: Redis, ttl: int = 86400, *, namespace: str = "catalog:settings"):
        self.redis = redis_client
        self.ttl = ttl
        self.namespace = namespace.rstrip(":")

    def _client_key(self, client_id: str) -> str:
        return f"{self.namespace}:client:{_validate_identifier(client_id, 'client_id')}"

    def _session_key(self, session_id: str) -> str:
        return f"{self.namespace}:session:{_validate_identifier(session_id, 'session_id')}"

    async def get_setting(self, client_id: str, key: SettingKey) -> Optional[str]:
        return await self.redis.hget(self._client_key(client_id), key.value)

    async def set_setting(self, client_id: str, key: SettingKey, value: str) -> None:
        await self.redis.hset(self._client_key(client_id), key.value, str(value))
        logger.debug("Saved setting %s for client %s", key.value, client_id)

    async def get_session_filters(self, session_id: str) -> Dict[str, str]:
        return dict(await self.redis.hgetall(self._session_key(session_id)))

    async def replace_session_filters(self, session_id: str, filters: Dict[str, str]) -> None:
        session_key = self._session_key(session_id)
        existing = await self.redis.hkeys(session_key)
        stale = [key for key in existing if key not in filters]

        async with self.redis.pipeline(transaction=True) as pipe:
            if stale:
                pipe.hdel(session_key, *stale)
            if filters:
                pipe.hset(session_key, mapping={k: str(v) for k, v in filters.items()})
                if self.ttl > 0:
                    pipe.expire(session_key, self.ttl)
            await pipe.execute()

        if stale:
            logger.debug("Pruned stale session filters %s for %s", stale, session_id)

    async def delete_session(self, session_id: str) -> None:
        await self.redis.delete(self._session_key(session_id))


# Global storage instances (initialized in main.py)
_redis_settings_storage: Optional[RedisSettingsStorage] = None
_in_memory_settings_storage: Optional[InMemorySettingsStorage] = None


def _redis_disabled() -> bool:
    """Check if Redis caching has been explicitly disabled."""
    return os.getenv("ENABLE_REDIS_CACHING", "true").lower() == "false"


def _get_in_memory_settings_storage(ttl: int = 86400) -> InMemorySettingsStorage:
    """Lazily initialize and return the in-memory storage."""
    global _in_memory_settings_storage

    if _in_memory_settings_storage is None:
        _in_memory_settings_storage = InMemorySettingsStorage(ttl=ttl)
        logger.info("Initialized in-memory settings storage fallback")

    return _in_memory_settings_storage


def get_settings_storage() -> Union[RedisSettingsStorage, InMemorySettingsStorage]:
    """
    Get settings storage instance.

    Returns Redis-backed storage when initialized, otherwise the in-memory fallback.
    """
    if _redis_settings_storage is not None:
        return _redis_settings_storage

    if not _redis_disabled():
        logger.debug("Redis settings storage not initialized, using in-memory storage")

    return _get_in_memory_settings_storage()


def init_settings_storage(redis_client: Optional[Redis], ttl: int = 86400) -> SettingsStorage:
    """Initialize global settings storage instance."""
    global _redis_settings_storage

    if redis_client is None or _redis_disabled():
        _redis_settings_storage = None
        logger.info("Redis client unavailable or disabled; using in-memory settings storage")
        return _get_in_memory_settings_storage(ttl=ttl)

    _redis_settings_storage = RedisSettingsStorage(redis_client, ttl)
    logger.info("Redis settings storage initialized (TTL: %ss)", ttl)
    return _redis_settings_storage
