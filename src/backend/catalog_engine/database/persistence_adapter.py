"""
Persistence Adapter

Binds a settings storage backend to one client (durable scope) and one catalog
session (session scope). The store depends on this interface only.
"""

import logging
from typing import Dict, Iterable, Optional

from .settings_storage import SettingKey, SettingsStorage

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    """get/set over the closed durable key vocabulary plus session-scoped filters"""

    def __init__(self, storage: SettingsStorage, client_id: str, session_id: str):
        self.storage = storage
        self.client_id = client_id
        self.session_id = session_id

    async def get(self, key: SettingKey) -> Optional[str]:
        return await self.storage.get_setting(self.client_id, key)

    async def set(self, key: SettingKey, value) -> None:
        await self.storage.set_setting(self.client_id, key, str(value))

    async def get_filters(self) -> Dict[str, str]:
        """Session filters, minus any entry with an empty value"""
        filters = await self.storage.get_session_filters(self.session_id)
        return {key: value for key, value in filters.items() if value}

    async def save_filters(self, filters: Dict[str, str]) -> None:
        await self.storage.replace_session_filters(self.session_id, filters)

    async def clear_session(self) -> None:
        await self.storage.delete_session(self.session_id)

    # Typed reads; malformed stored values fall back to the given default

    async def get_int(self, key: SettingKey, default: int, allowed: Optional[Iterable[int]] = None) -> int:
        raw = await self.get(key)
        if raw is None:
            return default

        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Malformed stored value for {key.value}: {raw!r}, using default {default}")
            return default

        if allowed is not None and value not in set(allowed):
            logger.warning(f"Stored {key.value}={value} not in allowed set, using default {default}")
            return default

        return value

    async def get_choice(self, key: SettingKey, default: str, allowed: Optional[Iterable[str]] = None) -> str:
        raw = await self.get(key)
        if not raw:
            return default

        if allowed is not None and raw not in set(allowed):
            logger.warning(f"Stored {key.value}={raw!r} not recognized, using default {default!r}")
            return default

        return raw
