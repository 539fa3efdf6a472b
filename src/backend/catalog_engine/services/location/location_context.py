"""
Location Context

Ambient "current city" used by the search query and the availability service.
Resolution order: selector value, durable fallback, configured default.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from ...database.settings_storage import SettingKey
from ...database.persistence_adapter import PersistenceAdapter
from ..clients.availability_client import AvailabilityService

logger = logging.getLogger(__name__)

CityListener = Callable[[int], Awaitable[None]]


class LocationContext:
    """
    Tracks the selected city and notifies listeners when it changes.

    A change clears the new city's cached availability before listeners run,
    so the reload they trigger enriches against fresh data.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        availability: Optional[AvailabilityService] = None,
        default_city_id: int = 1,
    ):
        self.persistence = persistence
        self.availability = availability
        self.default_city_id = default_city_id
        self._selector_value: Optional[int] = None
        self._fallback: Optional[int] = None
        self._listeners: List[CityListener] = []

    async def load(self) -> int:
        """Read the durable fallback; malformed values fall back to the default"""
        self._fallback = await self.persistence.get_int(SettingKey.CITY_ID, self.default_city_id)
        return self.city_id

    @property
    def city_id(self) -> int:
        if self._selector_value is not None:
            return self._selector_value
        if self._fallback is not None:
            return self._fallback
        return self.default_city_id

    def subscribe(self, listener: CityListener) -> None:
        self._listeners.append(listener)

    async def change_city(self, city_id: int) -> bool:
        """
        Select a new city.

        Returns:
            True if the city changed and listeners were notified
        """
        if city_id == self.city_id:
            return False

        previous = self.city_id
        self._selector_value = city_id
        self._fallback = city_id
        await self.persistence.set(SettingKey.CITY_ID, city_id)

        if self.availability is not None:
            self.availability.clear_cache(city_id)

        logger.info(f"City changed: {previous} → {city_id}")

        for listener in self._listeners:
            await listener(city_id)

        return True
