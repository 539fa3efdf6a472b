"""
Availability Service Client

Loads stock and delivery data for products already on screen. Responses are
cached per (city, product) in a bounded LRU shared by every session; a city
change clears only that city's entries.
"""

import logging
import os
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import List, Optional, Tuple

from ...exceptions import EnrichmentServiceError
from ...models.catalog import AvailabilityPatch
from .base import ServiceClient

logger = logging.getLogger(__name__)


class AvailabilityService(ABC):
    """Enrichment collaborator interface"""

    @abstractmethod
    async def load_availability(self, product_ids: List[str], city_id: int) -> List[AvailabilityPatch]:
        pass

    @abstractmethod
    def clear_cache(self, city_id: Optional[int] = None) -> None:
        """Drop cached entries for city_id, or every entry when None"""
        pass


class HttpAvailabilityClient(ServiceClient, AvailabilityService):
    """POST {base}/api/availability"""

    path = "/api/availability"

    def __init__(self, *args, max_entries: Optional[int] = None, **kwargs):
        super().__init__(*args, **kwargs)
        if max_entries is None:
            max_entries = int(os.getenv("AVAILABILITY_CACHE_SIZE", "5000"))
        self.max_entries = max_entries
        self._cache: "OrderedDict[Tuple[int, str], AvailabilityPatch]" = OrderedDict()

    def _remember(self, city_id: int, patch: AvailabilityPatch) -> None:
        key = (city_id, patch.product_id)
        self._cache[key] = patch
        self._cache.move_to_end(key)
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    async def load_availability(self, product_ids: List[str], city_id: int) -> List[AvailabilityPatch]:
        missing = [pid for pid in product_ids if (city_id, pid) not in self._cache]

        if missing:
            payload = await self._post_json(self.path, {"product_ids": missing, "city_id": city_id})
            if not payload.get("success", False):
                raise EnrichmentServiceError(payload.get("error") or "Availability request failed")

            fetched = {}
            for pid, entry in (payload.get("data") or {}).items():
                fetched[str(pid)] = AvailabilityPatch(
                    product_id=str(pid),
                    quantity=entry.get("quantity"),
                    delivery_text=entry.get("delivery_text"),
                )

            logger.debug(f"Fetched availability for {len(missing)} products (city {city_id})")
        else:
            fetched = {}

        patches = []
        for pid in product_ids:
            patch = fetched.get(pid) or self._cache.get((city_id, pid))
            if patch is None:
                continue
            self._remember(city_id, patch)
            patches.append(patch)
        return patches

    def clear_cache(self, city_id: Optional[int] = None) -> None:
        if city_id is None:
            self._cache.clear()
            logger.info("Availability cache cleared")
            return

        stale = [key for key in self._cache if key[0] == city_id]
        for key in stale:
            del self._cache[key]
        logger.info(f"Availability cache cleared for city {city_id} ({len(stale)} entries)")
