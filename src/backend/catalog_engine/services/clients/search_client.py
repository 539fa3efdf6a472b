"""
Search Service Client

Sends the flat parameter bag to the remote search service and returns the
response envelope. Ranking and matching happen on the remote side.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from ...models.catalog import SearchResponse
from .base import ServiceClient

logger = logging.getLogger(__name__)


class SearchService(ABC):
    """Search collaborator interface"""

    @abstractmethod
    async def search(self, params: Dict[str, Any]) -> SearchResponse:
        """
        Execute a product search.

        Args:
            params: Flat parameter bag (q, page, limit, sort, city_id, filters...)

        Returns:
            SearchResponse envelope; transport errors propagate as exceptions
        """
        pass


class HttpSearchClient(ServiceClient, SearchService):
    """GET {base}/api/products/search"""

    path = "/api/products/search"

    async def search(self, params: Dict[str, Any]) -> SearchResponse:
        logger.debug(f"Search request: {params}")
        payload = await self._get_json(self.path, params)
        return SearchResponse.model_validate(payload)
