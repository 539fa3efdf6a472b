"""
Base HTTP client for remote catalog collaborators.

Each collaborator (search, cart, availability) is a thin wrapper over one shared
httpx.AsyncClient configured from the environment.
"""

import logging
import os
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Shared plumbing for JSON-over-HTTP collaborators.

    Args:
        base_url: Service root, e.g. "https://shop.example.com"
        timeout_seconds: Request timeout; None disables it
        client: Optional pre-built httpx.AsyncClient (tests inject a mock transport)
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        if timeout_seconds is None:
            timeout_seconds = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"accept": "application/json"},
        )

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
