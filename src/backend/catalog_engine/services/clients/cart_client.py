"""Cart Service Client"""

import logging
from abc import ABC, abstractmethod

from ...exceptions import CartServiceError
from .base import ServiceClient

logger = logging.getLogger(__name__)


class CartService(ABC):
    """Cart collaborator interface"""

    @abstractmethod
    async def add_to_cart(self, product_id: str, quantity: int) -> None:
        """
        Add a product to the cart.

        Raises:
            CartServiceError: If the cart service rejects the request
        """
        pass


class HttpCartClient(ServiceClient, CartService):
    """POST {base}/api/cart/add"""

    path = "/api/cart/add"

    async def add_to_cart(self, product_id: str, quantity: int) -> None:
        if quantity < 1:
            raise CartServiceError(f"Quantity must be at least 1, got {quantity}")

        payload = await self._post_json(self.path, {"product_id": product_id, "quantity": quantity})
        if not payload.get("success", False):
            raise CartServiceError(payload.get("error") or f"Cart rejected product {product_id}")

        logger.info(f"Added {quantity} x {product_id} to cart")
