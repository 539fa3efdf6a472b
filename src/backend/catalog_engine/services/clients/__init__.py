"""Remote collaborator clients: search, cart, availability"""

from .availability_client import AvailabilityService, HttpAvailabilityClient
from .base import ServiceClient
from .cart_client import CartService, HttpCartClient
from .search_client import HttpSearchClient, SearchService

__all__ = [
    "AvailabilityService",
    "HttpAvailabilityClient",
    "ServiceClient",
    "CartService",
    "HttpCartClient",
    "HttpSearchClient",
    "SearchService",
]
