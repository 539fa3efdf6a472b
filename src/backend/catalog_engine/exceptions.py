"""Catalog engine exceptions"""


class CatalogError(Exception):
    """Base class for catalog engine errors"""


class InvalidPageSizeError(CatalogError, ValueError):
    """Requested page size is outside the allowed set"""

    def __init__(self, page_size, allowed):
        self.page_size = page_size
        self.allowed = list(allowed)
        super().__init__(f"Page size {page_size} not in allowed set {self.allowed}")


class SearchServiceError(CatalogError):
    """Search service failed or returned success=false"""


class CartServiceError(CatalogError):
    """Cart service rejected or failed to add a product"""


class EnrichmentServiceError(CatalogError):
    """Availability service failed"""


class SessionNotFoundError(CatalogError, KeyError):
    """No catalog session registered under the given id"""
