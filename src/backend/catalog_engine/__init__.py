"""Catalog engine: listing state, search loading, rendering and URL sync for product catalogs"""

__version__ = "1.0.0"
