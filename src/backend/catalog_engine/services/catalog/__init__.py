"""
Catalog Engine Core

Store, loader and session wiring. Import CatalogStore and the session helpers
from their modules directly; this package only re-exports the leaf pieces.
"""

from .active_filters import build_active_filters
from .loader import Loader, LoadOutcome

__all__ = [
    "build_active_filters",
    "Loader",
    "LoadOutcome",
]
