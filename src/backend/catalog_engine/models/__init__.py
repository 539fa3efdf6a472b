"""Models package - listing state, product records and view models"""

from .catalog import (
    AvailabilityPatch,
    DisplayDensity,
    ListState,
    LoadPolicy,
    Product,
    SearchData,
    SearchResponse,
    SortKey,
    ViewMode,
    compute_total_pages,
)

from .view import (
    CardView,
    CatalogSummary,
    FilterChip,
    HeaderState,
    PaginationPlan,
    PriceView,
    RenderedView,
    RowView,
)

__all__ = [
    "AvailabilityPatch",
    "DisplayDensity",
    "ListState",
    "LoadPolicy",
    "Product",
    "SearchData",
    "SearchResponse",
    "SortKey",
    "ViewMode",
    "compute_total_pages",
    "CardView",
    "CatalogSummary",
    "FilterChip",
    "HeaderState",
    "PaginationPlan",
    "PriceView",
    "RenderedView",
    "RowView",
]
