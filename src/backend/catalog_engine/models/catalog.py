"""
Catalog Listing Models

ListState is the single source of truth for what the catalog currently shows.
Product mirrors the record returned by the remote search service and is treated
as read-only, except for the availability fields the enrichment service patches.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ViewMode(str, Enum):
    """Render variant hosted by a page; fixed for the lifetime of a session"""
    GRID = "grid"
    TABLE = "table"


class DisplayDensity(str, Enum):
    """Grid-only presentation toggle; never affects the query"""
    GRID = "grid"
    LIST = "list"


class SortKey(str, Enum):
    """Fixed sort vocabulary. Table mode may also sort by a raw column name."""
    RELEVANCE = "relevance"
    NAME = "name"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    AVAILABILITY = "availability"
    POPULARITY = "popularity"


class LoadPolicy(str, Enum):
    """
    What happens to an intent issued while a load is in flight

    SUPERSEDE: the newer intent cancels the in-flight load and wins.
    DROP: the newer intent is discarded (legacy single-flight behaviour).
    """
    SUPERSEDE = "supersede"
    DROP = "drop"


class PriceBlock(BaseModel):
    base: Optional[float] = None
    final: Optional[float] = None
    has_special: bool = False


class StockBlock(BaseModel):
    quantity: Optional[int] = None


class DeliveryBlock(BaseModel):
    text: Optional[str] = None


class Product(BaseModel):
    """Single product record as returned by the search service"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str
    external_id: Optional[str] = None
    sku: Optional[str] = None
    name: str = ""
    brand_name: Optional[str] = None
    series_name: Optional[str] = None
    price: Optional[PriceBlock] = None
    base_price: Optional[float] = None  # Legacy flat price, used when price block is absent
    stock: Optional[StockBlock] = None
    delivery: Optional[DeliveryBlock] = None
    available: bool = False
    images: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    image_urls: Optional[str] = None  # Comma-separated
    status: Optional[str] = None
    min_sale: Optional[int] = None
    unit: Optional[str] = None

    # Search relevance annotations
    exact_match: bool = Field(default=False, alias="_exact_match")
    formatted_name: Optional[str] = Field(default=None, alias="_formatted_name")
    highlight: Dict[str, List[str]] = Field(default_factory=dict, alias="_highlight")

    @field_validator("product_id", "external_id", "sku", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("images", mode="before")
    @classmethod
    def _coerce_images(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @property
    def highlighted_name(self) -> Optional[str]:
        """Server-highlighted name markup, if the search service supplied one"""
        if self.formatted_name:
            return self.formatted_name
        names = self.highlight.get("name") or []
        return names[0] if names else None

    @property
    def in_stock(self) -> bool:
        quantity = self.stock.quantity if self.stock else None
        return bool(quantity and quantity > 0) or self.available


class SearchData(BaseModel):
    products: List[Product] = Field(default_factory=list)
    total: int = 0


class SearchResponse(BaseModel):
    """Envelope returned by the search service"""
    success: bool
    data: Optional[SearchData] = None
    error: Optional[str] = None


class AvailabilityPatch(BaseModel):
    """Per-product enrichment applied after the initial render"""
    product_id: str
    quantity: Optional[int] = None
    delivery_text: Optional[str] = None


def compute_total_pages(total_count: int, page_size: int) -> int:
    """ceil(total / page_size), floored at 1"""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total_count / page_size))


class ListState(BaseModel):
    """
    Canonical listing state

    Mutated only through CatalogStore intents. Invariants:
    - 1 <= page <= max(1, total_pages)
    - filters never hold an empty value
    - is_loading is true only while exactly one load is outstanding
    """
    query: str = ""
    page: int = 1
    page_size: int = 20
    sort_key: str = SortKey.RELEVANCE.value
    filters: Dict[str, str] = Field(default_factory=dict)
    view_mode: ViewMode = ViewMode.GRID
    display_density: DisplayDensity = DisplayDensity.GRID
    products: List[Product] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 1
    is_loading: bool = False
    selected_ids: Set[str] = Field(default_factory=set)

    def clamp_page(self, page: int) -> int:
        return max(1, min(page, max(1, self.total_pages)))
