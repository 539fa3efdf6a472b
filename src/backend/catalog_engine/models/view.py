"""
View Models

Data handed to a render target. Markup is the target's concern; these models
carry only what each template needs and the actions it exposes.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PriceView(BaseModel):
    current: str
    old: Optional[str] = None


class CardView(BaseModel):
    """Grid card for one product"""
    product_id: str
    code: str
    brand_name: Optional[str] = None
    name_html: str
    url: str
    image_url: str
    price: PriceView
    in_stock: bool
    availability_text: str
    badges: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    quantity: int = 1
    entrance_delay_ms: int = 0
    actions: List[str] = Field(default_factory=list)


class RowView(BaseModel):
    """Table row for one product"""
    product_id: str
    external_id: str
    name_html: str
    name_text: str
    url: str
    image_url: str
    sku: str
    brand_name: Optional[str] = None
    series_name: Optional[str] = None
    status: str
    status_class: str
    min_sale: str
    unit: str
    availability: str
    delivery: str
    price: str
    retail_price: str
    selected: bool = False
    quantity: int = 1
    actions: List[str] = Field(default_factory=list)


class HeaderState(BaseModel):
    """Sortable table header indicator"""
    column: str
    direction: Optional[str] = None  # "asc" | "desc" | None


class FilterChip(BaseModel):
    """Active-filter chip; key is None for the free-text pseudo-filter"""
    key: Optional[str] = None
    label: str
    value: str


class PaginationPlan(BaseModel):
    numbers: List[int] = Field(default_factory=list)
    current: int = 1
    total: int = 1
    show_first: bool = False
    show_last: bool = False
    leading_ellipsis: bool = False
    trailing_ellipsis: bool = False
    prev_enabled: bool = False
    next_enabled: bool = False


class CatalogSummary(BaseModel):
    total_count: int = 0
    current_page: int = 1
    total_pages: int = 1


class RenderedView(BaseModel):
    """Snapshot of everything a render target currently displays"""
    view_mode: str
    display_density: Optional[str] = None
    nodes: List[Dict] = Field(default_factory=list)
    empty: bool = False
    loading: bool = False
    summary: CatalogSummary = Field(default_factory=CatalogSummary)
    pagination: PaginationPlan = Field(default_factory=PaginationPlan)
    active_filters: List[FilterChip] = Field(default_factory=list)
    headers: List[HeaderState] = Field(default_factory=list)
    selected_ids: List[str] = Field(default_factory=list)
    url: str = ""
