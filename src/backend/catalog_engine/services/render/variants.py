"""
Render Variants

One coordinator drives either variant; each variant knows how to turn products
into its own view nodes and which delegated actions its content exposes.
- GridVariant: product cards with quantity stepper and quick view
- TableVariant: product rows with selection, copy affordances, clickable
  brand/series cells and sortable headers
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel

from ...models.catalog import DisplayDensity, ListState, Product, SortKey, ViewMode
from ...models.view import CardView, HeaderState, RowView
from .actions import ActionType
from .formatters import ProductFormatter


class RenderVariant(ABC):
    """Abstract base for the presentation variants"""

    view_mode: ViewMode
    supported_actions: FrozenSet[ActionType] = frozenset()

    def __init__(self, formatter: Optional[ProductFormatter] = None):
        self.formatter = formatter or ProductFormatter()

    @abstractmethod
    def build_node(self, product: Product, index: int, state: ListState) -> BaseModel:
        """Build the view node for one product at its position in the page"""
        pass

    def build_nodes(self, state: ListState) -> List[Dict]:
        return [
            self.build_node(product, index, state).model_dump()
            for index, product in enumerate(state.products)
        ]

    def availability_fields(self, product: Product) -> Dict:
        """Node fields that change when availability is patched in"""
        return {"availability_text": self.formatter.availability_text(product)}

    def header_states(self, state: ListState) -> List[HeaderState]:
        return []

    def supports(self, action_type: ActionType) -> bool:
        return action_type in self.supported_actions

    def get_name(self) -> str:
        return self.view_mode.value


class GridVariant(RenderVariant):
    view_mode = ViewMode.GRID
    supported_actions = frozenset({
        ActionType.ADD_TO_CART,
        ActionType.QUANTITY_INCREMENT,
        ActionType.QUANTITY_DECREMENT,
        ActionType.QUICK_VIEW,
    })

    def __init__(self, formatter: Optional[ProductFormatter] = None, stagger_ms: int = 50):
        super().__init__(formatter)
        self.stagger_ms = stagger_ms

    def _features(self, product: Product) -> List[str]:
        features = []
        if product.min_sale and product.min_sale > 1:
            features.append(f"Мин. {product.min_sale} {product.unit or self.formatter.unit_default}")
        if product.series_name:
            features.append(f"Серия: {product.series_name}")
        return features

    def build_node(self, product: Product, index: int, state: ListState) -> CardView:
        in_stock = product.in_stock

        badges = []
        if product.exact_match:
            badges.append("exact_match")
        if product.price is not None and product.price.has_special:
            badges.append("sale")
        if in_stock:
            badges.append("in_stock")

        actions = [ActionType.QUICK_VIEW.value, ActionType.QUANTITY_DECREMENT.value, ActionType.QUANTITY_INCREMENT.value]
        # Cart button is disabled for out-of-stock products
        if in_stock:
            actions.append(ActionType.ADD_TO_CART.value)

        features = self._features(product) if state.display_density == DisplayDensity.GRID else []

        return CardView(
            product_id=product.product_id,
            code=product.external_id or product.sku or "",
            brand_name=product.brand_name,
            name_html=self.formatter.name_html(product),
            url=self.formatter.product_url(product),
            image_url=self.formatter.image_url(product),
            price=self.formatter.format_price(product),
            in_stock=in_stock,
            availability_text=self.formatter.availability_text(product),
            badges=badges,
            features=features,
            entrance_delay_ms=index * self.stagger_ms,
            actions=actions,
        )

    def availability_fields(self, product: Product) -> Dict:
        return {
            "availability_text": self.formatter.availability_text(product),
            "in_stock": product.in_stock,
        }


class TableVariant(RenderVariant):
    view_mode = ViewMode.TABLE
    supported_actions = frozenset({
        ActionType.ADD_TO_CART,
        ActionType.COPY_VALUE,
        ActionType.FILTER_BY_ATTRIBUTE,
        ActionType.TOGGLE_SELECT,
    })

    def __init__(
        self,
        formatter: Optional[ProductFormatter] = None,
        sort_map: Optional[Dict[str, str]] = None,
        price_column: str = "base_price",
    ):
        super().__init__(formatter)
        self.sort_map = dict(sort_map or {})
        self.price_column = price_column

    def build_node(self, product: Product, index: int, state: ListState) -> RowView:
        price = self.formatter.format_price(product)
        quantity = product.stock.quantity if product.stock else None
        delivery = product.delivery.text if product.delivery else None
        status = product.status or "Активен"

        return RowView(
            product_id=product.product_id,
            external_id=product.external_id or "",
            name_html=self.formatter.name_html(product),
            name_text=product.name,
            url=self.formatter.product_url(product),
            image_url=self.formatter.image_url(product),
            sku=product.sku or "",
            brand_name=product.brand_name,
            series_name=product.series_name,
            status=status,
            status_class="status-available" if product.status == "active" else "status-out",
            min_sale=str(product.min_sale) if product.min_sale else "",
            unit=product.unit or "",
            availability=str(quantity) if quantity else "...",
            delivery=delivery or "...",
            price=price.current,
            retail_price=price.old or "—",
            selected=product.product_id in state.selected_ids,
            actions=[
                ActionType.TOGGLE_SELECT.value,
                ActionType.COPY_VALUE.value,
                ActionType.FILTER_BY_ATTRIBUTE.value,
                ActionType.ADD_TO_CART.value,
            ],
        )

    def availability_fields(self, product: Product) -> Dict:
        quantity = product.stock.quantity if product.stock else None
        delivery = product.delivery.text if product.delivery else None
        return {
            "availability": str(quantity) if quantity else "...",
            "delivery": delivery or "...",
        }

    def next_sort(self, column: str, current_sort: str) -> str:
        """
        Sort key after a header click.

        The price column alternates price_asc/price_desc; every other column
        maps to its configured sort key, or its raw name when unmapped.
        """
        if column == self.price_column:
            if current_sort == SortKey.PRICE_ASC.value:
                return SortKey.PRICE_DESC.value
            return SortKey.PRICE_ASC.value

        return self.sort_map.get(column, column)

    def header_states(self, state: ListState) -> List[HeaderState]:
        headers = []
        for column in self.sort_map:
            direction = None
            if column == self.price_column:
                if state.sort_key == SortKey.PRICE_DESC.value:
                    direction = "desc"
                elif state.sort_key == SortKey.PRICE_ASC.value:
                    direction = "asc"
            elif state.sort_key in (column, self.sort_map[column]):
                direction = "asc"
            headers.append(HeaderState(column=column, direction=direction))
        return headers
