"""
Product display formatting shared by the grid and table variants.
"""

import html
from typing import Any, Dict, Optional

from ...models.catalog import Product
from ...models.view import PriceView


class ProductFormatter:
    """Price, availability, image and name formatting for one display configuration"""

    def __init__(self, display: Optional[Dict[str, Any]] = None):
        display = display or {}
        self.currency = display.get("currency_symbol", "₽")
        self.price_on_request = display.get("price_on_request", "По запросу")
        self.placeholder_image = display.get("placeholder_image", "/images/placeholder.jpg")
        self.unit_default = display.get("unit_default", "шт")
        self.url_template = display.get("product_url_template", "/shop/product?id={id}")

    def _money(self, value: float) -> str:
        return f"{value:.2f} {self.currency}"

    def format_price(self, product: Product) -> PriceView:
        """
        Current price plus the pre-discount price when a special applies.

        Falls back to the legacy flat base_price, then to "price on request".
        """
        price = product.price
        if price is not None and price.final:
            old = None
            if price.has_special and price.base:
                old = self._money(price.base)
            return PriceView(current=self._money(price.final), old=old)

        if product.base_price:
            return PriceView(current=self._money(float(product.base_price)))

        return PriceView(current=self.price_on_request)

    def availability_text(self, product: Product) -> str:
        quantity = product.stock.quantity if product.stock else None
        if quantity and quantity > 0:
            return f"В наличии: {quantity} {self.unit_default}"

        if product.delivery and product.delivery.text:
            return product.delivery.text

        return "В наличии" if product.available else "Под заказ"

    def image_url(self, product: Product) -> str:
        if product.images:
            return product.images[0]

        if product.image_url:
            return product.image_url

        if product.image_urls:
            urls = [u.strip() for u in product.image_urls.split(",") if u.strip()]
            if urls:
                return urls[0]

        return self.placeholder_image

    def name_html(self, product: Product) -> str:
        """Highlighted markup from the search service, or the escaped plain name"""
        return product.highlighted_name or html.escape(product.name)

    def product_url(self, product: Product) -> str:
        return self.url_template.format(id=product.external_id or product.product_id)
