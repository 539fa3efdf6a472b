"""
Unit tests for product display formatting
"""

from catalog_engine.models.catalog import Product
from catalog_engine.services.render.formatters import ProductFormatter


def product(**fields) -> Product:
    return Product.model_validate({"product_id": "1", "name": "Drill", **fields})


class TestFormatPrice:

    def test_special_price_shows_old_price(self):
        view = ProductFormatter().format_price(
            product(price={"base": 120, "final": 99.5, "has_special": True})
        )

        assert view.current == "99.50 ₽"
        assert view.old == "120.00 ₽"

    def test_regular_price(self):
        view = ProductFormatter().format_price(product(price={"base": 120, "final": 120}))

        assert view.current == "120.00 ₽"
        assert view.old is None

    def test_falls_back_to_flat_base_price(self):
        assert ProductFormatter().format_price(product(base_price=15)).current == "15.00 ₽"

    def test_price_on_request(self):
        assert ProductFormatter().format_price(product()).current == "По запросу"


class TestAvailabilityText:

    def test_stock_quantity(self):
        assert ProductFormatter().availability_text(product(stock={"quantity": 4})) == "В наличии: 4 шт"

    def test_delivery_text(self):
        text = ProductFormatter().availability_text(product(delivery={"text": "2-3 дня"}))

        assert text == "2-3 дня"

    def test_available_flag(self):
        assert ProductFormatter().availability_text(product(available=True)) == "В наличии"

    def test_on_order(self):
        assert ProductFormatter().availability_text(product()) == "Под заказ"


class TestImageAndName:

    def test_image_fallback_chain(self):
        formatter = ProductFormatter()

        assert formatter.image_url(product(images=["/a.jpg", "/b.jpg"])) == "/a.jpg"
        assert formatter.image_url(product(image_url="/c.jpg")) == "/c.jpg"
        assert formatter.image_url(product(image_urls=" , /d.jpg,/e.jpg")) == "/d.jpg"
        assert formatter.image_url(product()) == "/images/placeholder.jpg"

    def test_plain_name_is_escaped(self):
        assert ProductFormatter().name_html(product(name="Saw <XL> & co")) == "Saw &lt;XL&gt; &amp; co"

    def test_highlighted_name_is_used_verbatim(self):
        highlighted = product(name="Drill", _highlight={"name": ["<em>Drill</em>"]})

        assert ProductFormatter().name_html(highlighted) == "<em>Drill</em>"

    def test_product_url_prefers_external_id(self):
        assert ProductFormatter().product_url(product(external_id="EXT-9")) == "/shop/product?id=EXT-9"
