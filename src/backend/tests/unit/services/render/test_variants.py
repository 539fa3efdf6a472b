"""
Unit tests for the grid and table render variants
"""

from catalog_engine.models.catalog import DisplayDensity, ListState, Product
from catalog_engine.services.render.actions import ActionType
from catalog_engine.services.render.variants import GridVariant, TableVariant

SORT_MAP = {
    "name": "name",
    "external_id": "external_id",
    "base_price": "price_asc",
    "availability": "availability",
}


def product(pid: str, **fields) -> Product:
    return Product.model_validate({"product_id": pid, "name": f"Item {pid}", **fields})


class TestGridVariant:

    def test_entrance_delay_is_staggered(self):
        state = ListState(products=[product("1"), product("2"), product("3")])

        nodes = GridVariant().build_nodes(state)

        assert [n["entrance_delay_ms"] for n in nodes] == [0, 50, 100]
        assert all(n["quantity"] == 1 for n in nodes)

    def test_badges(self):
        state = ListState(products=[
            product("1", _exact_match=True, price={"base": 10, "final": 8, "has_special": True}, available=True),
        ])

        node = GridVariant().build_nodes(state)[0]

        assert node["badges"] == ["exact_match", "sale", "in_stock"]

    def test_features_only_in_grid_density(self):
        item = product("1", min_sale=5, unit="м", series_name="Pro")

        grid_node = GridVariant().build_node(item, 0, ListState(display_density=DisplayDensity.GRID))
        list_node = GridVariant().build_node(item, 0, ListState(display_density=DisplayDensity.LIST))

        assert grid_node.features == ["Мин. 5 м", "Серия: Pro"]
        assert list_node.features == []

    def test_out_of_stock_card_has_no_cart_action(self):
        node = GridVariant().build_node(product("1"), 0, ListState())

        assert ActionType.ADD_TO_CART.value not in node.actions
        assert ActionType.QUICK_VIEW.value in node.actions

    def test_supported_actions(self):
        variant = GridVariant()

        assert variant.supports(ActionType.QUANTITY_INCREMENT)
        assert not variant.supports(ActionType.TOGGLE_SELECT)


class TestTableVariant:

    def test_row_fields(self):
        item = product(
            "7",
            external_id="EXT-7",
            status="active",
            stock={"quantity": 12},
            price={"base": 200, "final": 150, "has_special": True},
        )
        state = ListState(products=[item], selected_ids={"7"})

        row = TableVariant(sort_map=SORT_MAP).build_nodes(state)[0]

        assert row["external_id"] == "EXT-7"
        assert row["status_class"] == "status-available"
        assert row["availability"] == "12"
        assert row["delivery"] == "..."
        assert row["price"] == "150.00 ₽"
        assert row["retail_price"] == "200.00 ₽"
        assert row["selected"] is True

    def test_row_defaults(self):
        row = TableVariant().build_node(product("1"), 0, ListState())

        assert row.status == "Активен"
        assert row.status_class == "status-out"
        assert row.retail_price == "—"
        assert row.selected is False

    def test_price_header_alternates(self):
        variant = TableVariant(sort_map=SORT_MAP, price_column="base_price")

        first = variant.next_sort("base_price", "relevance")
        second = variant.next_sort("base_price", first)
        third = variant.next_sort("base_price", second)

        assert [first, second, third] == ["price_asc", "price_desc", "price_asc"]

    def test_other_columns_use_map_or_raw_name(self):
        variant = TableVariant(sort_map=SORT_MAP)

        assert variant.next_sort("name", "relevance") == "name"
        assert variant.next_sort("sku", "relevance") == "sku"

    def test_header_states(self):
        variant = TableVariant(sort_map=SORT_MAP)

        headers = {h.column: h.direction for h in variant.header_states(ListState(sort_key="price_desc"))}

        assert headers["base_price"] == "desc"
        assert headers["name"] is None

    def test_availability_fields(self):
        fields = TableVariant().availability_fields(
            product("1", stock={"quantity": 3}, delivery={"text": "Завтра"})
        )

        assert fields == {"availability": "3", "delivery": "Завтра"}
