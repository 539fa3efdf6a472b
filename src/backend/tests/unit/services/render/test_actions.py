"""
Unit tests for delegated action resolution
"""

from catalog_engine.services.render.actions import ActionType, resolve_action


def test_closest_actionable_ancestor_wins():
    path = [
        {"tag": "svg"},
        {"tag": "button", "action": "add-to-cart", "product_id": "17"},
        {"tag": "div", "action": "quick-view", "product_id": "17"},
        {"role": "container"},
    ]

    action = resolve_action(path)

    assert action.type == ActionType.ADD_TO_CART
    assert action.product_id == "17"


def test_data_attributes_are_carried():
    path = [{"action": "filter-by-attribute", "product_id": 3, "filter": "brand_name", "value": "Acme"}]

    action = resolve_action(path)

    assert action.type == ActionType.FILTER_BY_ATTRIBUTE
    assert action.product_id == "3"
    assert action.data == {"filter": "brand_name", "value": "Acme"}


def test_unrelated_descendant_dispatches_nothing():
    path = [{"tag": "span"}, {"tag": "td"}, {"role": "container"}]

    assert resolve_action(path) is None


def test_unknown_action_is_skipped():
    path = [{"action": "explode"}, {"action": "toggle-select", "product_id": "5"}]

    assert resolve_action(path).type == ActionType.TOGGLE_SELECT


def test_nothing_beyond_the_container():
    path = [{"tag": "span"}, {"role": "container"}, {"action": "add-to-cart", "product_id": "1"}]

    assert resolve_action(path) is None
