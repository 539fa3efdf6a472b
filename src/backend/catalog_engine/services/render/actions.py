"""
Delegated Actions

Rendered content raises actions through one listener on the container. An
event carries its path from the clicked element up to the container; the
closest ancestor that declares a recognized action wins. Elements without an
action (icons, text spans) are transparent, and anything outside the container
resolves to nothing.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

CONTAINER_ROLE = "container"


class ActionType(str, Enum):
    ADD_TO_CART = "add-to-cart"
    QUANTITY_INCREMENT = "quantity-increment"
    QUANTITY_DECREMENT = "quantity-decrement"
    COPY_VALUE = "copy-value"
    FILTER_BY_ATTRIBUTE = "filter-by-attribute"
    QUICK_VIEW = "quick-view"
    TOGGLE_SELECT = "toggle-select"


class RenderAction(BaseModel):
    """An action resolved from one user gesture"""
    type: ActionType
    product_id: Optional[str] = None
    data: Dict[str, str] = Field(default_factory=dict)


def resolve_action(path: List[Dict[str, Any]]) -> Optional[RenderAction]:
    """
    Resolve the action for a delegated event.

    Args:
        path: Element descriptors ordered from the event target outward. Each
            descriptor may carry "action", "role" and data attributes such as
            "product_id", "filter", "value", "text", "quantity".

    Returns:
        RenderAction for the closest actionable ancestor, or None

    Example:
        >>> resolve_action([{"tag": "svg"}, {"action": "quick-view", "product_id": "7"}, {"role": "container"}]).type
        <ActionType.QUICK_VIEW: 'quick-view'>
    """
    for node in path:
        if node.get("role") == CONTAINER_ROLE:
            return None

        raw = node.get("action")
        if not raw:
            continue

        try:
            action_type = ActionType(raw)
        except ValueError:
            continue

        product_id = node.get("product_id")
        data = {
            key: str(value)
            for key, value in node.items()
            if key not in ("action", "role", "product_id") and value is not None
        }
        return RenderAction(
            type=action_type,
            product_id=str(product_id) if product_id is not None else None,
            data=data,
        )

    return None
