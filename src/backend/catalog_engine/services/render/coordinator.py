"""
Render Coordinator

Translates settled listing state into render-target calls and routes delegated
user actions back to the store or to the cart/clipboard collaborators.

One coordinator serves both presentation variants; the variant is chosen at
construction and never switched.
"""

import logging
from typing import Dict, Iterable, Optional

from ...exceptions import CartServiceError
from ...models.catalog import ListState, Product
from ...models.view import CatalogSummary
from ..catalog.active_filters import build_active_filters
from ..clients.cart_client import CartService
from ..config.configuration_service import ConfigurationService, get_config_service
from ..notifications.channels import Clipboard, Notifier
from ..pagination.planner import plan_pagination
from .actions import ActionType, RenderAction, resolve_action
from .target import RenderTarget
from .variants import RenderVariant

logger = logging.getLogger(__name__)


class RenderCoordinator:
    """
    Drives a RenderTarget from ListState.

    Attributes:
        variant: Grid or table presentation
        target: Surface receiving the view models
        quantities: Per-product stepper values; reset to 1 on every content render
    """

    def __init__(
        self,
        variant: RenderVariant,
        target: RenderTarget,
        cart: Optional[CartService] = None,
        notifier: Optional[Notifier] = None,
        clipboard: Optional[Clipboard] = None,
        config_service: Optional[ConfigurationService] = None,
    ):
        self.variant = variant
        self.target = target
        self.cart = cart
        self.notifier = notifier
        self.clipboard = clipboard
        self.config = config_service or get_config_service()
        self.window_size = self.config.get_pagination_window()
        self.filter_labels = self.config.get_filter_labels()
        self.query_label = self.config.get_query_label()
        self.quantities: Dict[str, int] = {}
        self._store = None

    def attach(self, store) -> None:
        """Bind the store that receives filter and selection intents"""
        self._store = store

    # Rendering

    def set_loading(self, loading: bool) -> None:
        self.target.set_loading(loading)

    def render(self, state: ListState) -> None:
        """Render everything that depends on a settled load"""
        self.quantities = {}

        self.target.render_summary(CatalogSummary(
            total_count=state.total_count,
            current_page=state.page,
            total_pages=state.total_pages,
        ))
        self.target.render_pagination(plan_pagination(state.page, state.total_pages, self.window_size))

        if not state.products:
            self.target.show_empty_state()
        else:
            self.target.replace_content(self.variant.build_nodes(state))

        self.target.render_headers(self.variant.header_states(state))
        self.render_active_filters(state)

        logger.debug(
            f"Rendered {len(state.products)} products ({self.variant.get_name()}), "
            f"page {state.page}/{state.total_pages}"
        )

    def render_active_filters(self, state: ListState) -> None:
        self.target.render_active_filters(
            build_active_filters(state, self.filter_labels, self.query_label)
        )

    def render_selection(self, state: ListState) -> None:
        if not self.variant.supports(ActionType.TOGGLE_SELECT):
            return
        for product in state.products:
            self.target.patch_node(product.product_id, {"selected": product.product_id in state.selected_ids})

    def patch_availability(self, products: Iterable[Product]) -> None:
        """Update availability cells in place, addressed by product id"""
        for product in products:
            self.target.patch_node(product.product_id, self.variant.availability_fields(product))

    # Delegated actions

    def _notify(self, message_key: str, is_error: bool = False, **kwargs) -> None:
        if self.notifier is None:
            return
        self.notifier.notify(self.config.get_message(message_key, **kwargs), is_error=is_error)

    async def handle_event(self, path) -> Optional[RenderAction]:
        """
        Dispatch the action raised by one user gesture.

        Args:
            path: Element descriptors from the event target up to the container

        Returns:
            The dispatched action, or None if nothing in the path was actionable
        """
        action = resolve_action(path)
        if action is None:
            return None

        if not self.variant.supports(action.type):
            logger.debug(f"Action {action.type.value} not offered by {self.variant.get_name()} view, ignored")
            return None

        await self.dispatch(action)
        return action

    async def dispatch(self, action: RenderAction) -> None:
        if action.type == ActionType.ADD_TO_CART:
            await self._add_to_cart(action)
        elif action.type in (ActionType.QUANTITY_INCREMENT, ActionType.QUANTITY_DECREMENT):
            self._step_quantity(action)
        elif action.type == ActionType.COPY_VALUE:
            await self._copy_value(action)
        elif action.type == ActionType.FILTER_BY_ATTRIBUTE:
            await self._filter_by_attribute(action)
        elif action.type == ActionType.QUICK_VIEW:
            self._notify("quick_view_unavailable")
        elif action.type == ActionType.TOGGLE_SELECT:
            if self._store is not None and action.product_id:
                self._store.toggle_selection(action.product_id)

    def _quantity_for(self, action: RenderAction) -> int:
        raw = action.data.get("quantity")
        if raw is not None:
            try:
                return max(1, int(raw))
            except ValueError:
                logger.warning(f"Ignoring malformed quantity {raw!r} for product {action.product_id}")
        return self.quantities.get(action.product_id, 1)

    async def _add_to_cart(self, action: RenderAction) -> None:
        if self.cart is None or not action.product_id:
            return

        quantity = self._quantity_for(action)
        try:
            await self.cart.add_to_cart(action.product_id, quantity)
        except CartServiceError as e:
            logger.warning(f"Add to cart failed for {action.product_id}: {e}")
            self._notify("cart_failed", is_error=True)
            return
        except Exception as e:
            logger.error(f"Cart service error for {action.product_id}: {e}", exc_info=True)
            self._notify("cart_failed", is_error=True)
            return

        self._notify("cart_added")

    def _step_quantity(self, action: RenderAction) -> None:
        if not action.product_id:
            return

        current = self.quantities.get(action.product_id, 1)
        step = 1 if action.type == ActionType.QUANTITY_INCREMENT else -1
        # Lower bound only; there is no maximum
        updated = max(1, current + step)
        self.quantities[action.product_id] = updated
        self.target.patch_node(action.product_id, {"quantity": updated})

    async def _copy_value(self, action: RenderAction) -> None:
        text = (action.data.get("value") or action.data.get("text") or "").strip()
        if not text:
            self._notify("copy_empty", is_error=True)
            return

        if self.clipboard is None:
            return

        try:
            await self.clipboard.copy(text)
        except Exception as e:
            logger.warning(f"Clipboard copy failed: {e}")
            self._notify("copy_failed", is_error=True)
            return

        self._notify("copy_done", text=text)

    async def _filter_by_attribute(self, action: RenderAction) -> None:
        key = action.data.get("filter")
        value = action.data.get("value")
        if not key or not value or self._store is None:
            return
        await self._store.set_filter(key, value)
