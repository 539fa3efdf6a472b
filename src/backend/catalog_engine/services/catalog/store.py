"""
Catalog Store

Owns the canonical ListState and exposes the intents that mutate it. Every
intent follows the same sequence: mutate state, write through persistence,
ask the Loader for data, then render and sync the address bar once the load
settles.
"""

import logging
from typing import List, Optional

from ...database.persistence_adapter import PersistenceAdapter
from ...database.settings_storage import SettingKey
from ...exceptions import CatalogError, InvalidPageSizeError
from ...models.catalog import (
    AvailabilityPatch,
    DeliveryBlock,
    DisplayDensity,
    ListState,
    StockBlock,
    ViewMode,
)
from ...utils.debounce import Debouncer
from ..config.configuration_service import ConfigurationService, get_config_service
from ..location.location_context import LocationContext
from ..render.coordinator import RenderCoordinator
from ..url.url_sync import UrlSync
from .loader import Loader, LoadOutcome

logger = logging.getLogger(__name__)


class CatalogStore:
    """
    Intent surface of the catalog engine.

    Invariants:
    - page stays within [1, max(1, total_pages)] after every settle
    - any intent other than page navigation resets page to 1
    - is_loading is False whenever no load is outstanding
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        loader: Loader,
        coordinator: RenderCoordinator,
        url_sync: Optional[UrlSync] = None,
        location: Optional[LocationContext] = None,
        config_service: Optional[ConfigurationService] = None,
        state: Optional[ListState] = None,
    ):
        self.persistence = persistence
        self.loader = loader
        self.coordinator = coordinator
        self.url_sync = url_sync
        self.location = location
        self.config = config_service or get_config_service()

        self.allowed_page_sizes = self.config.get_allowed_page_sizes()
        self.default_sort = self.config.get_default_sort()

        self.state = state or ListState(
            page_size=self.config.get_default_page_size(),
            sort_key=self.default_sort,
            view_mode=coordinator.variant.view_mode,
            display_density=DisplayDensity(self.config.get_default_display_density()),
        )

        self._pending_query: Optional[str] = None
        self._debouncer = Debouncer(self.config.get_debounce_seconds(), self._flush_query_input)

        self.loader.on_enriched = self._apply_enrichment
        self.coordinator.attach(self)
        if self.location is not None:
            self.location.subscribe(self._on_city_changed)

    def _known_sort_keys(self) -> List[str]:
        table_map = self.config.get_table_sort_map()
        return self.config.get_sort_vocabulary() + list(table_map.keys()) + list(table_map.values())

    async def initialize(self) -> Optional[LoadOutcome]:
        """
        Seed state and run the first load.

        Precedence, lowest first: configured defaults, durable settings,
        session filters, address-bar parameters.
        """
        state = self.state
        state.page_size = await self.persistence.get_int(
            SettingKey.PAGE_SIZE, state.page_size, allowed=self.allowed_page_sizes
        )
        state.sort_key = await self.persistence.get_choice(
            SettingKey.SORT, state.sort_key, allowed=self._known_sort_keys()
        )
        if state.view_mode == ViewMode.GRID:
            density = await self.persistence.get_choice(
                SettingKey.VIEW_MODE,
                state.display_density.value,
                allowed=[d.value for d in DisplayDensity],
            )
            state.display_density = DisplayDensity(density)

        state.filters = await self.persistence.get_filters()

        if self.location is not None:
            await self.location.load()

        if self.url_sync is not None:
            self.url_sync.restore(state)

        logger.info(
            f"Catalog initialized: view={state.view_mode.value}, page_size={state.page_size}, "
            f"sort={state.sort_key}, filters={list(state.filters)}"
        )
        return await self._reload()

    # Load cycle

    async def _reload(self, clamp_retry: bool = True) -> Optional[LoadOutcome]:
        self.coordinator.set_loading(True)
        outcome = await self.loader.load(self.state)
        self.coordinator.set_loading(self.state.is_loading)

        if outcome is None:
            return None

        state = self.state
        if state.page > state.total_pages:
            if outcome.success and state.total_count > 0 and clamp_retry:
                logger.info(f"Page {state.page} beyond last page {state.total_pages}, reloading last page")
                state.page = state.total_pages
                return await self._reload(clamp_retry=False)
            state.page = state.clamp_page(state.page)

        self._settle()
        return outcome

    def _settle(self) -> None:
        state = self.state
        visible = {p.product_id for p in state.products}
        state.selected_ids &= visible

        self.coordinator.render(state)
        if self.url_sync is not None:
            self.url_sync.write(state)

    def _apply_enrichment(self, patches: List[AvailabilityPatch]) -> None:
        by_id = {p.product_id: p for p in self.state.products}
        patched = []
        for patch in patches:
            product = by_id.get(patch.product_id)
            if product is None:
                continue
            product.stock = StockBlock(quantity=patch.quantity)
            if patch.delivery_text:
                product.delivery = DeliveryBlock(text=patch.delivery_text)
            patched.append(product)

        if patched:
            self.coordinator.patch_availability(patched)

    async def _on_city_changed(self, city_id: int) -> None:
        logger.info(f"Reloading catalog for city {city_id}")
        await self.reload()

    # Intents

    async def set_query(self, query: str) -> Optional[LoadOutcome]:
        self._debouncer.cancel()
        self.state.query = query
        self.state.page = 1
        return await self._reload()

    def input_query(self, text: str) -> None:
        """Record typed search input; the query fires once typing pauses"""
        self._pending_query = text
        self._debouncer.trigger()

    async def wait_for_input(self) -> None:
        await self._debouncer.wait()

    async def _flush_query_input(self) -> None:
        query, self._pending_query = self._pending_query or "", None
        await self.set_query(query)

    async def set_page(self, page: int) -> Optional[LoadOutcome]:
        target = self.state.clamp_page(page)
        if target == self.state.page:
            return None
        self.state.page = target
        return await self._reload()

    async def go_to_next_page(self) -> Optional[LoadOutcome]:
        if self.state.page >= self.state.total_pages:
            return None
        return await self.set_page(self.state.page + 1)

    async def go_to_prev_page(self) -> Optional[LoadOutcome]:
        if self.state.page <= 1:
            return None
        return await self.set_page(self.state.page - 1)

    async def set_page_size(self, page_size: int) -> Optional[LoadOutcome]:
        if page_size not in self.allowed_page_sizes:
            raise InvalidPageSizeError(page_size, self.allowed_page_sizes)

        self.state.page_size = page_size
        self.state.page = 1
        await self.persistence.set(SettingKey.PAGE_SIZE, page_size)
        return await self._reload()

    async def set_sort(self, sort_key: str) -> Optional[LoadOutcome]:
        self.state.sort_key = sort_key
        self.state.page = 1
        await self.persistence.set(SettingKey.SORT, sort_key)
        return await self._reload()

    async def sort_by_column(self, column: str) -> Optional[LoadOutcome]:
        """Header click in the table view"""
        next_sort = getattr(self.coordinator.variant, "next_sort", None)
        if next_sort is None:
            raise CatalogError(f"Column sorting is not available in the {self.state.view_mode.value} view")
        return await self.set_sort(next_sort(column, self.state.sort_key))

    async def set_filter(self, key: str, value: Optional[str]) -> Optional[LoadOutcome]:
        """Set a filter, or remove it when value is None or empty"""
        if value is None or value == "":
            self.state.filters.pop(key, None)
        else:
            self.state.filters[key] = value
        self.state.page = 1

        await self.persistence.save_filters(self.state.filters)
        self.coordinator.render_active_filters(self.state)
        return await self._reload()

    async def remove_filter(self, key: Optional[str]) -> Optional[LoadOutcome]:
        """Chip removal; key None removes the free-text pseudo-filter"""
        if key is None:
            self._debouncer.cancel()
            self.state.query = ""
            self.state.page = 1
            self.coordinator.render_active_filters(self.state)
            return await self._reload()
        return await self.set_filter(key, None)

    async def clear_all_filters(self) -> Optional[LoadOutcome]:
        self._debouncer.cancel()
        self.state.filters = {}
        self.state.query = ""
        self.state.page = 1

        await self.persistence.clear_session()
        self.coordinator.render_active_filters(self.state)
        return await self._reload()

    async def set_display_density(self, density: str) -> None:
        """Grid-only toggle; persisted and re-rendered without a reload"""
        if self.state.view_mode != ViewMode.GRID:
            raise CatalogError(f"Display density is not available in the {self.state.view_mode.value} view")
        self.state.display_density = DisplayDensity(density)
        await self.persistence.set(SettingKey.VIEW_MODE, self.state.display_density.value)
        self.coordinator.render(self.state)

    def toggle_selection(self, product_id: str) -> bool:
        """Returns the new selection state of the row"""
        if product_id in self.state.selected_ids:
            self.state.selected_ids.discard(product_id)
            selected = False
        else:
            if product_id not in {p.product_id for p in self.state.products}:
                logger.warning(f"Cannot select product {product_id}: not on the current page")
                return False
            self.state.selected_ids.add(product_id)
            selected = True

        self.coordinator.render_selection(self.state)
        return selected

    def select_all(self, selected: bool = True) -> None:
        if selected:
            self.state.selected_ids = {p.product_id for p in self.state.products}
        else:
            self.state.selected_ids = set()
        self.coordinator.render_selection(self.state)

    async def reload(self) -> Optional[LoadOutcome]:
        """Reload the current page without resetting it"""
        return await self._reload()

    async def close(self) -> None:
        self._debouncer.cancel()
        await self.loader.close()
