"""
Loader

Owns the search round-trip for one store: builds the parameter bag, guards
concurrent loads, commits results into the listing state and launches the
non-blocking availability enrichment.

Every load carries a generation number. Only the newest generation may commit
results or reset the loading flag; anything older is discarded on arrival.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

import structlog

from ...models.catalog import AvailabilityPatch, ListState, LoadPolicy, Product, SearchResponse, compute_total_pages
from ...utils.logging_context import log_context, log_performance
from ..clients.availability_client import AvailabilityService
from ..clients.search_client import SearchService
from ..location.location_context import LocationContext
from ..query.query_builder import DEFAULT_CITY_ID, build_query

logger = logging.getLogger(__name__)
perf_logger = structlog.get_logger(__name__)

EnrichmentCallback = Callable[[List[AvailabilityPatch]], None]


@dataclass
class LoadOutcome:
    generation: int
    success: bool
    products: List[Product] = field(default_factory=list)
    total_count: int = 0
    error: Optional[str] = None


class Loader:
    """
    Single-flight search loader.

    Args:
        search: Search collaborator
        availability: Optional enrichment collaborator
        location: Supplies city_id for the query and for enrichment
        policy: SUPERSEDE cancels an in-flight load for a newer one;
            DROP ignores loads requested while one is in flight
    """

    def __init__(
        self,
        search: SearchService,
        availability: Optional[AvailabilityService] = None,
        location: Optional[LocationContext] = None,
        policy: LoadPolicy = LoadPolicy.SUPERSEDE,
    ):
        self.search = search
        self.availability = availability
        self.location = location
        self.policy = LoadPolicy(policy)
        self.on_enriched: Optional[EnrichmentCallback] = None
        self._generation = 0
        self._current: Optional[asyncio.Task] = None
        self._enrichment_tasks: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    def _city_id(self) -> Optional[int]:
        return self.location.city_id if self.location is not None else None

    async def load(self, state: ListState) -> Optional[LoadOutcome]:
        """
        Load the page described by state and commit the result into it.

        Returns:
            LoadOutcome for a committed load, or None when the request was
            dropped (DROP policy) or superseded by a newer load
        """
        if state.is_loading and self.policy == LoadPolicy.DROP:
            logger.info("Load already in flight, request dropped")
            return None

        if self._current is not None and not self._current.done():
            logger.info(f"Superseding in-flight load generation {self._generation}")
            self._current.cancel()

        self._generation += 1
        generation = self._generation
        city_id = self._city_id()
        params = build_query(state, city_id)

        state.is_loading = True
        task = asyncio.create_task(self._fetch(params))
        self._current = task

        with log_context(load_generation=generation):
            try:
                try:
                    response = await task
                except asyncio.CancelledError:
                    if generation != self._generation:
                        logger.debug(f"Load generation {generation} superseded")
                        return None
                    raise
                except Exception as e:
                    if generation != self._generation:
                        return None
                    logger.error(f"Search request failed: {e}")
                    return self._commit_failure(state, generation, str(e))

                if generation != self._generation:
                    logger.debug(f"Discarding stale result for generation {generation}")
                    return None

                if not response.success or response.data is None:
                    error = response.error or "Search service returned success=false"
                    logger.error(f"Search failed: {error}")
                    return self._commit_failure(state, generation, error)

                return self._commit_success(state, generation, response, city_id)
            finally:
                if generation == self._generation:
                    state.is_loading = False

    async def _fetch(self, params) -> SearchResponse:
        with log_performance("catalog_search", logger=perf_logger):
            return await self.search.search(params)

    def _commit_failure(self, state: ListState, generation: int, error: str) -> LoadOutcome:
        state.products = []
        state.total_count = 0
        state.total_pages = 1
        return LoadOutcome(generation=generation, success=False, error=error)

    def _commit_success(
        self,
        state: ListState,
        generation: int,
        response: SearchResponse,
        city_id: Optional[int],
    ) -> LoadOutcome:
        products = list(response.data.products)
        state.products = products
        state.total_count = response.data.total
        state.total_pages = compute_total_pages(response.data.total, state.page_size)

        logger.info(
            f"Loaded {len(products)} of {state.total_count} products "
            f"(page {state.page}/{state.total_pages})"
        )

        if self.availability is not None and products:
            self._schedule_enrichment(generation, [p.product_id for p in products], city_id)

        return LoadOutcome(
            generation=generation,
            success=True,
            products=products,
            total_count=state.total_count,
        )

    # Enrichment

    def _schedule_enrichment(self, generation: int, product_ids: List[str], city_id: Optional[int]) -> None:
        task = asyncio.create_task(self._enrich(generation, product_ids, city_id))
        self._enrichment_tasks.add(task)
        task.add_done_callback(self._enrichment_tasks.discard)

    async def _enrich(self, generation: int, product_ids: List[str], city_id: Optional[int]) -> None:
        effective_city = city_id if city_id is not None else DEFAULT_CITY_ID
        try:
            patches = await self.availability.load_availability(product_ids, effective_city)
        except Exception as e:
            logger.warning(f"Availability enrichment failed for {len(product_ids)} products: {e}")
            return

        # Rows were replaced or the city moved on while the request was out
        if generation != self._generation:
            logger.debug(f"Discarding availability for stale generation {generation}")
            return
        if city_id is not None and city_id != self._city_id():
            logger.debug(f"Discarding availability for previous city {city_id}")
            return

        if patches and self.on_enriched is not None:
            self.on_enriched(patches)

    async def wait_for_enrichment(self) -> None:
        if self._enrichment_tasks:
            await asyncio.gather(*list(self._enrichment_tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel the in-flight load and any pending enrichment"""
        pending = list(self._enrichment_tasks)
        if self._current is not None and not self._current.done():
            pending.append(self._current)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
