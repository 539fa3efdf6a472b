"""
Unit tests for the Loader: single-flight guard, failure path and enrichment
"""

import asyncio

import httpx
import pytest

from catalog_engine.models.catalog import ListState, LoadPolicy
from catalog_engine.services.catalog.loader import Loader


async def settle_tasks():
    for _ in range(5):
        await asyncio.sleep(0)


class TestLoad:

    @pytest.mark.asyncio
    async def test_success_commits_results(self, search_service):
        loader = Loader(search_service)
        state = ListState(page_size=20)

        outcome = await loader.load(state)

        assert outcome.success
        assert outcome.generation == 1
        assert len(state.products) == 20
        assert state.total_count == 45
        assert state.total_pages == 3
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_transport_failure_clears_results(self, search_service):
        loader = Loader(search_service)
        state = ListState()
        await loader.load(state)

        search_service.fail = httpx.ConnectError("connection refused")
        outcome = await loader.load(state)

        assert outcome.success is False
        assert "connection refused" in outcome.error
        assert state.products == []
        assert state.total_count == 0
        assert state.total_pages == 1
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_is_a_failure(self, search_service):
        search_service.unsuccessful = True
        state = ListState()

        outcome = await Loader(search_service).load(state)

        assert outcome.success is False
        assert outcome.error == "index unavailable"
        assert state.products == []

    @pytest.mark.asyncio
    async def test_drop_policy_ignores_request_while_loading(self, search_service):
        loader = Loader(search_service, policy=LoadPolicy.DROP)
        state = ListState()
        gate = asyncio.Event()
        search_service.hold = gate

        first = asyncio.create_task(loader.load(state))
        await settle_tasks()

        assert state.is_loading is True
        assert await loader.load(state) is None

        gate.set()
        outcome = await first

        assert outcome.success
        assert len(search_service.calls) == 1
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_supersede_policy_discards_stale_result(self, search_service):
        loader = Loader(search_service, policy=LoadPolicy.SUPERSEDE)
        state = ListState(query="slow")
        search_service.hold = asyncio.Event()

        first = asyncio.create_task(loader.load(state))
        await settle_tasks()

        state.query = "fast"
        second = await loader.load(state)
        stale = await first

        assert stale is None
        assert second.success
        assert second.generation == 2
        assert [c["q"] for c in search_service.calls] == ["slow", "fast"]
        assert state.is_loading is False


class TestEnrichment:

    @pytest.mark.asyncio
    async def test_enrichment_patches_are_delivered(self, search_service, availability_service):
        loader = Loader(search_service, availability=availability_service)
        received = []
        loader.on_enriched = received.extend
        state = ListState(page_size=10)

        await loader.load(state)
        await loader.wait_for_enrichment()

        assert len(received) == 10
        assert availability_service.calls[0]["city_id"] == 1
        assert availability_service.calls[0]["product_ids"] == [p.product_id for p in state.products]

    @pytest.mark.asyncio
    async def test_enrichment_failure_is_swallowed(self, search_service, availability_service):
        availability_service.fail = httpx.ReadTimeout("slow")
        loader = Loader(search_service, availability=availability_service)
        received = []
        loader.on_enriched = received.extend
        state = ListState()

        outcome = await loader.load(state)
        await loader.wait_for_enrichment()

        assert outcome.success
        assert received == []
        assert len(state.products) == 20

    @pytest.mark.asyncio
    async def test_stale_enrichment_is_discarded(self, search_service, availability_service):
        loader = Loader(search_service, availability=availability_service)
        received = []
        loader.on_enriched = received.extend
        state = ListState()

        await loader.load(state)
        # A newer load replaces the rows before the first enrichment lands
        loader._generation += 1
        await loader.wait_for_enrichment()

        assert received == []
