"""
Unit tests for address-bar synchronization
"""

from catalog_engine.models.catalog import ListState
from catalog_engine.services.url.url_sync import AddressBar, UrlSync


class TestRestore:

    def test_restores_search_page_and_sort(self):
        sync = UrlSync(AddressBar("/shop?search=drill&page=3&sort=name"))
        state = ListState()

        restored = sync.restore(state)

        assert state.query == "drill"
        assert state.page == 3
        assert state.sort_key == "name"
        assert restored == ["query", "page", "sort_key"]

    def test_invalid_page_becomes_one(self):
        state = ListState(page=4)

        UrlSync(AddressBar("/shop?page=abc")).restore(state)
        assert state.page == 1

        UrlSync(AddressBar("/shop?page=-2")).restore(state)
        assert state.page == 1

    def test_filters_and_page_size_are_not_restored(self):
        state = ListState(page_size=20)

        UrlSync(AddressBar("/shop?brand_name=Acme&limit=100")).restore(state)

        assert state.filters == {}
        assert state.page_size == 20

    def test_empty_sort_is_ignored(self):
        state = ListState(sort_key="name")

        UrlSync(AddressBar("/shop?sort=")).restore(state)

        assert state.sort_key == "name"


class TestWrite:

    def test_defaults_produce_bare_path(self):
        bar = AddressBar("/shop?search=old")
        sync = UrlSync(bar)

        url = sync.write(ListState())

        assert url == "/shop"
        assert bar.url == "/shop"

    def test_writes_non_default_values(self):
        bar = AddressBar("/shop")
        sync = UrlSync(bar)

        sync.write(ListState(query="angle grinder", page=2, sort_key="price_asc"))

        assert bar.params() == {"search": "angle grinder", "page": "2", "sort": "price_asc"}

    def test_write_replaces_history_entry(self):
        bar = AddressBar("/shop")
        sync = UrlSync(bar)

        sync.write(ListState(page=2))
        sync.write(ListState(page=3))

        assert bar.history_length == 1
        assert bar.replace_count == 2
