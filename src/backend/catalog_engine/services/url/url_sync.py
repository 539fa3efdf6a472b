"""
URL Synchronization

Maps the deep-linkable subset of the listing state (search, page, sort) to and
from the address bar. Filters and page size are intentionally not part of the
URL: filters live in session storage and page size in durable settings.
"""

import logging
from typing import Dict, List
from urllib.parse import parse_qsl, urlencode, urlsplit

from ...models.catalog import ListState

logger = logging.getLogger(__name__)


class AddressBar:
    """
    Host address bar. Writes go through replace_state, which swaps the current
    entry without adding history or triggering navigation.
    """

    def __init__(self, url: str = "/shop"):
        parts = urlsplit(url)
        self.path = parts.path or "/"
        self.query = parts.query
        self.history_length = 1
        self.replace_count = 0

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path

    def params(self) -> Dict[str, str]:
        """First value of each query parameter"""
        params: Dict[str, str] = {}
        for key, value in parse_qsl(self.query, keep_blank_values=True):
            params.setdefault(key, value)
        return params

    def replace_state(self, url: str) -> None:
        parts = urlsplit(url)
        self.path = parts.path or self.path
        self.query = parts.query
        self.replace_count += 1


class UrlSync:
    """Bidirectional mapping between ListState and the address bar"""

    def __init__(self, address_bar: AddressBar, default_sort: str = "relevance"):
        self.address_bar = address_bar
        self.default_sort = default_sort

    def restore(self, state: ListState) -> List[str]:
        """
        Apply search/page/sort from the address bar onto the state.

        Address-bar values win over durable and session defaults.

        Returns:
            Names of the state fields that were overridden
        """
        params = self.address_bar.params()
        restored: List[str] = []

        if "search" in params:
            state.query = params["search"]
            restored.append("query")

        if "page" in params:
            try:
                page = int(params["page"])
            except ValueError:
                logger.warning(f"Ignoring malformed page parameter: {params['page']!r}")
                page = 1
            state.page = max(1, page)
            restored.append("page")

        if params.get("sort"):
            state.sort_key = params["sort"]
            restored.append("sort_key")

        if restored:
            logger.debug(f"Restored {restored} from URL {self.address_bar.url}")

        return restored

    def build_url(self, state: ListState) -> str:
        params = {}

        if state.query:
            params["search"] = state.query

        if state.page > 1:
            params["page"] = state.page

        if state.sort_key != self.default_sort:
            params["sort"] = state.sort_key

        query = urlencode(params)
        return f"{self.address_bar.path}?{query}" if query else self.address_bar.path

    def write(self, state: ListState) -> str:
        """Replace the current address-bar entry with the visible state"""
        url = self.build_url(state)
        self.address_bar.replace_state(url)
        return url
