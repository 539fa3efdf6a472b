"""
Render Targets

The surface the coordinator draws on. A target receives whole view models and
never reaches back into engine state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from ...models.view import CatalogSummary, FilterChip, HeaderState, PaginationPlan, RenderedView

logger = logging.getLogger(__name__)


class RenderTarget(ABC):

    @abstractmethod
    def set_loading(self, loading: bool) -> None:
        pass

    @abstractmethod
    def replace_content(self, nodes: List[Dict]) -> None:
        """Swap the whole product area atomically"""
        pass

    @abstractmethod
    def show_empty_state(self) -> None:
        """Clear stale content and show the no-results placeholder"""
        pass

    @abstractmethod
    def patch_node(self, product_id: str, fields: Dict) -> bool:
        """Update fields of the node rendered for product_id; False if no such node"""
        pass

    @abstractmethod
    def render_summary(self, summary: CatalogSummary) -> None:
        pass

    @abstractmethod
    def render_pagination(self, plan: PaginationPlan) -> None:
        pass

    @abstractmethod
    def render_active_filters(self, chips: List[FilterChip]) -> None:
        pass

    def render_headers(self, headers: List[HeaderState]) -> None:
        """Only table targets show sortable headers"""
        pass


class SnapshotRenderTarget(RenderTarget):
    """Keeps the current display as a RenderedView snapshot"""

    def __init__(self, view_mode: str):
        self.view = RenderedView(view_mode=view_mode)
        self.content_replacements = 0

    def set_loading(self, loading: bool) -> None:
        self.view.loading = loading

    def replace_content(self, nodes: List[Dict]) -> None:
        self.view.nodes = list(nodes)
        self.view.empty = False
        self.content_replacements += 1

    def show_empty_state(self) -> None:
        self.view.nodes = []
        self.view.empty = True
        self.content_replacements += 1

    def patch_node(self, product_id: str, fields: Dict) -> bool:
        for node in self.view.nodes:
            if node.get("product_id") == product_id:
                node.update(fields)
                return True
        logger.debug(f"No rendered node for product {product_id}, patch ignored")
        return False

    def render_summary(self, summary: CatalogSummary) -> None:
        self.view.summary = summary

    def render_pagination(self, plan: PaginationPlan) -> None:
        self.view.pagination = plan

    def render_active_filters(self, chips: List[FilterChip]) -> None:
        self.view.active_filters = list(chips)

    def render_headers(self, headers: List[HeaderState]) -> None:
        self.view.headers = list(headers)

    def snapshot(self) -> RenderedView:
        return self.view.model_copy(deep=True)
