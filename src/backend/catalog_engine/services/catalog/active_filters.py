"""Active-filter chips: the free-text pseudo-filter followed by structured filters"""

from typing import Dict, List, Optional

from ...models.catalog import ListState
from ...models.view import FilterChip


def build_active_filters(
    state: ListState,
    labels: Optional[Dict[str, str]] = None,
    query_label: str = "Поиск",
) -> List[FilterChip]:
    labels = labels or {}
    chips = []

    if state.query:
        chips.append(FilterChip(key=None, label=query_label, value=state.query))

    for key, value in state.filters.items():
        chips.append(FilterChip(key=key, label=labels.get(key, key), value=value))

    return chips
