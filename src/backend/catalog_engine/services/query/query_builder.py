"""
Search Query Builder

Turns the listing state into the flat parameter bag sent to the search service.
Pure and total: no I/O, no validation. Filter values are passed through verbatim
because the search service is the validation authority.
"""

from typing import Any, Dict, Optional

from ...models.catalog import ListState

DEFAULT_CITY_ID = 1

RESERVED_KEYS = ("q", "page", "limit", "sort", "city_id")


def build_query(state: ListState, city_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Build the search parameter bag.

    Args:
        state: Current listing state
        city_id: Current city from the location context; falls back to DEFAULT_CITY_ID

    Returns:
        Dict with q, page, limit, sort, city_id and every filter as its own key

    Examples:
        >>> build_query(ListState(query=" drill ", filters={"brand_name": "Acme"}), 3)
        {'q': 'drill', 'page': 1, 'limit': 20, 'sort': 'relevance', 'city_id': 3, 'brand_name': 'Acme'}
    """
    params: Dict[str, Any] = {
        "q": state.query.strip(),
        "page": state.page,
        "limit": state.page_size,
        "sort": state.sort_key,
        "city_id": city_id if city_id is not None else DEFAULT_CITY_ID,
    }

    for key, value in state.filters.items():
        # Reserved keys are owned by the listing state
        if key in RESERVED_KEYS:
            continue
        params[key] = value

    return params
