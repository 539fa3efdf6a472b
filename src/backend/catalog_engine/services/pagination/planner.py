"""
Pagination Planner

Sliding-window page strip: a window of page numbers centred on the current
page, shifted inward at the edges rather than shrunk, with the first and last
pages pinned outside the window.
"""

from ...models.view import PaginationPlan


def plan_pagination(current: int, total: int, window_size: int = 5) -> PaginationPlan:
    """
    Compute the page strip for the current position.

    Args:
        current: Current page (clamped into [1, total])
        total: Total number of pages (floored at 1)
        window_size: Width of the numbered window

    Returns:
        PaginationPlan with the window, pinned endpoints and ellipsis markers

    Examples:
        >>> plan_pagination(1, 10).numbers
        [1, 2, 3, 4, 5]
        >>> plan_pagination(10, 10).numbers
        [6, 7, 8, 9, 10]
        >>> plan_pagination(5, 10).numbers
        [3, 4, 5, 6, 7]
    """
    total = max(1, total)
    current = max(1, min(current, total))
    window_size = max(1, window_size)

    start = max(1, current - window_size // 2)
    end = min(total, start + window_size - 1)

    # Window ran short at the right edge: shift it left instead of shrinking
    if end - start < window_size - 1:
        start = max(1, end - window_size + 1)

    show_first = start > 1
    show_last = end < total

    return PaginationPlan(
        numbers=list(range(start, end + 1)),
        current=current,
        total=total,
        show_first=show_first,
        show_last=show_last,
        leading_ellipsis=start > 2,
        trailing_ellipsis=end < total - 1,
        prev_enabled=current > 1,
        next_enabled=current < total,
    )
