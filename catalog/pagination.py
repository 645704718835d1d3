"""Page-count and page-button window for the product grid."""

from __future__ import annotations

from utils.schemas import PageWindow, PaginationState


def page_count(total: int, limit: int) -> int:
    if limit < 1:
        raise ValueError("limit must be >= 1")
    return -(-total // limit)


def page_window(state: PaginationState) -> PageWindow:
    count = page_count(state.total, state.limit)
    return PageWindow(
        pages=list(range(1, count + 1)),
        current=state.page,
        has_previous=state.page > 1,
        has_next=state.page < count,
        page_count=count,
    )
