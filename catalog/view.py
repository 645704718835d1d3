"""
Client-held catalog state.

``CatalogView`` keeps the last fetched page, the active filter, sort and
pagination, and derives the visible product list from them.

Filtering is scoped to the held page: narrowing a filter never pulls in
products from pages that were not fetched.  To filter the whole catalog,
pass the filter to ``CatalogClient.list_products`` instead, which applies
it server-side before paging.
"""

from __future__ import annotations

from typing import Any, List, Optional

from catalog.filters import apply_filters, sort_products
from catalog.pagination import page_window
from utils.schemas import (
    FilterState,
    PageWindow,
    PaginationState,
    ProductRead,
    SortDirection,
    SortField,
    SortSpec,
)


class CatalogView:
    def __init__(self, limit: int = 10):
        self.items: List[ProductRead] = []
        self.visible: List[ProductRead] = []
        self.filters = FilterState()
        self.sort_spec: Optional[SortSpec] = None
        self.pagination = PaginationState(limit=limit)

    # ── page loading ────────────────────────────────────────────────────

    def load_page(self, products: List[ProductRead], total: int) -> None:
        """Replace the held page with a fresh fetch."""
        self.items = list(products)
        self.visible = list(products)
        self.pagination = self.pagination.model_copy(update={"total": total})

    def set_page(self, page: int) -> None:
        self.pagination = PaginationState(
            page=page, limit=self.pagination.limit, total=self.pagination.total,
        )

    def window(self) -> PageWindow:
        return page_window(self.pagination)

    # ── filter / sort ───────────────────────────────────────────────────

    def set_filters(self, **changes: Any) -> List[ProductRead]:
        """Merge ``changes`` into the filter state and re-derive the view."""
        merged = {**self.filters.model_dump(), **changes}
        self.filters = FilterState(**merged)
        self.visible = apply_filters(self.items, self.filters)
        return self.visible

    def clear_filters(self) -> List[ProductRead]:
        self.filters = FilterState()
        self.visible = list(self.items)
        return self.visible

    def sort(
        self,
        field: SortField | str,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> List[ProductRead]:
        """Sort the currently visible products."""
        self.sort_spec = SortSpec(field=field, direction=direction)
        self.visible = sort_products(self.visible, self.sort_spec.field, self.sort_spec.direction)
        return self.visible

    # ── local mutations after admin writes ──────────────────────────────

    def product_created(self, product: ProductRead) -> None:
        self.items.insert(0, product)
        self.visible = list(self.items)

    def product_updated(self, product: ProductRead) -> None:
        for index, item in enumerate(self.items):
            if item.id == product.id:
                self.items[index] = product
                self.visible = list(self.items)
                return

    def product_deleted(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.id != product_id]
        self.visible = list(self.items)
