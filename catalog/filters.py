"""
In-memory filter / sort engine for product lists.

Works on whatever sequence of products the caller holds (typically one
fetched page) and never reaches back to the store.  Products may be ORM
rows, ``ProductRead`` models or any object exposing ``name``,
``description``, ``category``, ``price`` and ``rating`` attributes.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, TypeVar

from utils.schemas import FilterState, SortDirection, SortField, SortSpec

P = TypeVar("P")


def matches(product: Any, state: FilterState) -> bool:
    """Conjunctive predicate; each criterion is skipped when unset."""
    if state.category and product.category != state.category:
        return False
    if state.min_price is not None and product.price < state.min_price:
        return False
    if state.max_price is not None and product.price > state.max_price:
        return False
    if state.min_rating is not None and product.rating < state.min_rating:
        return False
    if state.query:
        needle = state.query.lower()
        if needle not in product.name.lower() and needle not in product.description.lower():
            return False
    return True


def apply_filters(products: Iterable[P], state: FilterState) -> List[P]:
    return [p for p in products if matches(p, state)]


def _sort_key(field: SortField):
    if field == SortField.NAME:
        return lambda p: p.name.lower()
    if field == SortField.PRICE:
        return lambda p: p.price
    return lambda p: p.rating


def sort_products(
    products: Iterable[P],
    field: SortField | str = SortField.NAME,
    direction: SortDirection | str = SortDirection.ASC,
) -> List[P]:
    """
    Stable sort on one field.

    ``sorted(reverse=True)`` keeps equal elements in input order, so ties
    never move in either direction and re-sorting is a no-op.
    """
    field = SortField(field)
    direction = SortDirection(direction)
    return sorted(products, key=_sort_key(field), reverse=direction == SortDirection.DESC)


def filter_and_sort(
    products: Sequence[P],
    state: Optional[FilterState] = None,
    sort: Optional[SortSpec] = None,
) -> List[P]:
    result = apply_filters(products, state) if state is not None else list(products)
    if sort is not None:
        result = sort_products(result, sort.field, sort.direction)
    return result
