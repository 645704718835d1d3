"""
Product store: paged listing and CRUD over the ``products`` table.

Each write commits on its own, so a create / update / delete is atomic at
the row level.  Authorization is enforced by the caller (see
``auth.dependencies.require_admin``).
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import asc, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import config
from core.deadlines import store_call
from core.errors import NotFound, ValidationError
from database.models import Product
from utils.schemas import FilterState, ProductCreate, ProductUpdate, SortDirection, SortSpec

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def _check_window(page: int, limit: int) -> None:
    errors = []
    if page < 1:
        errors.append({"field": "page", "message": "must be >= 1"})
    if limit < 1 or limit > config.max_page_limit:
        errors.append({"field": "limit", "message": f"must be between 1 and {config.max_page_limit}"})
    if errors:
        raise ValidationError("Invalid pagination", errors=errors)


def _filter_clauses(filters: FilterState) -> list:
    clauses = []
    if filters.category:
        clauses.append(Product.category == filters.category)
    if filters.min_price is not None:
        clauses.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        clauses.append(Product.price <= filters.max_price)
    if filters.min_rating is not None:
        clauses.append(Product.rating >= filters.min_rating)
    if filters.query:
        # escape LIKE metacharacters; the match is a plain substring
        needle = (
            filters.query.lower()
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        pattern = f"%{needle}%"
        clauses.append(
            or_(
                func.lower(Product.name).like(pattern, escape="\\"),
                func.lower(Product.description).like(pattern, escape="\\"),
            )
        )
    return clauses


@store_call
async def list_products(
    session: AsyncSession,
    page: int = 1,
    limit: int = 10,
    filters: Optional[FilterState] = None,
    sort: Optional[SortSpec] = None,
) -> Tuple[List[Product], int]:
    """
    Return one page of products and the total count across all pages.

    Without ``filters`` / ``sort`` the page is in persisted order.  When
    given, both are applied over the whole table before paging and the
    total counts matching rows only.  A page past the end is empty.
    """
    _check_window(page, limit)

    clauses = _filter_clauses(filters) if filters is not None else []

    order_by = [Product.id]
    if sort is not None:
        column = getattr(Product, sort.field.value)
        if sort.field.value == "name":
            # SQLite's lower() is ASCII-only; non-ASCII capitals may order
            # differently than catalog.filters.sort_products
            column = func.lower(column)
        direction = desc if sort.direction == SortDirection.DESC else asc
        # insertion order breaks ties, matching the in-memory stable sort
        order_by = [direction(column), Product.id]

    count_stmt = select(func.count()).select_from(Product).where(*clauses)
    total = (await session.execute(count_stmt)).scalar_one()

    offset = (page - 1) * limit
    if offset >= total:
        # also keeps oversized offsets away from the driver
        return [], total

    stmt = select(Product).where(*clauses).order_by(*order_by).offset(offset).limit(limit)
    items = (await session.execute(stmt)).scalars().all()
    return list(items), total


@store_call
async def get_product(session: AsyncSession, product_id: str | uuid.UUID) -> Product:
    pid = _to_uuid(product_id)
    product = None
    if pid is not None:
        result = await session.execute(select(Product).where(Product.product_id == pid))
        product = result.scalar_one_or_none()
    if product is None:
        raise NotFound(f"Product with ID {product_id} not found")
    return product


@store_call
async def create_product(
    session: AsyncSession,
    fields: ProductCreate,
    image_url: Optional[str] = None,
) -> Product:
    product = Product(product_id=uuid.uuid4(), **fields.model_dump())
    if image_url:
        product.image = image_url
    session.add(product)
    await session.commit()
    logger.info("Created product %s (%s)", product.product_id, product.name)
    return product


@store_call
async def update_product(
    session: AsyncSession,
    product_id: str | uuid.UUID,
    fields: ProductUpdate,
    image_url: Optional[str] = None,
) -> Product:
    """Apply only the supplied fields; a new image replaces the old reference."""
    product = await get_product(session, product_id)
    changes = fields.changes()
    for key, value in changes.items():
        setattr(product, key, value)
    if image_url:
        changes["image"] = image_url
        product.image = image_url
    await session.commit()
    logger.info("Updated product %s: %s", product.product_id, sorted(changes))
    return product


@store_call
async def delete_product(session: AsyncSession, product_id: str | uuid.UUID) -> None:
    pid = _to_uuid(product_id)
    deleted = 0
    if pid is not None:
        result = await session.execute(delete(Product).where(Product.product_id == pid))
        deleted = result.rowcount
    if not deleted:
        raise NotFound(f"Product with ID {product_id} not found")
    await session.commit()
    logger.info("Deleted product %s", pid)
