"""
Product API routes — public listing / detail, admin-only writes.

Route prefix: /products
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.uploads import save_upload
from auth.dependencies import db_session, require_admin
from config.settings import config
from core.errors import ValidationError
from database import products as store
from database.models import User
from utils.schemas import (
    FilterState,
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUpdate,
    SortDirection,
    SortField,
    SortSpec,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


def _build(model, data: Dict[str, Any]):
    try:
        return model(**data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from None


@router.get("", response_model=ProductPage)
async def list_products(
    page: int = Query(1),
    limit: int = Query(config.default_page_limit),
    category: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None),
    max_price: Optional[float] = Query(None),
    min_rating: Optional[float] = Query(None),
    q: Optional[str] = Query(None),
    sort: Optional[SortField] = Query(None),
    order: SortDirection = Query(SortDirection.ASC),
    session: AsyncSession = Depends(db_session),
) -> ProductPage:
    """
    One page of products plus the total.

    Optional filter / sort parameters are applied across the whole catalog
    before paging.
    """
    filters = _build(
        FilterState,
        {
            "category": category,
            "min_price": min_price,
            "max_price": max_price,
            "min_rating": min_rating,
            "query": q or "",
        },
    )
    sort_spec = SortSpec(field=sort, direction=order) if sort is not None else None
    items, total = await store.list_products(
        session,
        page=page,
        limit=limit,
        filters=None if filters.is_empty() else filters,
        sort=sort_spec,
    )
    return ProductPage(
        products=[ProductRead.model_validate(p) for p in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: str,
    session: AsyncSession = Depends(db_session),
) -> ProductRead:
    return ProductRead.model_validate(await store.get_product(session, product_id))


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> ProductRead:
    """Create a product from a multipart form (admin only)."""
    fields = _build(
        ProductCreate,
        {
            "name": name,
            "description": description,
            "category": category,
            "price": price,
            "rating": rating,
        },
    )
    image_url = await save_upload(image)
    product = await store.create_product(session, fields, image_url)
    logger.info("Admin %s created product %s", admin.user_id, product.product_id)
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> ProductRead:
    """Partial update; only the form fields that were sent change (admin only)."""
    supplied = {
        key: value
        for key, value in {
            "name": name,
            "description": description,
            "category": category,
            "price": price,
            "rating": rating,
        }.items()
        if value is not None
    }
    fields = _build(ProductUpdate, supplied)
    # resolve the product before touching disk
    await store.get_product(session, product_id)
    image_url = await save_upload(image)
    product = await store.update_product(session, product_id, fields, image_url)
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> Response:
    await store.delete_product(session, product_id)
    logger.info("Admin %s deleted product %s", admin.user_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
