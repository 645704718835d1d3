"""
Pydantic schemas for the storefront API.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("email")
    @classmethod
    def _looks_like_email(cls, v: str) -> str:
        local, at, domain = v.partition("@")
        if not at or not local or "." not in domain:
            raise ValueError("must be a valid email address")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPublic(BaseModel):
    """Public user view.  Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    name: str
    email: str
    role: str
    phone: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return str(v)


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=64)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    rating: float = Field(..., ge=0, le=5, allow_inf_nan=False)


class ProductUpdate(BaseModel):
    """
    Partial update.  Only the fields present in ``model_fields_set`` are
    applied; an explicit ``None`` counts as "not supplied".
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=64)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    rating: Optional[float] = Field(None, ge=0, le=5, allow_inf_nan=False)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("product_id", "id"))
    name: str
    description: str
    category: str
    price: float
    rating: float
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return str(v)


class ProductPage(BaseModel):
    products: List[ProductRead]
    total: int
    page: int
    limit: int


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog query: filter / sort / pagination
# ═══════════════════════════════════════════════════════════════════════════════


class SortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    RATING = "rating"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    field: SortField = SortField.NAME
    direction: SortDirection = SortDirection.ASC


class FilterState(BaseModel):
    """Conjunctive product filter.  ``None`` / empty means "not set"."""

    model_config = ConfigDict(extra="forbid")

    category: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    min_rating: Optional[float] = Field(None, ge=0, le=5, allow_inf_nan=False)
    query: str = ""

    def is_empty(self) -> bool:
        return (
            not self.category
            and self.min_price is None
            and self.max_price is None
            and self.min_rating is None
            and not self.query
        )


class PaginationState(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    total: int = Field(0, ge=0)


class PageWindow(BaseModel):
    pages: List[int]
    current: int
    has_previous: bool
    has_next: bool
    page_count: int

