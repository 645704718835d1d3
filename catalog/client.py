"""
CatalogClient — async HTTP client for the storefront API.

Wraps the REST surface with ``httpx`` and turns error responses back into
the ``core.errors`` taxonomy using the ``code`` field of the body, so
callers branch on the same error kinds the server raises.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from core.errors import ERRORS_BY_CODE, AppError, ValidationError
from utils.schemas import (
    AuthResponse,
    FilterState,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    SortSpec,
)

logger = logging.getLogger(__name__)


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    code = body.get("code") if isinstance(body, dict) else None
    message = body.get("detail") if isinstance(body, dict) else None
    cls = ERRORS_BY_CODE.get(code)
    if cls is ValidationError:
        raise ValidationError(message, errors=body.get("errors"))
    if cls is not None:
        raise cls(message)
    err = AppError(message or f"HTTP {resp.status_code}")
    err.status_code = resp.status_code
    raise err


class CatalogClient:
    """Async client; use as ``async with CatalogClient(base_url) as api:``."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    # ── auth ────────────────────────────────────────────────────────────

    async def signup(self, name: str, email: str, password: str) -> AuthResponse:
        resp = await self._client.post(
            "/auth/signup", json={"name": name, "email": email, "password": password},
        )
        _raise_for_error(resp)
        auth = AuthResponse.model_validate(resp.json())
        self.token = auth.token
        return auth

    async def login(self, email: str, password: str) -> AuthResponse:
        resp = await self._client.post("/auth/login", json={"email": email, "password": password})
        _raise_for_error(resp)
        auth = AuthResponse.model_validate(resp.json())
        self.token = auth.token
        return auth

    # ── products ────────────────────────────────────────────────────────

    async def list_products(
        self,
        page: int = 1,
        limit: int = 10,
        filters: Optional[FilterState] = None,
        sort: Optional[SortSpec] = None,
    ) -> Tuple[list[ProductRead], int]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if filters is not None:
            for key, value in filters.model_dump(exclude_none=True).items():
                if value == "":
                    continue
                params["q" if key == "query" else key] = value
        if sort is not None:
            params["sort"] = sort.field.value
            params["order"] = sort.direction.value
        resp = await self._client.get("/products", params=params)
        _raise_for_error(resp)
        body = resp.json()
        return [ProductRead.model_validate(p) for p in body["products"]], body["total"]

    async def get_product(self, product_id: str) -> ProductRead:
        resp = await self._client.get(f"/products/{product_id}")
        _raise_for_error(resp)
        return ProductRead.model_validate(resp.json())

    async def create_product(
        self,
        fields: ProductCreate,
        image: Optional[Tuple[str, bytes, str]] = None,
    ) -> ProductRead:
        """``image`` is ``(filename, content, content_type)``."""
        files = {"image": image} if image else None
        resp = await self._client.post(
            "/products",
            data={k: str(v) for k, v in fields.model_dump().items()},
            files=files,
            headers=self._auth_headers(),
        )
        _raise_for_error(resp)
        return ProductRead.model_validate(resp.json())

    async def update_product(
        self,
        product_id: str,
        fields: ProductUpdate,
        image: Optional[Tuple[str, bytes, str]] = None,
    ) -> ProductRead:
        files = {"image": image} if image else None
        resp = await self._client.put(
            f"/products/{product_id}",
            data={k: str(v) for k, v in fields.changes().items()},
            files=files,
            headers=self._auth_headers(),
        )
        _raise_for_error(resp)
        return ProductRead.model_validate(resp.json())

    async def delete_product(self, product_id: str) -> None:
        resp = await self._client.delete(f"/products/{product_id}", headers=self._auth_headers())
        _raise_for_error(resp)
