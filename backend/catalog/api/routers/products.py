"""CRUD endpoints for catalog products."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from catalog.api.dependencies.store import get_store
from catalog.api.schemas.error import APIError, format_operation
from catalog.api.schemas.product import ProductCreate, ProductUpdate
from catalog.services.products import Product, apply_update, new_product
from catalog.storage.base import ProductStore
from catalog.storage.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": APIError},
    status.HTTP_404_NOT_FOUND: {"model": APIError},
    status.HTTP_409_CONFLICT: {"model": APIError},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": APIError},
}


def api_error(
    request: Request, code: int, message: str, error: Exception | str = ""
) -> HTTPException:
    """Build the HTTPException carrying an :class:`APIError` body."""
    body = APIError(
        code=code,
        message=message,
        operation=format_operation(request.method, request.url.path),
        embedded_error=str(error),
    )
    return HTTPException(status_code=code, detail=body.model_dump(by_alias=True))


def _retrieve_or_404(request: Request, store: ProductStore, product_id: int) -> Product:
    try:
        return store.retrieve(product_id)
    except NotFoundError as e:
        raise api_error(request, status.HTTP_404_NOT_FOUND, "Product not found", e) from e
    except StoreError as e:
        raise api_error(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Error in product retrieval", e
        ) from e


@router.post(
    "/product/create",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=Product,
    responses=ERROR_RESPONSES,
)
def create_product(
    payload: ProductCreate,
    request: Request,
    store: ProductStore = Depends(get_store),
) -> Product:
    try:
        return store.create(new_product(payload))
    except StoreError as e:
        logger.error(f"Failed to create product: {e}")
        raise api_error(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Product not created", e
        ) from e


@router.get(
    "/product/{product_id}",
    summary="Fetch one product",
    response_model=Product,
    responses=ERROR_RESPONSES,
)
def retrieve_product(
    product_id: int,
    request: Request,
    store: ProductStore = Depends(get_store),
) -> Product:
    return _retrieve_or_404(request, store, product_id)


@router.get(
    "/product",
    summary="List products page by page",
    response_model=list[Product],
    responses=ERROR_RESPONSES,
)
def list_products(
    request: Request,
    page: int = Query(1, description="Page number (1-indexed)"),
    limit: int | None = Query(None, description="Items per page"),
    store: ProductStore = Depends(get_store),
) -> list[Product]:
    """Return one page of products; an empty page is ``[]``, not an error."""
    if page < 1:
        raise api_error(request, status.HTTP_400_BAD_REQUEST, "Invalid page number", page)
    if limit is not None and limit < 1:
        raise api_error(request, status.HTTP_400_BAD_REQUEST, "Invalid limit number", limit)

    try:
        # The store substitutes its default page size for 0
        return store.retrieve_all(page, limit or 0)
    except StoreError as e:
        raise api_error(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Error in product retrieval", e
        ) from e


@router.put(
    "/product/update/",
    summary="Partially update a product",
    response_model=Product,
    responses=ERROR_RESPONSES,
)
def update_product(
    payload: ProductUpdate,
    request: Request,
    store: ProductStore = Depends(get_store),
) -> Product:
    """Apply the fields present in ``payload``.

    A new ``quantity`` is sent to the store as a change relative to the
    quantity read here, so stock moved by another request in the meantime is
    kept. The update is refused with 409 when the result would be negative.
    """
    existing = _retrieve_or_404(request, store, payload.id)
    merged = apply_update(existing, payload)

    try:
        return store.update(merged, merged.quantity_delta)
    except ConflictError as e:
        raise api_error(
            request, status.HTTP_409_CONFLICT, "Product not updated: insufficient inventory", e
        ) from e
    except StoreError as e:
        raise api_error(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Product not updated", e
        ) from e


@router.delete(
    "/product/delete/{product_id}",
    summary="Delete a product",
    response_model=Product,
    responses=ERROR_RESPONSES,
)
def delete_product(
    product_id: int,
    request: Request,
    store: ProductStore = Depends(get_store),
) -> Product:
    """Delete the product and return it as it was just before deletion."""
    existing = _retrieve_or_404(request, store, product_id)

    try:
        store.delete(existing)
    except NotFoundError as e:
        raise api_error(request, status.HTTP_404_NOT_FOUND, "Product not found", e) from e
    except StoreError as e:
        raise api_error(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Product not deleted", e
        ) from e

    return existing
