"""Contracts shared by every product store backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from catalog.services.products import Product

DEFAULT_PAGE_LIMIT = 10


@runtime_checkable
class ProductCRUD(Protocol):
    """Create/read/update/delete over products.

    Create and update return the row as re-read from storage; callers should
    use the returned entity and drop the one they passed in.
    """

    def create(self, product: Product) -> Product: ...

    def retrieve(self, product_id: int) -> Product: ...

    def retrieve_all(self, page: int, limit: int) -> list[Product]: ...

    def update(self, product: Product, delta: int) -> Product: ...

    def delete(self, product: Product) -> None: ...


@runtime_checkable
class StoreLifecycle(Protocol):
    """Connection and schema management, kept apart from CRUD."""

    def verify_connection(self) -> None: ...

    def migrate_up(self) -> None: ...

    def migrate_down(self) -> None: ...

    def close(self) -> None: ...


class ProductStore(ProductCRUD, StoreLifecycle, Protocol):
    """What the application wires in: CRUD plus lifecycle."""


def page_bounds(page: int, limit: int, default_limit: int = DEFAULT_PAGE_LIMIT) -> tuple[int, int]:
    """Return ``(offset, limit)`` for a 1-indexed page.

    ``page < 1`` is treated as the first page and ``limit < 1`` as
    ``default_limit``.
    """
    if page < 1:
        page = 1
    if limit < 1:
        limit = default_limit
    return (page - 1) * limit, limit
