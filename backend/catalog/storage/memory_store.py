"""In-process product store used by tests and ``memory://`` deployments."""

from __future__ import annotations

import logging
import threading

from catalog.services.products import Product, utcnow
from catalog.storage.base import DEFAULT_PAGE_LIMIT, page_bounds
from catalog.storage.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class InMemoryProductStore:
    """Dict-backed store with the same contract as :class:`SQLProductStore`.

    One lock guards every operation, so the quantity check and the increment
    in :meth:`update` happen as a single step just like the SQL backend's
    conditional statement.
    """

    def __init__(self, default_page_limit: int = DEFAULT_PAGE_LIMIT):
        self.default_page_limit = default_page_limit
        self._rows: dict[int, Product] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, product: Product) -> Product:
        now = utcnow()
        with self._lock:
            product_id = self._next_id
            self._next_id += 1
            stored = product.model_copy(
                update={
                    "id": product_id,
                    "created_at": product.created_at or now,
                    "last_updated": product.last_updated or now,
                    "quantity_delta": 0,
                }
            )
            self._rows[product_id] = stored
        logger.info(f"Created product {product_id}")
        return stored.model_copy()

    def retrieve(self, product_id: int) -> Product:
        with self._lock:
            stored = self._rows.get(product_id)
        if stored is None:
            raise NotFoundError(product_id)
        return stored.model_copy()

    def retrieve_all(self, page: int, limit: int) -> list[Product]:
        offset, limit = page_bounds(page, limit, self.default_page_limit)
        with self._lock:
            ordered = [self._rows[key] for key in sorted(self._rows)]
        return [p.model_copy() for p in ordered[offset : offset + limit]]

    def update(self, product: Product, delta: int) -> Product:
        with self._lock:
            stored = self._rows.get(product.id)
            if stored is None or stored.quantity + delta < 0:
                logger.info(f"Rejected update of product {product.id} (delta {delta:+d})")
                raise ConflictError(product.id, delta)
            updated = stored.model_copy(
                update={
                    "name": product.name,
                    "description": product.description,
                    "price": product.price,
                    "discount": product.discount,
                    "quantity": stored.quantity + delta,
                    "last_updated": product.last_updated or utcnow(),
                    "quantity_delta": 0,
                }
            )
            self._rows[product.id] = updated
        logger.info(f"Updated product {product.id} (delta {delta:+d})")
        return updated.model_copy()

    def delete(self, product: Product) -> None:
        with self._lock:
            if self._rows.pop(product.id, None) is None:
                raise NotFoundError(product.id)
        logger.info(f"Deleted product {product.id}")

    def verify_connection(self) -> None:
        return None

    def migrate_up(self) -> None:
        return None

    def migrate_down(self) -> None:
        with self._lock:
            self._rows.clear()
            self._next_id = 1

    def close(self) -> None:
        return None
