"""Relational product store built on SQLAlchemy.

Quantity changes are applied inside the UPDATE statement itself
(``quantity = quantity + :delta`` guarded by ``quantity + :delta >= 0``), so
concurrent updates to one product never lose an inventory change and never
drive it below zero. The other columns are plain assignments: two writers
racing on name/description/price/discount end with the last one's values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.db.base import Base
from catalog.db.models.product import ProductRow
from catalog.db.session import build_engine, build_session_factory
from catalog.services.products import Product, utcnow
from catalog.storage.base import DEFAULT_PAGE_LIMIT, page_bounds
from catalog.storage.errors import (
    ConflictError,
    InvariantError,
    NotFoundError,
    StoreError,
    WriteError,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_entity(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description or "",
        price=row.price,
        quantity=row.quantity,
        discount=row.discount,
        created_at=_as_utc(row.created_at),
        last_updated=_as_utc(row.last_updated),
    )


class SQLProductStore:
    """Product store backed by any SQLAlchemy-supported database."""

    def __init__(self, engine: Engine, default_page_limit: int = DEFAULT_PAGE_LIMIT):
        self.engine = engine
        self.default_page_limit = default_page_limit
        self._session_factory = build_session_factory(engine)

    @classmethod
    def from_url(
        cls, database_url: str, default_page_limit: int = DEFAULT_PAGE_LIMIT
    ) -> SQLProductStore:
        return cls(build_engine(database_url), default_page_limit=default_page_limit)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on any error."""
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # CRUD

    def create(self, product: Product) -> Product:
        now = utcnow()
        row = ProductRow(
            name=product.name,
            description=product.description,
            price=product.price,
            discount=product.discount,
            quantity=product.quantity,
            created_at=product.created_at or now,
            last_updated=product.last_updated or now,
        )
        try:
            with self._session() as db:
                db.add(row)
                db.flush()
                product_id = row.id
        except SQLAlchemyError as e:
            logger.error(f"Database error creating product: {e}", exc_info=True)
            raise WriteError(f"could not insert product: {e}") from e

        logger.info(f"Created product {product_id}")
        return self.retrieve(product_id)

    def retrieve(self, product_id: int) -> Product:
        try:
            with self._session() as db:
                row = db.get(ProductRow, product_id)
                if row is None:
                    raise NotFoundError(product_id)
                return _to_entity(row)
        except SQLAlchemyError as e:
            logger.error(
                f"Database error retrieving product {product_id}: {e}", exc_info=True
            )
            raise StoreError(f"could not retrieve product {product_id}: {e}") from e

    def retrieve_all(self, page: int, limit: int) -> list[Product]:
        offset, limit = page_bounds(page, limit, self.default_page_limit)
        query = select(ProductRow).order_by(ProductRow.id).offset(offset).limit(limit)
        try:
            with self._session() as db:
                return [_to_entity(row) for row in db.scalars(query).all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error listing products: {e}", exc_info=True)
            raise StoreError(f"could not list products: {e}") from e

    def update(self, product: Product, delta: int) -> Product:
        """Persist ``product`` and move its stored quantity by ``delta``.

        The quantity column is never overwritten with ``product.quantity``;
        the stored value is incremented by ``delta`` only if the result stays
        non-negative. Returns the row as re-read after the write.

        Raises:
            ConflictError: no row matched (insufficient inventory or unknown id)
            InvariantError: more than one row matched; the write is rolled back
            WriteError: the database rejected the statement
        """
        stmt = (
            update(ProductRow)
            .where(ProductRow.id == product.id)
            .where(ProductRow.quantity + delta >= 0)
            .values(
                name=product.name,
                description=product.description,
                price=product.price,
                discount=product.discount,
                quantity=ProductRow.quantity + delta,
                last_updated=product.last_updated or utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            with self._session() as db:
                rows_affected = db.execute(stmt).rowcount
                if rows_affected > 1:
                    raise InvariantError(product.id, rows_affected)
                if rows_affected == 0:
                    raise ConflictError(product.id, delta)
        except InvariantError:
            logger.critical(
                f"Update of product {product.id} matched more than one row; rolled back"
            )
            raise
        except ConflictError:
            logger.info(f"Rejected update of product {product.id} (delta {delta:+d})")
            raise
        except IntegrityError as e:
            logger.warning(f"Constraint rejected update of product {product.id}: {e}")
            raise ConflictError(product.id, delta) from e
        except SQLAlchemyError as e:
            logger.error(
                f"Database error updating product {product.id}: {e}", exc_info=True
            )
            raise WriteError(f"could not update product {product.id}: {e}") from e

        logger.info(f"Updated product {product.id} (delta {delta:+d})")
        return self.retrieve(product.id)

    def delete(self, product: Product) -> None:
        stmt = delete(ProductRow).where(ProductRow.id == product.id)
        try:
            with self._session() as db:
                rows_affected = db.execute(stmt).rowcount
                if rows_affected > 1:
                    raise InvariantError(product.id, rows_affected)
                if rows_affected == 0:
                    raise NotFoundError(product.id)
        except InvariantError:
            logger.critical(
                f"Delete of product {product.id} matched more than one row; rolled back"
            )
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Database error deleting product {product.id}: {e}", exc_info=True
            )
            raise WriteError(f"could not delete product {product.id}: {e}") from e

        logger.info(f"Deleted product {product.id}")

    # Lifecycle

    def verify_connection(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
        except SQLAlchemyError as e:
            raise StoreError(f"could not establish connection to the storage: {e}") from e

    def migrate_up(self) -> None:
        Base.metadata.create_all(self.engine, tables=[ProductRow.__table__])
        logger.info("Products table is in place")

    def migrate_down(self) -> None:
        Base.metadata.drop_all(self.engine, tables=[ProductRow.__table__])
        logger.info("Dropped products table")

    def close(self) -> None:
        self.engine.dispose()
