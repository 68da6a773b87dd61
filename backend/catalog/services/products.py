"""Product entity and the merge rule that turns a sparse patch into a delta."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from catalog.api.schemas.product import ProductCreate, ProductUpdate

# Prices travel as JSON numbers, not strings
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]

PATCHABLE_FIELDS = ("name", "description", "price", "discount")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    """A catalog product as the store last reported it.

    ``quantity_delta`` is transient: it carries the change in quantity
    computed by :func:`apply_update` to the store and is never persisted or
    serialized.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    name: str
    description: str = ""
    price: Money
    quantity: int
    discount: Money = Decimal("0")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")
    quantity_delta: int = Field(default=0, exclude=True)


def new_product(payload: ProductCreate) -> Product:
    """Build an unsaved product; the store assigns its id."""
    now = utcnow()
    return Product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        quantity=payload.quantity,
        discount=payload.discount,
        created_at=now,
        last_updated=now,
    )


def apply_update(product: Product, payload: ProductUpdate) -> Product:
    """Merge ``payload`` onto ``product`` and return the result as a new entity.

    Fields left as ``None`` in the payload keep their current value. When a
    quantity is given, the returned product carries it together with
    ``quantity_delta = payload.quantity - product.quantity``; otherwise the
    delta is zero. ``last_updated`` is always refreshed. ``product`` itself is
    not modified.
    """
    changes: dict[str, object] = {}
    for field in PATCHABLE_FIELDS:
        value = getattr(payload, field)
        if value is not None:
            changes[field] = value

    delta = 0
    if payload.quantity is not None:
        delta = payload.quantity - product.quantity
        changes["quantity"] = payload.quantity

    changes["quantity_delta"] = delta
    changes["last_updated"] = utcnow()
    return product.model_copy(update=changes)
