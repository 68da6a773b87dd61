from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from catalog.api.schemas.product import ProductCreate, ProductUpdate
from catalog.services.products import Product, apply_update, new_product

EARLIER = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def existing():
    return Product(
        id=7,
        name="Original Product",
        description="Original description",
        price=Decimal("19.99"),
        quantity=10,
        discount=Decimal("5.0"),
        created_at=EARLIER,
        last_updated=EARLIER,
    )


def test_new_product_copies_payload_and_stamps_both_timestamps():
    before = datetime.now(timezone.utc)
    product = new_product(
        ProductCreate(
            name="Test Product",
            description="A test product description",
            price=Decimal("19.99"),
            quantity=10,
            discount=Decimal("5.0"),
        )
    )

    assert product.id == 0
    assert product.name == "Test Product"
    assert product.description == "A test product description"
    assert product.price == Decimal("19.99")
    assert product.quantity == 10
    assert product.discount == Decimal("5.0")
    assert product.created_at == product.last_updated
    assert product.created_at - before < timedelta(seconds=1)
    assert product.created_at.tzinfo is not None


def test_update_with_every_field(existing):
    payload = ProductUpdate(
        id=7,
        name="Updated Product",
        description="Updated description",
        price=Decimal("24.99"),
        quantity=15,
        discount=Decimal("10.0"),
    )

    merged = apply_update(existing, payload)

    assert merged.name == "Updated Product"
    assert merged.description == "Updated description"
    assert merged.price == Decimal("24.99")
    assert merged.quantity == 15
    assert merged.discount == Decimal("10.0")
    assert merged.quantity_delta == 5
    assert merged.last_updated > EARLIER


def test_update_without_fields_only_touches_last_updated(existing):
    merged = apply_update(existing, ProductUpdate(id=7))

    assert merged.model_dump(exclude={"last_updated"}) == existing.model_dump(
        exclude={"last_updated"}
    )
    assert merged.quantity_delta == 0
    assert merged.last_updated > existing.last_updated


def test_update_only_specified_fields(existing):
    payload = ProductUpdate(id=7, name="Partially Updated Product", price=Decimal("25.99"))

    merged = apply_update(existing, payload)

    assert merged.name == "Partially Updated Product"
    assert merged.price == Decimal("25.99")
    assert merged.quantity == 10
    assert merged.discount == Decimal("5.0")
    assert merged.description == "Original description"
    assert merged.quantity_delta == 0


@pytest.mark.parametrize("new_quantity, expected_delta", [(15, 5), (10, 0), (0, -10), (3, -7)])
def test_quantity_delta_is_new_minus_old(existing, new_quantity, expected_delta):
    merged = apply_update(existing, ProductUpdate(id=7, quantity=new_quantity))

    assert merged.quantity == new_quantity
    assert merged.quantity_delta == expected_delta


def test_explicit_values_that_sentinels_could_not_express(existing):
    payload = ProductUpdate(id=7, description="", discount=Decimal("-2.5"), price=Decimal("0"))

    merged = apply_update(existing, payload)

    assert merged.description == ""
    assert merged.discount == Decimal("-2.5")
    assert merged.price == Decimal("0")


def test_apply_update_leaves_input_untouched(existing):
    snapshot = existing.model_copy()

    apply_update(existing, ProductUpdate(id=7, name="Other", quantity=1))

    assert existing == snapshot


def test_quantity_delta_is_not_serialized(existing):
    merged = apply_update(existing, ProductUpdate(id=7, quantity=12))

    body = merged.model_dump(mode="json", by_alias=True)

    assert "quantity_delta" not in body
    assert "quantityDelta" not in body
    assert body["createdAt"].startswith("2024-01-01")
    assert body["price"] == 19.99


@pytest.mark.parametrize(
    "payload",
    [
        {"id": 1, "price": -1},
        {"id": 1, "quantity": -1},
        {"id": 1, "name": "   "},
        {"name": "no id"},
        {"id": 0},
    ],
)
def test_invalid_update_payloads_are_rejected(payload):
    with pytest.raises(ValidationError):
        ProductUpdate(**payload)


@pytest.mark.parametrize(
    "payload",
    [
        {"price": 1, "quantity": 1},
        {"name": "", "price": 1, "quantity": 1},
        {"name": "x", "quantity": 1},
        {"name": "x", "price": 1},
        {"name": "x", "price": -0.5, "quantity": 1},
    ],
)
def test_invalid_creation_payloads_are_rejected(payload):
    with pytest.raises(ValidationError):
        ProductCreate(**payload)


def test_creation_payload_defaults():
    payload = ProductCreate(name=" Widget ", price=Decimal("9.99"), quantity=3, description=None)

    assert payload.name == "Widget"
    assert payload.description == ""
    assert payload.discount == Decimal("0")
