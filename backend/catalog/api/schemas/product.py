"""Pydantic models describing Product payloads."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class ProductCreate(BaseModel):
    """Fields required to create a product."""

    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    discount: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Product name is required")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, v: str | None) -> str:
        return "" if v is None else v


class ProductUpdate(BaseModel):
    """Sparse patch for an existing product.

    ``None`` (or leaving the key out) means "do not touch this field". Any
    other value is applied, so ``description=""`` clears the description and
    a negative ``discount`` is accepted as given.
    """

    id: int = Field(..., ge=1)
    name: str | None = None
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    quantity: int | None = Field(None, ge=0)
    discount: Decimal | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Product name cannot be empty")
        return v.strip()
