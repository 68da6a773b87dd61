"""SQLAlchemy model for product records."""

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, Text
from sqlalchemy.types import DateTime

from catalog.db.base import Base


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric, nullable=False)
    discount = Column(Numeric, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_updated = Column(DateTime(timezone=True), nullable=False)

    # The store also guards this in its conditional update statement.
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )
