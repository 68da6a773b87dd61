"""Database models package."""
from catalog.db.models.product import ProductRow

__all__ = ["ProductRow"]
