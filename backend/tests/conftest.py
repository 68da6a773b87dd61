import os

# Keep the module-level app in catalog.main off any real database
os.environ.setdefault("DATABASE_URL", "memory://")

from decimal import Decimal

import pytest

from catalog.api.schemas.product import ProductCreate
from catalog.services.products import new_product
from catalog.storage.memory_store import InMemoryProductStore
from catalog.storage.sql_store import SQLProductStore


@pytest.fixture
def sql_store():
    store = SQLProductStore.from_url("sqlite://")
    store.migrate_up()
    yield store
    store.close()


@pytest.fixture
def memory_store():
    return InMemoryProductStore()


@pytest.fixture(params=["sql", "memory"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def file_sql_store(tmp_path):
    store = SQLProductStore.from_url(f"sqlite:///{tmp_path / 'catalog.db'}")
    store.migrate_up()
    yield store
    store.close()


@pytest.fixture(params=["file_sql", "memory"])
def threaded_store(request):
    """Stores that may be shared between threads."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def make_product():
    def _make(name="Widget", price="9.99", quantity=3, discount="0", description=""):
        return new_product(
            ProductCreate(
                name=name,
                price=Decimal(price),
                quantity=quantity,
                discount=Decimal(discount),
                description=description,
            )
        )

    return _make
