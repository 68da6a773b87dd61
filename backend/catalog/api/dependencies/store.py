"""Product store dependency."""

from fastapi import Request

from catalog.storage.base import ProductStore


def get_store(request: Request) -> ProductStore:
    """FastAPI dependency returning the store the app was built with."""
    return request.app.state.store
