"""FastAPI application bootstrap with router wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api.routers import health, products
from catalog.core.config import Settings, get_settings
from catalog.storage.base import ProductStore
from catalog.storage.factory import create_store

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(
    settings: Settings | None = None, store: ProductStore | None = None
) -> FastAPI:
    """Instantiate the FastAPI app around a product store.

    ``store`` defaults to the backend named by ``settings.database_url``.
    The store's connection is verified on startup, the products table is
    created when ``migrate_up`` is set, and on shutdown it is dropped when
    ``migrate_down`` is set before the store is closed.
    """
    settings = settings or get_settings()
    store = store or create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store.verify_connection()
        logger.info("Successfully established connection to storage component")
        if settings.migrate_up:
            logger.info("Running up migrations")
            store.migrate_up()

        yield

        logger.info("Shutting down server...")
        if settings.migrate_down:
            logger.info("Running down migrations")
            store.migrate_down()
        store.close()
        logger.info("Server stopped")

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(products.router, prefix=API_PREFIX, tags=["products"])

    return app


app = create_app()
