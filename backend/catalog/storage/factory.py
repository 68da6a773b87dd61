"""Pick a product store backend from settings."""

from __future__ import annotations

import logging

from catalog.core.config import Settings
from catalog.storage.base import ProductStore
from catalog.storage.memory_store import InMemoryProductStore
from catalog.storage.sql_store import SQLProductStore

logger = logging.getLogger(__name__)

MEMORY_URL_PREFIX = "memory://"


def create_store(settings: Settings) -> ProductStore:
    """Build the store named by ``settings.database_url``.

    ``memory://`` selects the in-process store; anything else is handed to
    SQLAlchemy.
    """
    if settings.database_url.startswith(MEMORY_URL_PREFIX):
        logger.info("Using in-memory product store")
        return InMemoryProductStore(default_page_limit=settings.default_page_limit)

    logger.info("Using SQL product store")
    return SQLProductStore.from_url(
        settings.database_url, default_page_limit=settings.default_page_limit
    )
