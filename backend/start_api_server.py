#!/usr/bin/env python3
"""Start the product catalog API with uvicorn."""

import uvicorn

from catalog.core.config import get_settings
from catalog.core.logging import configure_logging

if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        "catalog.main:app",
        host=settings.public_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
