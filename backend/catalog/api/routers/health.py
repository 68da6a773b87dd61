"""Simple health and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from catalog.api.dependencies.store import get_store
from catalog.storage.base import ProductStore
from catalog.storage.errors import StoreError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "product-catalog-api"


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates API process is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/ready", summary="Readiness probe")
def ready(store: ProductStore = Depends(get_store)) -> dict[str, Any]:
    """Check that the product store is reachable.

    Used by load balancers to determine if traffic should be routed to this instance.
    """
    checks: dict[str, Any] = {"status": "ok", "service": SERVICE_NAME, "checks": {}}

    try:
        store.verify_connection()
        checks["checks"]["storage"] = {
            "status": "healthy",
            "message": "Storage connection successful",
        }
    except StoreError as e:
        logger.error(f"Storage health check failed: {e}", exc_info=True)
        checks["checks"]["storage"] = {
            "status": "unhealthy",
            "message": str(e),
        }
        checks["status"] = "unhealthy"
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        ) from e

    return checks
