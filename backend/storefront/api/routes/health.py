"""Health & Readiness Probes — liveness and store-readiness endpoints.

Invariants:
    - GET /api/health/ answers 200 whenever the process is up; it never touches storage
    - GET /api/health/ready answers 503 while the snapshot store cannot be written
      (data dir missing/read-only, or database unreachable)

Design Decisions:
    - Readiness reports the shop and backend so a misrouted deployment (wrong
      DATA_DIR, wrong STORAGE_BACKEND) is visible from the probe alone
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from storefront.config import Settings, get_settings
from storefront.services.store_access import SnapshotAccess, get_snapshot_access

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

API_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "service": settings.shop_name,
        "version": API_VERSION,
    }


@router.get("/ready")
async def readiness(
    access: SnapshotAccess = Depends(get_snapshot_access),
    settings: Settings = Depends(get_settings),
):
    """503 until the snapshot store accepts writes."""
    backend = settings.storage_backend.value
    if not await access.health_check():
        logger.warning(
            f"Readiness failed: {backend} store unavailable",
            extra={"error_code": "STORE_UNAVAILABLE"},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
                "backend": backend,
            },
        )
    return {"status": "ready", "backend": backend, "checks": {"store": "healthy"}}
