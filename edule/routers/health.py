"""
Health Check Router

Provides health check endpoints for monitoring application status.
The readiness probe also confirms the collection store can be read.
"""

from fastapi import APIRouter, Depends, HTTPException
from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.errors import StoreUnavailable
from edule.models.schemas import HealthCheckResponse
from edule.utils.timestamps import utcnow, utcnow_iso
import time
import os

# Initialize router
router = APIRouter()

# Application start time for uptime calculation
_start_time = time.time()

READINESS_COLLECTIONS = ("courses", "users", "enrollments")


@router.get("/health", response_model=HealthCheckResponse, summary="Basic Health Check")
async def health_check():
    """
    Basic health check endpoint

    Returns application status, version, and environment information.
    This endpoint is used by load balancers and monitoring systems.
    """
    uptime = time.time() - _start_time

    return HealthCheckResponse(
        status="healthy",
        version=os.getenv("APP_VERSION", "1.0.0"),
        environment=os.getenv("ENVIRONMENT", "development"),
        timestamp=utcnow(),
        uptime=uptime
    )


@router.get("/health/ready", summary="Readiness Check")
async def readiness_check(store: RecordStore = Depends(get_store)):
    """
    Kubernetes-style readiness probe

    Returns 200 if every required collection can be loaded,
    503 if any of them is missing or corrupt.
    """
    counts = {}
    for name in READINESS_COLLECTIONS:
        try:
            counts[name] = len(await store.load(name))
        except StoreUnavailable as e:
            raise HTTPException(
                status_code=503,
                detail=f"Application not ready: {e.message}"
            )

    return {"status": "ready", "collections": counts, "timestamp": utcnow_iso()}


@router.get("/health/live", summary="Liveness Check")
async def liveness_check():
    """
    Kubernetes-style liveness probe

    Returns 200 if the application is alive and responding.
    """
    return {
        "status": "alive",
        "timestamp": utcnow_iso(),
        "pid": os.getpid()
    }
