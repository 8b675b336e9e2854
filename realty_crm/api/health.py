"""
Realty CRM Health Endpoints
"""

import time
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import structlog

from ..core.config import settings
from ..core.database import get_db

logger = structlog.get_logger()
router = APIRouter(prefix="/health", tags=["health"])

# Track service start time
start_time = time.time()


@router.get("/")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": "realty-crm",
        "version": settings.version,
        "uptime_seconds": time.time() - start_time,
        "timestamp": time.time()
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness check with database validation"""
    services = {}

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        services["database"] = "unhealthy"

    ready = all(state == "healthy" for state in services.values())

    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "service": "realty-crm",
            "version": settings.version,
            "uptime_seconds": time.time() - start_time,
            "services": services,
            "timestamp": time.time()
        }
    )


@router.get("/live")
async def liveness_check():
    """Liveness check - basic service responsiveness"""
    return {
        "status": "alive",
        "service": "realty-crm",
        "uptime_seconds": time.time() - start_time,
        "timestamp": time.time()
    }
