'''
Liveness and store connectivity checks. None of these require authentication.
'''
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.db.session import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "task-tracker-api"


@router.get("/")
async def root():
    return {"message": "Task Management API is running!"}


@router.get("/health")
async def health():
    """
    Simple health check. Does not require database connectivity.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "API is running",
        "service": SERVICE_NAME,
    }


@router.get("/health/full")
async def health_full(database: Database = Depends(get_database)):
    """
    Verifies both API and database connectivity.
    """
    connected = await database.ping()
    if not connected:
        logger.error("Database health check failed")
    return {
        "status": "healthy" if connected else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if connected else "disconnected",
        "service": SERVICE_NAME,
        "app_env": settings.APP_ENV,
    }
