from typing import Any, Dict
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.db.async_session import check_async_database_health

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/test")
async def liveness() -> Dict[str, str]:
    """Liveness check; does not touch the database."""
    return {"message": "API is working!"}


@router.get("/health")
async def health_check() -> Any:
    """
    Database health check.

    Returns:
        dict: status, round-trip time and timestamp; 503 when unhealthy
    """
    health_status = await check_async_database_health()
    if health_status["status"] != "healthy":
        logger.error(f"Health check failed: {health_status}")
        return JSONResponse(status_code=503, content={"success": False, **health_status})
    return {"success": True, **health_status}
