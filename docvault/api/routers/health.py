"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: docvault.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db import get_async_db

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)):
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed", extra={"error_msg": str(e)})
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unhealthy", message="Database unreachable").model_dump(),
        )
    return HealthResponse(status="healthy", message="Database connection OK")
