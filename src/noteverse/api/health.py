"""Health check API endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", response_model=HealthCheckResponse)
async def health_check(response: Response, session: AsyncSession = Depends(get_db_session)):
    """Overall status. Answers 503 when the database is unreachable."""
    report = await HealthService(session).get_health_status()
    if report.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report


@router.get("/database", response_model=Dict[str, Any])
async def database_health(session: AsyncSession = Depends(get_db_session)):
    return await HealthService(session).check_database_health()


@router.get("/redis", response_model=Dict[str, Any])
async def redis_health():
    # the blacklist client is process-wide, no session needed
    return await HealthService(session=None).check_redis_health()
