"""Health service implementation."""

import asyncio
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ... import __version__
from ..redis_client import get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_health_status(self) -> HealthCheckResponse:
        """Overall status. Redis is optional, so only the database decides health."""
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            overall_status = "degraded"
        else:
            overall_status = "healthy"

        return HealthCheckResponse(
            status=overall_status,
            version=__version__,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        try:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
        except (SQLAlchemyError, OSError) as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": 0.0,
            }
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((loop.time() - start_time) * 1000, 2),
        }

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check the shared Redis connection used for the token blacklist."""
        redis_client = get_redis_client()
        if not redis_client.is_connected:
            return {
                "connected": False,
                "status": "unavailable",
                "error": "Redis not connected",
                "response_time_ms": None,
            }

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        try:
            await redis_client.ping()
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((loop.time() - start_time) * 1000, 2),
        }
