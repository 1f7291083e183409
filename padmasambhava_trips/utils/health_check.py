"""
Health check utilities for monitoring service dependencies.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import get_cache

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthCheckResult:
    """Result of a health check."""

    def __init__(
        self,
        service: str,
        healthy: bool,
        response_time: float,
        details: Optional[Dict[str, Any]] = None,
        critical: bool = True,
    ):
        self.service = service
        self.healthy = healthy
        self.response_time = response_time
        self.details = details or {}
        self.critical = critical
        self.timestamp = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service": self.service,
            "healthy": self.healthy,
            "critical": self.critical,
            "response_time": round(self.response_time, 4),
            "details": self.details,
            "timestamp": self.timestamp
        }


async def check_database_health(db: AsyncSession) -> HealthCheckResult:
    """Check database connectivity with a trivial query."""
    start_time = time.time()

    try:
        result = await db.execute(text("SELECT 1"))
        healthy = result.scalar_one() == 1
        details = {"query": "SELECT 1", "result": "success" if healthy else "unexpected result"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        healthy = False
        details = {"error": str(e), "error_type": type(e).__name__}

    return HealthCheckResult(
        service="database",
        healthy=healthy,
        response_time=time.time() - start_time,
        details=details
    )


async def check_redis_health() -> HealthCheckResult:
    """
    Check Redis connectivity.

    Redis only backs the statistics cache, so an unreachable server marks the
    check unhealthy without making the service as a whole unhealthy.
    """
    start_time = time.time()
    cache = get_cache()

    if not cache.available:
        return HealthCheckResult(
            service="redis",
            healthy=False,
            response_time=time.time() - start_time,
            details={"error": "cache not connected; statistics are computed on every request"},
            critical=False
        )

    healthy = await cache.ping()
    return HealthCheckResult(
        service="redis",
        healthy=healthy,
        response_time=time.time() - start_time,
        details={"operations": ["ping"], "result": "success" if healthy else "failed"},
        critical=False
    )


async def get_health_status(db: AsyncSession) -> Dict[str, Any]:
    """Get detailed health status of the service and its dependencies."""
    start_time = time.time()

    checks = await asyncio.gather(
        check_database_health(db),
        check_redis_health(),
    )
    results = [check.to_dict() for check in checks]

    if any(not check.healthy and check.critical for check in checks):
        overall = "unhealthy"
    elif any(not check.healthy for check in checks):
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "status": overall,
        "timestamp": _now(),
        "total_check_time": round(time.time() - start_time, 4),
        "services": results,
        "summary": {
            "total_services": len(results),
            "healthy_services": sum(1 for r in results if r["healthy"]),
            "unhealthy_services": sum(1 for r in results if not r["healthy"])
        }
    }
