from typing import Dict, Any
import time
import psutil
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ... import config
from ...external.couchlytics_client import CouchlyticsClient
from .trades import get_couchlytics_client


router = APIRouter()

class HealthStatus(BaseModel):
    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: datetime
    version: str
    uptime_seconds: float
    checks: Dict[str, Any]


class SystemMetrics(BaseModel):
    cpu_percent: float
    memory_percent: float
    memory_available_mb: float
    disk_usage_percent: float


# Track startup time for uptime calculation
_startup_time = time.time()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/health", response_model=HealthStatus)
async def health_check():
    """
    Basic health check endpoint.

    Does not touch the backend, so it stays fast enough for load balancer
    probes. The evaluator has no external dependencies of its own.
    """

    uptime = time.time() - _startup_time

    checks = {
        "api": "healthy",
        "evaluator": "healthy",
        "uptime_seconds": uptime,
    }

    return HealthStatus(
        status="healthy",
        timestamp=_now(),
        version=config.VERSION,
        uptime_seconds=uptime,
        checks=checks
    )


@router.get("/health/detailed", response_model=Dict[str, Any])
async def detailed_health_check(client: CouchlyticsClient = Depends(get_couchlytics_client)):
    """
    Detailed health check with system metrics and a backend reachability check.

    Used for monitoring dashboards. Slower than the basic check because it
    samples CPU and pings the Couchlytics API.
    """

    uptime = time.time() - _startup_time

    cpu_percent = psutil.cpu_percent(interval=0.1)
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    system_metrics = SystemMetrics(
        cpu_percent=cpu_percent,
        memory_percent=memory.percent,
        memory_available_mb=memory.available / 1024 / 1024,
        disk_usage_percent=disk.percent
    )

    dependency_checks = {
        "couchlytics_api": await check_couchlytics_api(client),
    }

    failed_checks = [name for name, status in dependency_checks.items()
                     if status != "healthy"]

    # Previews still work without the backend, so a failed check only degrades
    overall_status = "degraded" if failed_checks else "healthy"

    return {
        "status": overall_status,
        "timestamp": _now().isoformat(),
        "version": config.VERSION,
        "uptime_seconds": uptime,
        "system_metrics": system_metrics.model_dump(),
        "dependency_checks": dependency_checks,
        "failed_checks": failed_checks,
    }


@router.get("/health/ready")
async def readiness_check():
    """
    Readiness probe endpoint.

    The scoring tables are static, so the service is ready as soon as it
    is serving.
    """
    return {"status": "ready", "timestamp": _now().isoformat()}


@router.get("/health/live")
async def liveness_check():
    """Liveness probe endpoint."""
    return {"status": "alive", "timestamp": _now().isoformat()}


async def check_couchlytics_api(client: CouchlyticsClient) -> str:
    """Check Couchlytics API connectivity."""
    return "healthy" if await client.ping() else "unhealthy"
