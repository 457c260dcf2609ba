"""Health check endpoints for monitoring and deployment verification."""

import time
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Response, status

from src.api.deps import CurrentUser
from src.core.supabase import check_database_connection
from src.schemas.auth import AuthenticatedResponse
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])


async def _timed_check(name: str, probe: Callable[[], Awaitable[dict[str, Any]]]) -> CheckResult:
    started = time.perf_counter()
    result = await probe()
    return CheckResult(
        name=name,
        healthy=result["healthy"],
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=result.get("error"),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Reports that the process is up. Touches no dependency.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status=HealthStatus.HEALTHY)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "The document store is unreachable"}},
    summary="Readiness check",
    description="Runs one cheap query against the document store.",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Report whether the store answers queries.

    Args:
        response: Used to switch the status code to 503.

    Returns:
        ReadinessResponse: Overall status and the per-dependency results.
    """
    checks = [await _timed_check("database", check_database_connection)]

    if all(check.healthy for check in checks):
        return ReadinessResponse(status=HealthStatus.HEALTHY, checks=checks)

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=HealthStatus.UNHEALTHY, checks=checks)


@router.get(
    "/health/auth",
    response_model=AuthenticatedResponse,
    summary="Token check",
    description="Echoes the identity behind the request's token.",
    responses={401: {"description": "Missing or invalid token"}},
)
async def authenticated_check(user: CurrentUser) -> AuthenticatedResponse:
    return AuthenticatedResponse(authenticated=True, user_id=str(user.user_id))
