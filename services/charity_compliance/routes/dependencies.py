"""
Route Dependencies
==================

FastAPI dependencies shared by the compliance routes: the repository,
the services built on it, and per-client rate limiting.

Version: 0.1.0
"""

from fastapi import Depends, HTTPException, Request, Response, status
from redis.exceptions import RedisError

from services.charity_compliance.repository import (
    ComplianceRepository,
    PostgresComplianceRepository,
)
from services.charity_compliance.services.annual_return import AnnualReturnAssembler
from services.charity_compliance.services.statistics import ComplianceStatisticsService
from services.charity_compliance.services.trends import TrendService
from shared.config import settings
from shared.database.redis import RedisClient
from shared.logging import get_logger


logger = get_logger(__name__)


# =============================================================================
# Services
# =============================================================================


def get_compliance_repository() -> ComplianceRepository:
    """Repository backed by the shared Postgres session factory."""
    return PostgresComplianceRepository()


def get_statistics_service(
    repository: ComplianceRepository = Depends(get_compliance_repository),
) -> ComplianceStatisticsService:
    return ComplianceStatisticsService(repository)


def get_trend_service(
    repository: ComplianceRepository = Depends(get_compliance_repository),
) -> TrendService:
    return TrendService(repository)


def get_annual_return_assembler(
    repository: ComplianceRepository = Depends(get_compliance_repository),
) -> AnnualReturnAssembler:
    return AnnualReturnAssembler(repository)


# =============================================================================
# Rate Limiting
# =============================================================================


def _client_key(request: Request, scope: str) -> str:
    host = request.client.host if request.client else "unknown"
    return f"rate:{scope}:{host}"


async def _enforce(
    request: Request,
    response: Response,
    scope: str,
    max_requests: int,
    window_seconds: int,
) -> None:
    if not settings.rate_limit.enabled:
        return

    try:
        allowed, remaining = await RedisClient.check_rate_limit(
            _client_key(request, scope), max_requests, window_seconds
        )
    except RedisError as e:
        # Counter store down: serve the request unlimited
        logger.error("rate_limit_unavailable", scope=scope, error=str(e))
        return

    headers = {
        "X-RateLimit-Limit": str(max_requests),
        "X-RateLimit-Remaining": str(remaining),
    }
    if not allowed:
        logger.warning("rate_limit_exceeded", scope=scope, path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
            headers={**headers, "Retry-After": str(window_seconds)},
        )
    response.headers.update(headers)


async def api_rate_limit(request: Request, response: Response) -> None:
    """General API limit per client."""
    await _enforce(request, response, "api", settings.rate_limit.requests_per_minute, 60)


async def export_rate_limit(request: Request, response: Response) -> None:
    """Stricter limit for report exports."""
    await _enforce(
        request,
        response,
        "export",
        settings.rate_limit.export_requests,
        settings.rate_limit.export_window_seconds,
    )
