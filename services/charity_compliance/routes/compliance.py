"""
Compliance Routes
=================

API endpoints for compliance statistics, scores and score history.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.charity_compliance.routes.dependencies import (
    api_rate_limit,
    get_statistics_service,
    get_trend_service,
)
from services.charity_compliance.services.score import (
    get_compliance_level,
    get_compliance_message,
)
from services.charity_compliance.services.statistics import ComplianceStatisticsService
from services.charity_compliance.services.trends import TrendService
from shared.logging import get_logger
from shared.models.compliance import ComplianceStatistics, ScoreHistoryPoint


logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(api_rate_limit)])


# Default history window
DEFAULT_HISTORY_DAYS = 365


def _as_utc(value: datetime) -> datetime:
    # Naive query values are taken as UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@router.get("/{organization_id}/statistics", response_model=ComplianceStatistics)
async def get_statistics(
    organization_id: str,
    service: ComplianceStatisticsService = Depends(get_statistics_service),
) -> ComplianceStatistics:
    """
    Get the compliance dashboard statistics.

    Calculates scores, trends and action items, and records the overall
    score in the history.
    """
    return await service.get_compliance_statistics(organization_id)


@router.get("/{organization_id}/score")
async def get_score(
    organization_id: str,
    service: ComplianceStatisticsService = Depends(get_statistics_service),
) -> dict:
    """Current scores with the overall level. Does not record history."""
    scores = await service.calculate_scores(organization_id)
    level = get_compliance_level(scores.overall)

    return {
        "organization_id": organization_id,
        **scores.model_dump(),
        "level": level.value,
        "message": get_compliance_message(level),
    }


@router.get("/{organization_id}/history", response_model=list[ScoreHistoryPoint])
async def get_history(
    organization_id: str,
    start: datetime | None = Query(default=None, description="Range start (default: one year ago)"),
    end: datetime | None = Query(default=None, description="Range end (default: now)"),
    service: TrendService = Depends(get_trend_service),
) -> list[ScoreHistoryPoint]:
    """Stored overall scores within a date range, oldest first."""
    end = _as_utc(end) if end else datetime.now(UTC)
    start = _as_utc(start) if start else end - timedelta(days=DEFAULT_HISTORY_DAYS)

    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )

    return await service.get_compliance_score_history(organization_id, start, end)
