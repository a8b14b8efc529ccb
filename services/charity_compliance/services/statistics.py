"""
Compliance Statistics Service
=============================

Produces the dashboard statistics document for an organization:
scores, levels, trends and action items, and records a history snapshot
of the overall score.

Version: 0.1.0
"""

import asyncio
from datetime import UTC, date, datetime

from services.charity_compliance.repository import ComplianceRepository
from services.charity_compliance.services.actions import generate_action_items
from services.charity_compliance.services.score import (
    ScoreWeights,
    calculate_compliance_score,
    get_compliance_level,
)
from services.charity_compliance.services.trends import TrendService, calculate_trends
from shared.config import ComplianceSettings, settings
from shared.logging import get_logger
from shared.models.compliance import (
    CategoryBreakdown,
    CategoryStatus,
    ComplianceScores,
    ComplianceStatistics,
)


logger = get_logger(__name__)


def _status(score: int) -> CategoryStatus:
    return CategoryStatus(percentage=score, level=get_compliance_level(score))


class ComplianceStatisticsService:
    """
    Orchestrates fetch → score → (trends, action items) → snapshot.

    Args:
        repository: Compliance data repository
        weights: Score weights (defaults from settings)
        config: Compliance settings (defaults to the global settings)
    """

    def __init__(
        self,
        repository: ComplianceRepository,
        weights: ScoreWeights | None = None,
        config: ComplianceSettings | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or settings.compliance
        self.weights = weights or ScoreWeights.from_settings(self.config)
        self.trends = TrendService(repository)

    async def calculate_scores(
        self,
        organization_id: str,
        today: date | None = None,
    ) -> ComplianceScores:
        """Current scores without touching the history."""
        safeguarding, overseas, income, countries = await asyncio.gather(
            self.repository.list_safeguarding_records(organization_id),
            self.repository.list_overseas_activities(organization_id),
            self.repository.list_income_records(organization_id),
            self.repository.list_countries(),
        )
        return calculate_compliance_score(
            safeguarding, overseas, income, countries, weights=self.weights, today=today
        )

    async def get_compliance_statistics(
        self,
        organization_id: str,
        today: date | None = None,
    ) -> ComplianceStatistics:
        """
        Build the statistics document and append a score snapshot.

        Fetch errors propagate. Snapshot failures are logged only.

        Args:
            organization_id: Organization UUID
            today: Reference date for DBS expiry (defaults to today)

        Returns:
            ComplianceStatistics
        """
        today = today or date.today()

        safeguarding, overseas, income, countries, history = await asyncio.gather(
            self.repository.list_safeguarding_records(organization_id),
            self.repository.list_overseas_activities(organization_id),
            self.repository.list_income_records(organization_id),
            self.repository.list_countries(),
            self.trends.get_recent_history(organization_id, self.config.trend_history_limit),
        )

        scores = calculate_compliance_score(
            safeguarding, overseas, income, countries, weights=self.weights, today=today
        )
        trends = calculate_trends(history, scores.overall)
        action_items = generate_action_items(
            scores,
            safeguarding,
            overseas,
            income,
            today=today,
            threshold=self.config.action_threshold,
            warning_days=self.config.dbs_expiry_warning_days,
        )

        await self.trends.store_compliance_score(organization_id, scores.overall)

        logger.info(
            "compliance_statistics_calculated",
            organization_id=organization_id,
            overall=scores.overall,
            action_items=len(action_items),
            trend=trends.direction.value if trends.direction else None,
        )

        return ComplianceStatistics(
            organization_id=organization_id,
            overall=_status(scores.overall),
            breakdown=CategoryBreakdown(
                safeguarding=_status(scores.safeguarding),
                overseas=_status(scores.overseas),
                fundraising=_status(scores.income),
            ),
            trends=trends,
            action_items=action_items,
            last_updated=datetime.now(UTC),
        )
