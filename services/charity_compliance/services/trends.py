"""
Compliance Trend Tracking
=========================

Stores overall score snapshots and compares the current score with the
stored history.

Snapshots are append-only. A failed snapshot write never fails the
request that triggered it.

Version: 0.1.0
"""

from collections.abc import Sequence
from datetime import datetime

from services.charity_compliance.repository import ComplianceRepository
from shared.logging import get_logger
from shared.models.compliance import ScoreHistoryPoint, ScoreTrends, TrendDirection
from shared.models.records import ComplianceScoreSnapshot


logger = get_logger(__name__)


# |change| below this is reported as stable
STABLE_BAND = 1.0


def _score_of(entry: ComplianceScoreSnapshot | int) -> int:
    return entry if isinstance(entry, int) else entry.score


def calculate_trends(
    history: Sequence[ComplianceScoreSnapshot | int] | None,
    current_score: int,
) -> ScoreTrends:
    """
    Compare the current score with the previous stored snapshot.

    Args:
        history: Snapshots newest first. The newest usually records the
            previous page load, so the comparison uses the one before it.
        current_score: Overall score just calculated

    Returns:
        ScoreTrends, all fields None when fewer than two snapshots exist
    """
    if not history or len(history) < 2:
        return ScoreTrends()

    last_month = _score_of(history[1])
    change = round(current_score - last_month, 1)

    if abs(change) < STABLE_BAND:
        direction = TrendDirection.STABLE
    elif change > 0:
        direction = TrendDirection.UP
    else:
        direction = TrendDirection.DOWN

    return ScoreTrends(last_month=last_month, change=change, direction=direction)


class TrendService:
    """
    Reads and appends compliance score history.

    Args:
        repository: Compliance data repository
    """

    def __init__(self, repository: ComplianceRepository) -> None:
        self.repository = repository

    async def get_recent_history(
        self, organization_id: str, limit: int = 2
    ) -> list[ComplianceScoreSnapshot]:
        """Latest snapshots, newest first."""
        return await self.repository.get_score_history(organization_id, limit)

    async def store_compliance_score(self, organization_id: str, score: int) -> bool:
        """
        Append a score snapshot.

        Failures are logged and swallowed.

        Returns:
            True if the snapshot was written
        """
        try:
            await self.repository.insert_score_snapshot(organization_id, score)
        except Exception as e:
            logger.error(
                "score_snapshot_failed",
                organization_id=organization_id,
                score=score,
                error=str(e),
            )
            return False

        logger.info("score_snapshot_stored", organization_id=organization_id, score=score)
        return True

    async def get_compliance_score_history(
        self,
        organization_id: str,
        start: datetime,
        end: datetime,
    ) -> list[ScoreHistoryPoint]:
        """
        Score history within a date range, oldest first.

        A read failure is logged and yields an empty list.
        """
        try:
            snapshots = await self.repository.get_score_history_between(
                organization_id, start, end
            )
        except Exception as e:
            logger.error(
                "score_history_fetch_failed",
                organization_id=organization_id,
                error=str(e),
            )
            return []

        return [
            ScoreHistoryPoint(date=snapshot.created_at, score=snapshot.score)
            for snapshot in sorted(snapshots, key=lambda s: s.created_at)
        ]
