"""
Trend Tracking Tests
====================

Tests for score trend calculation and history storage.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.charity_compliance.services.trends import TrendService, calculate_trends
from shared.models.compliance import TrendDirection
from shared.models.records import ComplianceScoreSnapshot


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


def snapshot(score: int, days_ago: int, organization_id: str = "org-1") -> ComplianceScoreSnapshot:
    return ComplianceScoreSnapshot(
        organization_id=organization_id,
        score=score,
        created_at=NOW - timedelta(days=days_ago),
    )


# =============================================================================
# calculate_trends
# =============================================================================


class TestCalculateTrends:
    """Tests for trend comparison."""

    def test_empty_history(self) -> None:
        trends = calculate_trends([], 80)

        assert trends.last_month is None
        assert trends.change is None
        assert trends.direction is None

    def test_none_history(self) -> None:
        assert calculate_trends(None, 80).direction is None

    def test_single_snapshot(self) -> None:
        assert calculate_trends([snapshot(80, 1)], 80).last_month is None

    def test_improving(self) -> None:
        """Compares against the second most recent snapshot."""
        trends = calculate_trends([82, 78], 80)

        assert trends.last_month == 78
        assert trends.change == 2
        assert trends.direction == TrendDirection.UP

    def test_declining(self) -> None:
        trends = calculate_trends([snapshot(70, 1), snapshot(90, 30)], 75)

        assert trends.last_month == 90
        assert trends.change == -15
        assert trends.direction == TrendDirection.DOWN

    def test_stable(self) -> None:
        trends = calculate_trends([snapshot(80, 1), snapshot(80, 30)], 80)

        assert trends.change == 0
        assert trends.direction == TrendDirection.STABLE


# =============================================================================
# TrendService
# =============================================================================


@pytest.fixture
def mock_repository() -> MagicMock:
    """Repository with async history methods."""
    repository = MagicMock()
    repository.insert_score_snapshot = AsyncMock(return_value=None)
    repository.get_score_history = AsyncMock(return_value=[])
    repository.get_score_history_between = AsyncMock(return_value=[])
    return repository


class TestStoreComplianceScore:
    """Tests for snapshot storage."""

    @pytest.mark.asyncio
    async def test_stores_snapshot(self, mock_repository: MagicMock) -> None:
        service = TrendService(mock_repository)

        stored = await service.store_compliance_score("org-1", 72)

        assert stored is True
        mock_repository.insert_score_snapshot.assert_awaited_once_with("org-1", 72)

    @pytest.mark.asyncio
    async def test_write_failure_is_swallowed(self, mock_repository: MagicMock) -> None:
        mock_repository.insert_score_snapshot.side_effect = RuntimeError("connection lost")
        service = TrendService(mock_repository)

        stored = await service.store_compliance_score("org-1", 72)

        assert stored is False


class TestScoreHistory:
    """Tests for history reads."""

    @pytest.mark.asyncio
    async def test_history_oldest_first(self, mock_repository: MagicMock) -> None:
        mock_repository.get_score_history_between.return_value = [
            snapshot(85, 1),
            snapshot(60, 60),
            snapshot(72, 30),
        ]
        service = TrendService(mock_repository)

        points = await service.get_compliance_score_history(
            "org-1", NOW - timedelta(days=90), NOW
        )

        assert [p.score for p in points] == [60, 72, 85]
        assert points[0].date == NOW - timedelta(days=60)

    @pytest.mark.asyncio
    async def test_read_failure_returns_empty(self, mock_repository: MagicMock) -> None:
        mock_repository.get_score_history_between.side_effect = RuntimeError("timeout")
        service = TrendService(mock_repository)

        points = await service.get_compliance_score_history(
            "org-1", NOW - timedelta(days=90), NOW
        )

        assert points == []

    @pytest.mark.asyncio
    async def test_recent_history_passes_limit(self, mock_repository: MagicMock) -> None:
        service = TrendService(mock_repository)

        await service.get_recent_history("org-1", limit=2)

        mock_repository.get_score_history.assert_awaited_once_with("org-1", 2)
