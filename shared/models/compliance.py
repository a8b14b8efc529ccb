"""
Compliance Models
=================

Models for compliance scores, trends, action items and the statistics
document served to the dashboard.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ComplianceLevel(str, Enum):
    """Banded label for a 0-100 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_ATTENTION = "needs_attention"
    AT_RISK = "at_risk"


class ComplianceScores(BaseModel):
    """Overall score plus one sub-score per category, all 0-100."""

    overall: int = Field(..., ge=0, le=100)
    safeguarding: int = Field(..., ge=0, le=100)
    overseas: int = Field(..., ge=0, le=100)
    income: int = Field(..., ge=0, le=100)


class ActionCategory(str, Enum):
    """Area of the charity an action item belongs to."""

    SAFEGUARDING = "safeguarding"
    OVERSEAS = "overseas"
    FUNDRAISING = "fundraising"


class ActionPriority(str, Enum):
    """Urgency of an action item."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[ActionPriority, int] = {
    ActionPriority.HIGH: 0,
    ActionPriority.MEDIUM: 1,
    ActionPriority.LOW: 2,
}


class ActionItem(BaseModel):
    """A remediation task derived from compliance gaps."""

    category: ActionCategory
    priority: ActionPriority
    title: str
    description: str
    count: int | None = None


class TrendDirection(str, Enum):
    """Movement of the overall score since the previous period."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class ScoreTrends(BaseModel):
    """Comparison of the current score with stored history."""

    last_month: int | None = None
    change: float | None = None
    direction: TrendDirection | None = None


class ScoreHistoryPoint(BaseModel):
    """A stored score for charting."""

    date: datetime
    score: int


class CategoryStatus(BaseModel):
    """A score with its banded level."""

    percentage: int
    level: ComplianceLevel


class CategoryBreakdown(BaseModel):
    """Per-category status. Income is presented as fundraising."""

    safeguarding: CategoryStatus
    overseas: CategoryStatus
    fundraising: CategoryStatus


class ComplianceStatistics(BaseModel):
    """Everything the compliance dashboard shows for one organization."""

    organization_id: str
    overall: CategoryStatus
    breakdown: CategoryBreakdown
    trends: ScoreTrends
    action_items: list[ActionItem] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
