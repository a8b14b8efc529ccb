"""
Compliance Score Calculation
============================

Pure scoring for a charity's compliance registers.

Score Components:
- Safeguarding: share of active DBS checks that have not expired
- Overseas: presence credit (100 whether or not activities exist)
- Income: diversity across income categories with a non-zero total

The overall score is the weighted mean of the sub-scores over the
categories that carry weight. Safeguarding and income only carry weight
when they have records; the overseas credit only counts when at least
one category has data, so an organization with nothing recorded scores 0.

Version: 0.1.0
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from shared.config import ComplianceSettings, settings
from shared.logging import get_logger
from shared.models.compliance import ComplianceLevel, ComplianceScores
from shared.models.records import (
    Country,
    IncomeRecord,
    OverseasActivity,
    SafeguardingRecord,
)


logger = get_logger(__name__)


# =============================================================================
# Score Configuration
# =============================================================================


@dataclass(frozen=True)
class ScoreWeights:
    """Category weights and thresholds for score calculation."""

    safeguarding: float = 0.4
    overseas: float = 0.3
    income: float = 0.3

    # Distinct income categories needed for an income score of 100
    income_diversity_target: int = 3

    @classmethod
    def from_settings(cls, config: ComplianceSettings | None = None) -> "ScoreWeights":
        """Build weights from compliance settings."""
        config = config or settings.compliance
        return cls(
            safeguarding=config.safeguarding_weight,
            overseas=config.overseas_weight,
            income=config.income_weight,
            income_diversity_target=config.income_diversity_target,
        )


# Score level thresholds, highest first
LEVEL_THRESHOLDS: tuple[tuple[int, ComplianceLevel], ...] = (
    (90, ComplianceLevel.EXCELLENT),
    (75, ComplianceLevel.GOOD),
    (50, ComplianceLevel.NEEDS_ATTENTION),
)

LEVEL_MESSAGES: dict[ComplianceLevel, str] = {
    ComplianceLevel.EXCELLENT: "Your charity is fully compliant and ready for inspection.",
    ComplianceLevel.GOOD: "Your charity is mostly compliant with a few items to review.",
    ComplianceLevel.NEEDS_ATTENTION: "Several compliance areas need attention before filing.",
    ComplianceLevel.AT_RISK: "Urgent action is needed to meet your compliance obligations.",
}


# =============================================================================
# Helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def _active(records: Iterable | None) -> list:
    return [r for r in (records or []) if r.deleted_at is None]


def safeguarding_score(records: list[SafeguardingRecord], today: date) -> int:
    """Percentage of records whose DBS check has not expired."""
    if not records:
        return 0
    valid = sum(1 for r in records if not r.is_expired(today))
    return round_half_up(valid / len(records) * 100)


def income_score(records: list[IncomeRecord], diversity_target: int = 3) -> int:
    """Income diversity: distinct categories with income, capped at the target."""
    if not records or diversity_target <= 0:
        return 0

    totals: dict[str, float] = {}
    for record in records:
        if record.source:
            totals[record.source] = totals.get(record.source, 0.0) + record.amount

    categories = sum(1 for total in totals.values() if total > 0)
    return round_half_up(min(categories / diversity_target, 1.0) * 100)


# =============================================================================
# Score Calculation
# =============================================================================


def calculate_compliance_score(
    safeguarding: list[SafeguardingRecord] | None,
    overseas: list[OverseasActivity] | None,
    income: list[IncomeRecord] | None,
    countries: list[Country] | None = None,
    weights: ScoreWeights | None = None,
    today: date | None = None,
) -> ComplianceScores:
    """
    Calculate the overall compliance score and the per-category scores.

    Never raises on empty input. `countries` is accepted for the high-risk
    lookup but does not affect the score.

    Args:
        safeguarding: DBS records for the organization
        overseas: Overseas activities
        income: Income records
        countries: Country reference data
        weights: Category weights (defaults from settings)
        today: Reference date for DBS expiry (defaults to today)

    Returns:
        ComplianceScores with integer scores in 0-100
    """
    weights = weights or ScoreWeights.from_settings()
    today = today or date.today()

    active_safeguarding = _active(safeguarding)
    active_overseas = _active(overseas)
    active_income = _active(income)

    sg_score = safeguarding_score(active_safeguarding, today)
    inc_score = income_score(active_income, weights.income_diversity_target)
    overseas_score = 100

    weighted_total = 0.0
    applied_weight = 0.0

    if active_safeguarding:
        weighted_total += sg_score * weights.safeguarding
        applied_weight += weights.safeguarding

    if active_income:
        weighted_total += inc_score * weights.income
        applied_weight += weights.income

    # Overseas credit only alongside real data
    if active_safeguarding or active_overseas or active_income:
        weighted_total += overseas_score * weights.overseas
        applied_weight += weights.overseas

    overall = round_half_up(weighted_total / applied_weight) if applied_weight > 0 else 0
    overall = max(0, min(100, overall))

    logger.debug(
        "score_calculated",
        overall=overall,
        safeguarding=sg_score,
        overseas=overseas_score,
        income=inc_score,
        countries=len(countries or []),
    )

    return ComplianceScores(
        overall=overall,
        safeguarding=sg_score,
        overseas=overseas_score,
        income=inc_score,
    )


def get_compliance_level(score: int | float) -> ComplianceLevel:
    """Map a 0-100 score to its compliance level."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return ComplianceLevel.AT_RISK


def get_compliance_message(level: ComplianceLevel) -> str:
    """Human-readable summary for a compliance level."""
    return LEVEL_MESSAGES[level]
