"""
Action Item Generation
======================

Derives a prioritized remediation list from the compliance registers.

Rules:
- Safeguarding: expired DBS checks (high), checks expiring soon (medium)
- Overseas: transfers by non-standard methods (high)
- Fundraising: uncategorized income (medium)

A category's rules only run when its sub-score is below the action
threshold. The result is stably sorted by priority, so items of equal
priority keep their generation order.

Version: 0.1.0
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from shared.config import settings
from shared.logging import get_logger
from shared.models.compliance import (
    PRIORITY_RANK,
    ActionCategory,
    ActionItem,
    ActionPriority,
    ComplianceScores,
)
from shared.models.records import IncomeRecord, OverseasActivity, SafeguardingRecord


logger = get_logger(__name__)


@dataclass(frozen=True)
class ActionContext:
    """Inputs shared by every action rule."""

    scores: ComplianceScores
    safeguarding: list[SafeguardingRecord]
    overseas: list[OverseasActivity]
    income: list[IncomeRecord]
    today: date
    warning_days: int


ActionRule = Callable[[ActionContext], ActionItem | None]


# =============================================================================
# Rules
# =============================================================================


def expired_dbs_checks(ctx: ActionContext) -> ActionItem | None:
    expired = [r for r in ctx.safeguarding if r.is_expired(ctx.today)]
    if not expired:
        return None
    return ActionItem(
        category=ActionCategory.SAFEGUARDING,
        priority=ActionPriority.HIGH,
        title="Expired DBS Checks",
        description=f"{len(expired)} DBS certificate(s) have expired and need renewal",
        count=len(expired),
    )


def expiring_dbs_checks(ctx: ActionContext) -> ActionItem | None:
    horizon = ctx.today + timedelta(days=ctx.warning_days)
    expiring = [
        r
        for r in ctx.safeguarding
        if r.expiry_date is not None and ctx.today <= r.expiry_date <= horizon
    ]
    if not expiring:
        return None
    return ActionItem(
        category=ActionCategory.SAFEGUARDING,
        priority=ActionPriority.MEDIUM,
        title="DBS Checks Expiring Soon",
        description=(
            f"{len(expiring)} DBS certificate(s) expire within the next "
            f"{ctx.warning_days} days"
        ),
        count=len(expiring),
    )


def risky_transfer_methods(ctx: ActionContext) -> ActionItem | None:
    risky = [a for a in ctx.overseas if not a.uses_standard_transfer]
    if not risky:
        return None
    return ActionItem(
        category=ActionCategory.OVERSEAS,
        priority=ActionPriority.HIGH,
        title="Review Transfer Methods",
        description=(
            f"{len(risky)} overseas transfer(s) used methods other than bank "
            "or wire transfer and need an explanation"
        ),
        count=len(risky),
    )


def uncategorized_income(ctx: ActionContext) -> ActionItem | None:
    uncategorized = [r for r in ctx.income if not r.source]
    if not uncategorized:
        return None
    return ActionItem(
        category=ActionCategory.FUNDRAISING,
        priority=ActionPriority.MEDIUM,
        title="Categorize Income",
        description=f"{len(uncategorized)} income record(s) need a source category",
        count=len(uncategorized),
    )


# Rules per category, in generation order
ACTION_RULES: dict[ActionCategory, tuple[ActionRule, ...]] = {
    ActionCategory.SAFEGUARDING: (expired_dbs_checks, expiring_dbs_checks),
    ActionCategory.OVERSEAS: (risky_transfer_methods,),
    ActionCategory.FUNDRAISING: (uncategorized_income,),
}

# Sub-score that gates each category
CATEGORY_SCORES: dict[ActionCategory, Callable[[ComplianceScores], int]] = {
    ActionCategory.SAFEGUARDING: lambda s: s.safeguarding,
    ActionCategory.OVERSEAS: lambda s: s.overseas,
    ActionCategory.FUNDRAISING: lambda s: s.income,
}

_unhandled = set(ActionCategory) - set(ACTION_RULES) | set(ActionCategory) - set(CATEGORY_SCORES)
if _unhandled:
    raise RuntimeError(f"No action rules registered for: {sorted(c.value for c in _unhandled)}")


# =============================================================================
# Generation
# =============================================================================


def generate_action_items(
    scores: ComplianceScores,
    safeguarding: list[SafeguardingRecord] | None,
    overseas: list[OverseasActivity] | None,
    income: list[IncomeRecord] | None,
    today: date | None = None,
    threshold: int | None = None,
    warning_days: int | None = None,
) -> list[ActionItem]:
    """
    Generate remediation items for categories scoring below the threshold.

    Args:
        scores: Scores from `calculate_compliance_score`
        safeguarding: DBS records
        overseas: Overseas activities
        income: Income records
        today: Reference date for DBS expiry (defaults to today)
        threshold: Sub-score below which rules run (defaults from settings)
        warning_days: Expiry warning window (defaults from settings)

    Returns:
        Action items sorted high → medium → low
    """
    threshold = settings.compliance.action_threshold if threshold is None else threshold
    ctx = ActionContext(
        scores=scores,
        safeguarding=[r for r in (safeguarding or []) if r.deleted_at is None],
        overseas=[a for a in (overseas or []) if a.deleted_at is None],
        income=[r for r in (income or []) if r.deleted_at is None],
        today=today or date.today(),
        warning_days=(
            settings.compliance.dbs_expiry_warning_days
            if warning_days is None
            else warning_days
        ),
    )

    items: list[ActionItem] = []
    for category, rules in ACTION_RULES.items():
        if CATEGORY_SCORES[category](scores) >= threshold:
            continue
        for rule in rules:
            item = rule(ctx)
            if item is not None:
                items.append(item)

    # sorted() is stable
    items = sorted(items, key=lambda item: PRIORITY_RANK[item.priority])

    logger.debug(
        "action_items_generated",
        count=len(items),
        categories=[item.category.value for item in items],
    )
    return items
