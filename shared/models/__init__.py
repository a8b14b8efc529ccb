"""
Shared Models
=============

Pydantic models shared across the Charity Prep services.

Models:
- Record models (SafeguardingRecord, OverseasActivity, IncomeRecord, ...)
- Compliance models (ComplianceScores, ActionItem, ScoreTrends, ...)
- Annual Return models (AnnualReturnData, AnnualReturnField, ...)
"""

from shared.models.annual_return import (
    AnnualReturnData,
    AnnualReturnField,
    MissingField,
    ReturnSection,
)
from shared.models.common import (
    ErrorResponse,
    HealthResponse,
)
from shared.models.compliance import (
    ActionCategory,
    ActionItem,
    ActionPriority,
    ComplianceLevel,
    ComplianceScores,
    ComplianceStatistics,
    ScoreHistoryPoint,
    ScoreTrends,
    TrendDirection,
)
from shared.models.records import (
    ComplianceScoreSnapshot,
    Country,
    FundraisingMethod,
    IncomeRecord,
    IncomeSource,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingPolicy,
    SafeguardingRecord,
    TransferMethod,
)

__all__ = [
    # Records
    "SafeguardingRecord",
    "SafeguardingPolicy",
    "OverseasActivity",
    "OverseasPartner",
    "IncomeRecord",
    "IncomeSource",
    "TransferMethod",
    "FundraisingMethod",
    "Country",
    "Organization",
    "ComplianceScoreSnapshot",
    # Compliance
    "ComplianceScores",
    "ComplianceLevel",
    "ComplianceStatistics",
    "ActionItem",
    "ActionCategory",
    "ActionPriority",
    "ScoreTrends",
    "ScoreHistoryPoint",
    "TrendDirection",
    # Annual Return
    "AnnualReturnData",
    "AnnualReturnField",
    "MissingField",
    "ReturnSection",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
