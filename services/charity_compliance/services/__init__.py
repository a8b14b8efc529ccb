"""
Charity Compliance Services
===========================

Business logic for compliance scoring and reporting.

Services:
- score: Weighted compliance score and levels
- actions: Prioritized remediation items
- trends: Score history and trend comparison
- annual_return: Annual Return aggregation and field mapping
- statistics: Dashboard statistics orchestration

Version: 0.1.0
"""

from services.charity_compliance.services.actions import generate_action_items
from services.charity_compliance.services.annual_return import (
    ANNUAL_RETURN_FIELD_MAPPING,
    AnnualReturnAssembler,
    current_financial_year,
    export_fields_as_text,
    format_annual_return_csv,
    get_fields_by_section,
    map_annual_return_fields,
)
from services.charity_compliance.services.score import (
    ScoreWeights,
    calculate_compliance_score,
    get_compliance_level,
    get_compliance_message,
)
from services.charity_compliance.services.statistics import ComplianceStatisticsService
from services.charity_compliance.services.trends import TrendService, calculate_trends

__all__ = [
    "ScoreWeights",
    "calculate_compliance_score",
    "get_compliance_level",
    "get_compliance_message",
    "generate_action_items",
    "calculate_trends",
    "TrendService",
    "AnnualReturnAssembler",
    "ANNUAL_RETURN_FIELD_MAPPING",
    "current_financial_year",
    "map_annual_return_fields",
    "get_fields_by_section",
    "export_fields_as_text",
    "format_annual_return_csv",
    "ComplianceStatisticsService",
]
