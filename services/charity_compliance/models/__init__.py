"""
Charity Compliance Database Models
==================================

SQLAlchemy ORM models for organizations, compliance registers and the
score history.

Tables:
- organizations, countries
- safeguarding_records, safeguarding_policies
- overseas_activities, overseas_partners
- income_records, fundraising_methods_used
- compliance_history

Version: 0.1.0
"""

from services.charity_compliance.models.organization import (
    CountryModel,
    OrganizationModel,
)
from services.charity_compliance.models.records import (
    FundraisingMethodModel,
    IncomeRecordModel,
    OverseasActivityModel,
    OverseasPartnerModel,
    SafeguardingPolicyModel,
    SafeguardingRecordModel,
)
from services.charity_compliance.models.score import ComplianceHistoryModel

__all__ = [
    "OrganizationModel",
    "CountryModel",
    "SafeguardingRecordModel",
    "SafeguardingPolicyModel",
    "OverseasActivityModel",
    "OverseasPartnerModel",
    "IncomeRecordModel",
    "FundraisingMethodModel",
    "ComplianceHistoryModel",
]
