"""
Annual Return Models
====================

Aggregated data behind the Charity Commission Annual Return and the
field-by-field projection of it.

Version: 0.1.0
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from shared.models.records import Organization


class ReturnSection(str, Enum):
    """Data sections of the Annual Return."""

    CHARITY = "charity"
    INCOME = "income"
    EXPENDITURE = "expenditure"
    OVERSEAS = "overseas"
    FUNDRAISING = "fundraising"
    SUBSIDIARIES = "subsidiaries"
    TRUSTEES = "trustees"
    SAFEGUARDING = "safeguarding"
    INCIDENTS = "incidents"
    ADDITIONAL = "additional"


class MissingFieldImpact(str, Enum):
    """How much a missing field holds up filing."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SafeguardingSummary(BaseModel):
    """DBS and policy aggregates."""

    total_staff_volunteers: int = 0
    working_with_children: int = 0
    working_with_vulnerable_adults: int = 0
    dbs_checks_valid: int = 0
    dbs_checks_expired: int = 0
    dbs_checks_pending: int = 0
    training_completed: int = 0
    policy_types: list[str] = Field(default_factory=list)
    policies_last_reviewed: date | None = None

    @property
    def has_policy(self) -> bool:
        """At least one active safeguarding policy on file."""
        return len(self.policy_types) > 0


class CountrySpend(BaseModel):
    """Overseas spend in one country."""

    country_code: str
    country_name: str
    total_spend: float
    activities: int
    is_high_risk: bool = False


class TransferMethodBreakdown(BaseModel):
    """Overseas spend by transfer method."""

    method: str
    amount: float
    percentage: float
    requires_explanation: bool


class OverseasSummary(BaseModel):
    """Overseas activity aggregates for one financial year."""

    has_overseas_activities: bool = False
    total_spend: float = 0.0
    countries: list[str] = Field(default_factory=list)
    country_spend: list[CountrySpend] = Field(default_factory=list)
    transfer_methods: list[TransferMethodBreakdown] = Field(default_factory=list)
    high_risk_activities: int = 0
    uses_non_bank_transfers: bool = False
    partners_total: int = 0
    partners_verified: int = 0

    @property
    def country_count(self) -> int:
        """Number of distinct countries operated in."""
        return len(self.countries)


class IncomeBreakdown(BaseModel):
    """Income totals by Charity Commission category."""

    donations_legacies: float = 0.0
    charitable_activities: float = 0.0
    other_trading: float = 0.0
    investments: float = 0.0
    other: float = 0.0


class IncomeSourceShare(BaseModel):
    """Income from one source as a share of total income."""

    source: str
    amount: float
    percentage: float


class IncomeSummary(BaseModel):
    """Income aggregates for one financial year."""

    total_income: float = 0.0
    breakdown: IncomeBreakdown = Field(default_factory=IncomeBreakdown)
    sources: list[IncomeSourceShare] = Field(default_factory=list)
    uncategorized_income: float = 0.0
    highest_corporate_donation: float | None = None
    highest_individual_donation: float | None = None
    has_related_party_transactions: bool = False
    related_party_total: float = 0.0


class ProfessionalFundraiser(BaseModel):
    """A professional fundraiser engaged during the year."""

    fundraiser_name: str
    fundraiser_registration: str | None = None


class FundraisingSummary(BaseModel):
    """Fundraising methods used during the year."""

    methods_used: list[str] = Field(default_factory=list)
    uses_professional_fundraiser: bool = False
    professional_fundraisers: list[ProfessionalFundraiser] = Field(default_factory=list)


class MissingField(BaseModel):
    """Data the return needs but the charity has not recorded."""

    section: ReturnSection
    field: str
    description: str
    required: bool
    impact: MissingFieldImpact


class ComplianceSummary(BaseModel):
    """Filing readiness."""

    overall_score: int
    filing_deadline: date
    ready_to_file: bool
    completeness: int = Field(..., ge=0, le=100)
    missing_fields: list[MissingField] = Field(default_factory=list)


class AnnualReturnData(BaseModel):
    """All aggregates for one organization and financial year."""

    organization: Organization
    financial_year: int
    safeguarding: SafeguardingSummary
    overseas: OverseasSummary
    income: IncomeSummary
    fundraising: FundraisingSummary
    compliance: ComplianceSummary
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AnnualReturnField(BaseModel):
    """One Annual Return field code resolved against the aggregated data."""

    code: str
    section: ReturnSection
    description: str
    data_path: str
    value: Any = None
    formatted_value: str
    copy_text: str
    placeholder: bool = False
