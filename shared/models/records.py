"""
Compliance Record Models
========================

Pydantic models for the organization-scoped rows the reporting pipeline
reads. Each compliance category has its own record type; soft-deleted rows
carry a `deleted_at` timestamp and are never treated as active.

Version: 0.1.0
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoleType(str, Enum):
    """Role of a person covered by safeguarding checks."""

    EMPLOYEE = "employee"
    VOLUNTEER = "volunteer"
    TRUSTEE = "trustee"
    OTHER = "other"


class ActivityType(str, Enum):
    """Kinds of overseas charitable activity."""

    DEVELOPMENT = "development"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    EMERGENCY_RELIEF = "emergency_relief"
    CAPACITY_BUILDING = "capacity_building"
    OTHER = "other"


class TransferMethod(str, Enum):
    """How funds were moved overseas."""

    BANK_TRANSFER = "bank_transfer"
    WIRE_TRANSFER = "wire_transfer"
    CASH = "cash"
    IN_KIND = "in_kind"
    OTHER = "other"


# Transfer methods that need no extra explanation on the Annual Return
STANDARD_TRANSFER_METHODS = frozenset(
    {TransferMethod.BANK_TRANSFER, TransferMethod.WIRE_TRANSFER}
)


class IncomeSource(str, Enum):
    """Charity Commission income categories."""

    DONATIONS_LEGACIES = "donations_legacies"
    CHARITABLE_ACTIVITIES = "charitable_activities"
    OTHER_TRADING = "other_trading"
    INVESTMENTS = "investments"
    OTHER = "other"


class DonorType(str, Enum):
    """Who made a donation."""

    INDIVIDUAL = "individual"
    CORPORATE = "corporate"
    OTHER = "other"


class RecordModel(BaseModel):
    """Base for rows read from the data store."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=False)


class SafeguardingRecord(RecordModel):
    """A DBS check held for one person working with the charity."""

    id: str | None = None
    organization_id: str
    person_name: str
    role: RoleType = RoleType.OTHER
    works_with_children: bool = False
    works_with_vulnerable_adults: bool = False
    dbs_certificate_number: str | None = None
    expiry_date: date | None = None
    training_completed: bool = False
    reference_checks_completed: bool = False
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Soft-deleted records are not active."""
        return self.deleted_at is None

    @property
    def is_pending(self) -> bool:
        """No expiry date recorded yet; never counted as expired."""
        return self.expiry_date is None

    def is_expired(self, today: date) -> bool:
        """Expired strictly before `today`. Pending records never expire."""
        return self.expiry_date is not None and self.expiry_date < today


class SafeguardingPolicy(RecordModel):
    """A safeguarding policy document and its review dates."""

    organization_id: str
    policy_type: str
    last_reviewed_date: date | None = None
    next_review_date: date | None = None
    deleted_at: datetime | None = None


class OverseasActivity(RecordModel):
    """Funds spent on an overseas activity. Amounts are always GBP."""

    id: str | None = None
    organization_id: str
    country_code: str = Field(..., min_length=2, max_length=2)
    activity_type: ActivityType = ActivityType.OTHER
    amount_gbp: float = Field(default=0.0, ge=0)
    transfer_method: TransferMethod
    transfer_date: date | None = None
    financial_year: int
    deleted_at: datetime | None = None

    @field_validator("country_code")
    @classmethod
    def uppercase_country_code(cls, v: str) -> str:
        """ISO-2 codes are stored upper case."""
        return v.upper()

    @property
    def uses_standard_transfer(self) -> bool:
        """Bank and wire transfers are the standard, traceable methods."""
        return self.transfer_method in STANDARD_TRANSFER_METHODS


class OverseasPartner(RecordModel):
    """A partner organization delivering overseas work."""

    id: str | None = None
    organization_id: str
    name: str
    country_code: str | None = None
    registration_number: str | None = None
    registration_verified: bool = False
    is_active: bool = True
    deleted_at: datetime | None = None

    @property
    def is_current(self) -> bool:
        """Active and not soft-deleted."""
        return self.is_active and self.deleted_at is None


class IncomeRecord(RecordModel):
    """A single item of income. `source` is None while uncategorized."""

    id: str | None = None
    organization_id: str
    source: IncomeSource | None = None
    amount: float = Field(default=0.0, ge=0)
    date_received: date | None = None
    is_related_party: bool = False
    donor_type: DonorType | None = None
    financial_year: int
    deleted_at: datetime | None = None


class FundraisingMethod(RecordModel):
    """A fundraising method and whether a professional fundraiser ran it."""

    organization_id: str
    financial_year: int
    method: str
    is_used: bool = True
    uses_professional_fundraiser: bool = False
    fundraiser_name: str | None = None
    fundraiser_registration: str | None = None


class Country(RecordModel):
    """Country reference data."""

    code: str
    name: str
    is_high_risk: bool = False
    requires_due_diligence: bool = False


class Organization(RecordModel):
    """Read-only charity metadata used by the Annual Return."""

    id: str
    name: str
    charity_number: str | None = None
    charity_type: str | None = None
    income_band: str | None = None
    financial_year_end: str = Field(default="03-31", pattern=r"^\d{2}-\d{2}$")


class ComplianceScoreSnapshot(RecordModel):
    """One stored overall score. Snapshots are only ever inserted."""

    organization_id: str | None = None
    score: int = Field(..., ge=0, le=100)
    created_at: datetime
