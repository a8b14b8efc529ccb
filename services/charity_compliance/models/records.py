"""
Compliance Record Database Models
=================================

SQLAlchemy ORM models for the per-organization compliance registers.

Tables:
- safeguarding_records: DBS checks per person
- safeguarding_policies: safeguarding policy review dates
- overseas_activities: overseas spend in GBP
- overseas_partners: partner organizations abroad
- income_records: categorized income
- fundraising_methods_used: fundraising methods per financial year

All registers except fundraising methods are soft-deleted via `deleted_at`.

Version: 0.1.0
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)

from shared.database.postgres import Base
from shared.models.records import (
    ActivityType,
    DonorType,
    IncomeSource,
    RoleType,
    TransferMethod,
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum(enum_cls: type, name: str) -> SQLEnum:
    """Store enum values rather than member names."""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )


class SafeguardingRecordModel(Base):
    """A DBS check held for one person."""

    __tablename__ = "safeguarding_records"
    __table_args__ = (
        Index("ix_safeguarding_org", "organization_id"),
        Index("ix_safeguarding_expiry", "expiry_date"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    person_name = Column(String(255), nullable=False)
    role = Column(_enum(RoleType, "role_type"), nullable=False, default=RoleType.OTHER)
    works_with_children = Column(Boolean, nullable=False, default=False)
    works_with_vulnerable_adults = Column(Boolean, nullable=False, default=False)

    dbs_certificate_number = Column(String(20))
    expiry_date = Column(Date)  # NULL while the check is pending

    training_completed = Column(Boolean, nullable=False, default=False)
    reference_checks_completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    deleted_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<SafeguardingRecord {self.id}: {self.person_name} expires={self.expiry_date}>"


class SafeguardingPolicyModel(Base):
    """A safeguarding policy and its review schedule."""

    __tablename__ = "safeguarding_policies"
    __table_args__ = (Index("ix_safeguarding_policies_org", "organization_id"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    policy_type = Column(String(100), nullable=False)
    last_reviewed_date = Column(Date)
    next_review_date = Column(Date)

    deleted_at = Column(DateTime(timezone=True))


class OverseasActivityModel(Base):
    """Overseas spend. `amount_gbp` is converted to GBP before insert."""

    __tablename__ = "overseas_activities"
    __table_args__ = (
        Index("ix_overseas_org_year", "organization_id", "financial_year"),
        CheckConstraint("amount_gbp >= 0", name="check_overseas_amount"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    country_code = Column(String(2), ForeignKey("countries.code"), nullable=False)
    activity_type = Column(
        _enum(ActivityType, "activity_type"),
        nullable=False,
        default=ActivityType.OTHER,
    )
    amount_gbp = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    transfer_method = Column(_enum(TransferMethod, "transfer_method"), nullable=False)
    transfer_date = Column(Date)
    financial_year = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    deleted_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<OverseasActivity {self.id}: {self.country_code} £{self.amount_gbp}>"


class IncomeRecordModel(Base):
    """An item of income. `source` is NULL until categorized."""

    __tablename__ = "income_records"
    __table_args__ = (
        Index("ix_income_org_year", "organization_id", "financial_year"),
        CheckConstraint("amount >= 0", name="check_income_amount"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    source = Column(_enum(IncomeSource, "income_source"))
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    date_received = Column(Date)
    is_related_party = Column(Boolean, nullable=False, default=False)
    donor_type = Column(_enum(DonorType, "donor_type"))
    financial_year = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    deleted_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<IncomeRecord {self.id}: {self.source} £{self.amount}>"


class FundraisingMethodModel(Base):
    """A fundraising method declared for a financial year."""

    __tablename__ = "fundraising_methods_used"
    __table_args__ = (Index("ix_fundraising_org_year", "organization_id", "financial_year"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    financial_year = Column(Integer, nullable=False)
    method = Column(String(100), nullable=False)
    is_used = Column(Boolean, nullable=False, default=True)
    uses_professional_fundraiser = Column(Boolean, nullable=False, default=False)
    fundraiser_name = Column(String(255))
    fundraiser_registration = Column(String(100))


class OverseasPartnerModel(Base):
    """A partner organization delivering overseas work."""

    __tablename__ = "overseas_partners"
    __table_args__ = (Index("ix_overseas_partners_org", "organization_id"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(String(255), nullable=False)
    country_code = Column(String(2), ForeignKey("countries.code"))
    registration_number = Column(String(100))
    registration_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    deleted_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<OverseasPartner {self.id}: {self.name} verified={self.registration_verified}>"
