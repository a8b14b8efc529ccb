"""
Organization and Reference Database Models
==========================================

SQLAlchemy ORM models for charities and the country reference list.

Version: 0.1.0
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Boolean, Column, DateTime, Index, String

from shared.database.postgres import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class OrganizationModel(Base):
    """
    SQLAlchemy model for a charity (tenant).

    The reporting pipeline only reads organizations; they are created
    during onboarding.
    """

    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    charity_number = Column(String(20))
    charity_type = Column(String(50))
    income_band = Column(String(50))

    # "MM-DD", e.g. "03-31"
    financial_year_end = Column(String(5), nullable=False, default="03-31")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    deleted_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Organization {self.id}: {self.name}>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "charity_number": self.charity_number,
            "charity_type": self.charity_type,
            "income_band": self.income_band,
            "financial_year_end": self.financial_year_end,
        }


class CountryModel(Base):
    """Country reference data shared by all organizations."""

    __tablename__ = "countries"
    __table_args__ = (Index("ix_countries_high_risk", "is_high_risk"),)

    code = Column(String(2), primary_key=True)
    name = Column(String(100), nullable=False)
    is_high_risk = Column(Boolean, nullable=False, default=False)
    requires_due_diligence = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Country {self.code}: {self.name}>"
