"""
Compliance History Database Model
=================================

SQLAlchemy ORM model for the append-only compliance score history used
for trend analysis.

Version: 0.1.0
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String

from shared.database.postgres import Base


class ComplianceHistoryModel(Base):
    """
    One overall score per aggregation run.

    Rows are inserted by the statistics pipeline and never updated.
    """

    __tablename__ = "compliance_history"
    __table_args__ = (
        Index("ix_compliance_history_org_created", "organization_id", "created_at"),
        CheckConstraint("score >= 0 AND score <= 100", name="check_history_score_range"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    score = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<ComplianceHistory {self.organization_id}={self.score} at {self.created_at}>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "score": self.score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
