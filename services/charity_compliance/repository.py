"""
Compliance Data Repository
==========================

Data access for the aggregation pipeline. Services depend on the
`ComplianceRepository` protocol; `PostgresComplianceRepository` is the
production implementation.

Every fetch is scoped to one organization and excludes soft-deleted rows.
Each method opens its own session so independent fetches can run
concurrently under `asyncio.gather`.

Version: 0.1.0
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.charity_compliance.models import (
    ComplianceHistoryModel,
    CountryModel,
    FundraisingMethodModel,
    IncomeRecordModel,
    OrganizationModel,
    OverseasActivityModel,
    OverseasPartnerModel,
    SafeguardingPolicyModel,
    SafeguardingRecordModel,
)
from shared.database.postgres import PostgresClient, postgres_session
from shared.logging import get_logger
from shared.models.records import (
    ComplianceScoreSnapshot,
    Country,
    FundraisingMethod,
    IncomeRecord,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingPolicy,
    SafeguardingRecord,
)


logger = get_logger(__name__)


class ComplianceRepository(Protocol):
    """Read access to compliance registers plus the score history."""

    async def get_organization(self, organization_id: str) -> Organization | None: ...

    async def list_safeguarding_records(
        self, organization_id: str
    ) -> list[SafeguardingRecord]: ...

    async def list_safeguarding_policies(
        self, organization_id: str
    ) -> list[SafeguardingPolicy]: ...

    async def list_overseas_activities(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[OverseasActivity]: ...

    async def list_overseas_partners(self, organization_id: str) -> list[OverseasPartner]: ...

    async def list_income_records(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[IncomeRecord]: ...

    async def list_fundraising_methods(
        self, organization_id: str, financial_year: int
    ) -> list[FundraisingMethod]: ...

    async def list_countries(self) -> list[Country]: ...

    async def get_score_history(
        self, organization_id: str, limit: int
    ) -> list[ComplianceScoreSnapshot]:
        """Latest snapshots, newest first."""
        ...

    async def get_score_history_between(
        self, organization_id: str, start: datetime, end: datetime
    ) -> list[ComplianceScoreSnapshot]:
        """Snapshots created within [start, end], oldest first."""
        ...

    async def insert_score_snapshot(self, organization_id: str, score: int) -> None: ...


class PostgresComplianceRepository:
    """
    SQLAlchemy implementation of `ComplianceRepository`.

    Args:
        session_factory: Session factory; defaults to the shared
            `PostgresClient` factory.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        self._session_factory = session_factory or PostgresClient.get_session_factory()

    async def _scalars(self, statement) -> Sequence:
        async with postgres_session(self._session_factory) as session:
            result = await session.execute(statement)
            return result.scalars().all()

    # =========================================================================
    # Organization & Reference Data
    # =========================================================================

    async def get_organization(self, organization_id: str) -> Organization | None:
        rows = await self._scalars(
            select(OrganizationModel).where(
                OrganizationModel.id == organization_id,
                OrganizationModel.deleted_at.is_(None),
            )
        )
        return Organization.model_validate(rows[0]) if rows else None

    async def list_countries(self) -> list[Country]:
        rows = await self._scalars(select(CountryModel).order_by(CountryModel.code))
        return [Country.model_validate(row) for row in rows]

    # =========================================================================
    # Compliance Registers
    # =========================================================================

    async def list_safeguarding_records(
        self, organization_id: str
    ) -> list[SafeguardingRecord]:
        rows = await self._scalars(
            select(SafeguardingRecordModel)
            .where(
                SafeguardingRecordModel.organization_id == organization_id,
                SafeguardingRecordModel.deleted_at.is_(None),
            )
            .order_by(SafeguardingRecordModel.created_at)
        )
        return [SafeguardingRecord.model_validate(row) for row in rows]

    async def list_safeguarding_policies(
        self, organization_id: str
    ) -> list[SafeguardingPolicy]:
        rows = await self._scalars(
            select(SafeguardingPolicyModel).where(
                SafeguardingPolicyModel.organization_id == organization_id,
                SafeguardingPolicyModel.deleted_at.is_(None),
            )
        )
        return [SafeguardingPolicy.model_validate(row) for row in rows]

    async def list_overseas_activities(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[OverseasActivity]:
        statement = select(OverseasActivityModel).where(
            OverseasActivityModel.organization_id == organization_id,
            OverseasActivityModel.deleted_at.is_(None),
        )
        if financial_year is not None:
            statement = statement.where(OverseasActivityModel.financial_year == financial_year)

        rows = await self._scalars(statement.order_by(OverseasActivityModel.created_at))
        return [OverseasActivity.model_validate(row) for row in rows]

    async def list_overseas_partners(self, organization_id: str) -> list[OverseasPartner]:
        rows = await self._scalars(
            select(OverseasPartnerModel)
            .where(
                OverseasPartnerModel.organization_id == organization_id,
                OverseasPartnerModel.deleted_at.is_(None),
            )
            .order_by(OverseasPartnerModel.name)
        )
        return [OverseasPartner.model_validate(row) for row in rows]

    async def list_income_records(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[IncomeRecord]:
        statement = select(IncomeRecordModel).where(
            IncomeRecordModel.organization_id == organization_id,
            IncomeRecordModel.deleted_at.is_(None),
        )
        if financial_year is not None:
            statement = statement.where(IncomeRecordModel.financial_year == financial_year)

        rows = await self._scalars(statement.order_by(IncomeRecordModel.created_at))
        return [IncomeRecord.model_validate(row) for row in rows]

    async def list_fundraising_methods(
        self, organization_id: str, financial_year: int
    ) -> list[FundraisingMethod]:
        rows = await self._scalars(
            select(FundraisingMethodModel).where(
                FundraisingMethodModel.organization_id == organization_id,
                FundraisingMethodModel.financial_year == financial_year,
                FundraisingMethodModel.is_used.is_(True),
            )
        )
        return [FundraisingMethod.model_validate(row) for row in rows]

    # =========================================================================
    # Score History
    # =========================================================================

    async def get_score_history(
        self, organization_id: str, limit: int
    ) -> list[ComplianceScoreSnapshot]:
        rows = await self._scalars(
            select(ComplianceHistoryModel)
            .where(ComplianceHistoryModel.organization_id == organization_id)
            .order_by(ComplianceHistoryModel.created_at.desc())
            .limit(limit)
        )
        return [ComplianceScoreSnapshot.model_validate(row) for row in rows]

    async def get_score_history_between(
        self, organization_id: str, start: datetime, end: datetime
    ) -> list[ComplianceScoreSnapshot]:
        rows = await self._scalars(
            select(ComplianceHistoryModel)
            .where(
                ComplianceHistoryModel.organization_id == organization_id,
                ComplianceHistoryModel.created_at >= start,
                ComplianceHistoryModel.created_at <= end,
            )
            .order_by(ComplianceHistoryModel.created_at.asc())
        )
        return [ComplianceScoreSnapshot.model_validate(row) for row in rows]

    async def insert_score_snapshot(self, organization_id: str, score: int) -> None:
        async with postgres_session(self._session_factory) as session:
            session.add(ComplianceHistoryModel(organization_id=organization_id, score=score))

        logger.debug("score_snapshot_inserted", organization_id=organization_id, score=score)
