"""
Test Configuration
==================

Pytest fixtures for Charity Prep tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from datetime import UTC, date, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from shared.models.records import (  # noqa: E402
    ComplianceScoreSnapshot,
    Country,
    DonorType,
    FundraisingMethod,
    IncomeRecord,
    IncomeSource,
    Organization,
    OverseasActivity,
    OverseasPartner,
    RoleType,
    SafeguardingPolicy,
    SafeguardingRecord,
    TransferMethod,
)


ORG_ID = "8d3c1f0e-2b7a-4c55-9e61-0f4a2d9b7c10"
TODAY = date(2025, 6, 15)


class InMemoryComplianceRepository:
    """ComplianceRepository backed by lists, for tests."""

    def __init__(
        self,
        organizations: list[Organization] | None = None,
        safeguarding: list[SafeguardingRecord] | None = None,
        policies: list[SafeguardingPolicy] | None = None,
        overseas: list[OverseasActivity] | None = None,
        partners: list[OverseasPartner] | None = None,
        income: list[IncomeRecord] | None = None,
        fundraising: list[FundraisingMethod] | None = None,
        countries: list[Country] | None = None,
        snapshots: list[ComplianceScoreSnapshot] | None = None,
    ) -> None:
        self.organizations = {o.id: o for o in organizations or []}
        self.safeguarding = list(safeguarding or [])
        self.policies = list(policies or [])
        self.overseas = list(overseas or [])
        self.partners = list(partners or [])
        self.income = list(income or [])
        self.fundraising = list(fundraising or [])
        self.countries = list(countries or [])
        self.snapshots = list(snapshots or [])

    async def get_organization(self, organization_id: str) -> Organization | None:
        return self.organizations.get(organization_id)

    async def list_safeguarding_records(self, organization_id: str) -> list[SafeguardingRecord]:
        return [
            r for r in self.safeguarding
            if r.organization_id == organization_id and r.deleted_at is None
        ]

    async def list_safeguarding_policies(self, organization_id: str) -> list[SafeguardingPolicy]:
        return [
            p for p in self.policies
            if p.organization_id == organization_id and p.deleted_at is None
        ]

    async def list_overseas_activities(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[OverseasActivity]:
        return [
            a for a in self.overseas
            if a.organization_id == organization_id
            and a.deleted_at is None
            and (financial_year is None or a.financial_year == financial_year)
        ]

    async def list_overseas_partners(self, organization_id: str) -> list[OverseasPartner]:
        return [
            p for p in self.partners
            if p.organization_id == organization_id and p.deleted_at is None
        ]

    async def list_income_records(
        self, organization_id: str, financial_year: int | None = None
    ) -> list[IncomeRecord]:
        return [
            r for r in self.income
            if r.organization_id == organization_id
            and r.deleted_at is None
            and (financial_year is None or r.financial_year == financial_year)
        ]

    async def list_fundraising_methods(
        self, organization_id: str, financial_year: int
    ) -> list[FundraisingMethod]:
        return [
            m for m in self.fundraising
            if m.organization_id == organization_id
            and m.financial_year == financial_year
            and m.is_used
        ]

    async def list_countries(self) -> list[Country]:
        return list(self.countries)

    def _history(self, organization_id: str) -> list[ComplianceScoreSnapshot]:
        # Oldest first; ties keep insertion order
        return sorted(
            (s for s in self.snapshots if s.organization_id == organization_id),
            key=lambda s: s.created_at,
        )

    async def get_score_history(
        self, organization_id: str, limit: int
    ) -> list[ComplianceScoreSnapshot]:
        return list(reversed(self._history(organization_id)))[:limit]

    async def get_score_history_between(
        self, organization_id: str, start: datetime, end: datetime
    ) -> list[ComplianceScoreSnapshot]:
        return [s for s in self._history(organization_id) if start <= s.created_at <= end]

    async def insert_score_snapshot(self, organization_id: str, score: int) -> None:
        self.snapshots.append(
            ComplianceScoreSnapshot(
                organization_id=organization_id,
                score=score,
                created_at=datetime.now(UTC),
            )
        )


class FakeRedis:
    """Counter subset of the Redis client used by rate limiting."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.expiries: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expiries[key] = seconds
        return True

    async def ping(self) -> bool:
        return True


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
def today() -> date:
    """Fixed reference date for expiry calculations."""
    return TODAY


@pytest.fixture
def organization() -> Organization:
    """Sample charity with a 31 March year end."""
    return Organization(
        id=ORG_ID,
        name="Helping Hands Trust",
        charity_number="1187654",
        charity_type="CIO",
        income_band="100k-500k",
        financial_year_end="03-31",
    )


@pytest.fixture
def countries() -> list[Country]:
    """Country reference rows."""
    return [
        Country(code="KE", name="Kenya", is_high_risk=False, requires_due_diligence=True),
        Country(code="SY", name="Syria", is_high_risk=True, requires_due_diligence=True),
        Country(code="FR", name="France"),
    ]


@pytest.fixture
def safeguarding_records() -> list[SafeguardingRecord]:
    """One valid, one expired, one expiring soon and one pending DBS check."""
    return [
        SafeguardingRecord(
            id="sg-1",
            organization_id=ORG_ID,
            person_name="Amina Okafor",
            role=RoleType.EMPLOYEE,
            works_with_children=True,
            expiry_date=TODAY + timedelta(days=200),
            training_completed=True,
        ),
        SafeguardingRecord(
            id="sg-2",
            organization_id=ORG_ID,
            person_name="Tom Reilly",
            role=RoleType.VOLUNTEER,
            works_with_vulnerable_adults=True,
            expiry_date=TODAY - timedelta(days=10),
        ),
        SafeguardingRecord(
            id="sg-3",
            organization_id=ORG_ID,
            person_name="Priya Shah",
            role=RoleType.TRUSTEE,
            works_with_children=True,
            expiry_date=TODAY + timedelta(days=20),
            training_completed=True,
        ),
        SafeguardingRecord(
            id="sg-4",
            organization_id=ORG_ID,
            person_name="Sam Lee",
            role=RoleType.VOLUNTEER,
            expiry_date=None,
        ),
    ]


@pytest.fixture
def safeguarding_policies() -> list[SafeguardingPolicy]:
    return [
        SafeguardingPolicy(
            organization_id=ORG_ID,
            policy_type="child_protection",
            last_reviewed_date=date(2025, 1, 10),
            next_review_date=date(2026, 1, 10),
        ),
        SafeguardingPolicy(
            organization_id=ORG_ID,
            policy_type="vulnerable_adults",
            last_reviewed_date=date(2024, 11, 2),
        ),
    ]


@pytest.fixture
def overseas_activities() -> list[OverseasActivity]:
    """FY2025 overseas spend in Kenya and Syria."""
    return [
        OverseasActivity(
            id="os-1",
            organization_id=ORG_ID,
            country_code="ke",
            amount_gbp=6000.0,
            transfer_method=TransferMethod.BANK_TRANSFER,
            financial_year=2025,
        ),
        OverseasActivity(
            id="os-2",
            organization_id=ORG_ID,
            country_code="SY",
            amount_gbp=2000.0,
            transfer_method=TransferMethod.CASH,
            financial_year=2025,
        ),
        OverseasActivity(
            id="os-3",
            organization_id=ORG_ID,
            country_code="KE",
            amount_gbp=2000.0,
            transfer_method=TransferMethod.WIRE_TRANSFER,
            financial_year=2025,
        ),
    ]


@pytest.fixture
def overseas_partners() -> list[OverseasPartner]:
    """One verified partner, one unverified and one no longer active."""
    return [
        OverseasPartner(
            id="op-1",
            organization_id=ORG_ID,
            name="Nairobi Community Health",
            country_code="KE",
            registration_number="NGO-4471",
            registration_verified=True,
        ),
        OverseasPartner(
            id="op-2",
            organization_id=ORG_ID,
            name="Mombasa Schools Network",
            country_code="KE",
        ),
        OverseasPartner(
            id="op-3",
            organization_id=ORG_ID,
            name="Aleppo Relief Committee",
            country_code="SY",
            registration_verified=True,
            is_active=False,
        ),
    ]


@pytest.fixture
def income_records() -> list[IncomeRecord]:
    """FY2025 income across two categories plus one uncategorized item."""
    return [
        IncomeRecord(
            id="in-1",
            organization_id=ORG_ID,
            source=IncomeSource.DONATIONS_LEGACIES,
            amount=5000.0,
            donor_type=DonorType.CORPORATE,
            financial_year=2025,
        ),
        IncomeRecord(
            id="in-2",
            organization_id=ORG_ID,
            source=IncomeSource.DONATIONS_LEGACIES,
            amount=250.0,
            donor_type=DonorType.INDIVIDUAL,
            financial_year=2025,
        ),
        IncomeRecord(
            id="in-3",
            organization_id=ORG_ID,
            source=IncomeSource.INVESTMENTS,
            amount=1200.5,
            is_related_party=True,
            financial_year=2025,
        ),
        IncomeRecord(
            id="in-4",
            organization_id=ORG_ID,
            source=None,
            amount=300.0,
            financial_year=2025,
        ),
    ]


@pytest.fixture
def fundraising_methods() -> list[FundraisingMethod]:
    return [
        FundraisingMethod(organization_id=ORG_ID, financial_year=2025, method="events"),
        FundraisingMethod(
            organization_id=ORG_ID,
            financial_year=2025,
            method="street_collection",
            uses_professional_fundraiser=True,
            fundraiser_name="StreetAsk Ltd",
            fundraiser_registration="FR-2231",
        ),
        FundraisingMethod(
            organization_id=ORG_ID,
            financial_year=2025,
            method="telephone",
            is_used=False,
        ),
    ]


@pytest.fixture
def repository(
    organization: Organization,
    safeguarding_records: list[SafeguardingRecord],
    safeguarding_policies: list[SafeguardingPolicy],
    overseas_activities: list[OverseasActivity],
    overseas_partners: list[OverseasPartner],
    income_records: list[IncomeRecord],
    fundraising_methods: list[FundraisingMethod],
    countries: list[Country],
) -> InMemoryComplianceRepository:
    """Repository populated with the sample organization's data."""
    return InMemoryComplianceRepository(
        organizations=[organization],
        safeguarding=safeguarding_records,
        policies=safeguarding_policies,
        overseas=overseas_activities,
        partners=overseas_partners,
        income=income_records,
        fundraising=fundraising_methods,
        countries=countries,
    )


@pytest.fixture
def empty_repository(organization: Organization) -> InMemoryComplianceRepository:
    """Repository holding the organization and nothing else."""
    return InMemoryComplianceRepository(organizations=[organization])


# =============================================================================
# HTTP Clients
# =============================================================================


@pytest.fixture
def fake_redis() -> Generator[FakeRedis, None, None]:
    """Install an in-memory Redis double as the shared client."""
    from shared.database.redis import RedisClient

    fake = FakeRedis()
    RedisClient._client = fake
    yield fake
    RedisClient._client = None


@pytest_asyncio.fixture
async def compliance_client(
    repository: InMemoryComplianceRepository,
    fake_redis: FakeRedis,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Charity Compliance Service."""
    from services.charity_compliance.main import app
    from services.charity_compliance.routes.dependencies import get_compliance_repository

    app.dependency_overrides[get_compliance_repository] = lambda: repository

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
