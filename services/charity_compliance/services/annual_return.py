"""
Annual Return Assembly
======================

Aggregates a charity's registers for one financial year and projects the
result onto the Charity Commission Annual Return field codes.

Sections:
- A: Charity details
- B: Income
- C: Expenditure (not tracked, emitted as placeholders)
- D: Overseas activities
- E: Fundraising
- F-I: Subsidiaries, trustees, safeguarding, serious incidents

The assembler only projects data. It does not apply Charity Commission
validation rules.

Version: 0.1.0
"""

import asyncio
import calendar
import csv
import io
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from services.charity_compliance.exceptions import (
    InvalidFinancialYearEndError,
    OrganizationNotFoundError,
)
from services.charity_compliance.repository import ComplianceRepository
from services.charity_compliance.services.score import (
    ScoreWeights,
    calculate_compliance_score,
    round_half_up,
)
from shared.config import ComplianceSettings, settings
from shared.logging import get_logger
from shared.models.annual_return import (
    AnnualReturnData,
    AnnualReturnField,
    ComplianceSummary,
    CountrySpend,
    FundraisingSummary,
    IncomeBreakdown,
    IncomeSourceShare,
    IncomeSummary,
    MissingField,
    MissingFieldImpact,
    OverseasSummary,
    ProfessionalFundraiser,
    ReturnSection,
    SafeguardingSummary,
    TransferMethodBreakdown,
)
from shared.models.records import (
    STANDARD_TRANSFER_METHODS,
    Country,
    DonorType,
    FundraisingMethod,
    IncomeRecord,
    OverseasActivity,
    OverseasPartner,
    SafeguardingPolicy,
    SafeguardingRecord,
)


logger = get_logger(__name__)


# Required fields the completeness percentage is measured against
REQUIRED_FIELD_COUNT = 15

STANDARD_METHOD_VALUES = frozenset(m.value for m in STANDARD_TRANSFER_METHODS)

# Label for income with no source category
UNCATEGORIZED_SOURCE = "uncategorized"


# =============================================================================
# Financial Year
# =============================================================================


def parse_year_end(financial_year_end: str) -> tuple[int, int]:
    """Parse an "MM-DD" financial year end into (month, day)."""
    try:
        month_str, day_str = financial_year_end.split("-")
        month, day = int(month_str), int(day_str)
    except (AttributeError, ValueError) as e:
        raise InvalidFinancialYearEndError(str(financial_year_end)) from e

    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise InvalidFinancialYearEndError(financial_year_end)
    return month, day


def _safe_date(year: int, month: int, day: int) -> date:
    # Clamp to the end of month (e.g. 02-29 in a non-leap year)
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def financial_year_end_date(financial_year: int, financial_year_end: str) -> date:
    """Date on which `financial_year` ends."""
    month, day = parse_year_end(financial_year_end)
    return _safe_date(financial_year, month, day)


def current_financial_year(financial_year_end: str, today: date | None = None) -> int:
    """
    Financial year containing `today`, named by the year it ends in.

    Once this calendar year's year-end date has passed, the current
    financial year is next year's.
    """
    today = today or date.today()
    if today > financial_year_end_date(today.year, financial_year_end):
        return today.year + 1
    return today.year


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    return _safe_date(year, month_index % 12 + 1, value.day)


def filing_deadline(financial_year: int, financial_year_end: str, months: int = 10) -> date:
    """Annual Return deadline: `months` after the financial year end."""
    return add_months(financial_year_end_date(financial_year, financial_year_end), months)


# =============================================================================
# Aggregation
# =============================================================================


def summarize_safeguarding(
    records: list[SafeguardingRecord],
    policies: list[SafeguardingPolicy],
    today: date,
) -> SafeguardingSummary:
    """DBS counts and policy review status."""
    active = [r for r in records if r.is_active]
    active_policies = [p for p in policies if p.deleted_at is None]
    reviewed = [p.last_reviewed_date for p in active_policies if p.last_reviewed_date]

    return SafeguardingSummary(
        total_staff_volunteers=len(active),
        working_with_children=sum(1 for r in active if r.works_with_children),
        working_with_vulnerable_adults=sum(1 for r in active if r.works_with_vulnerable_adults),
        dbs_checks_valid=sum(1 for r in active if not r.is_pending and not r.is_expired(today)),
        dbs_checks_expired=sum(1 for r in active if r.is_expired(today)),
        dbs_checks_pending=sum(1 for r in active if r.is_pending),
        training_completed=sum(1 for r in active if r.training_completed),
        policy_types=[p.policy_type for p in active_policies],
        policies_last_reviewed=max(reviewed) if reviewed else None,
    )


def _share(amount: float, total: float) -> float:
    return round(amount / total * 100, 1) if total > 0 else 0.0


def summarize_overseas(
    activities: list[OverseasActivity],
    countries: list[Country],
    partners: list[OverseasPartner] | None = None,
) -> OverseasSummary:
    """
    Overseas spend by country and by transfer method, plus partner counts.

    Countries and transfer methods are ordered by amount, largest first.
    """
    current_partners = [p for p in partners or [] if p.is_current]
    partners_total = len(current_partners)
    partners_verified = sum(1 for p in current_partners if p.registration_verified)

    active = [a for a in activities if a.deleted_at is None]
    if not active:
        return OverseasSummary(
            partners_total=partners_total,
            partners_verified=partners_verified,
        )

    country_lookup = {c.code: c for c in countries}
    total_spend = sum(a.amount_gbp for a in active)

    by_country: dict[str, CountrySpend] = {}
    by_method: dict[str, float] = {}
    high_risk_activities = 0

    for activity in active:
        country = country_lookup.get(activity.country_code)
        is_high_risk = bool(country and country.is_high_risk)
        if is_high_risk:
            high_risk_activities += 1

        spend = by_country.get(activity.country_code)
        if spend is None:
            spend = CountrySpend(
                country_code=activity.country_code,
                country_name=country.name if country else activity.country_code,
                total_spend=0.0,
                activities=0,
                is_high_risk=is_high_risk,
            )
            by_country[activity.country_code] = spend
        spend.total_spend += activity.amount_gbp
        spend.activities += 1

        method = activity.transfer_method.value
        by_method[method] = by_method.get(method, 0.0) + activity.amount_gbp

    # Stable sorts keep first-seen order between equal amounts
    country_spend = sorted(by_country.values(), key=lambda c: c.total_spend, reverse=True)
    transfer_methods = sorted(
        (
            TransferMethodBreakdown(
                method=method,
                amount=amount,
                percentage=_share(amount, total_spend),
                requires_explanation=method not in STANDARD_METHOD_VALUES,
            )
            for method, amount in by_method.items()
        ),
        key=lambda t: t.amount,
        reverse=True,
    )

    return OverseasSummary(
        has_overseas_activities=True,
        total_spend=total_spend,
        countries=[c.country_code for c in country_spend],
        country_spend=country_spend,
        transfer_methods=transfer_methods,
        high_risk_activities=high_risk_activities,
        uses_non_bank_transfers=any(not a.uses_standard_transfer for a in active),
        partners_total=partners_total,
        partners_verified=partners_verified,
    )


def summarize_income(records: list[IncomeRecord]) -> IncomeSummary:
    """Income totals by category, largest donations and related parties."""
    active = [r for r in records if r.deleted_at is None]

    breakdown = IncomeBreakdown()
    by_source: dict[str, float] = {}
    uncategorized = 0.0
    highest: dict[DonorType, float] = {}
    related_party_total = 0.0

    for record in active:
        if record.source:
            field = record.source.value
            setattr(breakdown, field, getattr(breakdown, field) + record.amount)
        else:
            field = UNCATEGORIZED_SOURCE
            uncategorized += record.amount
        by_source[field] = by_source.get(field, 0.0) + record.amount

        if record.donor_type in (DonorType.CORPORATE, DonorType.INDIVIDUAL):
            highest[record.donor_type] = max(highest.get(record.donor_type, 0.0), record.amount)

        if record.is_related_party:
            related_party_total += record.amount

    total_income = sum(r.amount for r in active)
    sources = sorted(
        (
            IncomeSourceShare(source=source, amount=amount, percentage=_share(amount, total_income))
            for source, amount in by_source.items()
        ),
        key=lambda s: s.amount,
        reverse=True,
    )

    return IncomeSummary(
        total_income=total_income,
        breakdown=breakdown,
        sources=sources,
        uncategorized_income=uncategorized,
        highest_corporate_donation=highest.get(DonorType.CORPORATE),
        highest_individual_donation=highest.get(DonorType.INDIVIDUAL),
        has_related_party_transactions=any(r.is_related_party for r in active),
        related_party_total=related_party_total,
    )


def summarize_fundraising(methods: list[FundraisingMethod]) -> FundraisingSummary:
    """Distinct methods used and any professional fundraisers."""
    used = [m for m in methods if m.is_used]
    fundraisers = [
        ProfessionalFundraiser(
            fundraiser_name=m.fundraiser_name,
            fundraiser_registration=m.fundraiser_registration,
        )
        for m in used
        if m.uses_professional_fundraiser and m.fundraiser_name
    ]

    return FundraisingSummary(
        methods_used=list(dict.fromkeys(m.method for m in used)),
        uses_professional_fundraiser=any(m.uses_professional_fundraiser for m in used),
        professional_fundraisers=fundraisers,
    )


def find_missing_fields(
    safeguarding: SafeguardingSummary,
    income: IncomeSummary,
    income_records: int,
    overseas: OverseasSummary | None = None,
) -> list[MissingField]:
    """Data the return needs that has not been recorded."""
    missing: list[MissingField] = []

    if safeguarding.total_staff_volunteers == 0:
        missing.append(
            MissingField(
                section=ReturnSection.SAFEGUARDING,
                field="dbs_records",
                description="No DBS records found",
                required=True,
                impact=MissingFieldImpact.HIGH,
            )
        )

    if not safeguarding.has_policy:
        missing.append(
            MissingField(
                section=ReturnSection.SAFEGUARDING,
                field="safeguarding_policy",
                description="No safeguarding policy on file",
                required=False,
                impact=MissingFieldImpact.MEDIUM,
            )
        )

    if overseas is not None and overseas.has_overseas_activities and overseas.partners_total == 0:
        missing.append(
            MissingField(
                section=ReturnSection.OVERSEAS,
                field="partners",
                description="Overseas activities recorded but no partner organizations",
                required=False,
                impact=MissingFieldImpact.MEDIUM,
            )
        )

    if income_records == 0:
        missing.append(
            MissingField(
                section=ReturnSection.INCOME,
                field="income",
                description="No income records for the financial year",
                required=True,
                impact=MissingFieldImpact.HIGH,
            )
        )
    elif income.uncategorized_income > 0:
        missing.append(
            MissingField(
                section=ReturnSection.INCOME,
                field="income_categories",
                description="Some income has no source category",
                required=False,
                impact=MissingFieldImpact.MEDIUM,
            )
        )

    return missing


def calculate_completeness(missing_fields: list[MissingField]) -> int:
    """Share of required fields that have data."""
    required_missing = sum(1 for f in missing_fields if f.required)
    completed = max(REQUIRED_FIELD_COUNT - required_missing, 0)
    return round_half_up(completed / REQUIRED_FIELD_COUNT * 100)


# =============================================================================
# Assembler
# =============================================================================


class AnnualReturnAssembler:
    """
    Builds `AnnualReturnData` for one organization and financial year.

    Args:
        repository: Compliance data repository
        weights: Score weights (defaults from settings)
        config: Compliance settings (defaults to the global settings)
    """

    def __init__(
        self,
        repository: ComplianceRepository,
        weights: ScoreWeights | None = None,
        config: ComplianceSettings | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or settings.compliance
        self.weights = weights or ScoreWeights.from_settings(self.config)

    async def assemble(
        self,
        organization_id: str,
        financial_year: int | None = None,
        today: date | None = None,
    ) -> AnnualReturnData:
        """
        Gather and aggregate Annual Return data.

        Args:
            organization_id: Organization UUID
            financial_year: Year the financial year ends in (defaults to
                the current financial year)
            today: Reference date (defaults to today)

        Raises:
            OrganizationNotFoundError: If the organization does not exist
        """
        today = today or date.today()

        organization = await self.repository.get_organization(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)

        year = financial_year or current_financial_year(organization.financial_year_end, today)

        (
            safeguarding_records,
            policies,
            overseas_activities,
            partners,
            income_records,
            fundraising_methods,
            countries,
        ) = await asyncio.gather(
            self.repository.list_safeguarding_records(organization_id),
            self.repository.list_safeguarding_policies(organization_id),
            self.repository.list_overseas_activities(organization_id, year),
            self.repository.list_overseas_partners(organization_id),
            self.repository.list_income_records(organization_id, year),
            self.repository.list_fundraising_methods(organization_id, year),
            self.repository.list_countries(),
        )

        scores = calculate_compliance_score(
            safeguarding_records,
            overseas_activities,
            income_records,
            countries,
            weights=self.weights,
            today=today,
        )

        safeguarding = summarize_safeguarding(safeguarding_records, policies, today)
        overseas = summarize_overseas(overseas_activities, countries, partners)
        income = summarize_income(income_records)
        missing = find_missing_fields(
            safeguarding,
            income,
            income_records=sum(1 for r in income_records if r.deleted_at is None),
            overseas=overseas,
        )

        compliance = ComplianceSummary(
            overall_score=scores.overall,
            filing_deadline=filing_deadline(
                year, organization.financial_year_end, self.config.filing_deadline_months
            ),
            ready_to_file=scores.overall >= self.config.ready_to_file_threshold,
            completeness=calculate_completeness(missing),
            missing_fields=missing,
        )

        data = AnnualReturnData(
            organization=organization,
            financial_year=year,
            safeguarding=safeguarding,
            overseas=overseas,
            income=income,
            fundraising=summarize_fundraising(fundraising_methods),
            compliance=compliance,
        )

        logger.info(
            "annual_return_assembled",
            organization_id=organization_id,
            financial_year=year,
            overall_score=scores.overall,
            completeness=compliance.completeness,
            missing_fields=len(missing),
        )
        return data


# =============================================================================
# Field Mapping
# =============================================================================


class FieldKind(str, Enum):
    """How a field value is formatted."""

    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    BOOLEAN = "boolean"
    LIST = "list"


PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class FieldDefinition:
    """Where an Annual Return field's value comes from."""

    section: ReturnSection
    description: str
    data_path: str
    kind: FieldKind = FieldKind.TEXT

    @property
    def is_placeholder(self) -> bool:
        return self.data_path == PLACEHOLDER


ANNUAL_RETURN_FIELD_MAPPING: dict[str, FieldDefinition] = {
    # Part A - Charity
    "A1_CharityName": FieldDefinition(
        ReturnSection.CHARITY, "Charity name", "organization.name"
    ),
    "A2_CharityNumber": FieldDefinition(
        ReturnSection.CHARITY, "Registered charity number", "organization.charity_number"
    ),
    "A3_CharityType": FieldDefinition(
        ReturnSection.CHARITY, "Charity type", "organization.charity_type"
    ),
    "A4_FinancialYearEnd": FieldDefinition(
        ReturnSection.CHARITY, "Financial year end", "organization.financial_year_end"
    ),
    # Part B - Income
    "B1_TotalIncome": FieldDefinition(
        ReturnSection.INCOME, "Total income", "income.total_income", FieldKind.CURRENCY
    ),
    "B2_DonationsLegacies": FieldDefinition(
        ReturnSection.INCOME,
        "Donations and legacies",
        "income.breakdown.donations_legacies",
        FieldKind.CURRENCY,
    ),
    "B3_CharitableActivities": FieldDefinition(
        ReturnSection.INCOME,
        "Charitable activities",
        "income.breakdown.charitable_activities",
        FieldKind.CURRENCY,
    ),
    "B4_OtherTrading": FieldDefinition(
        ReturnSection.INCOME,
        "Other trading activities",
        "income.breakdown.other_trading",
        FieldKind.CURRENCY,
    ),
    "B5_Investments": FieldDefinition(
        ReturnSection.INCOME, "Investments", "income.breakdown.investments", FieldKind.CURRENCY
    ),
    "B6_Other": FieldDefinition(
        ReturnSection.INCOME, "Other income", "income.breakdown.other", FieldKind.CURRENCY
    ),
    # Part C - Expenditure
    "C1_TotalExpenditure": FieldDefinition(
        ReturnSection.EXPENDITURE, "Total expenditure", PLACEHOLDER, FieldKind.CURRENCY
    ),
    "C2_CharitableSpend": FieldDefinition(
        ReturnSection.EXPENDITURE,
        "Expenditure on charitable activities",
        PLACEHOLDER,
        FieldKind.CURRENCY,
    ),
    "C3_RaisingFunds": FieldDefinition(
        ReturnSection.EXPENDITURE, "Expenditure on raising funds", PLACEHOLDER, FieldKind.CURRENCY
    ),
    # Part D - Overseas
    "D1_OverseasSpend": FieldDefinition(
        ReturnSection.OVERSEAS,
        "Total overseas expenditure",
        "overseas.total_spend",
        FieldKind.CURRENCY,
    ),
    "D2_CountriesCount": FieldDefinition(
        ReturnSection.OVERSEAS, "Number of countries", "overseas.country_count", FieldKind.NUMBER
    ),
    "D3_CountriesList": FieldDefinition(
        ReturnSection.OVERSEAS, "Countries of operation", "overseas.countries", FieldKind.LIST
    ),
    "D4_OverseasPartners": FieldDefinition(
        ReturnSection.OVERSEAS,
        "Number of overseas partners",
        "overseas.partners_total",
        FieldKind.NUMBER,
    ),
    "D5_PartnersVerified": FieldDefinition(
        ReturnSection.OVERSEAS,
        "Partners with verified registration",
        "overseas.partners_verified",
        FieldKind.NUMBER,
    ),
    # Part E - Fundraising
    "E1_FundraisingMethods": FieldDefinition(
        ReturnSection.FUNDRAISING,
        "Fundraising methods used",
        "fundraising.methods_used",
        FieldKind.LIST,
    ),
    "E2_ProfessionalFundraiser": FieldDefinition(
        ReturnSection.FUNDRAISING,
        "Used a professional fundraiser",
        "fundraising.uses_professional_fundraiser",
        FieldKind.BOOLEAN,
    ),
    # Part F - Subsidiaries
    "F1_HasSubsidiaries": FieldDefinition(
        ReturnSection.SUBSIDIARIES, "Has trading subsidiaries", PLACEHOLDER, FieldKind.BOOLEAN
    ),
    # Part G - Trustees
    "G1_TrusteePayments": FieldDefinition(
        ReturnSection.TRUSTEES, "Payments to trustees", PLACEHOLDER, FieldKind.BOOLEAN
    ),
    "G2_RelatedPartyTransactions": FieldDefinition(
        ReturnSection.TRUSTEES,
        "Had related party transactions",
        "income.has_related_party_transactions",
        FieldKind.BOOLEAN,
    ),
    # Part H - Safeguarding
    "H1_WorkingWithChildren": FieldDefinition(
        ReturnSection.SAFEGUARDING,
        "Number working with children",
        "safeguarding.working_with_children",
        FieldKind.NUMBER,
    ),
    "H2_SafeguardingPolicy": FieldDefinition(
        ReturnSection.SAFEGUARDING,
        "Has a safeguarding policy",
        "safeguarding.has_policy",
        FieldKind.BOOLEAN,
    ),
    # Part I - Serious incidents
    "I1_SeriousIncidents": FieldDefinition(
        ReturnSection.INCIDENTS, "Serious incidents reported", PLACEHOLDER, FieldKind.NUMBER
    ),
    # Additional information
    "HighestCorporateDonation": FieldDefinition(
        ReturnSection.ADDITIONAL,
        "Highest corporate donation",
        "income.highest_corporate_donation",
        FieldKind.CURRENCY,
    ),
    "HighestIndividualDonation": FieldDefinition(
        ReturnSection.ADDITIONAL,
        "Highest individual donation",
        "income.highest_individual_donation",
        FieldKind.CURRENCY,
    ),
    "StaffVolunteersCount": FieldDefinition(
        ReturnSection.ADDITIONAL,
        "Total staff and volunteers",
        "safeguarding.total_staff_volunteers",
        FieldKind.NUMBER,
    ),
}


NOT_PROVIDED = "Not provided"
NOT_TRACKED = "Not tracked"


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dotted attribute path; missing links resolve to None."""
    value = data
    for part in path.split("."):
        if value is None:
            return None
        value = getattr(value, part, None)
    return value


def format_field_value(value: Any, kind: FieldKind) -> tuple[str, str]:
    """Return (display text, text to paste into the online form)."""
    if value is None:
        return NOT_PROVIDED, ""

    if kind is FieldKind.CURRENCY:
        amount = float(value)
        return f"£{amount:,.2f}", f"{amount:.2f}"
    if kind is FieldKind.BOOLEAN:
        text = "Yes" if value else "No"
        return text, text
    if kind is FieldKind.LIST:
        text = ", ".join(str(v) for v in value)
        return (text or "None"), text
    if isinstance(value, Enum):
        value = value.value
    return str(value), str(value)


def map_annual_return_fields(data: AnnualReturnData) -> list[AnnualReturnField]:
    """Resolve every Annual Return field code against assembled data."""
    fields: list[AnnualReturnField] = []

    for code, definition in ANNUAL_RETURN_FIELD_MAPPING.items():
        if definition.is_placeholder:
            fields.append(
                AnnualReturnField(
                    code=code,
                    section=definition.section,
                    description=definition.description,
                    data_path=definition.data_path,
                    value=None,
                    formatted_value=NOT_TRACKED,
                    copy_text="",
                    placeholder=True,
                )
            )
            continue

        value = resolve_path(data, definition.data_path)
        formatted, copy_text = format_field_value(value, definition.kind)
        fields.append(
            AnnualReturnField(
                code=code,
                section=definition.section,
                description=definition.description,
                data_path=definition.data_path,
                value=value,
                formatted_value=formatted,
                copy_text=copy_text,
            )
        )

    return fields


def get_fields_by_section(
    fields: list[AnnualReturnField],
    section: ReturnSection | None = None,
) -> list[AnnualReturnField]:
    """Fields in one section, or all fields when `section` is None."""
    if section is None:
        return list(fields)
    return [f for f in fields if f.section == section]


def export_fields_as_text(fields: list[AnnualReturnField]) -> str:
    """One "CODE: value" line per field."""
    return "\n".join(f"{f.code}: {f.copy_text}" for f in fields)


def _money(amount: float | None) -> str:
    return f"£{amount:.2f}" if amount else "None"


def format_annual_return_csv(data: AnnualReturnData) -> str:
    """Render assembled data as a sectioned CSV document."""
    org = data.organization
    sg = data.safeguarding
    overseas = data.overseas
    income = data.income
    fundraising = data.fundraising

    rows: list[list[Any]] = [
        ["Charity Annual Return Data Export"],
        ["Generated:", datetime.now(UTC).isoformat()],
        ["Financial Year:", data.financial_year],
        [],
        ["Organization Details"],
        ["Charity Name:", org.name],
        ["Charity Number:", org.charity_number or "N/A"],
        ["Financial Year End:", org.financial_year_end],
        [],
        ["Safeguarding"],
        ["Total Staff/Volunteers:", sg.total_staff_volunteers],
        ["Working with Children:", sg.working_with_children],
        ["Working with Vulnerable Adults:", sg.working_with_vulnerable_adults],
        ["Valid DBS Checks:", sg.dbs_checks_valid],
        ["Expired DBS Checks:", sg.dbs_checks_expired],
        ["Pending DBS Checks:", sg.dbs_checks_pending],
        ["Training Completed:", sg.training_completed],
        [],
        ["International Operations"],
        ["Has Overseas Operations:", "Yes" if overseas.has_overseas_activities else "No"],
        ["Total Overseas Spend:", f"£{overseas.total_spend:.2f}"],
        ["Number of Countries:", overseas.country_count],
        ["Partners Verified:", f"{overseas.partners_verified} of {overseas.partners_total}"],
        [],
        ["Countries:"],
    ]
    rows.extend(
        [
            c.country_name,
            f"£{c.total_spend:.2f}",
            f"{c.activities} activities",
            "HIGH RISK" if c.is_high_risk else "",
        ]
        for c in overseas.country_spend
    )
    rows.extend([[], ["Transfer Methods:"]])
    rows.extend(
        [
            t.method,
            f"£{t.amount:.2f}",
            f"{t.percentage:.1f}%",
            "REQUIRES EXPLANATION" if t.requires_explanation else "",
        ]
        for t in overseas.transfer_methods
    )
    rows.extend(
        [
            [],
            ["Fundraising & Income"],
            ["Total Income:", f"£{income.total_income:.2f}"],
            ["Highest Corporate Donation:", _money(income.highest_corporate_donation)],
            ["Highest Individual Donation:", _money(income.highest_individual_donation)],
            [
                "Has Related Party Transactions:",
                "Yes" if income.has_related_party_transactions else "No",
            ],
            ["Related Party Amount:", f"£{income.related_party_total:.2f}"],
            ["Fundraising Methods:", ", ".join(fundraising.methods_used) or "None"],
            [],
            ["Income by Source:"],
        ]
    )
    rows.extend(
        [s.source, f"£{s.amount:.2f}", f"{s.percentage:.1f}%"] for s in income.sources
    )
    rows.extend(
        [
            [],
            ["Compliance"],
            ["Overall Score:", data.compliance.overall_score],
            ["Filing Deadline:", data.compliance.filing_deadline.isoformat()],
            ["Ready to File:", "Yes" if data.compliance.ready_to_file else "No"],
            ["Completeness:", f"{data.compliance.completeness}%"],
        ]
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()
