"""
Annual Return Tests
===================

Tests for Annual Return aggregation, field mapping and exports.

Version: 0.1.0
"""

import csv
import io
from datetime import date

import pytest
import pytest_asyncio

from services.charity_compliance.exceptions import (
    InvalidFinancialYearEndError,
    OrganizationNotFoundError,
)
from services.charity_compliance.services.annual_return import (
    ANNUAL_RETURN_FIELD_MAPPING,
    AnnualReturnAssembler,
    add_months,
    current_financial_year,
    export_fields_as_text,
    filing_deadline,
    format_annual_return_csv,
    get_fields_by_section,
    map_annual_return_fields,
    parse_year_end,
    summarize_income,
    summarize_overseas,
)
from shared.models.annual_return import AnnualReturnData, ReturnSection
from shared.models.records import (
    Country,
    IncomeRecord,
    IncomeSource,
    OverseasActivity,
    OverseasPartner,
    TransferMethod,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def assembler(repository) -> AnnualReturnAssembler:
    return AnnualReturnAssembler(repository)


@pytest_asyncio.fixture
async def annual_return(assembler, organization, today) -> AnnualReturnData:
    return await assembler.assemble(organization.id, 2025, today=today)


# =============================================================================
# Financial Year Tests
# =============================================================================


class TestFinancialYear:
    """Tests for financial year and deadline arithmetic."""

    @pytest.mark.parametrize(
        "year_end,today,expected",
        [
            ("03-31", date(2025, 6, 15), 2026),
            ("03-31", date(2025, 3, 31), 2025),
            ("03-31", date(2025, 1, 10), 2025),
            ("12-31", date(2025, 6, 1), 2025),
            ("12-31", date(2025, 12, 31), 2025),
        ],
    )
    def test_current_financial_year(self, year_end: str, today: date, expected: int) -> None:
        assert current_financial_year(year_end, today) == expected

    def test_filing_deadline_ten_months_after_year_end(self) -> None:
        assert filing_deadline(2025, "03-31") == date(2026, 1, 31)
        assert filing_deadline(2024, "12-31") == date(2025, 10, 31)

    def test_filing_deadline_clamps_short_month(self) -> None:
        """30 April + 10 months lands on the last day of February."""
        assert filing_deadline(2025, "04-30") == date(2026, 2, 28)

    def test_add_months_across_year(self) -> None:
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    @pytest.mark.parametrize("value", ["13-01", "00-10", "march", "03/31"])
    def test_invalid_year_end(self, value: str) -> None:
        with pytest.raises(InvalidFinancialYearEndError):
            parse_year_end(value)


# =============================================================================
# Assembly Tests
# =============================================================================


class TestAssemble:
    """Tests for AnnualReturnAssembler."""

    @pytest.mark.asyncio
    async def test_unknown_organization(self, assembler: AnnualReturnAssembler) -> None:
        with pytest.raises(OrganizationNotFoundError) as exc_info:
            await assembler.assemble("missing-org", 2025)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_defaults_to_current_financial_year(
        self, assembler: AnnualReturnAssembler, organization, today
    ) -> None:
        data = await assembler.assemble(organization.id, today=today)

        assert data.financial_year == 2026
        assert data.overseas.has_overseas_activities is False

    @pytest.mark.asyncio
    async def test_safeguarding_summary(self, annual_return: AnnualReturnData) -> None:
        sg = annual_return.safeguarding

        assert sg.total_staff_volunteers == 4
        assert sg.working_with_children == 2
        assert sg.working_with_vulnerable_adults == 1
        assert sg.dbs_checks_valid == 2
        assert sg.dbs_checks_expired == 1
        assert sg.dbs_checks_pending == 1
        assert sg.training_completed == 2
        assert sg.policy_types == ["child_protection", "vulnerable_adults"]
        assert sg.policies_last_reviewed == date(2025, 1, 10)

    @pytest.mark.asyncio
    async def test_overseas_summary(self, annual_return: AnnualReturnData) -> None:
        overseas = annual_return.overseas

        assert overseas.has_overseas_activities is True
        assert overseas.total_spend == 10000.0
        assert overseas.countries == ["KE", "SY"]
        assert overseas.high_risk_activities == 1
        assert overseas.uses_non_bank_transfers is True

        kenya, syria = overseas.country_spend
        assert (kenya.country_name, kenya.total_spend, kenya.activities) == ("Kenya", 8000.0, 2)
        assert syria.is_high_risk is True

    @pytest.mark.asyncio
    async def test_partner_counts(self, annual_return: AnnualReturnData) -> None:
        """Inactive partners are not counted."""
        assert annual_return.overseas.partners_total == 2
        assert annual_return.overseas.partners_verified == 1

    @pytest.mark.asyncio
    async def test_transfer_methods_largest_first(self, annual_return: AnnualReturnData) -> None:
        """Equal amounts keep the order they were first seen in."""
        methods = [m.method for m in annual_return.overseas.transfer_methods]

        assert methods == ["bank_transfer", "cash", "wire_transfer"]

    @pytest.mark.asyncio
    async def test_transfer_method_breakdown(self, annual_return: AnnualReturnData) -> None:
        methods = {m.method: m for m in annual_return.overseas.transfer_methods}

        assert methods["bank_transfer"].percentage == 60.0
        assert methods["bank_transfer"].requires_explanation is False
        assert methods["wire_transfer"].requires_explanation is False
        assert methods["cash"].amount == 2000.0
        assert methods["cash"].requires_explanation is True

    @pytest.mark.asyncio
    async def test_income_summary(self, annual_return: AnnualReturnData) -> None:
        income = annual_return.income

        assert income.total_income == pytest.approx(6750.5)
        assert income.breakdown.donations_legacies == 5250.0
        assert income.breakdown.investments == 1200.5
        assert income.breakdown.other_trading == 0.0
        assert income.uncategorized_income == 300.0
        assert income.highest_corporate_donation == 5000.0
        assert income.highest_individual_donation == 250.0
        assert income.has_related_party_transactions is True
        assert income.related_party_total == 1200.5

    @pytest.mark.asyncio
    async def test_income_by_source(self, annual_return: AnnualReturnData) -> None:
        sources = [(s.source, s.amount, s.percentage) for s in annual_return.income.sources]

        assert sources == [
            ("donations_legacies", 5250.0, 77.8),
            ("investments", 1200.5, 17.8),
            ("uncategorized", 300.0, 4.4),
        ]

    @pytest.mark.asyncio
    async def test_fundraising_summary(self, annual_return: AnnualReturnData) -> None:
        fundraising = annual_return.fundraising

        assert fundraising.methods_used == ["events", "street_collection"]
        assert fundraising.uses_professional_fundraiser is True
        assert fundraising.professional_fundraisers[0].fundraiser_name == "StreetAsk Ltd"

    @pytest.mark.asyncio
    async def test_compliance_summary(self, annual_return: AnnualReturnData) -> None:
        compliance = annual_return.compliance

        # 75 * 0.4 + 67 * 0.3 + 100 * 0.3
        assert compliance.overall_score == 80
        assert compliance.ready_to_file is False
        assert compliance.filing_deadline == date(2026, 1, 31)
        assert compliance.completeness == 100
        assert [f.field for f in compliance.missing_fields] == ["income_categories"]

    @pytest.mark.asyncio
    async def test_missing_data(self, empty_repository, organization, today) -> None:
        data = await AnnualReturnAssembler(empty_repository).assemble(
            organization.id, 2025, today=today
        )

        missing = {f.field: f for f in data.compliance.missing_fields}
        assert missing["dbs_records"].required is True
        assert missing["income"].required is True
        assert missing["safeguarding_policy"].required is False
        assert data.compliance.completeness == 87
        assert data.compliance.overall_score == 0
        assert "partners" not in missing

    @pytest.mark.asyncio
    async def test_activities_without_partners(
        self, repository, organization, today
    ) -> None:
        repository.partners = []

        data = await AnnualReturnAssembler(repository).assemble(organization.id, 2025, today=today)

        missing = {f.field: f for f in data.compliance.missing_fields}
        assert missing["partners"].required is False
        assert missing["partners"].section == ReturnSection.OVERSEAS
        assert data.compliance.completeness == 100


class TestSummaries:
    """Tests for the aggregation helpers."""

    def test_countries_ordered_by_spend(self) -> None:
        activities = [
            OverseasActivity(
                organization_id="org-1",
                country_code="KE",
                amount_gbp=10.0,
                transfer_method=TransferMethod.CASH,
                financial_year=2025,
            ),
            OverseasActivity(
                organization_id="org-1",
                country_code="UG",
                amount_gbp=500.0,
                transfer_method=TransferMethod.BANK_TRANSFER,
                financial_year=2025,
            ),
        ]

        overseas = summarize_overseas(activities, [Country(code="UG", name="Uganda")])

        assert overseas.countries == ["UG", "KE"]
        assert [c.country_name for c in overseas.country_spend] == ["Uganda", "KE"]
        assert [t.method for t in overseas.transfer_methods] == ["bank_transfer", "cash"]

    def test_partners_counted_without_activities(self) -> None:
        partners = [
            OverseasPartner(organization_id="org-1", name="A", registration_verified=True),
            OverseasPartner(organization_id="org-1", name="B"),
        ]

        overseas = summarize_overseas([], [], partners)

        assert overseas.has_overseas_activities is False
        assert (overseas.partners_total, overseas.partners_verified) == (2, 1)

    def test_income_sources_empty(self) -> None:
        income = summarize_income([])

        assert income.sources == []
        assert income.total_income == 0

    def test_income_source_shares(self) -> None:
        records = [
            IncomeRecord(
                organization_id="org-1",
                source=IncomeSource.OTHER_TRADING,
                amount=100.0,
                financial_year=2025,
            ),
            IncomeRecord(
                organization_id="org-1",
                source=IncomeSource.INVESTMENTS,
                amount=300.0,
                financial_year=2025,
            ),
        ]

        income = summarize_income(records)

        assert [(s.source, s.percentage) for s in income.sources] == [
            ("investments", 75.0),
            ("other_trading", 25.0),
        ]


# =============================================================================
# Field Mapping Tests
# =============================================================================


class TestFieldMapping:
    """Tests for the Annual Return field projection."""

    @pytest.mark.asyncio
    async def test_every_code_emitted_in_order(self, annual_return: AnnualReturnData) -> None:
        fields = map_annual_return_fields(annual_return)

        assert [f.code for f in fields] == list(ANNUAL_RETURN_FIELD_MAPPING)

    @pytest.mark.asyncio
    async def test_placeholders_flagged(self, annual_return: AnnualReturnData) -> None:
        fields = map_annual_return_fields(annual_return)

        placeholders = {f.code for f in fields if f.placeholder}
        assert placeholders == {
            "C1_TotalExpenditure",
            "C2_CharitableSpend",
            "C3_RaisingFunds",
            "F1_HasSubsidiaries",
            "G1_TrusteePayments",
            "I1_SeriousIncidents",
        }
        assert all(f.value is None for f in fields if f.placeholder)

    @pytest.mark.asyncio
    async def test_formatted_values(self, annual_return: AnnualReturnData) -> None:
        fields = {f.code: f for f in map_annual_return_fields(annual_return)}

        assert fields["A1_CharityName"].copy_text == "Helping Hands Trust"
        assert fields["B1_TotalIncome"].formatted_value == "£6,750.50"
        assert fields["B1_TotalIncome"].copy_text == "6750.50"
        assert fields["D2_CountriesCount"].value == 2
        assert fields["D3_CountriesList"].copy_text == "KE, SY"
        assert fields["D4_OverseasPartners"].copy_text == "2"
        assert fields["D5_PartnersVerified"].copy_text == "1"
        assert fields["E2_ProfessionalFundraiser"].copy_text == "Yes"
        assert fields["H2_SafeguardingPolicy"].copy_text == "Yes"
        assert fields["StaffVolunteersCount"].copy_text == "4"

    @pytest.mark.asyncio
    async def test_missing_value_not_provided(
        self, empty_repository, organization, today
    ) -> None:
        data = await AnnualReturnAssembler(empty_repository).assemble(
            organization.id, 2025, today=today
        )
        fields = {f.code: f for f in map_annual_return_fields(data)}

        assert fields["HighestCorporateDonation"].formatted_value == "Not provided"
        assert fields["HighestCorporateDonation"].copy_text == ""
        assert fields["H2_SafeguardingPolicy"].copy_text == "No"

    @pytest.mark.asyncio
    async def test_fields_by_section(self, annual_return: AnnualReturnData) -> None:
        fields = map_annual_return_fields(annual_return)

        income = get_fields_by_section(fields, ReturnSection.INCOME)
        assert [f.code for f in income] == [
            "B1_TotalIncome",
            "B2_DonationsLegacies",
            "B3_CharitableActivities",
            "B4_OtherTrading",
            "B5_Investments",
            "B6_Other",
        ]
        assert len(get_fields_by_section(fields)) == len(fields)


# =============================================================================
# Export Tests
# =============================================================================


class TestExports:
    """Tests for text and CSV exports."""

    @pytest.mark.asyncio
    async def test_text_export(self, annual_return: AnnualReturnData) -> None:
        text = export_fields_as_text(map_annual_return_fields(annual_return))
        lines = text.split("\n")

        assert len(lines) == len(ANNUAL_RETURN_FIELD_MAPPING)
        assert lines[0] == "A1_CharityName: Helping Hands Trust"
        assert "B1_TotalIncome: 6750.50" in lines

    @pytest.mark.asyncio
    async def test_csv_export(self, annual_return: AnnualReturnData) -> None:
        rows = list(csv.reader(io.StringIO(format_annual_return_csv(annual_return))))

        assert rows[0] == ["Charity Annual Return Data Export"]
        assert ["Charity Name:", "Helping Hands Trust"] in rows
        assert ["Syria", "£2000.00", "1 activities", "HIGH RISK"] in rows
        assert ["cash", "£2000.00", "20.0%", "REQUIRES EXPLANATION"] in rows
        assert ["Overall Score:", "80"] in rows
        assert ["Partners Verified:", "1 of 2"] in rows
        assert ["donations_legacies", "£5250.00", "77.8%"] in rows
