"""
Country Reference Data Tests
============================

Version: 0.1.0
"""

import pytest

from services.charity_compliance.countries import (
    HIGH_RISK_COUNTRIES,
    country_risk,
    seed_countries,
)


class TestCountryRisk:
    """Tests for risk banding."""

    @pytest.mark.parametrize(
        "code,risk",
        [("SY", "high"), ("af", "high"), ("KE", "medium"), ("FR", "low"), (None, "unknown")],
    )
    def test_country_risk(self, code: str | None, risk: str) -> None:
        assert country_risk(code) == risk


class TestSeedCountries:
    """Tests for the seed rows."""

    def test_flags_match_risk_lists(self) -> None:
        for country in seed_countries():
            assert country.is_high_risk == (country.code in HIGH_RISK_COUNTRIES)
            if country.is_high_risk:
                assert country.requires_due_diligence

    def test_codes_unique_and_sorted(self) -> None:
        codes = [c.code for c in seed_countries()]

        assert codes == sorted(set(codes))
