"""
Country Reference Data
======================

Seed rows for the `countries` table. High-risk countries need enhanced
due diligence before funds are sent; medium-risk countries need standard
due diligence.

Version: 0.1.0
"""

from shared.models.records import Country


HIGH_RISK_COUNTRIES = frozenset({
    "AF", "BY", "CD", "CF", "CU", "ER", "HT", "IQ", "KP", "LB",
    "LY", "ML", "MM", "NE", "NG", "PK", "RU", "SD", "SO", "SS",
    "SY", "VE", "YE", "ZW",
})

MEDIUM_RISK_COUNTRIES = frozenset({
    "BD", "EG", "ET", "GH", "ID", "KE", "LK", "MW", "NP", "PH",
    "RW", "SL", "TZ", "UA", "UG", "ZA", "ZM",
})

COUNTRY_NAMES: dict[str, str] = {
    "AF": "Afghanistan",
    "BD": "Bangladesh",
    "BY": "Belarus",
    "CD": "Democratic Republic of the Congo",
    "CF": "Central African Republic",
    "CU": "Cuba",
    "EG": "Egypt",
    "ER": "Eritrea",
    "ET": "Ethiopia",
    "FR": "France",
    "DE": "Germany",
    "GH": "Ghana",
    "HT": "Haiti",
    "ID": "Indonesia",
    "IE": "Ireland",
    "IN": "India",
    "IQ": "Iraq",
    "KE": "Kenya",
    "KP": "North Korea",
    "LB": "Lebanon",
    "LK": "Sri Lanka",
    "LY": "Libya",
    "ML": "Mali",
    "MM": "Myanmar",
    "MW": "Malawi",
    "NE": "Niger",
    "NG": "Nigeria",
    "NP": "Nepal",
    "PH": "Philippines",
    "PK": "Pakistan",
    "RU": "Russia",
    "RW": "Rwanda",
    "SD": "Sudan",
    "SL": "Sierra Leone",
    "SO": "Somalia",
    "SS": "South Sudan",
    "SY": "Syria",
    "TZ": "Tanzania",
    "UA": "Ukraine",
    "UG": "Uganda",
    "US": "United States",
    "VE": "Venezuela",
    "YE": "Yemen",
    "ZA": "South Africa",
    "ZM": "Zambia",
    "ZW": "Zimbabwe",
}


def country_risk(code: str | None) -> str:
    """Risk band for an ISO-2 code: high, medium, low or unknown."""
    if not code:
        return "unknown"
    code = code.upper()
    if code in HIGH_RISK_COUNTRIES:
        return "high"
    if code in MEDIUM_RISK_COUNTRIES:
        return "medium"
    return "low"


def seed_countries() -> list[Country]:
    """Country rows to load into the reference table."""
    return [
        Country(
            code=code,
            name=name,
            is_high_risk=country_risk(code) == "high",
            requires_due_diligence=country_risk(code) in ("high", "medium"),
        )
        for code, name in sorted(COUNTRY_NAMES.items())
    ]
