"""
Compliance Reporting Exceptions
===============================

Domain errors raised by the aggregation pipeline. The service's exception
handlers translate them into the JSON error envelope.

Version: 0.1.0
"""

from typing import Any


class ComplianceReportingError(Exception):
    """Base class for compliance reporting errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class OrganizationNotFoundError(ComplianceReportingError):
    """The requested organization does not exist or was deleted."""

    status_code = 404

    def __init__(self, organization_id: str) -> None:
        super().__init__(
            f"Organization not found: {organization_id}",
            details={"organization_id": organization_id},
        )
        self.organization_id = organization_id


class InvalidFinancialYearEndError(ComplianceReportingError):
    """An organization's financial year end is not a valid "MM-DD" date."""

    status_code = 422

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid financial year end: {value!r}",
            details={"financial_year_end": value},
        )
