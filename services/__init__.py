"""
Charity Prep Services
=====================

Services for the Charity Prep compliance platform.

Services:
- charity_compliance: Compliance scoring, trends and Annual Return reporting
"""

__all__ = [
    "charity_compliance",
]
