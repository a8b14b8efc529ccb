"""
Charity Compliance Service
==========================

Compliance aggregation and reporting for UK charities.

Features:
- Weighted compliance score (safeguarding, overseas, income)
- Score history and month-on-month trends
- Prioritized remediation action items
- Annual Return aggregation, field mapping and exports

Port: 8000
"""

__version__ = "0.1.0"
