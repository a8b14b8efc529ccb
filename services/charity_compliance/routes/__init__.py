"""
Charity Compliance Routes
=========================

API route handlers for the Charity Compliance Service.
"""

from services.charity_compliance.routes import annual_return, compliance


__all__ = ["annual_return", "compliance"]
