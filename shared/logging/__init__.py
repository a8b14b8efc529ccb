"""
Logging Module
==============

structlog configuration for Charity Prep.

Usage:
    from shared.logging import get_logger, setup_logging

    setup_logging(service_name="charity-compliance")
    logger = get_logger(__name__)

    logger.info("statistics_requested", organization_id=organization_id)
"""

from shared.logging.logger import bind_context, clear_context, get_logger, setup_logging


__all__ = [
    "get_logger",
    "setup_logging",
    "bind_context",
    "clear_context",
]
