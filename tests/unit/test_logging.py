"""
Logging Tests
=============

Tests for structured logging processors.

Version: 0.1.0
"""

from shared.logging.logger import _censor_secrets, _service_context


class TestCensorSecrets:
    """Tests for sensitive value redaction."""

    def test_redacts_dbs_certificate(self) -> None:
        event = _censor_secrets(None, "info", {"event": "x", "dbs_certificate_number": "001234"})

        assert event["dbs_certificate_number"] == "***REDACTED***"
        assert event["event"] == "x"

    def test_redacts_nested_keys(self) -> None:
        event = _censor_secrets(None, "info", {"db": {"password": "hunter2", "host": "db"}})

        assert event["db"] == {"password": "***REDACTED***", "host": "db"}

    def test_redacts_inside_lists(self) -> None:
        event = _censor_secrets(
            None,
            "info",
            {"records": [{"person_name": "Jo", "dbs_certificate_number": "0012"}]},
        )

        assert event["records"] == [{"person_name": "Jo", "dbs_certificate_number": "***REDACTED***"}]


class TestServiceContext:
    """Tests for the service name processor."""

    def test_adds_service_name(self) -> None:
        processor = _service_context("charity-compliance")

        event = processor(None, "info", {"event": "started"})

        assert event["service"] == "charity-compliance"

    def test_keeps_existing_service(self) -> None:
        processor = _service_context("charity-compliance")

        event = processor(None, "info", {"event": "x", "service": "init-db"})

        assert event["service"] == "init-db"
