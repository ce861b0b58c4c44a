"""
Unit tests for structured logging processors.
"""

import structlog

from shelf_common.logging import bind_context, redact_sensitive, unbind_context


class TestRedaction:
    """Test credential masking."""

    def test_masks_credentials(self):
        event = {"event": "login_attempt", "email": "ada@example.com", "password": "hunter22", "API_KEY": "pat1"}

        redacted = redact_sensitive(None, "info", event)

        assert redacted["password"] == "***"
        assert redacted["API_KEY"] == "***"
        assert redacted["email"] == "ada@example.com"

    def test_leaves_other_keys(self):
        event = {"event": "book_saved", "book_id": "rec1"}

        assert redact_sensitive(None, "info", dict(event)) == event


class TestContextBinding:
    """Test request context helpers."""

    def test_bind_and_unbind(self):
        bind_context(correlation_id="abc")
        assert structlog.contextvars.get_contextvars()["correlation_id"] == "abc"

        unbind_context("correlation_id")
        assert "correlation_id" not in structlog.contextvars.get_contextvars()
