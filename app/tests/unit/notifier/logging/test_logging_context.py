"""Unit tests for logging helpers."""

import pytest
import structlog

from notifier.logging import (
    bind_notification_context,
    get_module_logger,
    mask_sensitive_data,
)


@pytest.mark.unit
class TestMaskSensitiveData:
    """Tests for the masking processor."""

    def test_masks_sensitive_keys(self):
        processor = mask_sensitive_data()

        result = processor(
            None,
            "info",
            {"event": "x", "api_token": "abc", "Authorization": "Bearer abc", "user": "u"},
        )

        assert result["api_token"] == "***REDACTED***"
        assert result["Authorization"] == "***REDACTED***"
        assert result["user"] == "u"
        assert result["event"] == "x"

    def test_none_values_are_kept(self):
        result = mask_sensitive_data()(None, "info", {"push_token": None})

        assert result["push_token"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"phone"})
        )

        assert processor(None, "info", {"phone_number": "+62"})["phone_number"] == "[hidden]"


@pytest.mark.unit
class TestBindNotificationContext:
    """Tests for notification context binding."""

    def test_binds_and_unbinds(self):
        structlog.contextvars.clear_contextvars()

        with bind_notification_context(
            notification_id="n-1", notification_type="payment_success", channel="email"
        ):
            bound = structlog.contextvars.get_contextvars()
            assert bound == {
                "notification_id": "n-1",
                "notification_type": "payment_success",
                "channel": "email",
            }

        assert structlog.contextvars.get_contextvars() == {}

    def test_unbinds_on_error(self):
        structlog.contextvars.clear_contextvars()

        with pytest.raises(RuntimeError):
            with bind_notification_context(notification_id="n-1"):
                raise RuntimeError("boom")

        assert structlog.contextvars.get_contextvars() == {}

    def test_omits_missing_identifiers(self):
        structlog.contextvars.clear_contextvars()

        with bind_notification_context(attempt=2):
            assert structlog.contextvars.get_contextvars() == {"attempt": 2}


@pytest.mark.unit
class TestGetModuleLogger:
    """Tests for get_module_logger."""

    def test_returns_usable_logger(self):
        logger = get_module_logger()

        logger.info("test_event", key="value")
