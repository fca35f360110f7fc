"""Unit tests for alert presentation policy."""

import pytest

from notifier.errors import (
    ErrorCategory,
    ErrorSeverity,
    build_toast,
    notification_toast_duration,
    toast_duration,
    toast_status,
    toast_title,
)
from notifier.notifications.models import NotificationPriority


@pytest.mark.unit
class TestToastPolicy:
    """Tests for toast title, status and duration."""

    @pytest.mark.parametrize(
        "category,severity,expected",
        [
            (ErrorCategory.NETWORK, ErrorSeverity.CRITICAL, "Critical Error"),
            (ErrorCategory.PAYMENT, ErrorSeverity.HIGH, "Error"),
            (ErrorCategory.PAYMENT, ErrorSeverity.MEDIUM, "Payment Issue"),
            (ErrorCategory.NETWORK, ErrorSeverity.MEDIUM, "Connection Issue"),
            (ErrorCategory.VALIDATION, ErrorSeverity.MEDIUM, "Input Error"),
            (ErrorCategory.CLIENT, ErrorSeverity.LOW, "Warning"),
        ],
    )
    def test_title(self, category, severity, expected):
        assert toast_title(category, severity) == expected

    def test_status(self):
        assert toast_status(ErrorSeverity.CRITICAL) == "error"
        assert toast_status(ErrorSeverity.HIGH) == "error"
        assert toast_status(ErrorSeverity.MEDIUM) == "warning"
        assert toast_status(ErrorSeverity.LOW) == "info"

    def test_critical_is_never_auto_dismissed(self):
        assert toast_duration(ErrorSeverity.CRITICAL) is None

    def test_durations(self):
        assert toast_duration(ErrorSeverity.HIGH) == 8000
        assert toast_duration(ErrorSeverity.MEDIUM) == 6000
        assert toast_duration(ErrorSeverity.LOW) == 4000

    def test_notification_priority_durations(self):
        assert notification_toast_duration(NotificationPriority.URGENT) is None
        assert notification_toast_duration(NotificationPriority.HIGH) == 8000
        assert notification_toast_duration("medium") == 6000
        assert notification_toast_duration(NotificationPriority.LOW) == 4000

    def test_build_toast(self, classified_error_factory):
        error = classified_error_factory(user_message="Check your connection.")

        toast = build_toast(error)

        assert toast == {
            "title": "Connection Issue",
            "description": "Check your connection.",
            "status": "warning",
            "duration": 6000,
            "is_closable": True,
        }

    def test_build_toast_custom_message(self, classified_error_factory):
        toast = build_toast(classified_error_factory(), custom_message="Try later")

        assert toast["description"] == "Try later"
