"""Unit tests for the ErrorHandler facade."""

from unittest.mock import MagicMock

import pytest

from notifier.errors import BackendHTTPError, BackendTimeoutError
from notifier.errors.handler import ErrorHandler
from notifier.resilience.retry import RetryQueue


@pytest.fixture
def handler():
    return ErrorHandler(retry_queue=RetryQueue())


@pytest.mark.unit
class TestErrorHandler:
    """Tests for handle(), metrics() and clear_metrics()."""

    def test_handle_returns_classification(self, handler):
        outcome = handler.handle(BackendHTTPError(401))

        assert outcome["handled"] is True
        assert outcome["retryable"] is False
        assert outcome["user_message"] == "Your session has expired. Please log in again."
        assert outcome["retry_id"] is None

    def test_retryable_error_with_action_is_queued(self, handler):
        outcome = handler.handle(BackendTimeoutError("slow"), retry_action=MagicMock())

        assert outcome["retryable"] is True
        assert outcome["retry_id"] is not None
        assert handler.retry_queue.size() == 1

    def test_retryable_error_without_action_is_not_queued(self, handler):
        handler.handle(BackendTimeoutError("slow"))

        assert handler.retry_queue.size() == 0

    def test_non_retryable_error_is_not_queued(self, handler):
        handler.handle(BackendHTTPError(403), retry_action=MagicMock())

        assert handler.retry_queue.size() == 0

    def test_custom_message(self, handler):
        outcome = handler.handle(BackendHTTPError(500), custom_message="Try later")

        assert outcome["user_message"] == "Try later"

    def test_metrics(self, handler):
        handler.handle(BackendTimeoutError("slow"), retry_action=MagicMock())
        handler.handle(BackendHTTPError(500))
        handler.handle(BackendHTTPError(500))

        metrics = handler.metrics()

        assert metrics["total"] == 3
        assert metrics["by_category"] == {"network": 1, "server": 2}
        assert metrics["by_severity"] == {"medium": 1, "high": 2}
        assert metrics["pending"] == 1
        assert metrics["queue_size"] == 1
        assert metrics["resolved"] == 0

    def test_clear_metrics_empties_queue(self, handler):
        handler.handle(BackendTimeoutError("slow"), retry_action=MagicMock())

        handler.clear_metrics()

        metrics = handler.metrics()
        assert metrics["total"] == 0
        assert metrics["by_category"] == {}
        assert metrics["queue_size"] == 0
