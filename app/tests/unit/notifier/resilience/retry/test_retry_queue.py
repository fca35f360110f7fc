"""Unit tests for RetryQueue."""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from notifier.errors import ErrorCategory, ErrorSeverity
from notifier.resilience.retry import (
    RetryIntent,
    RetryQueue,
    RetryResult,
)

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FailingAction:
    def __init__(self, failures=None):
        self.calls = 0
        self.failures = failures

    def __call__(self):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise RuntimeError("still failing")


@pytest.fixture
def queue():
    return RetryQueue()


@pytest.mark.unit
class TestEnqueue:
    """Tests for admission rules."""

    def test_non_retryable_is_ignored(self, queue, classified_error_factory):
        item_id = queue.enqueue(classified_error_factory(is_retryable=False), lambda: None)

        assert item_id is None
        assert queue.size() == 0

    def test_missing_action_is_ignored(self, queue, classified_error_factory):
        assert queue.enqueue(classified_error_factory(), None) is None
        assert queue.size() == 0

    @freeze_time(START)
    def test_first_attempt_is_due_after_base_delay(self, queue, classified_error_factory):
        queue.enqueue(classified_error_factory(), lambda: None)

        item = queue.items()[0]
        assert item.attempts == 0
        assert item.max_attempts == 3
        assert item.next_retry_at == START + timedelta(milliseconds=1000)

    def test_max_attempts_follow_category(self, queue, classified_error_factory):
        queue.enqueue(classified_error_factory(category=ErrorCategory.PAYMENT), lambda: None)
        queue.enqueue(
            classified_error_factory(
                category=ErrorCategory.VALIDATION, severity=ErrorSeverity.MEDIUM
            ),
            lambda: None,
        )

        assert [item.max_attempts for item in queue.items()] == [2, 1]

    def test_retry_intent_requires_operation_type(self):
        with pytest.raises(ValueError):
            RetryIntent(operation_type="")


@pytest.mark.unit
class TestTick:
    """Tests for tick processing."""

    def test_item_not_due_is_not_attempted(self, queue, classified_error_factory):
        action = FailingAction()
        with freeze_time(START):
            queue.enqueue(classified_error_factory(), action)
            queue.tick()

        assert action.calls == 0
        assert queue.size() == 1

    def test_success_resolves_item(self, queue, classified_error_factory):
        action = FailingAction(failures=0)
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), action)
            frozen.tick(timedelta(seconds=1))
            stats = queue.tick()

        assert action.calls == 1
        assert stats["resolved"] == 1
        assert queue.size() == 0
        assert queue.stats()["resolved"] == 1

    def test_failure_reschedules_with_backoff(self, queue, classified_error_factory):
        action = FailingAction()
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), action)
            frozen.tick(timedelta(seconds=1))
            queue.tick()

            item = queue.items()[0]
            assert item.attempts == 1
            assert item.last_error == "still failing"
            assert item.next_retry_at == START + timedelta(seconds=1, milliseconds=2000)

            # Not due yet
            frozen.tick(timedelta(seconds=1))
            queue.tick()
            assert action.calls == 1

    def test_payment_item_evicted_after_two_failures(
        self, queue, classified_error_factory
    ):
        action = FailingAction()
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(category=ErrorCategory.PAYMENT), action)

            frozen.tick(timedelta(seconds=1))
            queue.tick()
            assert queue.size() == 1

            frozen.tick(timedelta(seconds=2))
            queue.tick()

        assert action.calls == 2
        assert queue.size() == 0
        assert queue.stats()["expired"] == 1
        assert queue.stats()["resolved"] == 0

    def test_network_item_evicted_after_three_failures(
        self, queue, classified_error_factory
    ):
        action = FailingAction()
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), action)
            for _ in range(5):
                frozen.tick(timedelta(seconds=30))
                queue.tick()

        assert action.calls == 3
        assert queue.size() == 0

    def test_recovering_action_resolves_before_exhaustion(
        self, queue, classified_error_factory
    ):
        action = FailingAction(failures=2)
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), action)
            for _ in range(3):
                frozen.tick(timedelta(seconds=30))
                queue.tick()

        assert action.calls == 3
        assert queue.stats()["resolved"] == 1
        assert queue.size() == 0

    def test_intent_is_resolved_by_registered_processor(
        self, queue, classified_error_factory
    ):
        processed = []

        class Processor:
            def process(self, intent):
                processed.append(intent.payload)
                return RetryResult.SUCCESS

        queue.register_processor("test.resend", Processor())
        with freeze_time(START) as frozen:
            queue.enqueue(
                classified_error_factory(),
                RetryIntent(operation_type="test.resend", payload={"id": "n-1"}),
            )
            frozen.tick(timedelta(seconds=1))
            queue.tick()

        assert processed == [{"id": "n-1"}]
        assert queue.size() == 0

    def test_permanent_failure_drops_item(self, queue, classified_error_factory):
        class Processor:
            def process(self, intent):
                return RetryResult.PERMANENT_FAILURE

        queue.register_processor("test.resend", Processor())
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), RetryIntent("test.resend", {}))
            frozen.tick(timedelta(seconds=1))
            queue.tick()

        assert queue.size() == 0
        assert queue.stats()["expired"] == 1

    def test_intent_without_processor_is_dropped(self, queue, classified_error_factory):
        with freeze_time(START) as frozen:
            queue.enqueue(classified_error_factory(), RetryIntent("unknown.op", {}))
            frozen.tick(timedelta(seconds=1))
            queue.tick()

        assert queue.size() == 0

    def test_overlapping_tick_is_skipped(self, queue, classified_error_factory):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_action():
            calls.append(1)
            started.set()
            release.wait(5)

        queue.enqueue(classified_error_factory(), slow_action)
        queue.items()[0].next_retry_at = datetime.now(timezone.utc) - timedelta(seconds=1)

        worker = threading.Thread(target=queue.tick)
        worker.start()
        assert started.wait(5)

        assert queue.tick() is None

        release.set()
        worker.join(5)
        assert calls == [1]
        assert queue.size() == 0

    def test_clear(self, queue, classified_error_factory):
        queue.enqueue(classified_error_factory(), lambda: None)

        queue.clear()

        assert queue.size() == 0
        assert queue.stats() == {
            "resolved": 0,
            "expired": 0,
            "pending": 0,
            "queue_size": 0,
        }
