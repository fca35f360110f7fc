"""Fixtures shared by notification tests."""

import threading

import pytest

from notifier.errors import BackendConnectionError, BackendHTTPError, BackendTimeoutError
from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.store import NotificationStore
from notifier.operations import OperationResult, classify_delivery_error
from notifier.resilience.retry import RetryQueue


class StubChannel(NotificationChannel):
    """Channel returning scripted results.

    ``outcomes`` is consumed one entry per send; the last entry repeats.
    Entries are "ok", "skip", "down" (connection failure), "timeout", "bad" (HTTP 400),
    "forbidden" (HTTP 403), "raise" or "block".
    """

    def __init__(self, name, *outcomes):
        self.name = name
        self.outcomes = list(outcomes) or ["ok"]
        self.sent = []
        self.release = threading.Event()
        self._lock = threading.Lock()

    @property
    def channel_name(self):
        return self.name

    def send(self, notification):
        with self._lock:
            self.sent.append(notification)
            outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]

        if outcome == "ok":
            return OperationResult.success()
        if outcome == "skip":
            return OperationResult.skipped("unavailable")
        if outcome == "down":
            return classify_delivery_error(BackendConnectionError("Network Error"))
        if outcome == "timeout":
            return classify_delivery_error(BackendTimeoutError("Request timeout"))
        if outcome == "bad":
            return classify_delivery_error(BackendHTTPError(400, "Bad request"))
        if outcome == "forbidden":
            return classify_delivery_error(BackendHTTPError(403))
        if outcome == "raise":
            raise RuntimeError("sender crashed")
        if outcome == "block":
            self.release.wait(5)
            return OperationResult.success()
        raise AssertionError(f"unknown outcome {outcome}")


@pytest.fixture
def stub_channel():
    return StubChannel


@pytest.fixture
def events():
    return SubscriberRegistry()


@pytest.fixture
def store(kv_store):
    return NotificationStore(kv_store)


@pytest.fixture
def retry_queue():
    return RetryQueue()
