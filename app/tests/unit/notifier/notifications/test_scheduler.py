"""Unit tests for BackgroundScheduler."""

import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from notifier.notifications.scheduler import BackgroundScheduler, safe_run


@pytest.mark.unit
class TestSafeRun:
    """Tests for the job wrapper."""

    def test_exceptions_are_contained(self):
        job = MagicMock(side_effect=RuntimeError("boom"))
        wrapped = safe_run(job, "flaky")

        wrapped()

        job.assert_called_once()
        assert wrapped.__name__ == "flaky"

    def test_defaults_to_function_name(self):
        def purge():
            return None

        assert safe_run(purge).__name__ == "purge"


@pytest.mark.unit
class TestBackgroundScheduler:
    """Tests for interval jobs and the background loop."""

    def test_jobs_run_on_their_interval(self):
        scheduler = BackgroundScheduler()
        fast, slow = MagicMock(), MagicMock()

        with freeze_time("2024-01-01 00:00:00") as frozen:
            scheduler.add_job("fast", 5, fast)
            scheduler.add_job("slow", 60, slow)

            frozen.tick(timedelta(seconds=6))
            scheduler.run_pending()
            frozen.tick(timedelta(seconds=6))
            scheduler.run_pending()

        assert fast.call_count == 2
        slow.assert_not_called()
        assert scheduler.jobs == ["fast", "slow"]

    def test_failing_job_keeps_running(self):
        scheduler = BackgroundScheduler()
        job = MagicMock(side_effect=RuntimeError("boom"))

        with freeze_time("2024-01-01 00:00:00") as frozen:
            scheduler.add_job("flaky", 1, job)
            for _ in range(3):
                frozen.tick(timedelta(seconds=2))
                scheduler.run_pending()

        assert job.call_count == 3

    def test_start_and_stop(self):
        scheduler = BackgroundScheduler(poll_interval=0.01)
        ran = threading.Event()
        scheduler.add_job("tick", 1, ran.set)

        scheduler.start()
        scheduler.start()
        assert scheduler.running is True

        scheduler.stop(timeout=5)

        assert scheduler.running is False
        assert scheduler.jobs == []

    def test_stop_without_start(self):
        scheduler = BackgroundScheduler()

        scheduler.stop()

        assert scheduler.running is False
