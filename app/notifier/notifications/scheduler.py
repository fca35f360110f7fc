"""Background scheduler for the engine's periodic tasks.

Runs queue draining, retry ticks and log purging on their own intervals in a
daemon thread. Jobs are wrapped so one failing run never stops the loop.
"""

import threading
from typing import Callable, List, Optional

import schedule

from notifier.logging import get_module_logger

logger = get_module_logger()


def safe_run(job: Callable[[], object], name: Optional[str] = None) -> Callable[[], None]:
    job_name = name or getattr(job, "__name__", "job")

    def wrapper() -> None:
        try:
            job()
        except Exception as e:
            logger.error("scheduled_job_failed", job=job_name, error=str(e), exc_info=True)

    wrapper.__name__ = job_name
    return wrapper


class BackgroundScheduler:
    """Interval scheduler running pending jobs on a background thread.

    Missed runs are not replayed: a job due several times while the loop was
    busy runs once.

    Args:
        poll_interval: Seconds between checks for pending jobs
    """

    def __init__(self, poll_interval: float = 1.0):
        self.poll_interval = poll_interval
        self._scheduler = schedule.Scheduler()
        self._cease = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def add_job(
        self, name: str, interval_seconds: int, job: Callable[[], object]
    ) -> None:
        self._scheduler.every(interval_seconds).seconds.do(safe_run(job, name)).tag(name)
        logger.debug("scheduled_job_added", job=name, interval_seconds=interval_seconds)

    @property
    def jobs(self) -> List[str]:
        return [next(iter(job.tags)) for job in self._scheduler.get_jobs() if job.tags]

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_pending(self) -> None:
        self._scheduler.run_pending()

    def _run(self) -> None:
        while not self._cease.is_set():
            self._scheduler.run_pending()
            self._cease.wait(self.poll_interval)

    def start(self) -> None:
        """Start the loop. No-op if already running."""
        with self._lock:
            if self.running:
                return
            self._cease.clear()
            self._thread = threading.Thread(
                target=self._run, name="notifier-scheduler", daemon=True
            )
            self._thread.start()
        logger.info("scheduler_started", jobs=self.jobs)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the loop and wait for the current run to finish."""
        with self._lock:
            thread = self._thread
            self._cease.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout)
            logger.info("scheduler_stopped")
        self._scheduler.clear()
