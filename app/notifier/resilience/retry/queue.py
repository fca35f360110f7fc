"""In-process retry queue with exponential backoff.

Retryable failures are admitted with the action that re-attempts them. A
periodic ``tick()`` re-runs every due item, rescheduling it with exponential
backoff until it succeeds or runs out of attempts for its error category.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Protocol

from notifier.errors.models import ClassifiedError
from notifier.logging import get_module_logger
from notifier.resilience.retry.config import RetryConfig
from notifier.resilience.retry.models import (
    RetryAction,
    RetryIntent,
    RetryItem,
    RetryResult,
)

logger = get_module_logger()


class RetryProcessor(Protocol):
    """Protocol for operation-specific retry logic.

    Implementations rebuild the failed operation from a ``RetryIntent`` and
    run it again.

    Example:
        class ResendProcessor:
            def process(self, intent: RetryIntent) -> RetryResult:
                result = sender.send(rebuild(intent.payload))
                if result.is_success:
                    return RetryResult.SUCCESS
                return RetryResult.RETRY
    """

    def process(self, intent: RetryIntent) -> Optional[RetryResult]:
        """Re-attempt the operation described by ``intent``.

        Args:
            intent: RetryIntent to process

        Returns:
            RetryResult, or None for success. Raising counts as RETRY.
        """
        ...


class RetryQueue:
    """Thread-safe retry queue.

    ``tick()`` is serialized: a tick that starts while another is still
    running returns immediately without touching any item.

    Attributes:
        config: RetryConfig controlling backoff and attempt limits
    """

    def __init__(self, config: Optional[RetryConfig] = None) -> None:
        self.config = config or RetryConfig()
        self._items: Dict[str, RetryItem] = {}
        self._processors: Dict[str, RetryProcessor] = {}
        self._lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._resolved = 0
        self._expired = 0

    def register_processor(self, operation_type: str, processor: RetryProcessor) -> None:
        """Register the processor handling intents of ``operation_type``."""
        with self._lock:
            self._processors[operation_type] = processor
        logger.debug("retry_processor_registered", operation_type=operation_type)

    def enqueue(
        self, error: ClassifiedError, action: Optional[RetryAction]
    ) -> Optional[str]:
        """Admit a failure to the queue.

        Args:
            error: The classified failure
            action: RetryIntent or zero-argument callable re-attempting it

        Returns:
            The retry item id, or None when the failure was not admitted
        """
        if not error.is_retryable or action is None:
            logger.debug(
                "retry_enqueue_skipped",
                code=error.code,
                retryable=error.is_retryable,
                has_action=action is not None,
            )
            return None

        now = datetime.now(timezone.utc)
        item = RetryItem(
            error=error,
            action=action,
            max_attempts=self.config.max_attempts_for(error.category),
            next_retry_at=now + timedelta(milliseconds=self.config.delay_ms(0)),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._items[item.id] = item

        logger.info(
            "retry_item_enqueued",
            item_id=item.id,
            operation_type=item.operation_type,
            category=error.category.value,
            code=error.code,
            max_attempts=item.max_attempts,
        )
        return item.id

    def tick(self) -> Optional[Dict[str, int]]:
        """Re-attempt every due item once.

        Returns:
            Dictionary with processing statistics, or None if another tick
            was already running:
                - processed: Items attempted
                - resolved: Items whose attempt succeeded (removed)
                - retried: Items kept for another attempt
                - expired: Items dropped after their last attempt
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("retry_tick_skipped_overlap")
            return None

        try:
            return self._run_tick()
        finally:
            self._tick_lock.release()

    def _run_tick(self) -> Dict[str, int]:
        stats = {"processed": 0, "resolved": 0, "retried": 0, "expired": 0}
        now = datetime.now(timezone.utc)

        with self._lock:
            due = [
                item for item in self._items.values() if item.next_retry_at <= now
            ]
            for item in due:
                item.attempts += 1
                item.next_retry_at = now + timedelta(
                    milliseconds=self.config.delay_ms(item.attempts)
                )
                item.updated_at = now

        if not due:
            return stats

        for item in due:
            result, error_message = self._attempt(item)
            stats["processed"] += 1

            with self._lock:
                if item.id not in self._items:
                    # Cleared while the action was running
                    continue

                if result == RetryResult.SUCCESS:
                    del self._items[item.id]
                    self._resolved += 1
                    stats["resolved"] += 1
                    logger.info(
                        "retry_item_resolved",
                        item_id=item.id,
                        operation_type=item.operation_type,
                        attempts=item.attempts,
                    )
                    continue

                item.last_error = error_message
                if result == RetryResult.PERMANENT_FAILURE or item.exhausted:
                    del self._items[item.id]
                    self._expired += 1
                    stats["expired"] += 1
                    logger.warning(
                        "retry_item_expired",
                        item_id=item.id,
                        operation_type=item.operation_type,
                        attempts=item.attempts,
                        max_attempts=item.max_attempts,
                        last_error=error_message,
                    )
                else:
                    stats["retried"] += 1
                    logger.info(
                        "retry_item_rescheduled",
                        item_id=item.id,
                        operation_type=item.operation_type,
                        attempts=item.attempts,
                        next_retry_at=item.next_retry_at.isoformat(),
                    )

        logger.info("retry_tick_complete", **stats)
        return stats

    def _attempt(self, item: RetryItem) -> tuple:
        action = item.action
        try:
            if isinstance(action, RetryIntent):
                processor = self._processors.get(action.operation_type)
                if processor is None:
                    logger.error(
                        "retry_processor_missing",
                        item_id=item.id,
                        operation_type=action.operation_type,
                    )
                    return RetryResult.PERMANENT_FAILURE, "no processor registered"
                outcome = processor.process(action)
            else:
                outcome = action()
        except Exception as e:
            logger.warning(
                "retry_attempt_failed",
                item_id=item.id,
                operation_type=item.operation_type,
                attempt=item.attempts,
                error=str(e),
            )
            return RetryResult.RETRY, str(e)

        if isinstance(outcome, RetryResult):
            return outcome, None if outcome == RetryResult.SUCCESS else outcome.value
        return RetryResult.SUCCESS, None

    def size(self) -> int:
        with self._lock:
            return len(self._items)

    def items(self) -> List[RetryItem]:
        """Snapshot of queued items in admission order."""
        with self._lock:
            return list(self._items.values())

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "resolved": self._resolved,
                "expired": self._expired,
                "pending": len(self._items),
                "queue_size": len(self._items),
            }

    def clear(self) -> None:
        """Drop every queued item and reset counters."""
        with self._lock:
            self._items.clear()
            self._resolved = 0
            self._expired = 0
        logger.info("retry_queue_cleared")
