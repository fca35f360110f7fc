"""Error handler facade.

Classifies a failure, records error metrics and admits retryable failures to
the retry queue in one call.

Usage:
    from notifier.errors.handler import ErrorHandler

    handler = ErrorHandler(retry_queue=queue)
    outcome = handler.handle(exc, context={"operation": "sync"}, retry_action=resync)
    if not outcome["retryable"]:
        show(outcome["user_message"])
"""

import threading
from typing import Any, Dict, Mapping, Optional

from notifier.errors.classifier import ErrorClassifier
from notifier.logging import get_module_logger
from notifier.resilience.retry import RetryAction, RetryQueue

logger = get_module_logger()


class ErrorHandler:
    """Classifies failures, tracks metrics and feeds the retry queue."""

    def __init__(
        self,
        classifier: Optional[ErrorClassifier] = None,
        retry_queue: Optional[RetryQueue] = None,
    ) -> None:
        self.classifier = classifier or ErrorClassifier()
        self.retry_queue = retry_queue or RetryQueue()
        self._lock = threading.Lock()
        self._total = 0
        self._by_category: Dict[str, int] = {}
        self._by_severity: Dict[str, int] = {}

    def handle(
        self,
        err: Any,
        context: Optional[Mapping[str, Any]] = None,
        retry_action: Optional[RetryAction] = None,
        custom_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Handle one failure.

        Args:
            err: The raw failure
            context: Caller context merged into the classified error
            retry_action: Action re-attempting the failed operation
            custom_message: Message replacing the classified user message

        Returns:
            Dict with ``error`` (ClassifiedError), ``handled``, ``retryable``,
            ``retry_id`` and ``user_message``
        """
        error = self.classifier.classify(err, context)
        self.track(error)

        logger.warning(
            "error_handled",
            category=error.category.value,
            severity=error.severity.value,
            code=error.code,
            retryable=error.is_retryable,
            message=error.message,
        )

        retry_id = None
        if error.is_retryable and retry_action is not None:
            retry_id = self.retry_queue.enqueue(error, retry_action)

        return {
            "error": error,
            "handled": True,
            "retryable": error.is_retryable,
            "retry_id": retry_id,
            "user_message": custom_message or error.user_message,
        }

    def track(self, error) -> None:
        """Count a classified error in the metrics."""
        with self._lock:
            self._total += 1
            category = error.category.value
            severity = error.severity.value
            self._by_category[category] = self._by_category.get(category, 0) + 1
            self._by_severity[severity] = self._by_severity.get(severity, 0) + 1

    def metrics(self) -> Dict[str, Any]:
        """Error metrics merged with retry queue counters.

        Returns:
            Dict with total, by_category, by_severity, resolved, expired,
            pending and queue_size
        """
        with self._lock:
            metrics: Dict[str, Any] = {
                "total": self._total,
                "by_category": dict(self._by_category),
                "by_severity": dict(self._by_severity),
            }
        metrics.update(self.retry_queue.stats())
        return metrics

    def clear_metrics(self) -> None:
        """Reset counters and empty the retry queue."""
        with self._lock:
            self._total = 0
            self._by_category = {}
            self._by_severity = {}
        self.retry_queue.clear()
