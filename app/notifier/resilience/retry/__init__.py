"""Retry queue for failed operations.

Architecture:
- RetryItem: A classified failure plus the action re-attempting it
- RetryIntent: Tagged, serializable retry action
- RetryQueue: Thread-safe queue processed on a periodic tick
- RetryProcessor: Protocol for operation-specific retry logic
- RetryConfig: Backoff timing and per-category attempt limits

Usage:
    from notifier.resilience.retry import RetryIntent, RetryQueue

    queue = RetryQueue()
    queue.register_processor("notifications.channel.resend", dispatcher)
    queue.enqueue(classified_error, RetryIntent("notifications.channel.resend", payload))

    # On a fixed interval
    queue.tick()
"""

from notifier.resilience.retry.config import RetryConfig
from notifier.resilience.retry.models import (
    RetryAction,
    RetryIntent,
    RetryItem,
    RetryResult,
)
from notifier.resilience.retry.queue import RetryProcessor, RetryQueue

__all__ = [
    # Models
    "RetryAction",
    "RetryIntent",
    "RetryItem",
    "RetryResult",
    # Configuration
    "RetryConfig",
    # Queue
    "RetryQueue",
    "RetryProcessor",
]
