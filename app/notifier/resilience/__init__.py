"""Resilience patterns for notification delivery."""

from notifier.resilience.retry import RetryConfig, RetryIntent, RetryQueue, RetryResult

__all__ = ["RetryConfig", "RetryIntent", "RetryQueue", "RetryResult"]
