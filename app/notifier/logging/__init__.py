"""Structured logging built on structlog.

Public API:
    - configure_logging(): Initialize logging for the process
    - get_module_logger(): Get a logger for the calling module
    - bind_notification_context(): Context manager for dispatch-scoped logging
    - mask_sensitive_data(): Processor redacting tokens and secrets
"""

from notifier.logging.context import bind_notification_context
from notifier.logging.formatters import SENSITIVE_PATTERNS, mask_sensitive_data
from notifier.logging.setup import configure_logging, get_module_logger

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_notification_context",
    "mask_sensitive_data",
    "SENSITIVE_PATTERNS",
]
