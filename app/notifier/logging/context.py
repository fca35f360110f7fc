"""Dispatch context binding for structured logging.

Usage:
    from notifier.logging import bind_notification_context

    with bind_notification_context(notification_id=notification.id):
        # Every log line inside the block carries notification_id
        logger.info("channel_send_started", channel="email")
"""

from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_notification_context(
    notification_id: Optional[str] = None,
    notification_type: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind notification-scoped context to all logs within the block.

    Args:
        notification_id: Identifier of the notification being processed.
        notification_type: Notification type value.
        **extra_context: Additional key-value pairs to include in logs.
    """
    context: dict[str, Any] = {}
    if notification_id is not None:
        context["notification_id"] = notification_id
    if notification_type is not None:
        context["notification_type"] = notification_type
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
