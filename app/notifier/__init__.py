"""Notification delivery and resilient-retry engine.

Accepts application events, filters them through per-user preferences,
fans them out across delivery channels and recovers from partial failures
through a classified, backoff-driven retry queue.

Usage:
    from notifier import build_engine, NotificationType

    engine = build_engine()
    engine.initialize()

    notification_id = engine.send(
        NotificationType.PAYMENT_SUCCESS,
        title="Payment Successful",
        message="Your payment of 150000 has been processed successfully.",
        immediate=True,
    )

    engine.teardown()
"""

from notifier.notifications.engine import NotificationEngine
from notifier.notifications.factory import build_engine
from notifier.notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationPriority,
    NotificationType,
    Preference,
    SubscriptionEvent,
)

__all__ = [
    "NotificationEngine",
    "build_engine",
    "DeliveryChannel",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "Preference",
    "SubscriptionEvent",
]
