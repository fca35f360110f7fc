"""Notification delivery.

Public API:
- NotificationEngine / build_engine: Orchestrator and its default wiring
- ChannelDispatcher: Concurrent multi-channel fan-out
- NotificationStore: Capacity-bounded notification log
- PreferenceRegistry: Per-type delivery policy
- SubscriberRegistry: Lifecycle event callbacks
"""

from notifier.notifications.dispatcher import ChannelDispatcher
from notifier.notifications.engine import NotificationEngine
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.factory import build_engine
from notifier.notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationPriority,
    NotificationResult,
    NotificationStats,
    NotificationStatus,
    NotificationType,
    Preference,
    SubscriptionEvent,
)
from notifier.notifications.preferences import PreferenceClient, PreferenceRegistry
from notifier.notifications.store import NotificationStore

__all__ = [
    "NotificationEngine",
    "build_engine",
    "ChannelDispatcher",
    "NotificationStore",
    "PreferenceClient",
    "PreferenceRegistry",
    "SubscriberRegistry",
    "DeliveryChannel",
    "Notification",
    "NotificationPriority",
    "NotificationResult",
    "NotificationStats",
    "NotificationStatus",
    "NotificationType",
    "Preference",
    "SubscriptionEvent",
]
