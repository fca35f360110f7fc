"""In-app channel.

Appends the notification to the local log, pushes it to subscribers and
shows a best-effort OS-level alert when the platform permits it.
"""

from typing import Optional, Protocol

from notifier.logging import get_module_logger
from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.models import Notification, SubscriptionEvent
from notifier.notifications.store import NotificationStore
from notifier.operations import OperationResult

logger = get_module_logger()


class LocalAlerter(Protocol):
    """Platform-specific local alert mechanism."""

    @property
    def permission_granted(self) -> bool:
        ...

    def show(self, notification: Notification) -> None:
        ...


class LoggingAlerter:
    """Alerter for headless hosts: records the alert in the log."""

    @property
    def permission_granted(self) -> bool:
        return True

    def show(self, notification: Notification) -> None:
        logger.info(
            "local_alert_shown",
            notification_id=notification.id,
            title=notification.title,
            tag=notification.type.value,
        )


class InAppChannel(NotificationChannel):
    """Stores the notification and notifies local subscribers."""

    def __init__(
        self,
        store: NotificationStore,
        events: SubscriberRegistry,
        alerter: Optional[LocalAlerter] = None,
    ):
        self.store = store
        self.events = events
        self.alerter = alerter

    @property
    def channel_name(self) -> str:
        return "in_app"

    def send(self, notification: Notification) -> OperationResult:
        self.store.append(notification)
        self.events.publish(SubscriptionEvent.NEW_NOTIFICATION, notification)
        self._show_local_alert(notification)
        return OperationResult.success(message="Stored in-app notification")

    def _show_local_alert(self, notification: Notification) -> None:
        if self.alerter is None:
            return
        try:
            if self.alerter.permission_granted:
                self.alerter.show(notification)
        except Exception as e:
            logger.warning(
                "local_alert_failed", notification_id=notification.id, error=str(e)
            )
