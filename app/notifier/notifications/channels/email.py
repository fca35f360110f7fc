"""Email channel delivered through the notification backend."""

from typing import Any, Dict

from notifier.notifications.channels.remote import RemoteChannel
from notifier.notifications.models import Notification


class EmailChannel(RemoteChannel):
    """Sends notifications to ``POST /notifications/email``."""

    endpoint = "/notifications/email"

    @property
    def channel_name(self) -> str:
        return "email"

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        return {
            "type": notification.type.value,
            "title": notification.title,
            "message": notification.message,
            "data": notification.data,
            "priority": notification.priority.value,
        }
