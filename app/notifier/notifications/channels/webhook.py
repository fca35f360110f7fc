"""Webhook channel delivered through the notification backend."""

from typing import Any, Dict

from notifier.notifications.channels.remote import RemoteChannel
from notifier.notifications.models import Notification


class WebhookChannel(RemoteChannel):
    """Sends notifications to ``POST /notifications/webhook``."""

    endpoint = "/notifications/webhook"

    @property
    def channel_name(self) -> str:
        return "webhook"

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        return {
            "type": notification.type.value,
            "title": notification.title,
            "message": notification.message,
            "data": notification.data,
            "timestamp": notification.timestamp.isoformat(),
        }
