"""SMS channel delivered through the notification backend."""

from typing import Any, Dict

from notifier.logging import get_module_logger
from notifier.notifications.channels.remote import RemoteChannel
from notifier.notifications.models import Notification

logger = get_module_logger()

SMS_MAX_LENGTH = 1600


class SMSChannel(RemoteChannel):
    """Sends notifications to ``POST /notifications/sms``.

    SMS carries no title; messages longer than the carrier limit are
    truncated.
    """

    endpoint = "/notifications/sms"

    @property
    def channel_name(self) -> str:
        return "sms"

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        message = notification.message
        if len(message) > SMS_MAX_LENGTH:
            logger.warning(
                "sms_message_truncated",
                notification_id=notification.id,
                original_length=len(message),
            )
            message = message[: SMS_MAX_LENGTH - 3] + "..."

        return {
            "type": notification.type.value,
            "message": message,
            "data": notification.data,
            "priority": notification.priority.value,
        }
