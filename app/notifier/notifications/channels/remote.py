"""Shared behavior for channels delivered through the notification backend."""

from abc import abstractmethod
from typing import Any, Dict

from notifier.errors.exceptions import DeliveryError
from notifier.logging import get_module_logger
from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.channels.http import BackendClient
from notifier.notifications.models import Notification
from notifier.operations import OperationResult, classify_delivery_error

logger = get_module_logger()


class RemoteChannel(NotificationChannel):
    """Channel that POSTs a JSON payload to a backend endpoint.

    Subclasses provide ``channel_name``, ``endpoint`` and ``build_payload``.
    """

    endpoint: str = ""

    def __init__(self, client: BackendClient):
        self.client = client

    @abstractmethod
    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        """Request body for ``notification``."""
        pass

    def send(self, notification: Notification) -> OperationResult:
        payload = self.build_payload(notification)
        try:
            body = self.client.post(self.endpoint, payload)
        except DeliveryError as e:
            result = classify_delivery_error(e)
            logger.warning(
                "channel_send_failed",
                channel=self.channel_name,
                notification_id=notification.id,
                status=result.status.value,
                error_code=result.error_code,
                error=result.message,
            )
            return result

        logger.info(
            "channel_send_succeeded",
            channel=self.channel_name,
            notification_id=notification.id,
        )
        return OperationResult.success(
            data=body, message=f"Sent {self.channel_name} notification"
        )

    def health_check(self) -> OperationResult:
        try:
            self.client.get("/health")
        except DeliveryError as e:
            logger.warning(
                "channel_health_check_failed", channel=self.channel_name, error=str(e)
            )
            return classify_delivery_error(e)
        return OperationResult.success(message=f"{self.channel_name} backend reachable")
