"""Push channel.

Push delivery requires a platform registration token. Without one the
channel reports SKIPPED, which the dispatcher treats as a silent no-op.
"""

from typing import Any, Dict, List, Optional, Protocol

from notifier.errors.exceptions import DeliveryError
from notifier.logging import get_module_logger
from notifier.notifications.actions import notification_actions
from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.channels.http import BackendClient
from notifier.notifications.models import Notification
from notifier.operations import OperationResult, classify_delivery_error

logger = get_module_logger()


class PushTransport(Protocol):
    """Platform push service."""

    def register(self) -> Optional[str]:
        """Register this host and return its token, or None if unsupported."""
        ...

    def send(
        self, notification: Notification, token: str, actions: List[Dict[str, str]]
    ) -> Any:
        """Deliver ``notification``. Raises DeliveryError on failure."""
        ...


class BackendPushTransport:
    """Push transport relayed through the notification backend."""

    def __init__(self, client: BackendClient):
        self.client = client

    def register(self) -> Optional[str]:
        body = self.client.post("/notifications/push/register", {})
        if isinstance(body, dict):
            return body.get("token")
        return None

    def send(
        self, notification: Notification, token: str, actions: List[Dict[str, str]]
    ) -> Any:
        return self.client.post(
            "/notifications/push",
            {
                "token": token,
                "type": notification.type.value,
                "title": notification.title,
                "message": notification.message,
                "data": notification.data,
                "tag": notification.type.value,
                "actions": actions,
            },
        )


class PushChannel(NotificationChannel):
    """Sends push notifications once a registration token is available."""

    def __init__(
        self,
        transport: Optional[PushTransport] = None,
        registration_token: Optional[str] = None,
    ):
        self.transport = transport
        self.registration_token = registration_token

    @property
    def channel_name(self) -> str:
        return "push"

    @property
    def available(self) -> bool:
        return self.transport is not None and bool(self.registration_token)

    def register(self) -> bool:
        """Obtain a registration token from the transport.

        Returns:
            True if push delivery is available afterwards
        """
        if self.transport is None:
            return False
        if self.registration_token:
            return True
        try:
            self.registration_token = self.transport.register()
        except DeliveryError as e:
            logger.warning("push_registration_failed", error=str(e))
            return False

        if self.registration_token:
            logger.info("push_registered")
        else:
            logger.info("push_unsupported")
        return self.available

    def send(self, notification: Notification) -> OperationResult:
        if not self.available:
            return OperationResult.skipped(
                "Push is not registered on this host", error_code="PUSH_UNAVAILABLE"
            )

        try:
            self.transport.send(  # type: ignore[union-attr]
                notification,
                self.registration_token,  # type: ignore[arg-type]
                notification_actions(notification.type),
            )
        except DeliveryError as e:
            result = classify_delivery_error(e)
            logger.warning(
                "channel_send_failed",
                channel=self.channel_name,
                notification_id=notification.id,
                error_code=result.error_code,
                error=result.message,
            )
            return result

        return OperationResult.success(message="Sent push notification")

    def health_check(self) -> OperationResult:
        if not self.available:
            return OperationResult.skipped(
                "Push is not registered on this host", error_code="PUSH_UNAVAILABLE"
            )
        return OperationResult.success(message="Push registered")
