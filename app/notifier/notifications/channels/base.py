"""Notification channel abstract base class.

All channel implementations (in-app, email, SMS, push, webhook) implement
this interface.
"""

from abc import ABC, abstractmethod

from notifier.notifications.models import Notification
from notifier.operations import OperationResult


class NotificationChannel(ABC):
    """Abstract base class for delivery channels.

    Senders never raise to the dispatcher. Failures come back as an error
    ``OperationResult`` carrying the original exception in ``error`` so the
    error classifier can categorize them.

    Example Implementation:
        class EmailChannel(NotificationChannel):

            @property
            def channel_name(self) -> str:
                return "email"

            def send(self, notification: Notification) -> OperationResult:
                try:
                    self.client.post("/notifications/email", payload)
                except DeliveryError as exc:
                    return classify_delivery_error(exc)
                return OperationResult.success()
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier (in_app, email, sms, push, webhook)."""
        pass

    @abstractmethod
    def send(self, notification: Notification) -> OperationResult:
        """Deliver one notification.

        Returns:
            OperationResult; SKIPPED when the channel is unavailable
        """
        pass

    def health_check(self) -> OperationResult:
        """Check channel health. Channels without a remote leg are healthy."""
        return OperationResult.success(message=f"{self.channel_name} channel ready")
