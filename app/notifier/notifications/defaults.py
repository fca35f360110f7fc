"""Hard-coded default delivery preferences, one entry per notification type."""

from typing import Dict

from notifier.notifications.models import (
    DeliveryChannel,
    NotificationPriority,
    NotificationType,
    Preference,
)

_IN_APP = [DeliveryChannel.IN_APP]
_IN_APP_EMAIL = [DeliveryChannel.IN_APP, DeliveryChannel.EMAIL]
_ESCALATED = [
    DeliveryChannel.IN_APP,
    DeliveryChannel.EMAIL,
    DeliveryChannel.SMS,
    DeliveryChannel.PUSH,
]

_DEFAULTS = {
    NotificationType.PAYMENT_SUCCESS: (_IN_APP_EMAIL, NotificationPriority.MEDIUM),
    NotificationType.PAYMENT_FAILED: (_IN_APP_EMAIL, NotificationPriority.HIGH),
    NotificationType.PAYMENT_PENDING: (_IN_APP, NotificationPriority.MEDIUM),
    NotificationType.PAYMENT_EXPIRED: (_IN_APP_EMAIL, NotificationPriority.HIGH),
    NotificationType.INVOICE_CREATED: (_IN_APP_EMAIL, NotificationPriority.MEDIUM),
    NotificationType.INVOICE_DUE: (_IN_APP_EMAIL, NotificationPriority.HIGH),
    NotificationType.INVOICE_OVERDUE: (_ESCALATED, NotificationPriority.URGENT),
    NotificationType.VERIFICATION_REQUIRED: (_IN_APP_EMAIL, NotificationPriority.HIGH),
    NotificationType.VERIFICATION_COMPLETE: (_IN_APP, NotificationPriority.MEDIUM),
    NotificationType.SYSTEM_MAINTENANCE: (_IN_APP, NotificationPriority.MEDIUM),
    NotificationType.SECURITY_ALERT: (_ESCALATED, NotificationPriority.URGENT),
}


def default_preferences() -> Dict[NotificationType, Preference]:
    """Fresh copy of the default preference table."""
    return {
        notification_type: Preference(
            enabled=True, channels=list(channels), priority=priority
        )
        for notification_type, (channels, priority) in _DEFAULTS.items()
    }


def default_preference(notification_type: NotificationType) -> Preference:
    channels, priority = _DEFAULTS[notification_type]
    return Preference(enabled=True, channels=list(channels), priority=priority)
