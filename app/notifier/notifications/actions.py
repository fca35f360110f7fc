"""Action buttons attached to push and OS-level alerts, per notification type."""

from typing import Dict, List

from notifier.notifications.models import NotificationType

_ACTIONS = {
    NotificationType.PAYMENT_FAILED: [
        {"action": "retry", "title": "Retry Payment"},
        {"action": "view", "title": "View Details"},
    ],
    NotificationType.INVOICE_DUE: [
        {"action": "pay", "title": "Pay Now"},
        {"action": "view", "title": "View Invoice"},
    ],
    NotificationType.VERIFICATION_REQUIRED: [
        {"action": "verify", "title": "Verify Now"},
        {"action": "later", "title": "Remind Later"},
    ],
}

_DEFAULT_ACTIONS = [{"action": "view", "title": "View"}]


def notification_actions(notification_type: NotificationType) -> List[Dict[str, str]]:
    return [dict(action) for action in _ACTIONS.get(notification_type, _DEFAULT_ACTIONS)]
