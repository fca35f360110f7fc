"""Delivery channel implementations.

Channels:
- InAppChannel: Local log plus subscriber fan-out
- EmailChannel, SMSChannel, WebhookChannel: Backend HTTP endpoints
- PushChannel: Platform push, skipped when unregistered
"""

from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.channels.email import EmailChannel
from notifier.notifications.channels.http import BackendClient
from notifier.notifications.channels.in_app import InAppChannel, LocalAlerter, LoggingAlerter
from notifier.notifications.channels.push import BackendPushTransport, PushChannel, PushTransport
from notifier.notifications.channels.remote import RemoteChannel
from notifier.notifications.channels.sms import SMSChannel
from notifier.notifications.channels.webhook import WebhookChannel

__all__ = [
    "NotificationChannel",
    "RemoteChannel",
    "BackendClient",
    "InAppChannel",
    "LocalAlerter",
    "LoggingAlerter",
    "EmailChannel",
    "SMSChannel",
    "WebhookChannel",
    "PushChannel",
    "PushTransport",
    "BackendPushTransport",
]
