"""Factory wiring a NotificationEngine from settings."""

from typing import Dict, Optional

import requests

from notifier.configuration import Settings, get_settings
from notifier.errors import ErrorClassifier
from notifier.errors.handler import ErrorHandler
from notifier.logging import get_module_logger
from notifier.notifications.channels import (
    BackendClient,
    BackendPushTransport,
    EmailChannel,
    InAppChannel,
    LocalAlerter,
    LoggingAlerter,
    NotificationChannel,
    PushChannel,
    SMSChannel,
    WebhookChannel,
)
from notifier.notifications.dispatcher import ChannelDispatcher
from notifier.notifications.engine import NotificationEngine
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.preferences import PreferenceClient, PreferenceRegistry
from notifier.notifications.scheduler import BackgroundScheduler
from notifier.notifications.store import NotificationStore
from notifier.persistence import KeyValueStore, create_key_value_store
from notifier.resilience.retry import RetryConfig, RetryQueue

logger = get_module_logger()


def build_engine(
    settings: Optional[Settings] = None,
    kv: Optional[KeyValueStore] = None,
    session: Optional[requests.Session] = None,
    channels: Optional[Dict[str, NotificationChannel]] = None,
    alerter: Optional[LocalAlerter] = None,
    remote_preferences: bool = True,
) -> NotificationEngine:
    """Build an engine with the default collaborators.

    Args:
        settings: Settings to use; defaults to ``get_settings()``
        kv: Key/value store override; defaults to the configured backend
        session: requests session for the backend client
        channels: Channel senders replacing the defaults of the same name
        alerter: Local alert mechanism for in-app notifications
        remote_preferences: Sync preferences with the backend

    Returns:
        NotificationEngine, not yet initialized

    Example:
        engine = build_engine()
        engine.initialize()
    """
    settings = settings or get_settings()
    kv = kv or create_key_value_store(settings.store)

    client = BackendClient(
        base_url=settings.backend.API_URL,
        token=settings.backend.API_TOKEN,
        timeout=settings.backend.HTTP_TIMEOUT_SECONDS,
        session=session,
    )

    retry_queue = RetryQueue(
        RetryConfig(
            base_delay_ms=settings.retry.base_delay_ms,
            max_delay_ms=settings.retry.max_delay_ms,
        )
    )
    events = SubscriberRegistry()
    store = NotificationStore(
        kv,
        max_entries=settings.store.max_notifications,
        retention_days=settings.store.retention_days,
    )
    preference_registry = PreferenceRegistry(
        kv,
        client=PreferenceClient(client, settings.USER_ID) if remote_preferences else None,
    )

    push_channel = PushChannel(transport=BackendPushTransport(client))
    senders: Dict[str, NotificationChannel] = {
        "in_app": InAppChannel(store, events, alerter or LoggingAlerter()),
        "email": EmailChannel(client),
        "sms": SMSChannel(client),
        "push": push_channel,
        "webhook": WebhookChannel(client),
    }
    senders.update(channels or {})
    registered_push = senders.get("push")

    dispatcher = ChannelDispatcher(
        channels=senders,
        store=store,
        events=events,
        error_handler=ErrorHandler(ErrorClassifier(), retry_queue),
        max_workers=settings.delivery.max_workers,
        channel_timeout=settings.delivery.channel_timeout_seconds,
    )

    logger.info(
        "notification_engine_built",
        store_backend=kv.backend_name,
        channels=list(senders.keys()),
        remote_preferences=remote_preferences,
    )

    return NotificationEngine(
        preference_registry=preference_registry,
        store=store,
        dispatcher=dispatcher,
        retry_queue=retry_queue,
        events=events,
        scheduler=BackgroundScheduler(),
        push_channel=registered_push if isinstance(registered_push, PushChannel) else None,
        settings=settings,
    )
