"""Notification engine.

Public facade tying preferences, the notification log, channel fan-out and
the retry queue together. Producers call ``send``; background jobs drain the
send queue, tick the retry queue and purge old notifications.

Notification lifecycle:
    created -> filtered out (type disabled, nothing recorded)
    created -> queued -> dispatching -> delivered
    created -> dispatching -> delivered (immediate sends)

Usage:
    engine = build_engine()
    engine.initialize()

    unsubscribe = engine.subscribe("new_notification", on_new)
    engine.send_payment_success({"amount": "Rp 150.000", "order_id": "INV-1"})

    engine.teardown()
"""

import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import (
    Any,
    Callable,
    Deque,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from notifier.configuration import Settings, get_settings
from notifier.logging import get_module_logger
from notifier.notifications.channels.push import PushChannel
from notifier.notifications.dispatcher import ChannelDispatcher
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationPriority,
    NotificationStats,
    NotificationType,
    Preference,
    SubscriptionEvent,
)
from notifier.notifications.preferences import (
    PreferenceMap,
    PreferenceRegistry,
    parse_notification_type,
)
from notifier.notifications.scheduler import BackgroundScheduler
from notifier.notifications.store import NotificationStore
from notifier.resilience.retry import RetryQueue

logger = get_module_logger()

DRAIN_JOB = "drain_send_queue"
RETRY_JOB = "retry_tick"
PURGE_JOB = "purge_notifications"


def _resolve_channels(
    channels: Optional[Iterable[Union[DeliveryChannel, str]]]
) -> List[DeliveryChannel]:
    resolved = []
    for channel in channels or []:
        try:
            resolved.append(DeliveryChannel(channel))
        except ValueError:
            logger.warning("unknown_channel_skipped", channel=str(channel))
    return resolved


def _resolve_priority(
    priority: Optional[Union[NotificationPriority, str]],
    default: NotificationPriority,
) -> NotificationPriority:
    if priority is None:
        return default
    try:
        return NotificationPriority(priority)
    except ValueError:
        logger.warning("unknown_priority_ignored", priority=str(priority))
        return default


class NotificationEngine:
    """Orchestrates notification delivery.

    Constructed once at process start and passed to producers. All
    collaborators are injected; ``build_engine`` wires the defaults.

    Attributes:
        preference_registry: Per-type delivery policy
        store: Notification log
        dispatcher: Channel fan-out
        retry_queue: Retry queue for failed channel sends
        events: Subscriber registry
        scheduler: Background scheduler for the periodic jobs
        push_channel: Optional push channel registered at initialization
    """

    def __init__(
        self,
        preference_registry: PreferenceRegistry,
        store: NotificationStore,
        dispatcher: ChannelDispatcher,
        retry_queue: RetryQueue,
        events: SubscriberRegistry,
        scheduler: Optional[BackgroundScheduler] = None,
        push_channel: Optional[PushChannel] = None,
        settings: Optional[Settings] = None,
    ):
        self.preference_registry = preference_registry
        self.store = store
        self.dispatcher = dispatcher
        self.retry_queue = retry_queue
        self.events = events
        self.scheduler = scheduler or BackgroundScheduler()
        self.push_channel = push_channel
        self.settings = settings or get_settings()

        self._queue: Deque[Notification] = deque()
        self._deferred: List[Tuple[datetime, Notification]] = []
        self._queue_lock = threading.Lock()
        self._drain_lock = threading.Lock()
        self._drain_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="notifier-drain"
        )
        self._state_lock = threading.Lock()
        self._idle = threading.Condition(self._state_lock)
        self._in_flight = 0
        self._initialized = False
        self._closed = False

    # Lifecycle

    def initialize(self) -> None:
        """Load remote preferences, register push and start background jobs.

        Never raises: failures are logged and the engine continues with
        default preferences and without push support.
        """
        with self._state_lock:
            if self._initialized or self._closed:
                return
            self._initialized = True

        try:
            self.preference_registry.load_remote()
        except Exception as e:
            logger.warning("preferences_load_failed_using_defaults", error=str(e))

        if self.push_channel is not None:
            try:
                self.push_channel.register()
            except Exception as e:
                logger.warning("push_registration_failed", error=str(e))

        delivery = self.settings.delivery
        self.scheduler.add_job(
            DRAIN_JOB, delivery.queue_interval_seconds, self.process_queue
        )
        if self.settings.retry.enabled:
            self.scheduler.add_job(
                RETRY_JOB, self.settings.retry.tick_interval_seconds, self.retry_queue.tick
            )
        self.scheduler.add_job(
            PURGE_JOB,
            self.settings.store.purge_interval_seconds,
            self.purge_old_notifications,
        )
        self.scheduler.start()
        logger.info("notification_engine_initialized")

    def teardown(self) -> None:
        """Stop background jobs and flush pending sends.

        Queued notifications are dispatched and in-flight dispatches are
        allowed to complete. Safe to call more than once.
        """
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            # Wait for immediate sends already accepted
            while self._in_flight:
                self._idle.wait()

        self.scheduler.stop()
        self._drain_executor.shutdown(wait=True)
        self.process_queue(force=True)
        self.dispatcher.close(wait=True)
        logger.info(
            "notification_engine_stopped",
            unsent=self.queue_size(),
            retry_queue_size=self.retry_queue.size(),
        )

    # Sending

    def send(
        self,
        type: Union[NotificationType, str],
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
        priority: Optional[Union[NotificationPriority, str]] = None,
        channels: Optional[Iterable[Union[DeliveryChannel, str]]] = None,
        immediate: bool = False,
    ) -> Optional[str]:
        """Submit a notification.

        Args:
            type: Notification type
            title: Display title
            message: Display body
            data: Free-form payload carried to senders and UI
            priority: Overrides the preference priority when given
            channels: Overrides the preference channels when non-empty
            immediate: Dispatch on the caller's thread instead of queueing

        Returns:
            The notification id, or None when the type is disabled, no
            channel is usable or the engine has been torn down

        Raises:
            UnknownNotificationTypeError: If ``type`` is not supported
        """
        notification_type = parse_notification_type(type)
        preference = self.preference_registry.get(notification_type)
        if not preference.enabled:
            logger.debug(
                "notification_type_disabled", notification_type=notification_type.value
            )
            return None

        resolved_channels = _resolve_channels(channels) or list(preference.channels)
        if not resolved_channels:
            logger.warning(
                "notification_dropped_no_channels",
                notification_type=notification_type.value,
            )
            return None

        notification = Notification(
            type=notification_type,
            title=str(title),
            message=str(message),
            data=dict(data or {}),
            priority=_resolve_priority(priority, preference.priority),
            channels=resolved_channels,
        )

        with self._state_lock:
            if self._closed:
                logger.warning(
                    "send_after_teardown_dropped",
                    notification_type=notification_type.value,
                )
                return None
            if immediate:
                self._in_flight += 1
            else:
                with self._queue_lock:
                    self._queue.append(notification)

        if immediate:
            try:
                self._dispatch(notification)
            finally:
                with self._state_lock:
                    self._in_flight -= 1
                    self._idle.notify_all()
        else:
            logger.info(
                "notification_queued",
                notification_id=notification.id,
                notification_type=notification_type.value,
            )
            self._trigger_drain()

        return notification.id

    def _dispatch(self, notification: Notification) -> None:
        try:
            self.dispatcher.dispatch(notification)
        except Exception as e:
            self._defer(notification, e)

    def _defer(self, notification: Notification, error: Exception) -> None:
        max_attempts = self.settings.delivery.queue_max_attempts
        if notification.retry_count >= max_attempts:
            logger.error(
                "notification_dropped",
                notification_id=notification.id,
                attempts=notification.retry_count,
                error=str(error),
            )
            return

        notification.retry_count += 1
        delay = self.settings.delivery.queue_retry_delay_seconds * notification.retry_count
        due_at = datetime.now(timezone.utc) + timedelta(seconds=delay)
        with self._queue_lock:
            self._deferred.append((due_at, notification))
        logger.warning(
            "notification_requeued",
            notification_id=notification.id,
            attempt=notification.retry_count,
            delay_seconds=delay,
            error=str(error),
        )

    def _trigger_drain(self) -> None:
        if self._closed:
            return
        try:
            self._drain_executor.submit(self.process_queue)
        except RuntimeError:
            logger.debug("drain_executor_unavailable")

    def process_queue(self, force: bool = False) -> int:
        """Dispatch queued notifications in submission order.

        Deferred notifications whose delay has elapsed are queued first. A
        drain that starts while another is running returns immediately.

        Args:
            force: Queue every deferred notification regardless of delay

        Returns:
            Number of notifications dispatched
        """
        if not self._drain_lock.acquire(blocking=False):
            return 0

        dispatched = 0
        try:
            self._promote_deferred(force)
            while True:
                with self._queue_lock:
                    if not self._queue:
                        break
                    notification = self._queue.popleft()
                try:
                    self.dispatcher.dispatch(notification)
                    dispatched += 1
                except Exception as e:
                    self._defer(notification, e)
        finally:
            self._drain_lock.release()

        if dispatched:
            logger.debug("send_queue_drained", dispatched=dispatched)
        return dispatched

    def _promote_deferred(self, force: bool) -> None:
        now = datetime.now(timezone.utc)
        with self._queue_lock:
            remaining = []
            for due_at, notification in self._deferred:
                if force or due_at <= now:
                    self._queue.append(notification)
                else:
                    remaining.append((due_at, notification))
            self._deferred = remaining

    def queue_size(self) -> int:
        with self._queue_lock:
            return len(self._queue) + len(self._deferred)

    # Typed producers

    def send_payment_success(
        self, payment: Mapping[str, Any], immediate: bool = False
    ) -> Optional[str]:
        return self.send(
            NotificationType.PAYMENT_SUCCESS,
            title="Payment Successful",
            message=(
                f"Your payment of {payment.get('amount')} has been processed "
                "successfully."
            ),
            data=payment,
            priority=NotificationPriority.MEDIUM,
            immediate=immediate,
        )

    def send_payment_failed(
        self, payment: Mapping[str, Any], reason: str, immediate: bool = False
    ) -> Optional[str]:
        return self.send(
            NotificationType.PAYMENT_FAILED,
            title="Payment Failed",
            message=f"Your payment of {payment.get('amount')} failed. {reason}",
            data={**payment, "reason": reason},
            priority=NotificationPriority.HIGH,
            immediate=immediate,
        )

    def send_invoice_due(
        self, invoice: Mapping[str, Any], immediate: bool = False
    ) -> Optional[str]:
        number = invoice.get("invoice_number", invoice.get("invoiceNumber"))
        due_date = invoice.get("due_date", invoice.get("dueDate"))
        return self.send(
            NotificationType.INVOICE_DUE,
            title="Invoice Due Soon",
            message=f"Invoice {number} is due on {due_date}.",
            data=invoice,
            priority=NotificationPriority.HIGH,
            immediate=immediate,
        )

    def send_payment_expired(
        self, payment: Mapping[str, Any], immediate: bool = False
    ) -> Optional[str]:
        return self.send(
            NotificationType.PAYMENT_EXPIRED,
            title="Payment Link Expired",
            message="Your payment link has expired. Please generate a new one.",
            data=payment,
            priority=NotificationPriority.HIGH,
            immediate=immediate,
        )

    # Subscriptions

    def subscribe(
        self,
        event: Union[SubscriptionEvent, str],
        callback: Callable[[Optional[Notification]], None],
    ) -> Callable[[], None]:
        """Register a lifecycle callback; returns the unsubscribe function."""
        return self.events.subscribe(event, callback)

    # Stored notifications

    def notifications(
        self,
        type: Optional[Union[NotificationType, str]] = None,
        priority: Optional[Union[NotificationPriority, str]] = None,
        read: Optional[bool] = None,
    ) -> List[Notification]:
        return self.store.query(
            type=parse_notification_type(type) if type is not None else None,
            priority=NotificationPriority(priority) if priority is not None else None,
            read=read,
        )

    def unread_notifications(self) -> List[Notification]:
        return self.store.unread()

    def mark_as_read(self, notification_id: str) -> bool:
        notification = self.store.mark_as_read(notification_id)
        if notification is None:
            return False
        self.events.publish(SubscriptionEvent.NOTIFICATION_READ, notification)
        return True

    def mark_all_as_read(self) -> int:
        changed = self.store.mark_all_as_read()
        self.events.publish(SubscriptionEvent.ALL_NOTIFICATIONS_READ, None)
        return changed

    def delete_notification(self, notification_id: str) -> bool:
        return self.store.delete(notification_id)

    def purge_old_notifications(self, older_than_days: Optional[int] = None) -> int:
        return self.store.purge(older_than_days)

    def stats(self) -> NotificationStats:
        return self.store.stats()

    # Preferences

    def preferences(self) -> PreferenceMap:
        return self.preference_registry.all()

    def get_preference(self, notification_type: Union[NotificationType, str]) -> Preference:
        return self.preference_registry.get(notification_type)

    def update_preferences(
        self,
        partial: Mapping[Union[NotificationType, str], Union[Preference, Mapping[str, Any]]],
    ) -> PreferenceMap:
        """Merge preference updates; see ``PreferenceRegistry.update``.

        Raises:
            PreferenceSyncError: Remote sync failed, local merge kept
        """
        return self.preference_registry.update(partial)

    # Health

    def health_check(self) -> Dict[str, bool]:
        """Health of every registered channel, keyed by channel name."""
        return self.dispatcher.health_check()

    def metrics(self) -> Dict[str, Any]:
        """Channel failure counters merged with retry queue counters."""
        return self.dispatcher.error_handler.metrics()

    def clear_metrics(self) -> None:
        self.dispatcher.error_handler.clear_metrics()
