"""Channel dispatcher with concurrent fan-out.

Delivers one notification across all of its channels at once and joins on
completion:
- Every channel send runs on a worker pool, bounded by a per-dispatch timeout
- One channel's failure never blocks or rolls back another's success
- Failures go through the error handler, which classifies them, records
  error metrics and queues retryable remote failures for resend
- Once every channel attempt has resolved the notification is marked
  delivered and ``notification_delivered`` is published

Usage Example:
    dispatcher = ChannelDispatcher(
        channels={"in_app": in_app, "email": email},
        store=store,
        events=events,
        error_handler=ErrorHandler(retry_queue=retry_queue),
    )

    results = dispatcher.dispatch(notification)
    sent = sum(1 for r in results if r.is_success)
"""

import contextvars
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Set

from notifier.errors import BackendTimeoutError
from notifier.errors.handler import ErrorHandler
from notifier.logging import bind_notification_context, get_module_logger
from notifier.notifications.channels.base import NotificationChannel
from notifier.notifications.events import SubscriberRegistry
from notifier.notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationResult,
    NotificationStatus,
    SubscriptionEvent,
)
from notifier.notifications.store import NotificationStore
from notifier.operations import OperationResult, OperationStatus
from notifier.resilience.retry import RetryIntent, RetryResult

logger = get_module_logger()

RESEND_OPERATION = "notifications.channel.resend"

# Channels whose failures are not re-sent through the retry queue
LOCAL_CHANNELS = {DeliveryChannel.IN_APP.value}

PERMANENT_STATUSES = {
    OperationStatus.PERMANENT_ERROR,
    OperationStatus.UNAUTHORIZED,
    OperationStatus.NOT_FOUND,
}


class ChannelDispatcher:
    """Concurrent multi-channel dispatcher.

    Also acts as the retry processor for ``notifications.channel.resend``
    intents, which it registers on the error handler's retry queue at
    construction.

    A channel send still running when the dispatch timeout expires cannot be
    interrupted: it keeps its worker thread until the transport returns.
    Such sends are tracked as hung workers, and a warning is logged when
    they occupy the whole pool.

    Attributes:
        channels: Dict mapping channel name to NotificationChannel instance
        store: Notification log, updated with the delivered flag
        events: Subscriber registry receiving ``notification_delivered``
        error_handler: Classifies failed sends, records error metrics and
            queues retryable remote failures
        max_workers: Worker pool size
        channel_timeout: Seconds to wait for the whole fan-out to resolve
    """

    def __init__(
        self,
        channels: Dict[str, NotificationChannel],
        store: NotificationStore,
        events: SubscriberRegistry,
        error_handler: Optional[ErrorHandler] = None,
        max_workers: int = 5,
        channel_timeout: float = 5.0,
    ):
        self.channels = channels
        self.store = store
        self.events = events
        self.error_handler = error_handler or ErrorHandler()
        self.max_workers = max_workers
        self.channel_timeout = channel_timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notifier-channel"
        )
        self._hung: Set[Future] = set()
        self._hung_lock = threading.Lock()

        self.error_handler.retry_queue.register_processor(RESEND_OPERATION, self)

        logger.info(
            "initialized_channel_dispatcher",
            channels=list(channels.keys()),
            max_workers=max_workers,
            channel_timeout=channel_timeout,
        )

    @property
    def retry_queue(self):
        return self.error_handler.retry_queue

    @property
    def hung_workers(self) -> int:
        """Workers still busy with a send that outlived its dispatch."""
        with self._hung_lock:
            return len(self._hung)

    def _track_hung(self, future: Future) -> None:
        with self._hung_lock:
            self._hung.add(future)

        def release(done: Future) -> None:
            with self._hung_lock:
                self._hung.discard(done)

        future.add_done_callback(release)

    def dispatch(self, notification: Notification) -> List[NotificationResult]:
        """Send ``notification`` through every channel it lists.

        Args:
            notification: Notification to deliver; its ``delivered`` flag is
                set once every channel attempt has resolved

        Returns:
            One NotificationResult per channel

        Raises:
            RuntimeError: If the dispatcher has been closed
        """
        with bind_notification_context(
            notification_id=notification.id,
            notification_type=notification.type.value,
        ):
            hung = self.hung_workers
            if hung >= self.max_workers:
                logger.warning(
                    "channel_pool_exhausted",
                    hung_workers=hung,
                    max_workers=self.max_workers,
                )

            channel_names = [channel.value for channel in notification.channels]
            futures = {}
            for channel_name in channel_names:
                ctx = contextvars.copy_context()
                future = self._executor.submit(
                    ctx.run, self._send_one, channel_name, notification
                )
                futures[future] = channel_name

            done, not_done = wait(futures, timeout=self.channel_timeout)

            results = []
            for future, channel_name in futures.items():
                if future in not_done:
                    # Queued sends are dropped; running ones keep their worker
                    if not future.cancel():
                        self._track_hung(future)
                    results.append(self._timed_out(channel_name, notification))
                else:
                    results.append(future.result())

            notification.delivered = True
            self.store.mark_delivered(notification.id)
            self.events.publish(SubscriptionEvent.NOTIFICATION_DELIVERED, notification)

            logger.info(
                "notification_dispatched",
                channel_count=len(results),
                sent=sum(1 for r in results if r.status == NotificationStatus.SENT),
                failed=sum(1 for r in results if r.status == NotificationStatus.FAILED),
                retrying=sum(
                    1 for r in results if r.status == NotificationStatus.RETRYING
                ),
                skipped=sum(1 for r in results if r.status == NotificationStatus.SKIPPED),
            )
            return results

    def _send_one(
        self, channel_name: str, notification: Notification
    ) -> NotificationResult:
        channel = self.channels.get(channel_name)
        if channel is None:
            logger.warning("channel_not_registered", channel=channel_name)
            return NotificationResult(
                notification_id=notification.id,
                channel=channel_name,
                status=NotificationStatus.SKIPPED,
                message="No sender registered for channel",
                error_code="CHANNEL_NOT_REGISTERED",
            )

        try:
            result = channel.send(notification)
        except Exception as e:
            logger.error(
                "channel_send_raised", channel=channel_name, error=str(e), exc_info=True
            )
            result = OperationResult.transient_error(
                f"Channel send raised: {e}", error_code="SEND_ERROR", error=e
            )

        return self._to_notification_result(channel_name, notification, result)

    def _timed_out(
        self, channel_name: str, notification: Notification
    ) -> NotificationResult:
        logger.warning(
            "channel_send_timed_out",
            channel=channel_name,
            timeout_seconds=self.channel_timeout,
        )
        error = BackendTimeoutError(
            f"Channel {channel_name} timed out after {self.channel_timeout}s"
        )
        result = OperationResult.transient_error(
            str(error), error_code="REQUEST_TIMEOUT", error=error
        )
        return self._to_notification_result(channel_name, notification, result)

    def _to_notification_result(
        self,
        channel_name: str,
        notification: Notification,
        result: OperationResult,
    ) -> NotificationResult:
        if result.is_success:
            return NotificationResult(
                notification_id=notification.id,
                channel=channel_name,
                status=NotificationStatus.SENT,
                message=result.message,
            )

        if result.is_skipped:
            logger.debug("channel_skipped", channel=channel_name, reason=result.message)
            return NotificationResult(
                notification_id=notification.id,
                channel=channel_name,
                status=NotificationStatus.SKIPPED,
                message=result.message,
                error_code=result.error_code,
            )

        retry_action = None
        if channel_name not in LOCAL_CHANNELS:
            retry_action = RetryIntent(
                operation_type=RESEND_OPERATION,
                payload={
                    "channel": channel_name,
                    "notification": notification.to_record(),
                },
            )

        outcome = self.error_handler.handle(
            result.error if result.error is not None else result.message,
            context={
                "channel": channel_name,
                "notification_id": notification.id,
                "error_code": result.error_code,
            },
            retry_action=retry_action,
        )
        classified = outcome["error"]
        retry_id = outcome["retry_id"]

        logger.warning(
            "channel_delivery_failed",
            channel=channel_name,
            category=classified.category.value,
            code=classified.code,
            retryable=classified.is_retryable,
            retry_id=retry_id,
        )
        return NotificationResult(
            notification_id=notification.id,
            channel=channel_name,
            status=NotificationStatus.RETRYING if retry_id else NotificationStatus.FAILED,
            message=result.message,
            error_code=result.error_code,
            error=classified,
            retry_id=retry_id,
        )

    def process(self, intent: RetryIntent) -> RetryResult:
        """Resend one notification over one channel (retry processor)."""
        channel_name = intent.payload.get("channel")
        channel = self.channels.get(channel_name) if channel_name else None
        if channel is None:
            logger.error("resend_channel_missing", channel=channel_name)
            return RetryResult.PERMANENT_FAILURE

        notification = Notification.from_record(intent.payload["notification"])
        with bind_notification_context(
            notification_id=notification.id,
            notification_type=notification.type.value,
        ):
            result = channel.send(notification)

        if result.is_success:
            logger.info("resend_succeeded", channel=channel_name)
            return RetryResult.SUCCESS
        if result.is_skipped or result.status in PERMANENT_STATUSES:
            logger.warning(
                "resend_failed_permanently",
                channel=channel_name,
                error_code=result.error_code,
            )
            return RetryResult.PERMANENT_FAILURE
        logger.info("resend_failed", channel=channel_name, error_code=result.error_code)
        return RetryResult.RETRY

    def health_check(self) -> Dict[str, bool]:
        """Health of every registered channel, keyed by channel name."""
        health = {}
        for name, channel in self.channels.items():
            try:
                health[name] = channel.health_check().is_success
            except Exception as e:
                logger.warning("channel_health_check_raised", channel=name, error=str(e))
                health[name] = False
        return health

    def close(self, wait: bool = True) -> None:
        """Stop accepting dispatches; in-flight sends finish when ``wait``."""
        self._executor.shutdown(wait=wait)
