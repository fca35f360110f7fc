"""Subscriber registry for notification lifecycle events.

Callbacks are registered per event name and called synchronously, in
registration order, when an event is published. If a callback raises, the
failure is logged and the remaining callbacks still run.
"""

from threading import Lock
from typing import Callable, Dict, List, Optional, Union

from notifier.logging import get_module_logger
from notifier.notifications.models import Notification, SubscriptionEvent

logger = get_module_logger()

Subscriber = Callable[[Optional[Notification]], None]


def _event_name(event: Union[SubscriptionEvent, str]) -> SubscriptionEvent:
    if isinstance(event, SubscriptionEvent):
        return event
    return SubscriptionEvent(event)


class SubscriberRegistry:
    """Registry of lifecycle event callbacks."""

    def __init__(self) -> None:
        self._subscribers: Dict[SubscriptionEvent, List[Subscriber]] = {}
        self._lock = Lock()

    def subscribe(
        self, event: Union[SubscriptionEvent, str], callback: Subscriber
    ) -> Callable[[], None]:
        """Register ``callback`` for ``event``.

        Args:
            event: SubscriptionEvent or its string value
            callback: Called with the affected Notification (or None)

        Returns:
            Zero-argument function removing this subscription. Calling it
            more than once is a no-op.

        Raises:
            ValueError: If ``event`` is not a known event name
        """
        name = _event_name(event)
        with self._lock:
            self._subscribers.setdefault(name, []).append(callback)
            total = len(self._subscribers[name])

        logger.debug(
            "subscriber_registered",
            event=name.value,
            callback=getattr(callback, "__name__", "unknown"),
            total_subscribers=total,
        )

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(name, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(
        self,
        event: Union[SubscriptionEvent, str],
        notification: Optional[Notification] = None,
    ) -> int:
        """Call every subscriber of ``event``.

        Args:
            event: SubscriptionEvent or its string value
            notification: Affected notification; None for
                ``all_notifications_read``

        Returns:
            Number of callbacks that completed without raising
        """
        name = _event_name(event)
        with self._lock:
            callbacks = list(self._subscribers.get(name, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(notification)
                delivered += 1
            except Exception as e:
                logger.error(
                    "subscriber_callback_failed",
                    event=name.value,
                    callback=getattr(callback, "__name__", "unknown"),
                    notification_id=getattr(notification, "id", None),
                    error=str(e),
                )
        return delivered

    def count(self, event: Union[SubscriptionEvent, str]) -> int:
        name = _event_name(event)
        with self._lock:
            return len(self._subscribers.get(name, []))
