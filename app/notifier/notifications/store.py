"""Capacity-bounded notification log.

The log is the source of truth for stored notifications. Writes are
serialized and replace the whole list (copy-on-write), so readers always see
a consistent snapshot without taking the write lock. Every write is followed
by a full-log write-back to the key/value store; write-back failures are
logged and the in-memory log stays authoritative.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from notifier.logging import get_module_logger
from notifier.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationStats,
    NotificationType,
)
from notifier.persistence import NOTIFICATIONS_KEY, KeyValueStore

logger = get_module_logger()

DEFAULT_MAX_ENTRIES = 100
DEFAULT_RETENTION_DAYS = 30


class NotificationStore:
    """Append-only, capacity-bounded notification log.

    Ordering is insertion order, oldest first. Returned notifications are
    copies; mutate state only through the store's methods.

    Args:
        kv: Key/value store holding the persisted log
        max_entries: Capacity; the oldest entries are evicted first
        retention_days: Default age limit used by ``purge``
    """

    def __init__(
        self,
        kv: KeyValueStore,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.kv = kv
        self.max_entries = max_entries
        self.retention_days = retention_days
        self._write_lock = threading.Lock()
        self._entries: List[Notification] = self._load()

    def _load(self) -> List[Notification]:
        try:
            records = self.kv.get(NOTIFICATIONS_KEY)
        except (OSError, ValueError) as e:
            logger.warning("notification_log_load_failed", error=str(e))
            return []
        if not records:
            return []
        if not isinstance(records, list):
            logger.warning("notification_log_malformed", kind=type(records).__name__)
            return []

        entries = []
        for record in records:
            try:
                entries.append(Notification.from_record(record))
            except (ValidationError, TypeError) as e:
                logger.warning("notification_record_skipped", error=str(e))
        return entries[-self.max_entries :]

    def _persist(self, entries: List[Notification]) -> None:
        try:
            self.kv.set(NOTIFICATIONS_KEY, [n.to_record() for n in entries])
        except (OSError, TypeError, ValueError) as e:
            logger.error(
                "notification_log_persist_failed",
                backend=self.kv.backend_name,
                error=str(e),
            )

    def _update(
        self, mutate: Callable[[List[Notification]], Optional[List[Notification]]]
    ) -> bool:
        """Apply ``mutate`` to a copy of the log under the write lock.

        ``mutate`` returns the new list, or None when nothing changed.
        """
        with self._write_lock:
            working = [n.model_copy() for n in self._entries]
            updated = mutate(working)
            if updated is None:
                return False
            self._entries = updated
            self._persist(updated)
            return True

    def append(self, notification: Notification) -> None:
        """Add a notification, evicting the oldest entries beyond capacity."""
        stored = notification.model_copy(deep=True)

        def mutate(entries):
            entries.append(stored)
            return entries[-self.max_entries :]

        self._update(mutate)
        logger.debug(
            "notification_stored",
            notification_id=stored.id,
            notification_type=stored.type.value,
            size=len(self._entries),
        )

    def get(self, notification_id: str) -> Optional[Notification]:
        for notification in self._entries:
            if notification.id == notification_id:
                return notification.model_copy(deep=True)
        return None

    def mark_as_read(self, notification_id: str) -> Optional[Notification]:
        """Mark one notification read. No-op if already read or absent.

        Returns:
            The notification as stored after the call, or None if absent
        """

        def mutate(entries):
            for notification in entries:
                if notification.id == notification_id and not notification.read:
                    notification.read = True
                    return entries
            return None

        self._update(mutate)
        return self.get(notification_id)

    def mark_all_as_read(self) -> int:
        """Mark every notification read.

        Returns:
            Number of notifications that changed state
        """
        changed = 0

        def mutate(entries):
            nonlocal changed
            for notification in entries:
                if not notification.read:
                    notification.read = True
                    changed += 1
            return entries if changed else None

        self._update(mutate)
        return changed

    def mark_delivered(self, notification_id: str) -> bool:
        def mutate(entries):
            for notification in entries:
                if notification.id == notification_id and not notification.delivered:
                    notification.delivered = True
                    return entries
            return None

        return self._update(mutate)

    def delete(self, notification_id: str) -> bool:
        """Remove one notification. No-op if absent."""

        def mutate(entries):
            remaining = [n for n in entries if n.id != notification_id]
            return remaining if len(remaining) != len(entries) else None

        return self._update(mutate)

    def purge(self, older_than_days: Optional[int] = None) -> int:
        """Delete notifications older than ``older_than_days``.

        Args:
            older_than_days: Age limit in days; defaults to ``retention_days``

        Returns:
            Number of notifications removed
        """
        days = self.retention_days if older_than_days is None else older_than_days
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        removed = 0

        def mutate(entries):
            nonlocal removed
            remaining = [n for n in entries if n.timestamp >= cutoff]
            removed = len(entries) - len(remaining)
            return remaining if removed else None

        self._update(mutate)
        if removed:
            logger.info("notifications_purged", removed=removed, older_than_days=days)
        return removed

    def clear(self) -> None:
        self._update(lambda entries: [] if entries else None)

    def query(
        self,
        type: Optional[NotificationType] = None,
        priority: Optional[NotificationPriority] = None,
        read: Optional[bool] = None,
    ) -> List[Notification]:
        """Notifications matching every given filter, oldest first."""
        results = []
        for notification in self._entries:
            if type is not None and notification.type != type:
                continue
            if priority is not None and notification.priority != priority:
                continue
            if read is not None and notification.read != read:
                continue
            results.append(notification.model_copy(deep=True))
        return results

    def unread(self) -> List[Notification]:
        return self.query(read=False)

    def stats(self) -> NotificationStats:
        """Counters derived by scanning the current log."""
        entries = self._entries
        now = datetime.now(timezone.utc)
        one_day_ago = now - timedelta(days=1)
        one_week_ago = now - timedelta(days=7)

        stats = NotificationStats(total=len(entries))
        for notification in entries:
            if not notification.read:
                stats.unread += 1
            if notification.timestamp > one_day_ago:
                stats.today += 1
            if notification.timestamp > one_week_ago:
                stats.this_week += 1
            type_key = notification.type.value
            priority_key = notification.priority.value
            stats.by_type[type_key] = stats.by_type.get(type_key, 0) + 1
            stats.by_priority[priority_key] = stats.by_priority.get(priority_key, 0) + 1
        return stats

    def __len__(self) -> int:
        return len(self._entries)
