"""Per-type delivery preferences.

The registry is the single source of truth for delivery policy. It is
seeded from the persisted ``notificationPreferences`` key (falling back to
the hard-coded defaults), replaced by the remote copy at initialization and
mutated through ``update``, which persists locally before syncing remotely.
"""

import threading
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from notifier.errors.exceptions import (
    DeliveryError,
    PreferenceSyncError,
    UnknownNotificationTypeError,
)
from notifier.logging import get_module_logger
from notifier.notifications.channels.http import BackendClient
from notifier.notifications.defaults import default_preference, default_preferences
from notifier.notifications.models import NotificationType, Preference
from notifier.persistence import PREFERENCES_KEY, KeyValueStore

logger = get_module_logger()

PREFERENCES_PATH = "/notifications/preferences"

PreferenceMap = Dict[NotificationType, Preference]


def parse_notification_type(value: Union[NotificationType, str]) -> NotificationType:
    """Resolve a NotificationType from an enum member or its string value.

    Raises:
        UnknownNotificationTypeError: If the value is not a known type
    """
    if isinstance(value, NotificationType):
        return value
    try:
        return NotificationType(value)
    except ValueError:
        raise UnknownNotificationTypeError(value) from None


def serialize_preferences(preferences: PreferenceMap) -> Dict[str, Dict[str, Any]]:
    return {
        notification_type.value: preference.model_dump(mode="json")
        for notification_type, preference in preferences.items()
    }


def parse_preferences(raw: Any) -> PreferenceMap:
    """Parse a ``{type: preference}`` mapping, skipping invalid entries."""
    parsed: PreferenceMap = {}
    if not isinstance(raw, Mapping):
        return parsed
    for key, value in raw.items():
        try:
            notification_type = NotificationType(key)
            parsed[notification_type] = Preference.model_validate(value)
        except (ValueError, ValidationError) as e:
            logger.warning("preference_entry_skipped", notification_type=key, error=str(e))
    return parsed


class PreferenceClient:
    """Remote preference service.

    Args:
        client: Backend HTTP client
        user_id: User whose preferences are read and written
    """

    def __init__(self, client: BackendClient, user_id: str):
        self.client = client
        self.user_id = user_id

    def fetch(self) -> PreferenceMap:
        """Fetch the user's preferences.

        Raises:
            DeliveryError: If the backend cannot be reached or rejects the call
        """
        body = self.client.get(PREFERENCES_PATH, params={"user_id": self.user_id})
        if isinstance(body, Mapping) and "preferences" in body:
            body = body["preferences"]
        return parse_preferences(body)

    def push(self, preferences: PreferenceMap) -> None:
        """Replace the user's remote preferences.

        Raises:
            DeliveryError: If the backend cannot be reached or rejects the call
        """
        self.client.put(
            PREFERENCES_PATH,
            {"preferences": serialize_preferences(preferences)},
            params={"user_id": self.user_id},
        )


class PreferenceRegistry:
    """Thread-safe preference table.

    Args:
        kv: Key/value store holding the local preference cache
        client: Optional remote preference service; without one, updates
            are local only
    """

    def __init__(self, kv: KeyValueStore, client: Optional[PreferenceClient] = None):
        self.kv = kv
        self.client = client
        self._lock = threading.Lock()
        self._preferences: PreferenceMap = self._load_local()

    def _load_local(self) -> PreferenceMap:
        preferences = default_preferences()
        try:
            stored = self.kv.get(PREFERENCES_KEY)
        except (OSError, ValueError) as e:
            logger.warning("preferences_load_failed", error=str(e))
            return preferences
        if stored:
            preferences.update(parse_preferences(stored))
        return preferences

    def _persist(self, preferences: PreferenceMap) -> None:
        try:
            self.kv.set(PREFERENCES_KEY, serialize_preferences(preferences))
        except (OSError, TypeError, ValueError) as e:
            logger.error("preferences_persist_failed", error=str(e))

    def get(self, notification_type: Union[NotificationType, str]) -> Preference:
        """Preference for a type, or its hard default if none is stored.

        Raises:
            UnknownNotificationTypeError: If the type is not supported
        """
        resolved = parse_notification_type(notification_type)
        with self._lock:
            preference = self._preferences.get(resolved)
        if preference is None:
            return default_preference(resolved)
        return preference.model_copy(deep=True)

    def all(self) -> PreferenceMap:
        with self._lock:
            return {k: v.model_copy(deep=True) for k, v in self._preferences.items()}

    def update(
        self,
        partial: Mapping[Union[NotificationType, str], Union[Preference, Mapping[str, Any]]],
    ) -> PreferenceMap:
        """Merge per-type partial updates, persist them, then sync remotely.

        Each value is either a full ``Preference`` or a mapping holding only
        the fields to change (e.g. ``{"enabled": False}``).

        Args:
            partial: Updates keyed by notification type

        Returns:
            The merged preference table

        Raises:
            UnknownNotificationTypeError: If a key is not a supported type
            ValueError: If an update holds invalid field values
            PreferenceSyncError: If the remote sync failed; the local merge
                has already been applied and is kept
        """
        with self._lock:
            merged = {k: v.model_copy(deep=True) for k, v in self._preferences.items()}
            for key, update in partial.items():
                notification_type = parse_notification_type(key)
                current = merged.get(notification_type) or default_preference(
                    notification_type
                )
                if isinstance(update, Preference):
                    merged[notification_type] = update.model_copy(deep=True)
                else:
                    merged[notification_type] = Preference.model_validate(
                        {**current.model_dump(), **dict(update)}
                    )

            self._preferences = merged
            self._persist(merged)
            snapshot = {k: v.model_copy(deep=True) for k, v in merged.items()}

        logger.info(
            "preferences_updated",
            types=[parse_notification_type(k).value for k in partial.keys()],
        )

        if self.client is not None:
            try:
                self.client.push(snapshot)
            except DeliveryError as e:
                logger.warning("preferences_sync_failed", error=str(e))
                raise PreferenceSyncError(
                    f"Preferences saved locally but remote sync failed: {e}",
                    preferences=serialize_preferences(snapshot),
                ) from e

        return snapshot

    def load_remote(self) -> PreferenceMap:
        """Replace the table with the remote copy merged over the defaults.

        Raises:
            DeliveryError: If no remote copy could be fetched
        """
        if self.client is None:
            return self.all()

        remote = self.client.fetch()
        merged = default_preferences()
        merged.update(remote)

        with self._lock:
            self._preferences = merged
            self._persist(merged)

        logger.info("preferences_loaded_remote", remote_types=len(remote))
        return self.all()
