"""Key/value storage interface for persisted engine state.

Two keys are used: ``notifications`` (the bounded notification log) and
``notificationPreferences`` (preferences keyed by notification type). Values
are JSON-serializable records.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

NOTIFICATIONS_KEY = "notifications"
PREFERENCES_KEY = "notificationPreferences"


class KeyValueStore(ABC):
    """Abstract key/value store holding JSON-serializable values.

    Implementations must return a fresh copy from ``get`` so callers cannot
    mutate stored state in place.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short backend identifier (e.g. "memory", "file")."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for ``key``, or None if absent.

        Raises:
            ValueError: If the stored value cannot be decoded
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``.

        Raises:
            TypeError: If the value is not JSON-serializable
            OSError: If the backing medium cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. No-op if absent."""
        pass
