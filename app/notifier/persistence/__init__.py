"""Persisted engine state.

Exports:
    KeyValueStore: Storage interface
    InMemoryKeyValueStore, JsonFileKeyValueStore: Implementations
    create_key_value_store: Factory selecting a backend from settings
    NOTIFICATIONS_KEY, PREFERENCES_KEY: Persisted state keys
"""

from notifier.persistence.base import NOTIFICATIONS_KEY, PREFERENCES_KEY, KeyValueStore
from notifier.persistence.factory import create_key_value_store
from notifier.persistence.file import JsonFileKeyValueStore
from notifier.persistence.memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "create_key_value_store",
    "NOTIFICATIONS_KEY",
    "PREFERENCES_KEY",
]
