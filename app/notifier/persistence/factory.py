"""Factory for creating key/value stores based on configuration."""

from typing import Optional

from notifier.configuration import StoreSettings
from notifier.logging import get_module_logger
from notifier.persistence.base import KeyValueStore
from notifier.persistence.file import JsonFileKeyValueStore
from notifier.persistence.memory import InMemoryKeyValueStore

logger = get_module_logger()


def create_key_value_store(
    store_settings: StoreSettings, backend: Optional[str] = None
) -> KeyValueStore:
    """Create the key/value store selected by configuration.

    Args:
        store_settings: Store settings section
        backend: Optional backend override (memory, file).
            If None, uses store_settings.backend

    Returns:
        KeyValueStore implementation

    Raises:
        ValueError: If an unknown backend is specified

    Examples:
        >>> store = create_key_value_store(settings.store)
        >>> store = create_key_value_store(settings.store, backend="memory")
    """
    backend = backend or store_settings.backend

    if backend == "memory":
        logger.info("creating_in_memory_state_store")
        return InMemoryKeyValueStore()

    if backend == "file":
        logger.info("creating_file_state_store", path=store_settings.path)
        return JsonFileKeyValueStore(store_settings.path)

    raise ValueError(f"Unknown store backend: {backend}. Supported: memory, file")
