"""In-memory key/value store."""

import json
import threading
from typing import Any, Dict, Optional

from notifier.persistence.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Values are kept JSON-encoded."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def backend_name(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
