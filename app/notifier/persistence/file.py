"""JSON file key/value store.

All keys live in one JSON document. Writes go to a temporary file in the
same directory and are moved into place with ``os.replace`` so a crash never
leaves a half-written document behind.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from notifier.logging import get_module_logger
from notifier.persistence.base import KeyValueStore

logger = get_module_logger()


class JsonFileKeyValueStore(KeyValueStore):
    """Key/value store backed by a single JSON file.

    Args:
        path: Location of the JSON document. Parent directories are created
            on first write.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    @property
    def backend_name(self) -> str:
        return "file"

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        if not content.strip():
            return {}
        document = json.loads(content)
        if not isinstance(document, dict):
            raise ValueError(f"State file {self.path} does not hold a JSON object")
        return document

    def _write_document(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read_document().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            try:
                document = self._read_document()
            except ValueError:
                logger.warning("state_file_corrupt_overwriting", path=str(self.path))
                document = {}
            document[key] = value
            self._write_document(document)

    def delete(self, key: str) -> None:
        with self._lock:
            document = self._read_document()
            if key in document:
                del document[key]
                self._write_document(document)
