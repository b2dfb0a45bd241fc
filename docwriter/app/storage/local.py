"""Local key-value storage - JSON values keyed by string, persisted to one file."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Keys used by the editing session
ROWS_KEY = "document-rows"
SAVED_DOCUMENTS_KEY = "saved-documents"
CURRENT_DOCUMENT_ID_KEY = "current-document-id"


class LocalStorageError(Exception):
    """Raised when local storage cannot be read or written."""


class KeyValueStorage(Protocol):
    """Synchronous key -> JSON value storage."""

    def get_item(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or default when the key is absent.

        Raises:
            LocalStorageError: If the stored state cannot be read
        """
        ...

    def set_item(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value.

        Raises:
            LocalStorageError: If the value cannot be written
        """
        ...

    def set_items(self, items: dict[str, Any]) -> None:
        """Store several values in one write; on failure none of them is stored.

        Raises:
            LocalStorageError: If the values cannot be written
        """
        ...


class InMemoryStorage:
    """KeyValueStorage kept in a dict; values are round-tripped through JSON."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._items: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set_item(key, value)

    def get_item(self, key: str, default: Any = None) -> Any:
        """Return the stored value or default."""
        raw = self._items.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set_item(self, key: str, value: Any) -> None:
        """Store a value."""
        self.set_items({key: value})

    def set_items(self, items: dict[str, Any]) -> None:
        """Store several values; nothing is stored if any of them fails to serialize."""
        encoded: dict[str, str] = {}
        for key, value in items.items():
            try:
                encoded[key] = json.dumps(value)
            except (TypeError, ValueError) as e:
                raise LocalStorageError(f"Cannot serialize value for key '{key}': {e}") from e
        self._items.update(encoded)


class JsonFileStorage:
    """KeyValueStorage backed by a single JSON object on disk.

    The whole file is rewritten, through a temporary file, on every write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def get_item(self, key: str, default: Any = None) -> Any:
        """Return the stored value or default."""
        return self._read_all().get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        """Store a value and flush the file."""
        self.set_items({key: value})

    def set_items(self, items: dict[str, Any]) -> None:
        """Store several values with a single file write."""
        data = self._read_all()
        data.update(items)
        keys = ", ".join(items)

        try:
            payload = json.dumps(data, indent=2)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error setting local storage keys '{keys}': {e}")
            raise LocalStorageError(f"Cannot write local storage keys '{keys}': {e}") from e

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading local storage file {self._path}: {e}")
            raise LocalStorageError(f"Cannot read local storage: {e}") from e

        if not isinstance(data, dict):
            raise LocalStorageError(f"Corrupted local storage: expected an object in {self._path}")

        return data
