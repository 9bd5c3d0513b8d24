"""
Synchronous, string-keyed key-value storage.
The cache codec is the only caller; it knows nothing about where values live.
"""
import json
import logging
from abc import ABC, abstractmethod
from hashlib import sha1
from pathlib import Path
from typing import Callable, Dict, List, Optional

from placecache.core.errors import StorageFailure
from placecache.core.logger import logs


class BaseStorageAdapter(ABC):
    """Base class for all key-value storage backends"""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent"""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key if present"""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return every stored key"""

    def remove_all(self, predicate: Callable[[str], bool]) -> int:
        """Remove every key matching predicate, returning how many were removed."""
        removed = 0
        for key in self.keys():
            if predicate(key):
                self.remove(key)
                removed += 1
        return removed


class InMemoryStorageAdapter(BaseStorageAdapter):
    """Dict-backed storage, for tests and non-persistent targets."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageFailure(f"Refusing to store non-string value for '{key}'")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class FileStorageAdapter(BaseStorageAdapter):
    """
    One JSON file per key under a directory.
    The original key is stored inside the file so keys() survives sanitizing.
    """

    def __init__(self, base_dir: str = "data/cache"):
        self.base_dir = Path(base_dir)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailure(f"Cannot create cache directory {self.base_dir}: {str(e)}")
        logs.log(logging.INFO, f"File storage initialized at {self.base_dir}")

    def _get_file(self, key: str) -> Path:
        """Get the file path for a key."""
        # Sanitize key for filename, suffix keeps distinct keys distinct
        safe_key = key.replace(":", "_").replace("/", "_")
        digest = sha1(key.encode("utf-8")).hexdigest()[:8]
        return self.base_dir / f"{safe_key}.{digest}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._get_file(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)["value"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageFailure(f"Failed to read '{key}': {str(e)}")

    def write(self, key: str, value: str) -> None:
        try:
            with open(self._get_file(key), "w", encoding="utf-8") as f:
                json.dump({"key": key, "value": value}, f)
        except (OSError, TypeError) as e:
            raise StorageFailure(f"Failed to write '{key}': {str(e)}")

    def remove(self, key: str) -> None:
        try:
            self._get_file(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageFailure(f"Failed to remove '{key}': {str(e)}")

    def keys(self) -> List[str]:
        """Keys of every readable file. Unreadable files are logged and skipped."""
        try:
            paths = list(self.base_dir.glob("*.json"))
        except OSError as e:
            raise StorageFailure(f"Failed to list keys: {str(e)}")

        found = []
        for path in paths:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    key = json.load(f)["key"]
            except (OSError, ValueError, KeyError, TypeError) as e:
                logs.log(logging.WARNING, f"Skipping unreadable cache file {path.name}: {str(e)}")
                continue
            if isinstance(key, str):
                found.append(key)
        return found
