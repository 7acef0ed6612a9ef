"""Storage service interfaces and implementations.

Provides abstract storage interface, a JSON file-based implementation
for persisting client state between runs, and an in-memory
implementation for tests and throwaway sessions.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class IStorageService(ABC):
    """Abstract base class for storage services.

    Defines the interface for saving, loading, and deleting data
    with string keys.
    """

    @abstractmethod
    def save(self, key: str, data: Any) -> None:
        """Save data with the given key.

        Args:
            key: Unique identifier for the data
            data: JSON-serializable data to store
        """
        ...

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Load data for the given key.

        Args:
            key: Unique identifier for the data

        Returns:
            The stored data, or None if not found
        """
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether anything is stored under the key, readable or not."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete data for the given key."""
        ...


class JsonFileStorage(IStorageService):
    """JSON file-based storage implementation.

    Stores each key as a separate JSON file in the specified base directory.
    """

    def __init__(self, base_path: str | Path) -> None:
        """Initialize the JSON file storage.

        Args:
            base_path: Directory path where JSON files will be stored
        """
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._base_path / f"{safe_key}.json"

    def save(self, key: str, data: Any) -> None:
        """Save data to a JSON file.

        Args:
            key: Unique identifier for the data
            data: JSON-serializable data to store

        Raises:
            TypeError: If data is not JSON-serializable
            OSError: If file cannot be written
        """
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(".tmp")
        try:
            # Serialize first so a bad payload never truncates the file
            text = json.dumps(data, indent=2, ensure_ascii=False)
            temp_path.write_text(text, encoding="utf-8")
            temp_path.replace(file_path)
        except (TypeError, ValueError, OSError) as e:
            logger.error(f"Failed to save data for key '{key}': {e}")
            raise

    def load(self, key: str) -> Optional[Any]:
        """Load data from a JSON file.

        Returns:
            The stored data, or None if file doesn't exist or is corrupted.
            Use ``exists`` to tell the two apart.
        """
        file_path = self._get_file_path(key)
        if not file_path.exists():
            return None

        try:
            with file_path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted data for key '{key}': {e}")
            return None
        except OSError as e:
            logger.error(f"Failed to load data for key '{key}': {e}")
            return None

    def exists(self, key: str) -> bool:
        return self._get_file_path(key).exists()

    def delete(self, key: str) -> None:
        file_path = self._get_file_path(key)
        try:
            if file_path.exists():
                file_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete data for key '{key}': {e}")


class MemoryStorage(IStorageService):
    """Dictionary-backed storage.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def save(self, key: str, data: Any) -> None:
        # Match the file backend: reject what JSON cannot represent
        json.dumps(data)
        self._data[key] = copy.deepcopy(data)

    def load(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def exists(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
