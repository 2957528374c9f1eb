"""
Storage backends for workforce snapshots.
"""
import json
import os
import re
import tempfile
from copy import deepcopy
from typing import Any, Dict, Optional

from config import StorageConfig
from exceptions.custom_errors import PersistenceError
from store.interfaces import StorageBackend
from utils.logger import logger


class MemoryStorage(StorageBackend):
    """Dict-backed storage, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._data: Dict[str, Dict[str, Any]] = deepcopy(initial) if initial else {}
        self.save_count = 0

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        payload = self._data.get(key)
        return deepcopy(payload) if payload is not None else None

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        self._data[key] = deepcopy(payload)
        self.save_count += 1


class JsonFileStorage(StorageBackend):
    """
    Storage that keeps one ``<key>.json`` file per key in a directory.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write never leaves a truncated snapshot.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, key: str) -> str:
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", key):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read snapshot from {path}: {e}") from e
        if not isinstance(payload, dict):
            raise PersistenceError(f"Snapshot in {path} is not a JSON object")
        return payload

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.directory, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write snapshot to {path}: {e}") from e
        logger.debug(f"Snapshot saved to {path}")


def create_storage(config: StorageConfig) -> StorageBackend:
    """Build the storage backend named in the configuration."""
    if config.backend == "memory":
        return MemoryStorage()
    if config.backend == "json":
        return JsonFileStorage(config.data_dir)
    raise ValueError(f"Unknown storage backend: {config.backend!r}")
