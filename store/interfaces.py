# Directory: store/interfaces.py
"""
Interfaces for the key-value persistence collaborator.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StorageBackend(ABC):
    """Base interface for durable snapshot storage."""

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load the payload stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored payload, or None if nothing has been saved yet
        """
        pass

    @abstractmethod
    def save(self, key: str, payload: Dict[str, Any]) -> None:
        """
        Store a payload under a key, replacing any previous value.

        Args:
            key: Storage key
            payload: JSON-serializable snapshot
        """
        pass
