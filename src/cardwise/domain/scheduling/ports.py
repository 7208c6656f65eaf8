"""
Ports (interfaces) for card persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """
    Port for the client-side key-value store that holds card records.

    Implementations:
        - JsonFileStore: A single JSON document on disk.
        - InMemoryStore: A plain dict, for tests and speculative use.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """
        Return the value stored under ``key``, or None if absent.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Store a JSON-compatible ``value`` under ``key``, replacing any previous value.
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete ``key``. Removing a missing key is a no-op.
        """
        pass
