# ==============================================================================
# Key-Value Storage Abstract Base Class
# ==============================================================================
"""
Abstract interface for durable key-value storage.

This is the analogue of a page's local storage: string keys, string values,
no expiry. Used to persist the visitor identifier across sessions and
page loads.

Implementations: in-memory, JSON file, Valkey.
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """
    Durable string key-value storage.

    Implementations raise StorageError when the backing store cannot be
    reached; they never raise library-specific exceptions.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read a stored value.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if not found
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Storage key
            value: String value to store
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: Storage key to delete

        Returns:
            True if key was deleted, False if not found
        """
        ...
