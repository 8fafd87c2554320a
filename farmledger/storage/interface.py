"""
Abstract Storage Interface

DESIGN DECISION: The store persists through a flat key-value interface.
This allows us to:
1. Keep the whole state under one key, replaced in one write
2. Use in-memory storage for testing and for several stores in one process
3. Use a directory of files for real persistence
4. Keep store logic decoupled from where the bytes live

The interface is intentionally tiny - get, set, remove. Anything richer
(transactions, locking, versioning) is deliberately absent; the last
write to a key wins.
"""

from abc import ABC, abstractmethod
from typing import Optional

from farmledger.storage.bus import ChangeBus, StorageEvent


class KeyValueBackend(ABC):
    """
    Abstract interface for the persisted byte store.

    Writes are published on the change bus (if one is attached) so that
    other execution contexts sharing the storage learn about them.
    """

    def __init__(self, bus: Optional[ChangeBus] = None):
        self._bus = bus

    @property
    def bus(self) -> Optional[ChangeBus]:
        """The change bus this backend publishes writes to."""
        return self._bus

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageUnavailableError: If the storage cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str, origin: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Storage key
            value: Complete new value
            origin: Execution context performing the write

        Raises:
            StorageUnavailableError: If the storage cannot be written
            QuotaExceededError: If the value does not fit
        """
        pass

    @abstractmethod
    def remove_item(self, key: str, origin: str) -> None:
        """Delete a key. Removing an absent key is not an error."""
        pass

    def _publish(self, key: str, value: Optional[str], origin: str) -> None:
        if self._bus is not None:
            self._bus.publish(StorageEvent(key=key, new_value=value, origin=origin))


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage facility is missing or cannot be accessed."""
    pass


class QuotaExceededError(StorageError):
    """The value does not fit in the storage quota."""
    pass
