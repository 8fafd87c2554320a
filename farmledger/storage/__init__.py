"""
Storage Package

Provides the flat key-value storage interface, its in-memory and file
implementations, the change bus that reports writes to other execution
contexts, and the adapter that persists the whole AppState.
"""

from farmledger.storage.bus import (
    EXTERNAL_ORIGIN,
    ChangeBus,
    StorageEvent,
    StorageListener,
)
from farmledger.storage.interface import (
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)
from farmledger.storage.memory import MemoryBackend
from farmledger.storage.filesystem import FileBackend, FileChangeWatcher
from farmledger.storage.adapter import PersistenceAdapter

__all__ = [
    # Change bus
    "EXTERNAL_ORIGIN",
    "ChangeBus",
    "StorageEvent",
    "StorageListener",
    # Interface
    "KeyValueBackend",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "FileBackend",
    "FileChangeWatcher",
    "MemoryBackend",
    "PersistenceAdapter",
]
