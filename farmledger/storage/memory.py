"""
In-Memory Storage Backend

Shared in-process storage. Several stores attached to the same
MemoryBackend (and the same ChangeBus) behave like several browser tabs
sharing one origin's local storage.

An optional byte quota and an `available` switch make the failure
paths (quota exceeded, storage disabled) reproducible.
"""

from typing import Optional

from farmledger.storage.bus import ChangeBus
from farmledger.storage.interface import (
    KeyValueBackend,
    QuotaExceededError,
    StorageUnavailableError,
)


class MemoryBackend(KeyValueBackend):
    """Dict-backed key-value storage."""

    def __init__(
        self,
        bus: Optional[ChangeBus] = None,
        quota_bytes: Optional[int] = None,
    ):
        super().__init__(bus)
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Memory storage is disabled")

    def _size_with(self, key: str, value: str) -> int:
        total = len(value.encode("utf-8"))
        for other_key, other_value in self._items.items():
            if other_key != key:
                total += len(other_value.encode("utf-8"))
        return total

    def get_item(self, key: str) -> Optional[str]:
        self._check_available()
        return self._items.get(key)

    def set_item(self, key: str, value: str, origin: str) -> None:
        self._check_available()
        if self._quota_bytes is not None:
            size = self._size_with(key, value)
            if size > self._quota_bytes:
                raise QuotaExceededError(
                    f"Writing {key!r} needs {size} bytes, quota is {self._quota_bytes}"
                )
        self._items[key] = value
        self._publish(key, value, origin)

    def remove_item(self, key: str, origin: str) -> None:
        self._check_available()
        if self._items.pop(key, None) is not None:
            self._publish(key, None, origin)

    def keys(self) -> list[str]:
        return list(self._items)
