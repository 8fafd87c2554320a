"""
File Storage Backend

DESIGN DECISION: One file per key in a data directory.
- Each write goes to a temp file in the same directory and is moved into
  place with os.replace, so readers see the old value or the new one,
  never a partial write.
- Other processes sharing the directory are noticed by polling
  (FileChangeWatcher), which keeps everything single-threaded.

TRADEOFFS:
- No locking: two processes writing the same key race, last replace wins
- Polling latency: external changes surface on the next poll()
"""

import errno
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote

import structlog

from farmledger.storage.bus import EXTERNAL_ORIGIN, ChangeBus, StorageEvent
from farmledger.storage.interface import (
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)


logger = structlog.get_logger("farmledger.storage")

_NO_SPACE_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileBackend(KeyValueBackend):
    """Directory-backed key-value storage."""

    def __init__(self, directory: Path, bus: Optional[ChangeBus] = None):
        super().__init__(bus)
        self._directory = Path(directory)
        # Last value this process wrote per key, used to recognise our own writes
        self._last_written: dict[str, Optional[str]] = {}

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """Map a key to a file name that is safe on every platform."""
        return self._directory / f"{quote(key, safe='')}.json"

    def last_written(self, key: str) -> Optional[str]:
        return self._last_written.get(key)

    def forget_write(self, key: str) -> None:
        """Stop treating the last value this process wrote as its own."""
        self._last_written.pop(key, None)

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {path}: {e}")

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"Stored value for {key!r} is not UTF-8 text: {e}")

    def set_item(self, key: str, value: str, origin: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=".tmp-", suffix=".json"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            if e.errno in _NO_SPACE_ERRNOS:
                raise QuotaExceededError(f"No space left writing {path}: {e}")
            raise StorageUnavailableError(f"Cannot write {path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        self._last_written[key] = value
        self._publish(key, value, origin)

    def remove_item(self, key: str, origin: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageUnavailableError(f"Cannot remove {path}: {e}")

        self._last_written[key] = None
        self._publish(key, None, origin)


class FileChangeWatcher:
    """
    Notices writes to a FileBackend made by other processes.

    Cooperative: the host calls poll() from its own loop. Each changed
    key produces one StorageEvent with EXTERNAL_ORIGIN. Writes made by
    this process are already on the bus and are skipped here.
    """

    def __init__(self, backend: FileBackend, bus: ChangeBus, keys: Iterable[str]):
        self._backend = backend
        self._bus = bus
        self._seen: dict[str, Optional[str]] = {}
        for key in keys:
            self._seen[key] = self._read(key)

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._backend.get_item(key)
        except StorageError as e:
            logger.warning("watch_read_failed", key=key, error=str(e))
            return self._seen.get(key)

    def watch(self, key: str) -> None:
        if key not in self._seen:
            self._seen[key] = self._read(key)

    def poll(self) -> int:
        """
        Check every watched key once.

        Returns:
            Number of events published.
        """
        published = 0
        for key in list(self._seen):
            content = self._read(key)
            if content == self._seen[key]:
                continue
            self._seen[key] = content
            if content is not None and content == self._backend.last_written(key):
                continue
            # Another process has written since; the same bytes may come back from it
            self._backend.forget_write(key)
            self._bus.publish(
                StorageEvent(key=key, new_value=content, origin=EXTERNAL_ORIGIN)
            )
            published += 1
        return published
