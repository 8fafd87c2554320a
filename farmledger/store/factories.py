"""Factory functions for wiring a store to its storage."""

from pathlib import Path
from typing import Optional

from farmledger.audit import AuditLogger
from farmledger.config import get_settings
from farmledger.storage.adapter import PersistenceAdapter
from farmledger.storage.bus import ChangeBus
from farmledger.storage.filesystem import FileBackend, FileChangeWatcher
from farmledger.storage.memory import MemoryBackend
from farmledger.store.state_store import StateStore


def create_file_store(
    data_dir: Optional[Path] = None,
    key: Optional[str] = None,
    bus: Optional[ChangeBus] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[StateStore, FileChangeWatcher]:
    """Create a store persisted to a directory of files.

    Args:
        data_dir: Storage directory. If None, uses the configured data_dir
            (FARMLEDGER_DATA_DIR, default ./.farmledger).
        key: Storage key. If None, uses the configured storage key.
        bus: Change bus to share with other stores in this process. A new
            one is created if None.
        audit_logger: Shared audit logger

    Returns:
        The store, and a watcher whose poll() surfaces writes made by
        other processes.
    """
    store_settings = get_settings().store
    data_dir = Path(data_dir) if data_dir is not None else store_settings.data_dir
    key = key or store_settings.storage_key
    bus = bus or ChangeBus(audit_logger)

    backend = FileBackend(data_dir, bus=bus)
    store = StateStore(
        PersistenceAdapter(backend, audit_logger=audit_logger),
        bus=bus,
        key=key,
    )
    watcher = FileChangeWatcher(backend, bus, [key])
    return store, watcher


def create_memory_store(
    backend: Optional[MemoryBackend] = None,
    bus: Optional[ChangeBus] = None,
    key: Optional[str] = None,
    context_id: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> StateStore:
    """Create a store on in-memory storage.

    Pass the same backend to several calls to get several stores
    sharing one storage, the way browser tabs share local storage.
    """
    if backend is None:
        bus = bus or ChangeBus(audit_logger)
        backend = MemoryBackend(bus=bus)
    else:
        bus = bus or backend.bus
    return StateStore(
        PersistenceAdapter(backend, context_id=context_id, audit_logger=audit_logger),
        bus=bus,
        key=key,
    )
