"""State store package."""

from farmledger.store.reducer import reduce
from farmledger.store.state_store import StateListener, StateStore
from farmledger.store.factories import create_file_store, create_memory_store

__all__ = [
    "StateListener",
    "StateStore",
    "create_file_store",
    "create_memory_store",
    "reduce",
]
