"""
State Store

The single authoritative in-memory AppState of one execution context.

FLOW (local):
1. dispatch(command) -> reduce against the current state
2. Commit: the new state replaces the old one
3. Save the complete state through the persistence adapter
4. Notify local listeners

FLOW (external):
1. Another context writes the shared key -> the change bus calls us
2. Decode the new document; ignore it if it is unusable
3. Commit it as a full replacement (REPLACE_STATE), without saving

A failed save never rolls back the commit; the store carries on in
memory and the next successful save catches storage up.

KNOWN LIMITATION: last writer wins. A local commit that has not yet been
saved elsewhere can be overwritten by an external replace, and vice
versa. There is no merge.
"""

from typing import Any, Callable, Optional

from farmledger.audit import AuditLogger
from farmledger.config import get_settings
from farmledger.models.audit import AuditEventBuilder
from farmledger.models.commands import ReplaceState, parse_command
from farmledger.models.records import AppState, default_app_state
from farmledger.storage.adapter import PersistenceAdapter
from farmledger.storage.bus import ChangeBus, StorageEvent
from farmledger.store.reducer import reduce


StateListener = Callable[[AppState], None]


class StateStore:
    """
    Owns the live AppState and the only mutation path into it.

    Usage:
        bus = ChangeBus()
        backend = MemoryBackend(bus=bus)
        store = StateStore(PersistenceAdapter(backend), bus=bus)
        store.dispatch(AddTransaction(transaction=t))
        store.get_state()
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        bus: Optional[ChangeBus] = None,
        key: Optional[str] = None,
        default: Optional[AppState] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Load persisted state and attach to the change bus.

        Args:
            adapter: Persistence for this execution context
            bus: Change bus shared with other contexts. If None, external
                writes are never observed.
            key: Storage key. Defaults to the configured storage key.
            default: State to use when nothing usable is persisted
            audit_logger: Defaults to the adapter's logger
        """
        self._adapter = adapter
        self._key = key or get_settings().store.storage_key
        self._audit = audit_logger or adapter.audit_logger
        self._listeners: list[StateListener] = []

        self._state = adapter.load(
            self._key, default if default is not None else default_app_state()
        )

        self._unsubscribe_bus: Optional[Callable[[], None]] = None
        if bus is not None:
            self._unsubscribe_bus = bus.subscribe(
                self._key, self._on_storage_event, self.context_id
            )

    @property
    def key(self) -> str:
        return self._key

    @property
    def context_id(self) -> str:
        return self._adapter.context_id

    def get_state(self) -> AppState:
        """Return the latest committed state."""
        return self._state

    def dispatch(self, command: Any) -> None:
        """
        Apply a command, persist the result and notify listeners.

        Args:
            command: A command model, or a dict with a "type" field

        Raises:
            pydantic.ValidationError: If a dict command is malformed.
                State is untouched in that case.
        """
        command = parse_command(command)
        previous = self._state
        self._state = reduce(previous, command)

        if self._state is previous:
            self._audit.log(AuditEventBuilder.command_ignored(command, self.context_id))
        else:
            self._audit.log(AuditEventBuilder.command_applied(command, self.context_id))

        self._adapter.save(self._key, self._state)

        if self._state is not previous:
            self._notify(self._state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call `listener(state)` after every change, local or external.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Stop observing external writes. Safe to call more than once."""
        if self._unsubscribe_bus is not None:
            self._unsubscribe_bus()
            self._unsubscribe_bus = None

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key != self._key:
            return

        if event.new_value is None:
            self._audit.log(
                AuditEventBuilder.external_ignored(
                    self._key, event.origin, "key removed", self.context_id
                )
            )
            return

        state = self._adapter.decode(event.new_value)
        if state is None:
            self._audit.log(
                AuditEventBuilder.external_ignored(
                    self._key, event.origin, "value is not a valid state document",
                    self.context_id,
                )
            )
            return

        self._state = reduce(self._state, ReplaceState(state=state))
        self._audit.log(
            AuditEventBuilder.external_replace(self._key, event.origin, self.context_id)
        )
        self._notify(self._state)

    def _notify(self, state: AppState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                listener_name = getattr(listener, "__qualname__", repr(listener))
                self._audit.log(
                    AuditEventBuilder.listener_failed(
                        listener=listener_name,
                        error=str(e),
                        context_id=self.context_id,
                    )
                )
