"""
Persistence Adapter

Turns a flat key-value backend into load/save of the whole AppState.

GUARANTEES:
- load never raises: absent, unparseable or invalid content and an
  unavailable backend all yield the caller's default
- save never raises: failures are logged and reported as False
- save writes the complete state as one value under one key
"""

from typing import Optional
from uuid import uuid4

from pydantic import ValidationError

from farmledger.audit import AuditLogger
from farmledger.models.audit import AuditEventBuilder
from farmledger.models.records import AppState
from farmledger.storage.interface import KeyValueBackend, StorageError


class PersistenceAdapter:
    """
    JSON persistence of AppState for one execution context.

    The adapter carries the context id so that every write it makes is
    tagged with its origin on the change bus.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        context_id: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._context_id = context_id or uuid4().hex
        self._audit = audit_logger or AuditLogger()

    @property
    def context_id(self) -> str:
        return self._context_id

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    @staticmethod
    def decode(raw: str) -> Optional[AppState]:
        """Parse a persisted document. Returns None if it is not a valid AppState."""
        try:
            return AppState.model_validate_json(raw)
        except ValidationError:
            return None

    def load(self, key: str, default: AppState) -> AppState:
        """
        Load the state stored under `key`.

        Returns `default` if nothing usable is stored.
        """
        try:
            raw = self._backend.get_item(key)
        except StorageError as e:
            self._audit.log(
                AuditEventBuilder.load_fallback(key, str(e), self._context_id)
            )
            return default

        if raw is None:
            return default

        state = self.decode(raw)
        if state is None:
            self._audit.log(
                AuditEventBuilder.load_fallback(
                    key, "stored value is not a valid state document", self._context_id
                )
            )
            return default

        self._audit.log(
            AuditEventBuilder.state_loaded(key, len(state.transactions), self._context_id)
        )
        return state

    def save(self, key: str, state: AppState) -> bool:
        """
        Persist the complete state under `key`.

        Returns True on success. On failure the error is logged and
        False is returned; nothing is raised.
        """
        try:
            payload = state.to_json()
            self._backend.set_item(key, payload, origin=self._context_id)
        except Exception as e:
            self._audit.log(
                AuditEventBuilder.save_failed(key, str(e), self._context_id)
            )
            return False

        self._audit.log(
            AuditEventBuilder.state_saved(key, len(payload), self._context_id)
        )
        return True
