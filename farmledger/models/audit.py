"""
Audit Models for Farm Ledger

Every significant thing that happens to the store is logged:
commands applied or ignored, saves, load fallbacks, and external
replacements arriving from other execution contexts.

DESIGN DECISION: Audit events are plain data. Where they go
(console, memory, elsewhere) is decided by the AuditLogger and its sink.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Commands
    COMMAND_APPLIED = "command_applied"
    COMMAND_IGNORED = "command_ignored"

    # Persistence
    STATE_LOADED = "state_loaded"
    LOAD_FALLBACK = "load_fallback"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"

    # Change bus
    EXTERNAL_REPLACE = "external_replace"
    EXTERNAL_IGNORED = "external_ignored"
    LISTENER_FAILED = "listener_failed"

    # Insights collaborator
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FAILED = "insights_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which store and which record?
    context_id: Optional[str] = Field(
        default=None,
        description="Execution context (store instance) that produced the event"
    )
    storage_key: Optional[str] = None
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'task', 'settings')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "context_id": self.context_id,
            "storage_key": self.storage_key,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


# Command type -> (entity_type, attribute holding the entity id)
_COMMAND_ENTITIES = {
    "ADD_TRANSACTION": ("transaction", "transaction.id"),
    "UPDATE_TRANSACTION": ("transaction", "transaction.id"),
    "DELETE_TRANSACTION": ("transaction", "transaction_id"),
    "DELETE_TRANSACTIONS": ("transaction", None),
    "ADD_TASK": ("task", "task.id"),
    "UPDATE_TASK": ("task", "task.id"),
    "DELETE_TASK": ("task", "task_id"),
    "UPDATE_SETTINGS": ("settings", None),
    "REPLACE_STATE": ("state", None),
}


def _command_entity(command: Any) -> tuple[Optional[str], Optional[str]]:
    entity_type, path = _COMMAND_ENTITIES.get(command.type, (None, None))
    if path is None:
        return entity_type, None
    value = command
    for part in path.split("."):
        value = getattr(value, part)
    return entity_type, value


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.command_applied(command, context_id)
        event = AuditEventBuilder.save_failed(key, error, context_id)
    """

    @staticmethod
    def command_applied(command: Any, context_id: str) -> AuditEvent:
        entity_type, entity_id = _command_entity(command)
        return AuditEvent(
            event_type=AuditEventType.COMMAND_APPLIED,
            context_id=context_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Command applied: {command.type}",
            details={"command": command.type},
        )

    @staticmethod
    def command_ignored(command: Any, context_id: str) -> AuditEvent:
        entity_type, entity_id = _command_entity(command)
        return AuditEvent(
            event_type=AuditEventType.COMMAND_IGNORED,
            severity=AuditSeverity.DEBUG,
            context_id=context_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Command left state unchanged: {command.type}",
            details={"command": command.type},
        )

    @staticmethod
    def state_loaded(key: str, transaction_count: int, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            context_id=context_id,
            storage_key=key,
            description=f"State loaded with {transaction_count} transactions",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def load_fallback(key: str, reason: str, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FALLBACK,
            severity=AuditSeverity.WARNING,
            context_id=context_id,
            storage_key=key,
            description="Persisted state unusable, default state substituted",
            error_message=reason,
        )

    @staticmethod
    def state_saved(key: str, size: int, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            context_id=context_id,
            storage_key=key,
            description=f"State saved ({size} bytes)",
            details={"size": size},
        )

    @staticmethod
    def save_failed(key: str, error: str, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            context_id=context_id,
            storage_key=key,
            description="Save failed, continuing in memory-only mode",
            error_message=error,
        )

    @staticmethod
    def external_replace(key: str, origin: str, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_REPLACE,
            context_id=context_id,
            storage_key=key,
            description=f"State replaced by external write from {origin}",
            details={"origin": origin},
        )

    @staticmethod
    def external_ignored(key: str, origin: str, reason: str, context_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_IGNORED,
            severity=AuditSeverity.WARNING,
            context_id=context_id,
            storage_key=key,
            description=f"External write from {origin} ignored",
            details={"origin": origin},
            error_message=reason,
        )

    @staticmethod
    def listener_failed(listener: str, error: str, context_id: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LISTENER_FAILED,
            severity=AuditSeverity.ERROR,
            context_id=context_id,
            description=f"Listener failed: {listener}",
            details={"listener": listener},
            error_message=error,
        )

    @staticmethod
    def insights_generated(transaction_count: int, model_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            description=f"Insights generated for {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "model_name": model_name,
            },
        )

    @staticmethod
    def insights_failed(transaction_count: int, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_FAILED,
            severity=AuditSeverity.WARNING,
            description="Insights generation failed, no-data message returned",
            details={"transaction_count": transaction_count},
            error_message=error,
        )
