"""
Data Models Package

This package contains all Pydantic models used in Farm Ledger.
All data owned by the store must conform to these schemas.
"""

from farmledger.models.records import (
    AppState,
    Enterprise,
    FarmSettings,
    FarmTask,
    SettingsPatch,
    TaskEnterprise,
    TaskStatus,
    Transaction,
    TransactionKind,
    default_app_state,
)
from farmledger.models.commands import (
    COMMAND_TYPES,
    AddTask,
    AddTransaction,
    Command,
    DeleteTask,
    DeleteTransaction,
    DeleteTransactions,
    ReplaceState,
    UpdateSettings,
    UpdateTask,
    UpdateTransaction,
    parse_command,
)
from farmledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "AppState",
    "Enterprise",
    "FarmSettings",
    "FarmTask",
    "SettingsPatch",
    "TaskEnterprise",
    "TaskStatus",
    "Transaction",
    "TransactionKind",
    "default_app_state",
    # Commands
    "COMMAND_TYPES",
    "AddTask",
    "AddTransaction",
    "Command",
    "DeleteTask",
    "DeleteTransaction",
    "DeleteTransactions",
    "ReplaceState",
    "UpdateSettings",
    "UpdateTask",
    "UpdateTransaction",
    "parse_command",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
