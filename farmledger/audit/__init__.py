"""Audit logging package."""

from farmledger.audit.logger import (
    AuditLogger,
    AuditSink,
    MemoryAuditSink,
    configure_logging,
)

__all__ = ["AuditLogger", "AuditSink", "MemoryAuditSink", "configure_logging"]
