"""
Audit Logger

DESIGN DECISION: Every significant store action is logged.
This provides:
1. Traceability of what each execution context did to the shared state
2. A visible trail for swallowed failures (failed saves, bad external writes)
3. A hook for tests to assert on what happened

The audit logger:
- Is synchronous, because store dispatch is synchronous
- Gracefully handles failures (a broken sink never breaks the store)
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Optional

import structlog

from farmledger.config import get_settings
from farmledger.models.audit import AuditEvent, AuditSeverity


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog for local logging.

    Called once at startup by the embedding application. Until it is
    called structlog's defaults apply. Arguments left as None come from
    StoreSettings (FARMLEDGER_LOG_LEVEL, FARMLEDGER_JSON_LOGS).
    """
    if level is None or json_logs is None:
        store_settings = get_settings().store
        level = level or store_settings.log_level
        json_logs = store_settings.json_logs if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditSink(ABC):
    """Destination for audit events besides the local log."""

    @abstractmethod
    def append_event(self, event: AuditEvent) -> None:
        pass


class MemoryAuditSink(AuditSink):
    """Keeps the most recent events in memory (newest last)."""

    def __init__(self, max_events: int = 1000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (structlog)
    2. An optional sink
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        self._sink = sink
        self._logger = structlog.get_logger("farmledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Forwards to the sink if one is configured.

        Returns True if the sink accepted the event (or no sink is configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True
