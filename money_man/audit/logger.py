"""
Audit Logger

DESIGN DECISION: Every mutation of ledger data is logged.
This provides:
1. Traceability of every change to financial records
2. Debugging capability
3. A record of confirmed and declined creations

The audit logger:
- Never writes to the ledger files
- Never raises: a logging failure must not undo a completed mutation
- Emits nothing until the host application configures logging

Library modules never attach handlers. They call get_logger(__name__)
and rely on configure_logging() being called once by the entry point.
"""

import logging
from typing import IO, Any, Callable, Optional, Union

import structlog

from money_man.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


_PKG_LOGGER_NAME = "money_man"
_CONFIGURED = False

_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog(json_output: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers pick up a later configure_logging() call.
        cache_logger_on_first_use=False,
    )


# Route structlog through the standard library from the first import on,
# so nothing reaches stdout before the host application decides.
_configure_structlog()


def configure_logging(
    level: Union[int, str] = "INFO",
    json_output: bool = True,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Attach a single stream handler to the package root logger.

    Called once by create_app_components() with the configured level and
    renderer; later calls are ignored. The stream defaults to stderr.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, logging.NullHandler):
            pkg_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    pkg_logger.setLevel(level)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False

    structlog.reset_defaults()
    _configure_structlog(json_output)

    _CONFIGURED = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module of this package."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Turns AuditEvents into structured log records. Events are built
    inside the guarded section too, so no argument can make auditing
    raise into a flow after its mutation is persisted.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or get_logger("money_man.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the record was handed to the logger.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            logging.getLogger(_PKG_LOGGER_NAME).exception(
                "audit logging failed for event %s", log_dict["event_id"]
            )
            return False
        return True

    def _emit(self, build: Callable[..., AuditEvent], *args: Any, **kwargs: Any) -> bool:
        try:
            event = build(*args, **kwargs)
        except Exception:
            logging.getLogger(_PKG_LOGGER_NAME).exception(
                "audit event %s could not be built", build.__name__
            )
            return False
        return self.log(event)

    def log_account_created(self, account: str) -> bool:
        return self._emit(AuditEventBuilder.account_created, account)

    def log_account_selected(self, account: str) -> bool:
        return self._emit(AuditEventBuilder.account_selected, account)

    def log_tag_created(self, tag: str) -> bool:
        return self._emit(AuditEventBuilder.tag_created, tag)

    def log_table_created(self, account: str, table: str) -> bool:
        return self._emit(AuditEventBuilder.table_created, account, table)

    def log_table_selected(self, account: str, table: str) -> bool:
        return self._emit(AuditEventBuilder.table_selected, account, table)

    def log_transaction_added(
        self,
        account: str,
        table: str,
        transaction_id: int,
        tag: str,
    ) -> bool:
        return self._emit(
            AuditEventBuilder.transaction_added, account, table, transaction_id, tag
        )

    def log_transaction_removed(
        self,
        account: str,
        table: str,
        transaction_id: int,
    ) -> bool:
        return self._emit(
            AuditEventBuilder.transaction_removed, account, table, transaction_id
        )

    def log_table_exported(self, account: str, table: str, destination: str) -> bool:
        return self._emit(AuditEventBuilder.table_exported, account, table, destination)

    def log_table_imported(
        self,
        account: str,
        table: str,
        source: str,
        assigned_ids: list[int],
    ) -> bool:
        return self._emit(
            AuditEventBuilder.table_imported, account, table, source, assigned_ids
        )

    def log_creation_declined(self, kind: str, name: str) -> bool:
        return self._emit(AuditEventBuilder.creation_declined, kind, name)

    def log_operation_failed(
        self,
        operation: str,
        error_kind: str,
        error_message: str,
        account: Optional[str] = None,
        table: Optional[str] = None,
    ) -> bool:
        """Log a failed operation."""
        return self._emit(
            AuditEventBuilder.operation_failed,
            operation=operation,
            error_kind=error_kind,
            error_message=error_message,
            account=account,
            table=table,
        )
