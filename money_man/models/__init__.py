"""
Data Models Package

This package contains all Pydantic models used by the Money Man ledger engine.
All data flowing through the engine must conform to these schemas.
"""

from money_man.models.ledger import (
    FIELD_DELIMITER,
    NAME_DELIMITER,
    ErrorKind,
    OperationResult,
    Session,
    SessionState,
    TableRef,
    Transaction,
    ValidationIssue,
    ValidationResult,
)
from money_man.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "FIELD_DELIMITER",
    "NAME_DELIMITER",
    "ErrorKind",
    "OperationResult",
    "Session",
    "SessionState",
    "TableRef",
    "Transaction",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
