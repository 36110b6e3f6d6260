"""
Audit Models for Money Man

Every mutation of ledger data is recorded as an audit event.
This provides:
1. Traceability of every change to financial records
2. Debugging information when things go wrong
3. A record of which creations the user confirmed or declined

DESIGN DECISION: Audit events are emitted through the structured logger
only. The ledger files stay exactly in the documented format.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Registries
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_SELECTED = "account_selected"
    TAG_CREATED = "tag_created"

    # Tables
    TABLE_CREATED = "table_created"
    TABLE_SELECTED = "table_selected"

    # Records
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REMOVED = "transaction_removed"

    # Transfers
    TABLE_EXPORTED = "table_exported"
    TABLE_IMPORTED = "table_imported"

    # Confirmation
    CREATION_DECLINED = "creation_declined"

    # Failures
    OPERATION_FAILED = "operation_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every state change and every failed operation creates one of these.
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
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which ledger is this about?
    account: Optional[str] = None
    table: Optional[str] = None

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by an explicit user decision?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "account": self.account,
            "table": self.table,
            "description": self.description,
            "details": self.details,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created("main")
        event = AuditEventBuilder.transaction_added("main", "2024-03", 7, "groceries")
    """

    @staticmethod
    def account_created(account: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            account=account,
            description=f"Account created: {account}",
            is_user_action=True,
        )

    @staticmethod
    def account_selected(account: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_SELECTED,
            severity=AuditSeverity.DEBUG,
            account=account,
            description=f"Account selected: {account}",
        )

    @staticmethod
    def tag_created(tag: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TAG_CREATED,
            description=f"Tag created: {tag}",
            details={"tag": tag},
            is_user_action=True,
        )

    @staticmethod
    def table_created(account: str, table: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TABLE_CREATED,
            account=account,
            table=table,
            description=f"Table created: {account}/{table}",
            is_user_action=True,
        )

    @staticmethod
    def table_selected(account: str, table: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TABLE_SELECTED,
            severity=AuditSeverity.DEBUG,
            account=account,
            table=table,
            description=f"Table selected: {account}/{table}",
        )

    @staticmethod
    def transaction_added(
        account: str,
        table: str,
        transaction_id: int,
        tag: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            account=account,
            table=table,
            description=f"Transaction {transaction_id} added",
            details={"id": transaction_id, "tag": tag},
        )

    @staticmethod
    def transaction_removed(
        account: str,
        table: str,
        transaction_id: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVED,
            account=account,
            table=table,
            description=f"Transaction {transaction_id} removed",
            details={"id": transaction_id},
        )

    @staticmethod
    def table_exported(account: str, table: str, destination: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TABLE_EXPORTED,
            account=account,
            table=table,
            description=f"Table exported to {destination}",
            details={"destination": destination},
        )

    @staticmethod
    def table_imported(
        account: str,
        table: str,
        source: str,
        assigned_ids: list[int],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TABLE_IMPORTED,
            account=account,
            table=table,
            description=f"Imported {len(assigned_ids)} records from {source}",
            details={
                "source": source,
                "record_count": len(assigned_ids),
                "first_id": assigned_ids[0] if assigned_ids else None,
                "last_id": assigned_ids[-1] if assigned_ids else None,
            },
        )

    @staticmethod
    def creation_declined(kind: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREATION_DECLINED,
            description=f"Creation of {kind} '{name}' declined",
            details={"kind": kind, "name": name},
            is_user_action=True,
        )

    @staticmethod
    def operation_failed(
        operation: str,
        error_kind: str,
        error_message: str,
        account: Optional[str] = None,
        table: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_FAILED,
            severity=AuditSeverity.WARNING,
            account=account,
            table=table,
            description=f"Operation failed: {operation}",
            details={"operation": operation},
            error_kind=error_kind,
            error_message=error_message,
        )
