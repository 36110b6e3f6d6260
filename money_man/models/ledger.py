"""
Core Data Models for Money Man

These models define the schemas for everything the ledger engine
handles. They are designed to:
1. Keep persisted text fields safe for the delimited table format
2. Provide clear validation error messages
3. Make the shell session an explicit value instead of ambient state
4. Give the shell layer one structured result shape per operation

DESIGN DECISION: Amounts and dates stay free text.
The ledger stores what the user typed; it does not interpret money
or calendars. Ordering by date is a plain string comparison.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# Field delimiter of table rows. Never escaped, so never allowed inside a field.
FIELD_DELIMITER = ","

# Joins account and table names into a table file name.
NAME_DELIMITER = "-"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ErrorKind(str, Enum):
    """
    Every way an engine operation can fail.

    Each failed OperationResult carries exactly one of these.
    """
    INVALID_ARGUMENT = "invalid_argument"   # Wrong arity/shape of a request
    NOT_FOUND = "not_found"                 # Unknown account/table/tag/id/file
    ALREADY_EXISTS = "already_exists"       # Duplicate creation attempt
    UNKNOWN_TAG = "unknown_tag"             # Tag missing from the registry on add
    MALFORMED_RECORD = "malformed_record"   # Unparseable persisted line
    IO_ERROR = "io_error"                   # Filesystem failure


class SessionState(str, Enum):
    """
    Shell session states.

    NO_ACCOUNT -> ACCOUNT_SELECTED -> TABLE_SELECTED.
    Selecting another account goes back to ACCOUNT_SELECTED.
    """
    NO_ACCOUNT = "no_account"
    ACCOUNT_SELECTED = "account_selected"
    TABLE_SELECTED = "table_selected"


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    One financial record of a ledger table.

    Identifiers are unique within a table and never renumbered.
    The tag is a soft reference by name into the tag registry; it is
    checked when the record is added, never afterwards.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=0,
        description="Identifier, unique within its table"
    )
    description: str = Field(
        default="",
        description="Free text description"
    )
    amount: str = Field(
        default="",
        description="Amount as typed (not validated as a number)"
    )
    tag: str = Field(
        default="",
        description="Tag name"
    )
    date: str = Field(
        default="",
        description="Date as typed (not validated as a calendar date)"
    )

    @field_validator('description', 'amount', 'tag', 'date')
    @classmethod
    def validate_storable(cls, v: str) -> str:
        """Reject text that would break the one-line, comma-delimited row."""
        if FIELD_DELIMITER in v:
            raise ValueError(f"Field must not contain '{FIELD_DELIMITER}': {v!r}")
        if "\n" in v or "\r" in v:
            raise ValueError(f"Field must not contain a line break: {v!r}")
        return v


class TableRef(BaseModel):
    """Address of one ledger table: (account name, table name)."""
    model_config = ConfigDict(frozen=True)

    account: str = Field(..., min_length=1)
    table: str = Field(..., min_length=1)

    def file_name(self, suffix: str = ".csv") -> str:
        """Flat file name of the table inside the project directory."""
        return f"{self.account}{NAME_DELIMITER}{self.table}{suffix}"

    def __str__(self) -> str:
        return f"{self.account}/{self.table}"


# =============================================================================
# SESSION
# =============================================================================

class Session(BaseModel):
    """
    Explicit session context owned by the shell layer.

    The engine keeps no state between calls; every call receives the
    session, and selection calls return a new one.
    """
    model_config = ConfigDict(frozen=True)

    account: Optional[str] = None
    table: Optional[str] = None

    @model_validator(mode='after')
    def validate_selection(self) -> 'Session':
        if self.table is not None and self.account is None:
            raise ValueError("A table cannot be selected without an account")
        return self

    @property
    def state(self) -> SessionState:
        if self.account is None:
            return SessionState.NO_ACCOUNT
        if self.table is None:
            return SessionState.ACCOUNT_SELECTED
        return SessionState.TABLE_SELECTED

    @property
    def table_ref(self) -> Optional[TableRef]:
        if self.state != SessionState.TABLE_SELECTED:
            return None
        return TableRef(account=self.account, table=self.table)

    @property
    def label(self) -> str:
        """Prompt text, e.g. '[main/2024-03]' or '[none/none]'."""
        return f"[{self.account or 'none'}/{self.table or 'none'}]"

    def with_account(self, account: str) -> 'Session':
        """Select an account; any selected table is cleared."""
        return Session(account=account)

    def with_table(self, table: str) -> 'Session':
        """Select a table of the current account."""
        return Session(account=self.account, table=table)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field or argument with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'forbidden_character', 'arity')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of checking one request before anything is persisted."""

    subject: str = Field(
        ...,
        description="What was validated (e.g., 'account name', 'add arguments')"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def summary(self) -> str:
        return "; ".join(issue.message for issue in self.issues)


# =============================================================================
# OPERATION RESULTS
# =============================================================================

class OperationResult(BaseModel):
    """
    Result of one engine operation.

    Discriminates success from exactly one ErrorKind. The shell layer
    presents the message; the engine itself never prints.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    operation: str
    success: bool
    value: Any = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @model_validator(mode='after')
    def validate_outcome(self) -> 'OperationResult':
        if self.success and self.error_kind is not None:
            raise ValueError("A successful result cannot carry an error kind")
        if not self.success and self.error_kind is None:
            raise ValueError("A failed result must carry an error kind")
        return self

    @classmethod
    def ok(cls, operation: str, value: Any = None) -> 'OperationResult':
        return cls(operation=operation, success=True, value=value)

    @classmethod
    def failed(
        cls,
        operation: str,
        error_kind: ErrorKind,
        error_message: str,
    ) -> 'OperationResult':
        return cls(
            operation=operation,
            success=False,
            error_kind=error_kind,
            error_message=error_message,
        )
