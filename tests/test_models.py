"""
Tests for Money Man

Test strategy:
1. Unit tests for individual components (models, codec, validators)
2. Flow tests against a temporary project directory
3. No interactive input in tests (confirmation callbacks are stubs)
"""

import pytest

from money_man.models.ledger import (
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


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            id=1,
            description="Coffee",
            amount="3.50",
            tag="food",
            date="2024-03-01",
        )
        assert transaction.id == 1
        assert transaction.amount == "3.50"

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        transaction = Transaction(id=1, description="  Coffee  ", tag=" food ")
        assert transaction.description == "Coffee"
        assert transaction.tag == "food"

    def test_transaction_rejects_negative_id(self):
        """Test that identifiers are non-negative."""
        with pytest.raises(ValueError):
            Transaction(id=-1, description="Coffee")

    def test_transaction_rejects_delimiter(self):
        """Test that a comma cannot be stored in a field."""
        with pytest.raises(ValueError, match="must not contain ','"):
            Transaction(id=1, description="Coffee, large")

    def test_transaction_rejects_line_break(self):
        """Test that a field cannot span lines."""
        with pytest.raises(ValueError, match="line break"):
            Transaction(id=1, description="Coffee\nTea")

    def test_amount_and_date_are_free_text(self):
        """Test that amount and date are not interpreted."""
        transaction = Transaction(id=1, amount="twelve", date="yesterday")
        assert transaction.amount == "twelve"
        assert transaction.date == "yesterday"


class TestTableRef:
    """Tests for TableRef."""

    def test_file_name(self):
        ref = TableRef(account="main", table="2024_03")
        assert ref.file_name() == "main-2024_03.csv"
        assert ref.file_name(".txt") == "main-2024_03.txt"
        assert str(ref) == "main/2024_03"

    def test_empty_names_rejected(self):
        with pytest.raises(ValueError):
            TableRef(account="", table="2024_03")


class TestSession:
    """Tests for the explicit session context."""

    def test_initial_state(self):
        session = Session()
        assert session.state == SessionState.NO_ACCOUNT
        assert session.table_ref is None
        assert session.label == "[none/none]"

    def test_account_then_table(self):
        session = Session().with_account("main")
        assert session.state == SessionState.ACCOUNT_SELECTED
        session = session.with_table("2024_03")
        assert session.state == SessionState.TABLE_SELECTED
        assert session.table_ref == TableRef(account="main", table="2024_03")
        assert session.label == "[main/2024_03]"

    def test_new_account_clears_table(self):
        session = Session(account="main", table="2024_03").with_account("savings")
        assert session == Session(account="savings")
        assert session.state == SessionState.ACCOUNT_SELECTED

    def test_table_without_account_rejected(self):
        with pytest.raises(ValueError, match="without an account"):
            Session(table="2024_03")

    def test_session_is_immutable(self):
        session = Session(account="main")
        with pytest.raises(ValueError):
            session.account = "savings"


class TestOperationResult:
    """Tests for OperationResult."""

    def test_ok(self):
        result = OperationResult.ok("add_transaction", 7)
        assert result.success is True
        assert result.value == 7
        assert result.error_kind is None

    def test_failed(self):
        result = OperationResult.failed("remove_transaction", ErrorKind.NOT_FOUND, "ID 3 not found")
        assert result.success is False
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error_message == "ID 3 not found"

    def test_failed_without_kind_rejected(self):
        with pytest.raises(ValueError):
            OperationResult(operation="x", success=False)

    def test_success_with_kind_rejected(self):
        with pytest.raises(ValueError):
            OperationResult(operation="x", success=True, error_kind=ErrorKind.IO_ERROR)


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_with_issues(self):
        result = ValidationResult(
            subject="account name",
            issues=[
                ValidationIssue(
                    field="account name",
                    issue_type="forbidden_character",
                    message="The account name 'a-b' must not contain '-'",
                ),
            ],
        )
        assert result.is_valid is False
        assert result.summary == "The account name 'a-b' must not contain '-'"

    def test_validation_result_without_issues(self):
        result = ValidationResult(subject="tag name")
        assert result.is_valid is True
        assert result.summary == ""


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TAG_CREATED,
            description="Tag created: food",
        )
        assert event.event_type == AuditEventType.TAG_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added("main", "2024_03", 7, "food")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["account"] == "main"
        assert log_dict["details"] == {"id": 7, "tag": "food"}

    def test_audit_event_builder_table_imported(self):
        event = AuditEventBuilder.table_imported("main", "2024_03", "bank.csv", [6, 7, 8])
        assert event.details["record_count"] == 3
        assert event.details["first_id"] == 6
        assert event.details["last_id"] == 8

    def test_audit_event_builder_operation_failed(self):
        event = AuditEventBuilder.operation_failed(
            operation="add_transaction",
            error_kind=ErrorKind.UNKNOWN_TAG.value,
            error_message="Tag 'fun' not found",
            account="main",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_kind == "unknown_tag"
        assert event.table is None

    def test_creation_declined_is_user_action(self):
        event = AuditEventBuilder.creation_declined("account", "main")
        assert event.is_user_action is True


class TestErrorKinds:
    """Tests for the error kind enum."""

    def test_all_kinds_exist(self):
        expected = [
            "invalid_argument", "not_found", "already_exists",
            "unknown_tag", "malformed_record", "io_error",
        ]
        for kind in expected:
            assert ErrorKind(kind) is not None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
