"""
Main Orchestrator for Money Man

This module ties together all the components and defines the engine
entry points the interactive shell calls:
1. Registry flow (accounts, tags)
2. Table flow (select, list, add, remove, import, export)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is created without the caller's explicit confirmation
- Session state is passed in and handed back, never kept here
- Every failure becomes an OperationResult; nothing is raised or printed
- Every mutation is audited

The shell layer owns prompting, output and the command loop.
"""

import os
from pathlib import Path
from typing import Any, Callable, Optional

from money_man.audit import AuditLogger, configure_logging
from money_man.config import get_settings
from money_man.models.ledger import (
    OperationResult,
    Session,
    SessionState,
    ValidationResult,
)
from money_man.services.storage import (
    AccountRegistry,
    FlatFileClient,
    FlatFileLedgerTable,
    InvalidArgumentError,
    LedgerError,
    NameRegistryInterface,
    NotFoundError,
    TagRegistry,
)
from money_man.services.transfer import ImportExportService
from money_man.validation import LedgerValidator


# Asked before creating an account, table or tag. Returns True to create.
ConfirmCallback = Callable[[str], bool]


def _decline(message: str) -> bool:
    return False


class _Flow:
    """Shared result handling of the flows."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger

    def _run(
        self,
        operation: str,
        action: Callable[[], Any],
        session: Optional[Session] = None,
    ) -> OperationResult:
        try:
            return OperationResult.ok(operation, action())
        except LedgerError as e:
            if self._audit_logger:
                self._audit_logger.log_operation_failed(
                    operation=operation,
                    error_kind=e.kind.value,
                    error_message=str(e),
                    account=session.account if session else None,
                    table=session.table if session else None,
                )
            return OperationResult.failed(operation, e.kind, str(e))

    def _confirm(
        self,
        confirm: Optional[ConfirmCallback],
        kind: str,
        name: str,
        message: str,
    ) -> None:
        """Ask the caller; a refusal is reported as NotFound."""
        if (confirm or _decline)(message):
            return
        if self._audit_logger:
            self._audit_logger.log_creation_declined(kind, name)
        raise NotFoundError(f"{kind.capitalize()} '{name}' not found. Cancelled")

    @staticmethod
    def _check(result: ValidationResult) -> None:
        if not result.is_valid:
            raise InvalidArgumentError(result.summary)


class RegistryFlow(_Flow):
    """
    Account and tag registries.

    Flow for 'use':
    1. Known name → use it
    2. Unknown name → ask the caller (PAUSE)
    3. Confirmed → create, then use it
    """

    def __init__(
        self,
        accounts: NameRegistryInterface,
        tags: NameRegistryInterface,
        validator: Optional[LedgerValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._accounts = accounts
        self._tags = tags
        self._validator = validator or LedgerValidator()

    def list_accounts(self) -> OperationResult:
        return self._run("list_accounts", self._accounts.list_names)

    def create_account(self, name: str) -> OperationResult:
        def action() -> str:
            self._accounts.create(name)
            if self._audit_logger:
                self._audit_logger.log_account_created(name)
            return name

        return self._run("create_account", action)

    def use_account(
        self,
        session: Session,
        name: str,
        confirm: Optional[ConfirmCallback] = None,
    ) -> OperationResult:
        """
        Select an account, creating it after confirmation.

        Returns:
            OperationResult whose value is the new Session
            (selected table cleared)
        """
        def action() -> Session:
            if not self._accounts.exists(name):
                self._check(self._validator.validate_account_name(name))
                self._confirm(
                    confirm, "account", name,
                    f"Account {name} not found. Create?",
                )
                self._accounts.create(name)
                if self._audit_logger:
                    self._audit_logger.log_account_created(name)

            if self._audit_logger:
                self._audit_logger.log_account_selected(name)
            return session.with_account(name)

        return self._run("use_account", action, session)

    def list_tags(self) -> OperationResult:
        return self._run("list_tags", self._tags.list_names)

    def tag_exists(self, name: str) -> OperationResult:
        return self._run("tag_exists", lambda: self._tags.exists(name))

    def create_tag(self, name: str) -> OperationResult:
        def action() -> str:
            self._tags.create(name)
            if self._audit_logger:
                self._audit_logger.log_tag_created(name)
            return name

        return self._run("create_tag", action)

    def use_tag(
        self,
        name: str,
        confirm: Optional[ConfirmCallback] = None,
    ) -> OperationResult:
        """Show an existing tag, creating it after confirmation."""
        def action() -> str:
            if not self._tags.exists(name):
                self._check(self._validator.validate_tag_name(name))
                self._confirm(
                    confirm, "tag", name,
                    f"Tag {name} not found. Create?",
                )
                self._tags.create(name)
                if self._audit_logger:
                    self._audit_logger.log_tag_created(name)
            return name

        return self._run("use_tag", action)


class TableFlow(_Flow):
    """
    Ledger tables of the selected account.

    Every call takes the shell's Session:
    - list_tables/select_table need an account
    - everything else needs a table
    """

    def __init__(
        self,
        client: FlatFileClient,
        tags: NameRegistryInterface,
        transfer_service: Optional[ImportExportService] = None,
        validator: Optional[LedgerValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        run_dir: Optional[os.PathLike] = None,
    ):
        super().__init__(audit_logger)
        self._client = client
        self._tags = tags
        self._transfer = transfer_service or ImportExportService(client.settings)
        self._validator = validator or LedgerValidator()
        self._run_dir = Path(run_dir) if run_dir is not None else Path.cwd()

    @staticmethod
    def _require_account(session: Session) -> str:
        if session.state == SessionState.NO_ACCOUNT:
            raise InvalidArgumentError(
                "Please select account (using 'acc [account name]')"
            )
        return session.account

    def _require_table(self, session: Session) -> FlatFileLedgerTable:
        if session.state != SessionState.TABLE_SELECTED:
            raise InvalidArgumentError(
                "Please select table (using 'select <table name>')"
            )
        return FlatFileLedgerTable.select(
            self._client, self._tags, session.account, session.table
        )

    def _resolve(self, path: os.PathLike) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self._run_dir / path

    def list_tables(self, session: Session) -> OperationResult:
        def action() -> list[str]:
            account = self._require_account(session)
            return self._client.list_table_names(account)

        return self._run("list_tables", action, session)

    def select_table(
        self,
        session: Session,
        name: str,
        confirm: Optional[ConfirmCallback] = None,
    ) -> OperationResult:
        """
        Select a table of the current account, creating it after confirmation.

        Returns:
            OperationResult whose value is the new Session
        """
        def action() -> Session:
            account = self._require_account(session)
            created = False
            if not FlatFileLedgerTable.exists(self._client, account, name):
                self._check(self._validator.validate_table_name(name))
                self._confirm(
                    confirm, "table", name,
                    f"Table '{name}' not found. Create?",
                )
                created = True

            FlatFileLedgerTable.select(
                self._client, self._tags, account, name,
                create_if_missing=created,
                validator=self._validator,
            )
            if self._audit_logger:
                if created:
                    self._audit_logger.log_table_created(account, name)
                self._audit_logger.log_table_selected(account, name)
            return session.with_table(name)

        return self._run("select_table", action, session)

    def list_transactions(
        self,
        session: Session,
        limit: Optional[int] = None,
    ) -> OperationResult:
        """Transactions sorted by date, newest first; at most `limit` of them."""
        def action():
            self._check(self._validator.validate_limit(limit))
            table = self._require_table(session)
            return table.list_transactions(None if limit is None else int(limit))

        return self._run("list_transactions", action, session)

    def next_id(self, session: Session) -> OperationResult:
        return self._run(
            "next_id", lambda: self._require_table(session).next_id(), session
        )

    def add_transaction(self, session: Session, *fields: str) -> OperationResult:
        """
        Add a record: description, amount, tag, date.

        Returns:
            OperationResult whose value is the assigned identifier
        """
        def action() -> int:
            table = self._require_table(session)
            self._check(self._validator.validate_add_arguments(fields))
            transaction_id = table.add_transaction(*fields)
            if self._audit_logger:
                self._audit_logger.log_transaction_added(
                    session.account, session.table, transaction_id, fields[2].strip()
                )
            return transaction_id

        return self._run("add_transaction", action, session)

    def remove_transaction(self, session: Session, identifier) -> OperationResult:
        def action() -> int:
            table = self._require_table(session)
            self._check(self._validator.validate_identifier(identifier))
            transaction_id = int(identifier)
            table.remove_transaction(transaction_id)
            if self._audit_logger:
                self._audit_logger.log_transaction_removed(
                    session.account, session.table, transaction_id
                )
            return transaction_id

        return self._run("remove_transaction", action, session)

    def export_table(
        self,
        session: Session,
        destination: Optional[os.PathLike] = None,
    ) -> OperationResult:
        """
        Copy the selected table to a file.

        Without a destination the file is '{table}.csv' in the run directory.
        Relative destinations resolve against the run directory.

        Returns:
            OperationResult whose value is the destination Path
        """
        def action() -> Path:
            table = self._require_table(session)
            target = self._resolve(
                destination if destination is not None
                else self._transfer.default_export_name(table)
            )
            exported = self._transfer.export_table(table, target)
            if self._audit_logger:
                self._audit_logger.log_table_exported(
                    session.account, session.table, str(exported)
                )
            return exported

        return self._run("export_table", action, session)

    def import_table(self, session: Session, source: os.PathLike) -> OperationResult:
        """
        Append the rows of a file to the selected table.

        Returns:
            OperationResult whose value is the list of assigned identifiers
        """
        def action() -> list[int]:
            table = self._require_table(session)
            path = self._resolve(source)
            assigned = self._transfer.import_table(table, path)
            if self._audit_logger:
                self._audit_logger.log_table_imported(
                    session.account, session.table, str(path), assigned
                )
            return assigned

        return self._run("import_table", action, session)


def create_app_components(
    project_dir: Optional[os.PathLike] = None,
    run_dir: Optional[os.PathLike] = None,
) -> tuple[RegistryFlow, TableFlow, FlatFileClient]:
    """
    Factory function to create all application components.

    Args:
        project_dir: Project directory; defaults to the configured one.
                     It must already exist.
        run_dir: Directory relative export/import paths resolve against;
                 defaults to the current working directory.

    Logging is configured from the app settings (level and renderer)
    on the first call.

    Returns:
        (registry_flow, table_flow, client)
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)

    client = FlatFileClient(
        project_dir if project_dir is not None else app_settings.project_dir,
        settings.storage,
    )
    validator = LedgerValidator()
    audit_logger = AuditLogger()

    accounts = AccountRegistry(client, validator)
    tags = TagRegistry(client, validator)

    registry_flow = RegistryFlow(
        accounts=accounts,
        tags=tags,
        validator=validator,
        audit_logger=audit_logger,
    )

    table_flow = TableFlow(
        client=client,
        tags=tags,
        transfer_service=ImportExportService(settings.storage),
        validator=validator,
        audit_logger=audit_logger,
        run_dir=run_dir,
    )

    return registry_flow, table_flow, client
