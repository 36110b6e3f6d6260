"""
Flat File Storage Implementation

DESIGN DECISION: Every ledger lives in one project directory of plain
text files:
- the account list (one name per line)
- the tag list (one name per line)
- one '{account}-{table}.csv' file per ledger table

TRADEOFFS:
- No locking: two processes writing the same table can lose updates
- No backup: a mutation rewrites (or appends to) the file in place
- Users can read and edit every file with any text editor

The implementation follows the abstract interface, so the flows never
touch paths or file formats directly.
"""

import errno
import os
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from money_man.audit import get_logger
from money_man.config import StorageSettings, get_settings
from money_man.models.ledger import (
    NAME_DELIMITER,
    TableRef,
    Transaction,
    ValidationResult,
)
from money_man.services.storage.csv_codec import (
    FIELD_SEPARATOR,
    encode_transaction,
    iter_transactions,
    parse_identifier,
)
from money_man.services.storage.interface import (
    AlreadyExistsError,
    InvalidArgumentError,
    LedgerIOError,
    LedgerTableInterface,
    NameRegistryInterface,
    NotFoundError,
    UnknownTagError,
)
from money_man.validation import LedgerValidator


logger = get_logger(__name__)

# Errors worth a second attempt (busy files on synced or network drives).
TRANSIENT_IO_ERRORS = (BlockingIOError, InterruptedError, TimeoutError)

_retry_transient = retry(
    retry=retry_if_exception_type(TRANSIENT_IO_ERRORS),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


def sort_transactions(transactions: list[Transaction]) -> list[Transaction]:
    """
    Sort by date, newest first.

    Dates are compared as plain strings, which matches calendar order
    only for fixed-width formats such as ISO dates. Equal dates keep
    their file order.
    """
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def next_identifier(lines: list[str]) -> int:
    """max(existing identifiers) + 1, or 1 for a table without identifiers."""
    identifiers = [i for i in (parse_identifier(line) for line in lines) if i is not None]
    return max(identifiers) + 1 if identifiers else 1


class FlatFileClient:
    """
    Low-level access to one project directory.

    Translates every OSError (and the ValueError of an unusable path,
    such as one holding a NUL byte) into LedgerIOError and retries
    transient failures.
    """

    def __init__(
        self,
        project_dir: os.PathLike,
        settings: Optional[StorageSettings] = None,
    ):
        self._project_dir = Path(project_dir)
        self._settings = settings or get_settings().storage

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    @property
    def account_list_path(self) -> Path:
        return self._project_dir / self._settings.account_file

    @property
    def tag_list_path(self) -> Path:
        return self._project_dir / self._settings.tag_file

    def table_path(self, ref: TableRef) -> Path:
        return self._project_dir / ref.file_name(self._settings.table_suffix)

    def is_file(self, path: Path) -> bool:
        """
        True if the path is an existing regular file.

        A name the filesystem cannot hold (too long, NUL byte) names no file.
        """
        return self._probe(path.is_file, path)

    @staticmethod
    def _probe(check: Callable[[], bool], path: Path) -> bool:
        try:
            return check()
        except ValueError:
            return False
        except OSError as e:
            if e.errno == errno.ENAMETOOLONG:
                return False
            raise LedgerIOError(f"Could not access {path}: {e}") from e

    def ensure_file(self, path: Path) -> bool:
        """
        Create an empty file if none exists.

        Returns:
            True if the file was created
        """
        if self.is_file(path):
            return False
        if self._probe(path.exists, path):
            raise LedgerIOError(f"Not a regular file: {path}")
        try:
            self._touch(path)
        except (OSError, ValueError) as e:
            raise LedgerIOError(f"Could not create {path}: {e}") from e
        logger.debug("file_created", path=str(path))
        return True

    def read_lines(self, path: Path) -> list[str]:
        """Read a file as lines without terminators."""
        try:
            text = self._read_text(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}") from e
        except (OSError, ValueError) as e:
            raise LedgerIOError(f"Could not read {path}: {e}") from e

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def append_lines(self, path: Path, lines: list[str]) -> None:
        """Append lines, completing an unterminated last line first."""
        if not lines:
            return
        try:
            self._append_text(path, "".join(line + "\n" for line in lines))
        except (OSError, ValueError) as e:
            raise LedgerIOError(f"Could not write {path}: {e}") from e

    def write_lines(self, path: Path, lines: list[str]) -> None:
        """Replace the whole file content."""
        try:
            self._write_text(path, "".join(line + "\n" for line in lines))
        except (OSError, ValueError) as e:
            raise LedgerIOError(f"Could not write {path}: {e}") from e

    def list_table_names(self, account: str) -> list[str]:
        """Names of every table file of an account, sorted."""
        prefix = f"{account}{NAME_DELIMITER}"
        suffix = self._settings.table_suffix
        try:
            entries = list(self._project_dir.iterdir())
        except OSError as e:
            raise LedgerIOError(f"Could not list {self._project_dir}: {e}") from e

        names = []
        for entry in entries:
            name = entry.name
            if not (name.startswith(prefix) and name.endswith(suffix)):
                continue
            table = name[len(prefix):len(name) - len(suffix)]
            if table and self.is_file(entry):
                names.append(table)
        return sorted(names)

    @_retry_transient
    def _touch(self, path: Path) -> None:
        path.touch(exist_ok=True)

    @_retry_transient
    def _read_text(self, path: Path) -> str:
        return path.read_text(encoding=self._settings.encoding)

    @_retry_transient
    def _append_text(self, path: Path, text: str) -> None:
        with open(path, "a+b") as f:
            f.seek(0, os.SEEK_END)
            if f.tell() > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    f.write(b"\n")
            f.write(text.encode(self._settings.encoding))

    @_retry_transient
    def _write_text(self, path: Path, text: str) -> None:
        with open(path, "w", encoding=self._settings.encoding, newline="\n") as f:
            f.write(text)


class FlatFileNameRegistry(NameRegistryInterface):
    """
    A set of unique names stored one per line.

    The list file is created on first access.
    """

    kind = "name"

    def __init__(
        self,
        client: FlatFileClient,
        path: Path,
        rules: Optional[Callable[[str], ValidationResult]] = None,
    ):
        self._client = client
        self._path = path
        self._rules = rules

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[str]:
        self._client.ensure_file(self._path)
        return [line.strip() for line in self._client.read_lines(self._path) if line.strip()]

    def list_names(self) -> list[str]:
        return self._load()

    def exists(self, name: str) -> bool:
        return name in self._load()

    def create(self, name: str) -> None:
        if self._rules is not None:
            result = self._rules(name)
            if not result.is_valid:
                raise InvalidArgumentError(result.summary)

        if name in self._load():
            raise AlreadyExistsError(f"The {self.kind} '{name}' already exists")

        self._client.append_lines(self._path, [name])
        logger.debug("name_registered", kind=self.kind, name=name)


class AccountRegistry(FlatFileNameRegistry):
    """Registered account names."""

    kind = "account"

    def __init__(self, client: FlatFileClient, validator: Optional[LedgerValidator] = None):
        validator = validator or LedgerValidator()
        super().__init__(client, client.account_list_path, validator.validate_account_name)


class TagRegistry(FlatFileNameRegistry):
    """Registered tag names: the controlled vocabulary of transactions."""

    kind = "tag"

    def __init__(self, client: FlatFileClient, validator: Optional[LedgerValidator] = None):
        validator = validator or LedgerValidator()
        super().__init__(client, client.tag_list_path, validator.validate_tag_name)


class FlatFileLedgerTable(LedgerTableInterface):
    """
    Transactions of one (account, table) pair in one CSV file.

    Rows are kept in file order; listing sorts a copy. Identifiers are
    computed from the file on every allocation, never cached.
    """

    def __init__(
        self,
        client: FlatFileClient,
        ref: TableRef,
        tags: NameRegistryInterface,
    ):
        self._client = client
        self._ref = ref
        self._tags = tags
        self._path = client.table_path(ref)

    @staticmethod
    def _make_ref(account: str, table: str) -> TableRef:
        try:
            return TableRef(account=account, table=table)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid table address {account!r}/{table!r}") from e

    @classmethod
    def exists(cls, client: FlatFileClient, account: str, table: str) -> bool:
        return client.is_file(client.table_path(cls._make_ref(account, table)))

    @classmethod
    def select(
        cls,
        client: FlatFileClient,
        tags: NameRegistryInterface,
        account: str,
        table: str,
        create_if_missing: bool = False,
        validator: Optional[LedgerValidator] = None,
    ) -> "FlatFileLedgerTable":
        """
        Resolve the table of an account.

        Raises:
            NotFoundError: If the table is missing and may not be created
            InvalidArgumentError: If a new table name breaks the naming rules
        """
        ref = cls._make_ref(account, table)
        path = client.table_path(ref)

        if not client.is_file(path):
            if not create_if_missing:
                raise NotFoundError(f"Table '{table}' not found in account '{account}'")
            result = (validator or LedgerValidator()).validate_table_name(table)
            if not result.is_valid:
                raise InvalidArgumentError(result.summary)
            client.ensure_file(path)
            logger.info("table_created", account=account, table=table)

        return cls(client, ref, tags)

    @property
    def ref(self) -> TableRef:
        return self._ref

    @property
    def backing_path(self) -> Path:
        return self._path

    def _lines(self) -> list[str]:
        try:
            return self._client.read_lines(self._path)
        except NotFoundError as e:
            raise NotFoundError(f"Table '{self._ref}' no longer exists") from e

    def list_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        transactions = sort_transactions(list(iter_transactions(self._lines())))
        if limit is None or limit < 0:
            return transactions
        return transactions[:limit]

    def next_id(self) -> int:
        return next_identifier(self._lines())

    def add_transaction(
        self,
        description: str,
        amount: str,
        tag: str,
        date: str,
    ) -> int:
        lines = self._lines()
        try:
            transaction = Transaction(
                id=next_identifier(lines),
                description=description,
                amount=amount,
                tag=tag,
                date=date,
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Transaction cannot be stored: {e}") from e

        if not self._tags.exists(transaction.tag):
            raise UnknownTagError(
                f"Tag '{transaction.tag}' not found. Create it before using it."
            )

        self._client.append_lines(self._path, [encode_transaction(transaction)])
        return transaction.id

    def remove_transaction(self, transaction_id: int) -> None:
        lines = self._lines()
        kept = [line for line in lines if parse_identifier(line) != transaction_id]
        if len(kept) == len(lines):
            raise NotFoundError(
                f"ID {transaction_id} not found in table '{self._ref.table}'"
            )
        self._client.write_lines(self._path, kept)

    def append_rows(self, remainders: list[str]) -> list[int]:
        if not remainders:
            return []
        first = next_identifier(self._lines())
        assigned = list(range(first, first + len(remainders)))
        rows = [
            f"{identifier}{FIELD_SEPARATOR}{remainder}"
            for identifier, remainder in zip(assigned, remainders)
        ]
        self._client.append_lines(self._path, rows)
        return assigned
