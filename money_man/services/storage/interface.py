"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the flat-file format in one place
2. Use in-memory storage for testing
3. Move to another backend later without touching the flows

The interface is intentionally small: two name registries (accounts,
tags) and one transaction store per ledger table.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from money_man.models.ledger import ErrorKind, TableRef, Transaction


class NameRegistryInterface(ABC):
    """
    Abstract interface for a persisted set of unique names.

    Names are append-only: there is no update or delete.
    """

    @abstractmethod
    def list_names(self) -> list[str]:
        """
        Get every registered name.

        Returns:
            Names in persisted order, without duplicates

        Raises:
            LedgerIOError: If the backing store cannot be read or initialized
        """
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether a name is registered."""
        pass

    @abstractmethod
    def create(self, name: str) -> None:
        """
        Register a new name.

        Raises:
            AlreadyExistsError: If the name is already registered
            InvalidArgumentError: If the name breaks the naming rules
            LedgerIOError: If the backing store cannot be written
        """
        pass


class LedgerTableInterface(ABC):
    """
    Abstract interface for the transaction store of one ledger table.

    Every mutation is a single-record read-modify-write against the
    persisted store. There is no multi-record transaction.
    """

    @property
    @abstractmethod
    def ref(self) -> TableRef:
        """The (account, table) this store belongs to."""
        pass

    @property
    @abstractmethod
    def backing_path(self) -> Path:
        """File holding the table content."""
        pass

    @abstractmethod
    def list_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        """
        List transactions sorted by date, newest first.

        Args:
            limit: Maximum number of records; None or negative means all

        Raises:
            MalformedRecordError: If a persisted row cannot be parsed
        """
        pass

    @abstractmethod
    def next_id(self) -> int:
        """Identifier the next added record will receive."""
        pass

    @abstractmethod
    def add_transaction(
        self,
        description: str,
        amount: str,
        tag: str,
        date: str,
    ) -> int:
        """
        Append a new record.

        Returns:
            The identifier assigned to the record

        Raises:
            UnknownTagError: If the tag is not registered
            InvalidArgumentError: If a field cannot be stored
        """
        pass

    @abstractmethod
    def remove_transaction(self, transaction_id: int) -> None:
        """
        Delete exactly one record; other identifiers are untouched.

        Raises:
            NotFoundError: If no record has this identifier
        """
        pass

    @abstractmethod
    def append_rows(self, remainders: list[str]) -> list[int]:
        """
        Append raw rows behind freshly allocated identifiers.

        Each remainder is stored verbatim after '<id>, '.

        Returns:
            The identifiers assigned, in input order
        """
        pass


class LedgerError(Exception):
    """Base exception for ledger engine operations."""
    kind: ErrorKind = ErrorKind.IO_ERROR


class InvalidArgumentError(LedgerError):
    """Request has the wrong arity or shape."""
    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(LedgerError):
    """Unknown account, table, tag, identifier or file."""
    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(LedgerError):
    """Attempted to create a name that is already registered."""
    kind = ErrorKind.ALREADY_EXISTS


class UnknownTagError(LedgerError):
    """Transaction references a tag missing from the registry."""
    kind = ErrorKind.UNKNOWN_TAG


class MalformedRecordError(LedgerError):
    """A persisted line cannot be parsed as a transaction."""
    kind = ErrorKind.MALFORMED_RECORD


class LedgerIOError(LedgerError):
    """Filesystem operation failed."""
    kind = ErrorKind.IO_ERROR
