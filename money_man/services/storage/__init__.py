"""
Storage Services Package

Provides abstract interfaces and concrete implementations for ledger storage.
Currently implements flat files in a project directory, but designed to be swappable.
"""

from money_man.services.storage.interface import (
    AlreadyExistsError,
    InvalidArgumentError,
    LedgerError,
    LedgerIOError,
    LedgerTableInterface,
    MalformedRecordError,
    NameRegistryInterface,
    NotFoundError,
    UnknownTagError,
)
from money_man.services.storage.csv_codec import (
    decode_transaction,
    encode_transaction,
    iter_transactions,
    parse_identifier,
    strip_identifier,
)
from money_man.services.storage.flat_file import (
    AccountRegistry,
    FlatFileClient,
    FlatFileLedgerTable,
    FlatFileNameRegistry,
    TagRegistry,
    sort_transactions,
)

__all__ = [
    # Interfaces
    "LedgerTableInterface",
    "NameRegistryInterface",
    # Exceptions
    "AlreadyExistsError",
    "InvalidArgumentError",
    "LedgerError",
    "LedgerIOError",
    "MalformedRecordError",
    "NotFoundError",
    "UnknownTagError",
    # Row codec
    "decode_transaction",
    "encode_transaction",
    "iter_transactions",
    "parse_identifier",
    "strip_identifier",
    # Flat file implementation
    "AccountRegistry",
    "FlatFileClient",
    "FlatFileLedgerTable",
    "FlatFileNameRegistry",
    "TagRegistry",
    "sort_transactions",
]
