"""Services package."""

from money_man.services.storage import (
    AccountRegistry,
    AlreadyExistsError,
    FlatFileClient,
    FlatFileLedgerTable,
    InvalidArgumentError,
    LedgerError,
    LedgerIOError,
    LedgerTableInterface,
    MalformedRecordError,
    NameRegistryInterface,
    NotFoundError,
    TagRegistry,
    UnknownTagError,
)
from money_man.services.transfer import ImportExportService

__all__ = [
    # Storage services
    "AccountRegistry",
    "FlatFileClient",
    "FlatFileLedgerTable",
    "LedgerTableInterface",
    "NameRegistryInterface",
    "TagRegistry",
    # Errors
    "AlreadyExistsError",
    "InvalidArgumentError",
    "LedgerError",
    "LedgerIOError",
    "MalformedRecordError",
    "NotFoundError",
    "UnknownTagError",
    # Transfer services
    "ImportExportService",
]
