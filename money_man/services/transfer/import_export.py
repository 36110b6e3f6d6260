"""
Table Import / Export

Moves a table's content across file boundaries.

Export is a byte-for-byte copy of the table file: no filtering, no
re-sorting.

Import appends the rows of an arbitrary file. Each source row loses
its leading 'identifier,' prefix and gets a fresh identifier continuing
from the destination table's maximum, in source file order.

DESIGN DECISION: Import is permissive. Unlike add, it checks neither
the tag nor the field count of a row; the remainder of each source line
is stored verbatim. Existing exports in the wild rely on this, so the
two paths are deliberately not unified.
"""

import os
import shutil
from pathlib import Path
from typing import Optional

from money_man.audit import get_logger
from money_man.config import StorageSettings, get_settings
from money_man.services.storage.csv_codec import is_blank, strip_identifier
from money_man.services.storage.interface import (
    LedgerIOError,
    LedgerTableInterface,
    NotFoundError,
)


logger = get_logger(__name__)


class ImportExportService:
    """Copies tables out to files and merges files into tables."""

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    def default_export_name(self, table: LedgerTableInterface) -> str:
        """File name used when the caller gives no destination."""
        return f"{table.ref.table}{self._settings.table_suffix}"

    def export_table(
        self,
        table: LedgerTableInterface,
        destination: os.PathLike,
    ) -> Path:
        """
        Copy the table file verbatim to the destination.

        Returns:
            The destination path

        Raises:
            LedgerIOError: If the copy fails
        """
        destination = Path(destination)
        try:
            shutil.copyfile(table.backing_path, destination)
        except (OSError, ValueError) as e:
            raise LedgerIOError(
                f"Could not export table '{table.ref}' to {destination}: {e}"
            ) from e

        logger.info("table_exported", table=str(table.ref), destination=str(destination))
        return destination

    def read_source_rows(self, source: os.PathLike) -> list[str]:
        """
        Read the importable rows of a file, identifiers stripped.

        Raises:
            NotFoundError: If the source is not a regular file
            LedgerIOError: If the source cannot be read
        """
        source = Path(source)
        try:
            is_file = source.is_file()
        except (OSError, ValueError):
            is_file = False
        if not is_file:
            raise NotFoundError(f"Not a valid file to import: {source}")

        try:
            text = source.read_text(encoding=self._settings.encoding)
        except (OSError, ValueError) as e:
            raise LedgerIOError(f"Could not read {source}: {e}") from e

        # Rows end at "\n" only; other Unicode line separators stay inside a row.
        return [strip_identifier(line) for line in text.split("\n") if not is_blank(line)]

    def import_table(
        self,
        table: LedgerTableInterface,
        source: os.PathLike,
    ) -> list[int]:
        """
        Append every non-blank row of the source to the table.

        Returns:
            Identifiers assigned to the imported rows, in source order
        """
        remainders = self.read_source_rows(source)
        assigned = table.append_rows(remainders)

        logger.info(
            "table_imported",
            table=str(table.ref),
            source=str(source),
            record_count=len(assigned),
        )
        return assigned
