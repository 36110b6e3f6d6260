"""Table import/export package."""

from money_man.services.transfer.import_export import ImportExportService

__all__ = ["ImportExportService"]
