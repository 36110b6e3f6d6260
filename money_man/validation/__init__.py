"""Request validation package."""

from money_man.validation.validator import ADD_FIELDS, MAX_NAME_LENGTH, LedgerValidator

__all__ = ["ADD_FIELDS", "MAX_NAME_LENGTH", "LedgerValidator"]
