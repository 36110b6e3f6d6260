"""
Request Validation

DESIGN DECISION: Validation happens before anything is persisted.
A request that fails here leaves every ledger file untouched.

Naming rules:
- Account and table names are joined as '{account}-{table}.csv', so
  neither may contain '-' (nor a path separator or a line break).
- Tag names end up inside comma-delimited rows, so they may not
  contain ',' (nor a line break).
- Names hold at most MAX_NAME_LENGTH characters and no NUL byte, so the
  table file name stays a valid file name.
- Names are only checked when they are created. Names that already
  exist on disk stay addressable.

IMPORTANT: Validation NEVER silently fixes input.
It reports the issues; the caller decides what to raise.
"""

import re
from typing import Any, Sequence

from money_man.models.ledger import (
    FIELD_DELIMITER,
    NAME_DELIMITER,
    ValidationIssue,
    ValidationResult,
)


ADD_FIELDS = ("description", "amount", "tag", "date")

MAX_NAME_LENGTH = 64

_LINE_BREAKS = ("\n", "\r")
_NUL = "\x00"
_PATH_SEPARATORS = ("/", "\\")

_IDENTIFIER_RE = re.compile(r"^\s*[0-9]+\s*$")
_LIMIT_RE = re.compile(r"^\s*-?[0-9]+\s*$")


class LedgerValidator:
    """
    Checks names and add arguments.

    Every method returns a ValidationResult; nothing here raises.
    """

    def _validate_name(
        self,
        subject: str,
        name: Any,
        forbidden: Sequence[str],
    ) -> ValidationResult:
        issues = []

        if not isinstance(name, str):
            issues.append(ValidationIssue(
                field=subject,
                issue_type="invalid_type",
                message=f"The {subject} must be text",
            ))
            return ValidationResult(subject=subject, issues=issues)

        if not name.strip():
            issues.append(ValidationIssue(
                field=subject,
                issue_type="missing",
                message=f"The {subject} cannot be empty",
            ))
        elif name != name.strip():
            issues.append(ValidationIssue(
                field=subject,
                issue_type="surrounding_whitespace",
                message=f"The {subject} '{name}' has leading or trailing whitespace",
            ))

        if len(name) > MAX_NAME_LENGTH:
            issues.append(ValidationIssue(
                field=subject,
                issue_type="too_long",
                message=f"The {subject} must be at most {MAX_NAME_LENGTH} characters",
            ))

        for char in forbidden:
            if char in name:
                shown = repr(char) if char in (*_LINE_BREAKS, _NUL) else f"'{char}'"
                issues.append(ValidationIssue(
                    field=subject,
                    issue_type="forbidden_character",
                    message=f"The {subject} '{name.strip()}' must not contain {shown}",
                ))

        return ValidationResult(subject=subject, issues=issues)

    def validate_account_name(self, name: Any) -> ValidationResult:
        return self._validate_name(
            "account name",
            name,
            (NAME_DELIMITER, *_PATH_SEPARATORS, *_LINE_BREAKS, _NUL),
        )

    def validate_table_name(self, name: Any) -> ValidationResult:
        return self._validate_name(
            "table name",
            name,
            (NAME_DELIMITER, *_PATH_SEPARATORS, *_LINE_BREAKS, _NUL),
        )

    def validate_tag_name(self, name: Any) -> ValidationResult:
        return self._validate_name(
            "tag name",
            name,
            (FIELD_DELIMITER, *_LINE_BREAKS, _NUL),
        )

    def validate_add_arguments(self, fields: Sequence[Any]) -> ValidationResult:
        """
        Check the arguments of an add request.

        Exactly four text fields are expected: description, amount,
        tag, date. None of them may hold the row delimiter or a line break.
        """
        subject = "add arguments"
        issues = []

        if len(fields) != len(ADD_FIELDS):
            issues.append(ValidationIssue(
                field="arguments",
                issue_type="arity",
                message=(
                    f"Expected {len(ADD_FIELDS)} fields "
                    f"({', '.join(ADD_FIELDS)}), got {len(fields)}"
                ),
            ))
            return ValidationResult(subject=subject, issues=issues)

        for name, value in zip(ADD_FIELDS, fields):
            if not isinstance(value, str):
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="invalid_type",
                    message=f"The {name} must be text",
                ))
                continue
            if FIELD_DELIMITER in value:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="forbidden_character",
                    message=f"The {name} '{value}' must not contain '{FIELD_DELIMITER}'",
                ))
            if any(char in value for char in _LINE_BREAKS):
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="forbidden_character",
                    message=f"The {name} must not contain a line break",
                ))

        return ValidationResult(subject=subject, issues=issues)

    def validate_identifier(self, value: Any) -> ValidationResult:
        """A transaction identifier is a non-negative integer (or its digits)."""
        subject = "identifier"
        valid = (
            (isinstance(value, int) and not isinstance(value, bool) and value >= 0)
            or (isinstance(value, str) and _IDENTIFIER_RE.match(value) is not None)
        )
        if valid:
            return ValidationResult(subject=subject)
        return ValidationResult(subject=subject, issues=[ValidationIssue(
            field="id",
            issue_type="invalid_value",
            message=f"Identifier must be a non-negative integer, got {value!r}",
        )])

    def validate_limit(self, value: Any) -> ValidationResult:
        """A list limit is None or an integer (negative means 'all')."""
        subject = "limit"
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            return ValidationResult(subject=subject)
        if isinstance(value, str) and _LIMIT_RE.match(value):
            return ValidationResult(subject=subject)
        return ValidationResult(subject=subject, issues=[ValidationIssue(
            field="limit",
            issue_type="invalid_value",
            message=f"Limit must be an integer, got {value!r}",
        )])
