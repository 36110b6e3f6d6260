"""
Table Row Codec

One transaction per line:

    id, description, amount, tag, date

Fields are joined by ", " and split on ",". There is no quoting or
escaping: a field holding the delimiter would corrupt the row, so
Transaction refuses such fields before they ever reach this codec.
"""

import re
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError

from money_man.models.ledger import FIELD_DELIMITER, Transaction
from money_man.services.storage.interface import MalformedRecordError


FIELD_SEPARATOR = FIELD_DELIMITER + " "
FIELD_COUNT = 5

# Leading identifier of a row, e.g. "12," in "12, Coffee, 3.50, food, 2024-03-01"
_IDENTIFIER_RE = re.compile(r"^\s*(\d+)\s*" + re.escape(FIELD_DELIMITER))
_IDENTIFIER_PREFIX_RE = re.compile(r"^(\d+)" + re.escape(FIELD_DELIMITER) + r"\s*(.*)$")


def encode_transaction(transaction: Transaction) -> str:
    """Encode a transaction as one table row (without line terminator)."""
    return FIELD_SEPARATOR.join([
        str(transaction.id),
        transaction.description,
        transaction.amount,
        transaction.tag,
        transaction.date,
    ])


def decode_transaction(line: str) -> Transaction:
    """
    Decode one table row.

    Raises:
        MalformedRecordError: If the row does not start with an integer
            identifier and delimiter, or does not hold exactly five fields
    """
    if not _IDENTIFIER_RE.match(line):
        raise MalformedRecordError(f"Row does not start with an identifier: {line!r}")

    fields = [field.strip() for field in line.split(FIELD_DELIMITER)]
    if len(fields) != FIELD_COUNT:
        raise MalformedRecordError(
            f"Row has {len(fields)} fields, expected {FIELD_COUNT}: {line!r}"
        )

    try:
        return Transaction(
            id=int(fields[0]),
            description=fields[1],
            amount=fields[2],
            tag=fields[3],
            date=fields[4],
        )
    except ValidationError as e:
        raise MalformedRecordError(f"Row cannot be decoded: {line!r}: {e}") from e


def parse_identifier(line: str) -> Optional[int]:
    """Leading identifier of a row, or None when the row has none."""
    match = _IDENTIFIER_RE.match(line)
    return int(match.group(1)) if match else None


def strip_identifier(line: str) -> str:
    """
    Drop a leading 'identifier,' prefix and the whitespace after it.

    The rest of the line is kept verbatim. A line without such a prefix
    is returned whole (surrounding whitespace trimmed).
    """
    line = line.strip()
    match = _IDENTIFIER_PREFIX_RE.match(line)
    return match.group(2) if match else line


def is_blank(line: str) -> bool:
    return not line.strip()


def iter_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """Decode a stream of rows, skipping blank lines."""
    for line in lines:
        if is_blank(line):
            continue
        yield decode_transaction(line)
