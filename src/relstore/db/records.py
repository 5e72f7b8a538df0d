"""Record and scalar value types returned by query operations."""

from __future__ import annotations

import sqlite3
from enum import Enum
from typing import Union

# Closed set of scalar types a record value may hold
Value = Union[int, float, str, bool, bytes, None]

Record = dict[str, Value]


class ValueKind(str, Enum):
    """Tag for each member of the Value variant."""

    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BOOLEAN = "boolean"
    BLOB = "blob"
    NULL = "null"


def kind_of(value: Value) -> ValueKind:
    """Classify a scalar value.

    Raises:
        TypeError: value is not part of the Value variant
    """
    if value is None:
        return ValueKind.NULL
    # bool first, it is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, bytes):
        return ValueKind.BLOB
    raise TypeError(f"Unsupported record value type: {type(value).__name__}")


def column_names(cursor: sqlite3.Cursor) -> list[str]:
    """Column labels of the cursor's current result, in result order."""
    if cursor.description is None:
        return []
    return [col[0] for col in cursor.description]


def marshal_rows(cursor: sqlite3.Cursor) -> list[Record]:
    """Drain a cursor into records keyed by the result's column names.

    Values keep the type SQLite reports for each cell. A repeated column
    name keeps the last value in the row.

    Raises:
        TypeError: a cell holds a value outside the Value variant
    """
    names = column_names(cursor)
    records: list[Record] = []
    for row in cursor:
        record: Record = {}
        for name, value in zip(names, row):
            kind_of(value)
            record[name] = value
        records.append(record)
    return records
