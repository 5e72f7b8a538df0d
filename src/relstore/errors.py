"""Errors raised by the relstore facade."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DataAccessError(Exception):
    """Raised when SQLite rejects a connection attempt or a statement.

    The engine's own message is kept as the exception message; the original
    ``sqlite3.Error`` is chained as ``__cause__``.
    """

    def __init__(self, message: str, store: Optional[Path] = None, sql: Optional[str] = None):
        super().__init__(message)
        self.store = store
        self.sql = sql

    def __str__(self) -> str:
        message = super().__str__()
        if self.store is not None:
            return f"{message} (store: {self.store})"
        return message
