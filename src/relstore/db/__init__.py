"""Database module for relstore.

This module provides per-call SQLite connections and the data-access facade
built on them.

Usage:
    from relstore.db import RelationalStore

    store = RelationalStore()

    store.create_table(Path("app.db"), "people", "id INTEGER PRIMARY KEY, name TEXT")
    rows = store.execute_query(Path("app.db"), "SELECT * FROM people WHERE id = ?", (1,))
"""

from .connection import open_connection, resolve_store_path
from .facade import RelationalStore
from .records import Record, Value, ValueKind, kind_of

__all__ = [
    "RelationalStore",
    "open_connection",
    "resolve_store_path",
    "Record",
    "Value",
    "ValueKind",
    "kind_of",
]
