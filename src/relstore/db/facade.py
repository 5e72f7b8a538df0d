"""Data-access facade over file-backed SQLite stores.

Every operation takes the store path as its first argument, opens its own
connection, runs one statement and closes the connection before returning.
Nothing is cached or pooled between calls.

Table names, column definitions, column lists, value lists and SET / WHERE
clauses are pasted into the statement text as given. The caller owns their
correctness and their safety against injection. For untrusted values put
``?`` (or ``:name``) placeholders in the fragment and pass ``params``; those
are bound by SQLite. Identifiers cannot be bound and are always verbatim.
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import ContextManager, Mapping, Optional, Sequence, Union

from ..config import StoreConfig
from ..errors import DataAccessError
from .connection import StorePath, open_connection, resolve_store_path
from .records import Record, Value, marshal_rows

logger = logging.getLogger(__name__)

Params = Union[Sequence[Value], Mapping[str, Value]]


def _require(value: str, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{label} must not be empty")
    return value


def _where(clause: Optional[str]) -> str:
    """WHERE suffix for a caller clause; blank clauses match every row."""
    if clause is None or not clause.strip():
        return ""
    return f" WHERE {clause}"


class RelationalStore:
    """Schema, mutation and query operations against SQLite store files.

    Usage:
        store = RelationalStore()

        store.create_table(path, "people", "id INTEGER PRIMARY KEY, name TEXT")
        store.insert_record(path, "people", "1, 'John Doe'")
        store.read_records(path, "people", "*")
        # [{"id": 1, "name": "John Doe"}]

    One instance is built by the host and handed to each consumer; it holds
    only its configuration and is safe to share between threads.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()

    def connection(self, store: StorePath) -> ContextManager[sqlite3.Connection]:
        """Open a connection to a store for several statements in one block.

        The connection commits on success, rolls back on error and is closed
        when the block exits.
        """
        return open_connection(store, self.config)

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def _run(self, conn: sqlite3.Connection, path: Path, sql: str, params: Params) -> sqlite3.Cursor:
        logger.debug("%s: %s", path, sql)
        try:
            return conn.execute(sql, params)
        except (sqlite3.Error, sqlite3.Warning) as e:
            logger.debug("Statement failed on %s: %s", path, e)
            raise DataAccessError(str(e), store=path, sql=sql) from e

    def _write(self, store: StorePath, sql: str, params: Params = ()) -> int:
        path = resolve_store_path(store, self.config)
        with open_connection(path, self.config) as conn:
            with closing(self._run(conn, path, sql, params)) as cursor:
                return cursor.rowcount

    def _query(self, store: StorePath, sql: str, params: Params = ()) -> list[Record]:
        path = resolve_store_path(store, self.config)
        with open_connection(path, self.config) as conn:
            with closing(self._run(conn, path, sql, params)) as cursor:
                try:
                    return marshal_rows(cursor)
                except TypeError as e:
                    raise DataAccessError(str(e), store=path, sql=sql) from e
                except sqlite3.Error as e:
                    raise DataAccessError(str(e), store=path, sql=sql) from e

    def _first(self, store: StorePath, sql: str, params: Params = ()) -> Optional[tuple]:
        path = resolve_store_path(store, self.config)
        with open_connection(path, self.config) as conn:
            with closing(self._run(conn, path, sql, params)) as cursor:
                try:
                    return cursor.fetchone()
                except sqlite3.Error as e:
                    raise DataAccessError(str(e), store=path, sql=sql) from e

    # ------------------------------------------------------------------
    # Schema operations
    # ------------------------------------------------------------------

    def create_table(self, store: StorePath, table_name: str, columns_definition: str) -> None:
        """Create a table unless one of that name already exists.

        Args:
            store: Path to the store file
            table_name: Name of the table to create
            columns_definition: Column definitions in SQL, e.g. "id INTEGER PRIMARY KEY, name TEXT"
        """
        _require(table_name, "Table name")
        self._write(store, f"CREATE TABLE IF NOT EXISTS {table_name} ({columns_definition})")

    def drop_table(self, store: StorePath, table_name: str) -> None:
        """Drop a table; dropping a missing table does nothing."""
        _require(table_name, "Table name")
        self._write(store, f"DROP TABLE IF EXISTS {table_name}")

    def table_exists(self, store: StorePath, table_name: str) -> bool:
        """Check the schema catalog for a table or view named table_name."""
        _require(table_name, "Table name")
        row = self._first(
            store,
            "SELECT 1 FROM sqlite_master WHERE type IN ('table', 'view') AND name = ? COLLATE NOCASE LIMIT 1",
            (table_name,),
        )
        return row is not None

    # ------------------------------------------------------------------
    # Mutation operations
    # ------------------------------------------------------------------

    def insert_record(self, store: StorePath, table_name: str, values_list: str) -> int:
        """Insert one row from positional SQL literals.

        Args:
            store: Path to the store file
            table_name: Table to insert into
            values_list: Comma-separated literals in column order, e.g. "1, 'John Doe'"

        Returns:
            Number of rows inserted
        """
        _require(table_name, "Table name")
        return self._write(store, f"INSERT INTO {table_name} VALUES ({values_list})")

    def insert_values(
        self,
        store: StorePath,
        table_name: str,
        values: Sequence[Value],
        columns: Optional[Sequence[str]] = None,
    ) -> int:
        """Insert one row with every value bound as a parameter.

        Args:
            store: Path to the store file
            table_name: Table to insert into
            values: Values in column order (or in the order of columns)
            columns: Optional column names the values map to

        Returns:
            Number of rows inserted
        """
        _require(table_name, "Table name")
        if not values:
            raise ValueError("At least one value is required")
        if columns is not None and len(columns) != len(values):
            raise ValueError(f"Got {len(values)} values for {len(columns)} columns")

        target = f"{table_name} ({', '.join(columns)})" if columns else table_name
        placeholders = ", ".join("?" for _ in values)
        return self._write(store, f"INSERT INTO {target} VALUES ({placeholders})", tuple(values))

    def update_records(
        self,
        store: StorePath,
        table_name: str,
        set_clause: str,
        where_clause: Optional[str],
        params: Params = (),
    ) -> int:
        """Update the rows matching where_clause.

        A blank where_clause is not rejected: it updates every row.

        Args:
            store: Path to the store file
            table_name: Table to update
            set_clause: Assignments, e.g. "name = 'Jane Doe'"
            where_clause: Row filter, e.g. "id = 1"
            params: Values bound to placeholders in set_clause and where_clause

        Returns:
            Number of rows updated
        """
        _require(table_name, "Table name")
        return self._write(store, f"UPDATE {table_name} SET {set_clause}{_where(where_clause)}", params)

    def delete_records(
        self,
        store: StorePath,
        table_name: str,
        where_clause: Optional[str],
        params: Params = (),
    ) -> int:
        """Delete the rows matching where_clause; a blank clause deletes all rows.

        Returns:
            Number of rows deleted
        """
        _require(table_name, "Table name")
        return self._write(store, f"DELETE FROM {table_name}{_where(where_clause)}", params)

    def execute_sql(self, store: StorePath, sql_text: str, params: Params = ()) -> int:
        """Execute one arbitrary statement without reading results.

        Returns:
            Rows changed by a DML statement, -1 for anything else
        """
        _require(sql_text, "SQL text")
        return self._write(store, sql_text, params)

    def execute_script(self, store: StorePath, script: str) -> None:
        """Execute several semicolon-separated statements in one connection.

        The script runs through sqlite3's executescript, which commits any
        pending transaction first and binds no parameters.
        """
        _require(script, "SQL script")
        path = resolve_store_path(store, self.config)
        logger.debug("%s: script (%d chars)", path, len(script))
        with open_connection(path, self.config) as conn:
            try:
                conn.executescript(script).close()
            except sqlite3.Error as e:
                raise DataAccessError(str(e), store=path, sql=script) from e

    # ------------------------------------------------------------------
    # Query operations
    # ------------------------------------------------------------------

    def read_records(self, store: StorePath, table_name: str, columns_spec: str = "*") -> list[Record]:
        """Read every row of a table.

        Args:
            store: Path to the store file
            table_name: Table to read
            columns_spec: Columns to select, "*" for all

        Returns:
            One record per row; an empty list when the table has no rows
        """
        _require(table_name, "Table name")
        return self._query(store, f"SELECT {columns_spec} FROM {table_name}")

    def execute_query(self, store: StorePath, sql_text: str, params: Params = ()) -> list[Record]:
        """Run a query and return its rows keyed by the result's column names."""
        _require(sql_text, "SQL text")
        return self._query(store, sql_text, params)

    def records_exist(
        self,
        store: StorePath,
        table_name: str,
        where_clause: Optional[str] = None,
        params: Params = (),
    ) -> bool:
        """Check whether a table holds at least one (matching) row.

        Fetches at most one row.
        """
        _require(table_name, "Table name")
        row = self._first(store, f"SELECT 1 FROM {table_name}{_where(where_clause)} LIMIT 1", params)
        return row is not None

    def get_record_count(self, store: StorePath, table_name: str) -> int:
        """Number of rows in a table."""
        _require(table_name, "Table name")
        row = self._first(store, f"SELECT COUNT(*) AS count FROM {table_name}")
        if row is None:
            return 0
        return int(row[0])
