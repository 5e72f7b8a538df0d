"""Facade operations shaped as response dicts for the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..db import Record, RelationalStore
from ..output.pagination import paginate


def _page(records: list[Record], limit: Optional[int], offset: int) -> dict:
    page, pagination = paginate(records, limit, offset)
    return {"records": page, "pagination": pagination}


def create_table(store: RelationalStore, path: Path, table: str, columns: str) -> dict:
    store.create_table(path, table, columns)
    return {"success": True, "table": table, "exists": store.table_exists(path, table)}


def drop_table(store: RelationalStore, path: Path, table: str) -> dict:
    store.drop_table(path, table)
    return {"success": True, "table": table, "exists": store.table_exists(path, table)}


def table_exists(store: RelationalStore, path: Path, table: str) -> dict:
    return {"table": table, "exists": store.table_exists(path, table)}


def insert_record(store: RelationalStore, path: Path, table: str, values: str) -> dict:
    return {"success": True, "table": table, "inserted": store.insert_record(path, table, values)}


def update_records(
    store: RelationalStore,
    path: Path,
    table: str,
    set_clause: str,
    where: Optional[str] = None,
) -> dict:
    return {"success": True, "table": table, "updated": store.update_records(path, table, set_clause, where)}


def delete_records(store: RelationalStore, path: Path, table: str, where: Optional[str] = None) -> dict:
    return {"success": True, "table": table, "deleted": store.delete_records(path, table, where)}


def execute_sql(store: RelationalStore, path: Path, sql: str) -> dict:
    changed = store.execute_sql(path, sql)
    return {"success": True, "changed": changed if changed >= 0 else None}


def execute_script(store: RelationalStore, path: Path, script: str) -> dict:
    store.execute_script(path, script)
    return {"success": True}


def read_records(
    store: RelationalStore,
    path: Path,
    table: str,
    columns: str = "*",
    limit: Optional[int] = None,
    offset: int = 0,
) -> dict:
    return {"table": table, **_page(store.read_records(path, table, columns), limit, offset)}


def query_records(
    store: RelationalStore,
    path: Path,
    sql: str,
    limit: Optional[int] = None,
    offset: int = 0,
) -> dict:
    return _page(store.execute_query(path, sql), limit, offset)


def records_exist(store: RelationalStore, path: Path, table: str, where: Optional[str] = None) -> dict:
    return {"table": table, "where": where, "exists": store.records_exist(path, table, where)}


def count_records(store: RelationalStore, path: Path, table: str) -> dict:
    return {"table": table, "count": store.get_record_count(path, table)}
