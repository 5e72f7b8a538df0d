"""Shared service layer for the CLI and host integrations."""

from .store_ops import (
    count_records,
    create_table,
    delete_records,
    drop_table,
    execute_script,
    execute_sql,
    insert_record,
    query_records,
    read_records,
    records_exist,
    table_exists,
    update_records,
)

__all__ = [
    "count_records",
    "create_table",
    "delete_records",
    "drop_table",
    "execute_script",
    "execute_sql",
    "insert_record",
    "query_records",
    "read_records",
    "records_exist",
    "table_exists",
    "update_records",
]
