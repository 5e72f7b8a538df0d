"""Command line interface for relstore."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import services
from .config import ConfigError, create_config, resolve_config
from .db import RelationalStore
from .errors import DataAccessError
from .output import format_response, records_table, render_cli

app = typer.Typer(
    name="relstore",
    help="relstore - run schema, record and query operations against SQLite store files",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

STORE_ARG = typer.Argument(..., help="Path to the store file (created if missing)")
FORMAT_OPT = typer.Option("toon", "--format", "-f", help="Output format (toon|json|text)")


def _store(ctx: typer.Context) -> RelationalStore:
    return ctx.obj["store"]


def _emit(
    action: Callable[[], dict],
    output_format: str = "toon",
    text_renderer: Optional[Callable[[Any], Any]] = None,
) -> None:
    """Run a service call and print its response, exiting 1 on failure."""
    try:
        data = action()
        response = format_response(data, output_format, text_renderer)
    except DataAccessError as e:
        err_console.print(f"[red]Data access error:[/red] {e}")
        raise typer.Exit(1)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(render_cli(response), markup=False, emoji=False, soft_wrap=True)


def _records_text(data: dict) -> Any:
    return records_table(data["records"], title=data.get("table"))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every statement"),
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", "-C", help="Directory to resolve .relstore/config.json from"
    ),
):
    """Build the store facade shared by every command."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    try:
        config = resolve_config(config_dir)
    except ConfigError as e:
        err_console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1)
    ctx.obj = {"store": RelationalStore(config), "config": config}


# ============================================================================
# Configuration Commands
# ============================================================================


@app.command("config")
def show_config(
    ctx: typer.Context,
    output_format: str = FORMAT_OPT,
):
    """Show the resolved store configuration."""
    _emit(lambda: ctx.obj["config"].to_dict(), output_format)


@app.command("init")
def init_config(
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Directory to initialize"),
    store_dir: Optional[str] = typer.Option(None, "--store-dir", help="Base directory for relative store paths"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds to wait on a locked store"),
    journal_mode: Optional[str] = typer.Option(None, "--journal-mode", help="SQLite journal mode, e.g. wal"),
    foreign_keys: Optional[bool] = typer.Option(
        None, "--foreign-keys/--no-foreign-keys", help="Enforce FOREIGN KEY constraints (off by default)"
    ),
):
    """Initialize .relstore/config.json in current or specified directory."""
    target_path = Path(path) if path else Path.cwd()

    if not target_path.is_dir():
        err_console.print(f"[red]Error:[/red] Directory not found: {target_path}")
        raise typer.Exit(1)

    try:
        config_path = create_config(
            target_path,
            store_dir=store_dir,
            timeout=timeout,
            journal_mode=journal_mode,
            foreign_keys=foreign_keys,
        )
    except ConfigError as e:
        err_console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Created:[/green] {config_path}")


# ============================================================================
# Schema Commands
# ============================================================================


@app.command("create-table")
def create_table(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    columns: str = typer.Argument(..., help="Column definitions, e.g. 'id INTEGER PRIMARY KEY, name TEXT'"),
    output_format: str = FORMAT_OPT,
):
    """Create a table if it does not exist yet."""
    _emit(lambda: services.create_table(_store(ctx), store, table, columns), output_format)


@app.command("drop-table")
def drop_table(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    output_format: str = FORMAT_OPT,
):
    """Drop a table if it exists."""
    _emit(lambda: services.drop_table(_store(ctx), store, table), output_format)


@app.command("table-exists")
def table_exists(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    output_format: str = FORMAT_OPT,
):
    """Check whether a table exists."""
    _emit(lambda: services.table_exists(_store(ctx), store, table), output_format)


# ============================================================================
# Mutation Commands
# ============================================================================


@app.command("insert")
def insert(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    values: str = typer.Argument(..., help="SQL literals in column order, e.g. \"1, 'John Doe'\""),
    output_format: str = FORMAT_OPT,
):
    """Insert one row from SQL literals."""
    _emit(lambda: services.insert_record(_store(ctx), store, table, values), output_format)


@app.command("update")
def update(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    set_clause: str = typer.Argument(..., help="Assignments, e.g. \"name = 'Jane Doe'\""),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="Row filter; omit to update every row"),
    output_format: str = FORMAT_OPT,
):
    """Update rows matching a condition."""
    _emit(lambda: services.update_records(_store(ctx), store, table, set_clause, where), output_format)


@app.command("delete")
def delete(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="Row filter; omit to delete every row"),
    output_format: str = FORMAT_OPT,
):
    """Delete rows matching a condition."""
    _emit(lambda: services.delete_records(_store(ctx), store, table, where), output_format)


@app.command("exec")
def exec_sql(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    sql: str = typer.Argument(..., help="One SQL statement"),
    output_format: str = FORMAT_OPT,
):
    """Execute one statement without reading results."""
    _emit(lambda: services.execute_sql(_store(ctx), store, sql), output_format)


@app.command("script")
def exec_script(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    script_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File of ;-separated statements"),
    output_format: str = FORMAT_OPT,
):
    """Execute every statement in a SQL file."""
    script = script_file.read_text()
    _emit(lambda: services.execute_script(_store(ctx), store, script), output_format)


# ============================================================================
# Query Commands
# ============================================================================


@app.command("read")
def read(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    columns: str = typer.Option("*", "--columns", "-c", help="Columns to select"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0, help="Maximum rows to print"),
    offset: int = typer.Option(0, "--offset", min=0, help="Rows to skip"),
    output_format: str = FORMAT_OPT,
):
    """Read every row of a table."""
    _emit(
        lambda: services.read_records(_store(ctx), store, table, columns, limit, offset),
        output_format,
        _records_text,
    )


@app.command("query")
def query(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    sql: str = typer.Argument(..., help="SELECT statement"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0, help="Maximum rows to print"),
    offset: int = typer.Option(0, "--offset", min=0, help="Rows to skip"),
    output_format: str = FORMAT_OPT,
):
    """Run a query and print its rows."""
    _emit(
        lambda: services.query_records(_store(ctx), store, sql, limit, offset),
        output_format,
        _records_text,
    )


@app.command("exists")
def exists(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="Row filter"),
    output_format: str = FORMAT_OPT,
):
    """Check whether a table holds at least one (matching) row."""
    _emit(lambda: services.records_exist(_store(ctx), store, table, where), output_format)


@app.command("count")
def count(
    ctx: typer.Context,
    store: Path = STORE_ARG,
    table: str = typer.Argument(..., help="Table name"),
    output_format: str = FORMAT_OPT,
):
    """Count the rows in a table."""
    _emit(lambda: services.count_records(_store(ctx), store, table), output_format)


if __name__ == "__main__":
    app()
