"""Connection provisioning for file-backed SQLite stores."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from ..config import StoreConfig
from ..errors import DataAccessError

logger = logging.getLogger(__name__)

StorePath = Union[str, Path]


def resolve_store_path(store: StorePath, config: StoreConfig) -> Path:
    """Turn a store identifier into an absolute file path.

    Relative paths are resolved against ``config.store_dir`` when set,
    otherwise against the current directory.
    """
    if store is None or not str(store).strip():
        raise ValueError("Store path must not be empty")
    path = Path(store).expanduser()
    if not path.is_absolute() and config.store_dir is not None:
        path = Path(config.store_dir).expanduser() / path
    return path.resolve()


def _configure(conn: sqlite3.Connection, config: StoreConfig) -> None:
    if config.foreign_keys:
        conn.execute("PRAGMA foreign_keys = ON")
    if config.journal_mode:
        conn.execute(f"PRAGMA journal_mode = {config.journal_mode}")


@contextmanager
def open_connection(
    store: StorePath,
    config: Optional[StoreConfig] = None,
) -> Generator[sqlite3.Connection, None, None]:
    """Open a connection to one store for the duration of a block.

    Commits on successful exit, rolls back on exception, and always closes.
    SQLite errors raised while opening or inside the block surface as
    DataAccessError.

    Example:
        with open_connection("/data/app.db") as conn:
            conn.execute("INSERT INTO t VALUES (1)")
    """
    config = config or StoreConfig()
    path = resolve_store_path(store, config)

    if config.create_dirs:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DataAccessError(f"Cannot create store directory: {e}", store=path) from e

    try:
        conn = sqlite3.connect(str(path), timeout=config.timeout)
    except sqlite3.Error as e:
        logger.debug("Cannot open store %s: %s", path, e)
        raise DataAccessError(str(e), store=path) from e

    try:
        try:
            _configure(conn, config)
            yield conn
            conn.commit()
        except (sqlite3.Error, sqlite3.Warning) as e:
            conn.rollback()
            logger.debug("Store %s failed: %s", path, e)
            raise DataAccessError(str(e), store=path) from e
        except BaseException:
            conn.rollback()
            raise
    finally:
        conn.close()
