"""relstore - a data-access facade over file-backed SQLite stores."""

from pathlib import Path
from typing import Optional

from .config import ConfigError, StoreConfig, resolve_config
from .db import Record, RelationalStore, Value, ValueKind, kind_of
from .errors import DataAccessError

__version__ = "0.1.0"


def create_store(config: Optional[StoreConfig] = None, path: Optional[Path] = None) -> RelationalStore:
    """Build the facade a host hands to its consumers.

    Args:
        config: Explicit configuration; resolved from `path` (or cwd) when omitted
        path: Directory used for config resolution
    """
    return RelationalStore(config or resolve_config(path))


__all__ = [
    "ConfigError",
    "DataAccessError",
    "Record",
    "RelationalStore",
    "StoreConfig",
    "Value",
    "ValueKind",
    "create_store",
    "kind_of",
    "resolve_config",
]
