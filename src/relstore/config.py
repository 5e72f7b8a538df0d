"""Store configuration with directory-based detection.

Settings live in a `.relstore/` folder next to the code that uses the
stores, with a user-level file as fallback.

## .relstore/ Folder Specification

```
.relstore/
└── config.json          # Main config file
```

### config.json Structure

```json
{
  "store_dir": "data",
  "timeout": 5.0,
  "foreign_keys": false,
  "journal_mode": "wal",
  "create_dirs": true
}
```

A relative `store_dir` is taken relative to the folder holding `.relstore/`.

### Resolution Order

1. Check for .relstore/config.json in current directory
2. Walk up parent directories looking for .relstore/config.json
3. Fall back to the user config (platformdirs user_config_dir)
4. Built-in defaults
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir

APP_NAME = "relstore"

# User-level config location
USER_CONFIG_DIR = Path(user_config_dir(APP_NAME))
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.json"

# Directory-level config
STORE_CONFIG_DIR = ".relstore"
STORE_CONFIG_FILE = "config.json"

JOURNAL_MODES = ("delete", "truncate", "persist", "memory", "wal", "off")


class ConfigError(Exception):
    """Raised when a config file cannot be read or holds invalid values."""


@dataclass
class StoreConfig:
    """Resolved settings applied to every connection the facade opens."""

    # Source of config
    config_path: Optional[Path] = None
    config_source: str = "none"  # "directory", "parent", "user", "none"

    # Base directory for relative store paths (None: current directory)
    store_dir: Optional[Path] = None

    # Seconds SQLite waits on a locked file before failing
    timeout: float = 5.0

    foreign_keys: bool = False  # engine default; true turns on PRAGMA foreign_keys
    journal_mode: Optional[str] = None  # None keeps the engine default
    create_dirs: bool = True

    def to_dict(self) -> dict:
        return {
            "config_source": self.config_source,
            "config_path": str(self.config_path) if self.config_path else None,
            "store_dir": str(self.store_dir) if self.store_dir else None,
            "timeout": self.timeout,
            "foreign_keys": self.foreign_keys,
            "journal_mode": self.journal_mode,
            "create_dirs": self.create_dirs,
        }


def find_store_config(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest .relstore/config.json by walking up the directory tree.

    Args:
        start_path: Directory to start searching from (default: cwd)

    Returns:
        Path to config.json if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()

    while current != current.parent:
        config_path = current / STORE_CONFIG_DIR / STORE_CONFIG_FILE
        if config_path.exists():
            return config_path
        current = current.parent

    # Check root
    config_path = current / STORE_CONFIG_DIR / STORE_CONFIG_FILE
    if config_path.exists():
        return config_path

    return None


def load_config_file(config_path: Path) -> dict:
    """Load and parse a config.json file."""
    try:
        with open(config_path) as f:
            data = json.load(f) or {}
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a JSON object")
    return data


def _flag(data: dict, key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid {key}: {value!r}, expected true or false")
    return value


def _apply(config: StoreConfig, data: dict, base_dir: Path) -> None:
    if data.get("store_dir"):
        store_dir = Path(data["store_dir"]).expanduser()
        config.store_dir = store_dir if store_dir.is_absolute() else base_dir / store_dir

    if "timeout" in data:
        try:
            config.timeout = float(data["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout: {data['timeout']!r}") from e
        if config.timeout < 0:
            raise ConfigError(f"Invalid timeout: {data['timeout']!r}")

    if "foreign_keys" in data:
        config.foreign_keys = _flag(data, "foreign_keys")

    if data.get("journal_mode"):
        mode = str(data["journal_mode"]).lower()
        if mode not in JOURNAL_MODES:
            raise ConfigError(
                f"Invalid journal_mode {data['journal_mode']!r}, expected one of: {', '.join(JOURNAL_MODES)}"
            )
        config.journal_mode = mode

    if "create_dirs" in data:
        config.create_dirs = _flag(data, "create_dirs")


def resolve_config(path: Optional[Path] = None) -> StoreConfig:
    """Resolve store configuration for a directory.

    Args:
        path: Directory to resolve configuration for (default: cwd)

    Returns:
        StoreConfig with resolved settings
    """
    config = StoreConfig()

    config_path = find_store_config(path)
    if config_path:
        config.config_path = config_path
        target_dir = Path(path).resolve() if path else Path.cwd().resolve()
        owner_dir = config_path.parent.parent  # .relstore/config.json -> .relstore -> owner
        config.config_source = "directory" if owner_dir == target_dir else "parent"
        _apply(config, load_config_file(config_path), owner_dir)
        return config

    if USER_CONFIG_FILE.exists():
        config.config_path = USER_CONFIG_FILE
        config.config_source = "user"
        _apply(config, load_config_file(USER_CONFIG_FILE), USER_CONFIG_DIR)

    return config


def create_config(
    path: Path,
    store_dir: Optional[str] = None,
    timeout: Optional[float] = None,
    foreign_keys: Optional[bool] = None,
    journal_mode: Optional[str] = None,
) -> Path:
    """Create a .relstore/config.json file in the specified directory.

    Only options that were given are written; the rest keep their defaults.

    Returns:
        Path to created config file
    """
    data: dict = {}
    if store_dir:
        data["store_dir"] = store_dir
    if timeout is not None:
        data["timeout"] = timeout
    if foreign_keys is not None:
        data["foreign_keys"] = foreign_keys
    if journal_mode:
        data["journal_mode"] = journal_mode

    # Validate before writing anything
    _apply(StoreConfig(), data, Path(path))

    config_dir = Path(path) / STORE_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = config_dir / STORE_CONFIG_FILE
    with open(config_path, "w") as f:
        json.dump(data, f, indent=2)

    return config_path
