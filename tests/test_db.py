"""Tests for connection provisioning."""

from pathlib import Path

import pytest

from relstore import DataAccessError, RelationalStore, StoreConfig
from relstore.db import open_connection, resolve_store_path


class TestResolveStorePath:
    """Tests for resolve_store_path."""

    def test_absolute_path_unchanged(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        assert resolve_store_path(db_path, StoreConfig()) == db_path.resolve()

    def test_relative_path_uses_store_dir(self, tmp_path: Path):
        config = StoreConfig(store_dir=tmp_path / "stores")
        assert resolve_store_path("app.db", config) == (tmp_path / "stores" / "app.db").resolve()

    def test_relative_path_without_store_dir_uses_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_store_path("app.db", StoreConfig()) == (tmp_path / "app.db").resolve()

    def test_string_paths_accepted(self, tmp_path: Path):
        assert resolve_store_path(str(tmp_path / "a.db"), StoreConfig()) == (tmp_path / "a.db").resolve()

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            resolve_store_path("", StoreConfig())


class TestOpenConnection:
    """Tests for the open_connection context manager."""

    def test_store_file_created(self, tmp_path: Path):
        db_path = tmp_path / "test.db"

        with open_connection(db_path) as conn:
            conn.execute("CREATE TABLE t (id INTEGER)")

        assert db_path.exists()

    def test_directory_creation(self, tmp_path: Path):
        """Test database directory is created if it doesn't exist."""
        nested_path = tmp_path / "nested" / "dir" / "test.db"

        with open_connection(nested_path) as conn:
            conn.execute("CREATE TABLE t (id INTEGER)")

        assert nested_path.parent.exists()
        assert nested_path.exists()

    def test_missing_directory_without_create_dirs(self, tmp_path: Path):
        config = StoreConfig(create_dirs=False)
        nested_path = tmp_path / "missing" / "test.db"

        with pytest.raises(DataAccessError):
            with open_connection(nested_path, config) as conn:
                conn.execute("CREATE TABLE t (id INTEGER)")

        assert not nested_path.parent.exists()

    def test_commit_on_success(self, tmp_path: Path):
        db_path = tmp_path / "test.db"

        with open_connection(db_path) as conn:
            conn.execute("CREATE TABLE t (id INTEGER)")
            conn.execute("INSERT INTO t VALUES (1)")

        with open_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 1

    def test_rollback_on_error(self, tmp_path: Path):
        db_path = tmp_path / "test.db"

        with open_connection(db_path) as conn:
            conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")
            conn.execute("INSERT INTO t VALUES (1)")

        with pytest.raises(RuntimeError):
            with open_connection(db_path) as conn:
                conn.execute("INSERT INTO t VALUES (2)")
                raise RuntimeError("boom")

        with open_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 1

    def test_sqlite_errors_become_data_access_errors(self, tmp_path: Path):
        db_path = tmp_path / "test.db"

        with pytest.raises(DataAccessError) as exc_info:
            with open_connection(db_path) as conn:
                conn.execute("SELECT * FROM missing")

        assert exc_info.value.store == db_path.resolve()
        assert "missing" in str(exc_info.value)

    def test_foreign_keys_off_by_default(self, tmp_path: Path):
        """Test the engine default for foreign key enforcement is kept."""
        with open_connection(tmp_path / "test.db") as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 0

    def test_foreign_keys_can_be_enabled(self, tmp_path: Path):
        """Test foreign_keys=True turns on enforcement."""
        with open_connection(tmp_path / "test.db", StoreConfig(foreign_keys=True)) as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_journal_mode_applied(self, tmp_path: Path):
        with open_connection(tmp_path / "test.db", StoreConfig(journal_mode="wal")) as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"


class TestFacadeConnection:
    """Tests for RelationalStore.connection and config-driven behaviour."""

    def test_several_statements_one_connection(self, tmp_path: Path):
        store = RelationalStore()
        db_path = tmp_path / "test.db"

        with store.connection(db_path) as conn:
            conn.execute("CREATE TABLE t (id INTEGER)")
            conn.executemany("INSERT INTO t VALUES (?)", [(1,), (2,), (3,)])

        assert store.get_record_count(db_path, "t") == 3

    def test_foreign_key_violation(self, tmp_path: Path):
        """Test a dangling reference fails when enforcement is on."""
        store = RelationalStore(StoreConfig(foreign_keys=True))
        db_path = tmp_path / "test.db"
        store.create_table(db_path, "parents", "id INTEGER PRIMARY KEY")
        store.create_table(db_path, "children", "id INTEGER PRIMARY KEY, parent_id INTEGER REFERENCES parents(id)")

        with pytest.raises(DataAccessError, match="FOREIGN KEY"):
            store.insert_record(db_path, "children", "1, 99")

    def test_relative_store_in_store_dir(self, tmp_path: Path):
        store = RelationalStore(StoreConfig(store_dir=tmp_path / "stores"))

        store.create_table("app.db", "t", "id INTEGER")

        assert (tmp_path / "stores" / "app.db").exists()
        assert store.table_exists(tmp_path / "stores" / "app.db", "t")

    def test_referenced_parent_dropped_by_default(self, tmp_path: Path):
        """Test default config drops a referenced parent and accepts dangling rows."""
        store = RelationalStore()
        db_path = tmp_path / "test.db"
        store.create_table(db_path, "parents", "id INTEGER PRIMARY KEY")
        store.create_table(db_path, "children", "id INTEGER PRIMARY KEY, parent_id INTEGER REFERENCES parents(id)")
        store.insert_record(db_path, "parents", "1")
        store.insert_record(db_path, "children", "1, 1")

        store.drop_table(db_path, "parents")
        store.insert_record(db_path, "children", "2, 99")

        assert store.table_exists(db_path, "parents") is False
        assert store.get_record_count(db_path, "children") == 2

    def test_referenced_parent_kept_when_enforced(self, tmp_path: Path):
        """Test dropping a referenced parent fails when enforcement is on."""
        store = RelationalStore(StoreConfig(foreign_keys=True))
        db_path = tmp_path / "test.db"
        store.create_table(db_path, "parents", "id INTEGER PRIMARY KEY")
        store.create_table(db_path, "children", "id INTEGER PRIMARY KEY, parent_id INTEGER REFERENCES parents(id)")
        store.insert_record(db_path, "parents", "1")
        store.insert_record(db_path, "children", "1, 1")

        with pytest.raises(DataAccessError, match="FOREIGN KEY"):
            store.drop_table(db_path, "parents")

        assert store.table_exists(db_path, "parents")
