"""
Storage - Key/value persistence adapters for the engine store.

All adapters share the same two-method port:
  read(key)         -> stored string, or None if the key was never written
  write(key, value) -> replace the stored string

Backends:
  - JsonFileStorage: one <key>.json file per key, written atomically
  - SqliteStorage: a single kv table in a WAL-mode database
  - MemoryStorage: in-process dict (tests, throwaway sessions)

Write failures propagate to the caller so the store can keep its last
valid in-memory state.
"""

import os
import sqlite3
from pathlib import Path
from typing import Protocol

from loguru import logger

from multisearch.utils.helpers import data_dir


class Storage(Protocol):
    def read(self, key: str) -> str | None:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """
    Store each key as <directory>/<key>.json.

    Writes go to a .tmp sibling first and are moved into place with
    os.replace, so a crash mid-write never leaves a truncated file.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug(f"Wrote {key} to {path}")


class SqliteStorage:
    """Key/value table in a SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Persistent connection with WAL mode so a second instance can read
        # while this one writes
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_database()
        logger.debug(f"SqliteStorage initialized with db at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at INTEGER
            )
        """)
        self._conn.commit()

    def read(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        with self._conn:
            self._conn.execute("""
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, strftime('%s', 'now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value))

    def close(self) -> None:
        self._conn.close()


def create_storage(settings: dict) -> Storage:
    """
    Build the storage backend named in settings.

    Args:
        settings: Merged settings dict (see utils.helpers.load_settings)

    Returns:
        Storage adapter rooted at [storage].path or the XDG data dir
    """
    storage_settings = settings["storage"]
    backend = storage_settings["backend"]
    root = Path(storage_settings["path"]).expanduser() if storage_settings["path"] else data_dir()

    if backend == "sqlite":
        return SqliteStorage(root / "multisearch.db")
    if backend == "memory":
        return MemoryStorage()
    if backend != "json":
        logger.warning(f"Unknown storage backend '{backend}', using json")
    return JsonFileStorage(root)
