# sharebox/storage/kv_storage.py

"""String key-value storage backends for persisted catalog state."""

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from sharebox.config.settings import Settings
from sharebox.models.errors import StorageError

logger = logging.getLogger("sharebox.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


class KeyValueStorage(Protocol):
    """Minimal get/set/remove contract over string keys and values."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Return the stored keys in insertion order."""
        return list(self._data)


class SQLiteStorage:
    """SQLite-file storage, the durable default backend."""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.DB_PATH
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(path), check_same_thread=False,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(
                f"Cannot open storage at {path}: {exc}"
            ) from exc
        self.path = path
        logger.debug("SQLiteStorage opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
        logger.debug("SQLiteStorage closed at %s", self.path)

    def get_item(self, key: str) -> str | None:
        try:
            row = self._conn.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read {key!r}: {exc}") from exc
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            self._conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value=excluded.value, updated_at=excluded.updated_at",
                (key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write {key!r}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self._conn.execute(
                "DELETE FROM kv_store WHERE key = ?", (key,),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(
                f"Failed to remove {key!r}: {exc}"
            ) from exc
