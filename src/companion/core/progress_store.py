"""Storage port for the device-local progress record.

The progress record lives under a single fixed key as serialized JSON text.
Storage backends only move text around; parsing and defaults belong to the
streak tracker.

Backends:
- MemoryProgressStorage: in-process dict (tests, ephemeral sessions)
- JsonFileProgressStorage: data/state/<key>.json, replaced atomically
- SqliteProgressStorage: row in the progress_store table
"""

from __future__ import annotations

import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

from companion.config.app_config import AppConfig
from companion.db.database import get_db, init_db

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

PROGRESS_KEY = "schoolCompanionProgress"


class ProgressStorageError(Exception):
    """Error reading or writing the persisted progress record."""

    pass


class ProgressStorage(Protocol):
    """Key/value storage for one named record."""

    def read(self) -> str | None:
        """Return the last written value, or None if absent."""
        ...

    def write(self, value: str) -> None:
        """Replace the whole stored value."""
        ...

    def delete(self) -> None:
        """Remove the record. No-op if absent."""
        ...


# =============================================================================
# BACKENDS
# =============================================================================


class MemoryProgressStorage:
    """Storage kept in a plain dict, shared between instances if passed in."""

    def __init__(self, key: str = PROGRESS_KEY, data: dict[str, str] | None = None):
        self.key = key
        self.data: dict[str, str] = data if data is not None else {}

    def read(self) -> str | None:
        return self.data.get(self.key)

    def write(self, value: str) -> None:
        self.data[self.key] = value

    def delete(self) -> None:
        self.data.pop(self.key, None)


class JsonFileProgressStorage:
    """Storage backed by one JSON file per key."""

    def __init__(self, state_dir: Path, key: str = PROGRESS_KEY):
        self.state_dir = state_dir
        self.key = key

    @property
    def path(self) -> Path:
        return self.state_dir / f"{self.key}.json"

    def read(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ProgressStorageError(f"Cannot read {self.path}: {e}") from e

    def write(self, value: str) -> None:
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.state_dir, prefix=f".{self.key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ProgressStorageError(f"Cannot write {self.path}: {e}") from e

        logger.debug("progress_storage.written", path=str(self.path))

    def delete(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise ProgressStorageError(f"Cannot delete {self.path}: {e}") from e


class SqliteProgressStorage:
    """Storage backed by the progress_store table.

    The database is created on first access, so an unusable path surfaces as
    ProgressStorageError from read/write/delete rather than at construction.
    """

    def __init__(self, key: str = PROGRESS_KEY, db_path: Path | None = None):
        self.key = key
        self.db_path = db_path
        self._initialized = False

    def _ensure_db(self) -> None:
        if not self._initialized:
            init_db(self.db_path)
            self._initialized = True

    def read(self) -> str | None:
        try:
            self._ensure_db()
            with get_db() as conn:
                row = conn.execute(
                    "SELECT value FROM progress_store WHERE key = ?", (self.key,)
                ).fetchone()
        except (sqlite3.Error, OSError) as e:
            raise ProgressStorageError(f"Cannot read progress '{self.key}': {e}") from e

        return row["value"] if row is not None else None

    def write(self, value: str) -> None:
        try:
            self._ensure_db()
            with get_db() as conn:
                conn.execute(
                    """
                    INSERT INTO progress_store (key, value, updated_at)
                    VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, value),
                )
        except (sqlite3.Error, OSError) as e:
            raise ProgressStorageError(f"Cannot write progress '{self.key}': {e}") from e

    def delete(self) -> None:
        try:
            self._ensure_db()
            with get_db() as conn:
                conn.execute("DELETE FROM progress_store WHERE key = ?", (self.key,))
        except (sqlite3.Error, OSError) as e:
            raise ProgressStorageError(f"Cannot delete progress '{self.key}': {e}") from e


def storage_from_config(config: AppConfig) -> ProgressStorage:
    """Build the storage backend selected in the app config."""
    key = config.storage.progress_key
    if config.storage.backend == "sqlite":
        return SqliteProgressStorage(key=key, db_path=config.db_path())
    return JsonFileProgressStorage(config.state_dir(), key=key)
