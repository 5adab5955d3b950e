"""Key-value stores holding the active session credential."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import RLock
from typing import Optional, Protocol

from frontdesk.utils.config import Settings, get_settings
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)


class SessionStore(Protocol):
    """Minimal storage contract used by the session accessors."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self, key: str) -> None:
        """Remove ``key``; a missing key is a no-op."""
        ...


class InMemorySessionStore:
    """Process-local store, used by tests and per-browser dashboard sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = RLock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def clear(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


class SqliteSessionStore:
    """Persists session values in a single SQLite key-value table."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.session_db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.initialize()

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS SessionValues (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                );
                """
            )
        logger.debug("Session store ready at %s", self._db_path)

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM SessionValues WHERE key = ?;",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO SessionValues (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (key, value),
            )

    def clear(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM SessionValues WHERE key = ?;", (key,))
