"""
client/storage.py -- Client-local persistent key/value storage.

The session manager keeps exactly two string entries here: the raw token
under TOKEN_KEY and the JSON-serialized user under USER_KEY.

FileStorage is a single-table SQLite file so the session survives process
restarts (the CLI relies on this). MemoryStorage is the same interface over a
dict, for tests and embedding.

Usage:
    storage = FileStorage(Path("~/.taskflow/session.db").expanduser())
    storage.set_item(TOKEN_KEY, token)
    storage.get_item(TOKEN_KEY)     # str or None
    storage.remove_item(TOKEN_KEY)
"""

import sqlite3
from pathlib import Path
from typing import Optional

TOKEN_KEY = "token"
USER_KEY = "user"

_DDL = """
CREATE TABLE IF NOT EXISTS session_store (
    key     TEXT PRIMARY KEY,
    value   TEXT NOT NULL
);
"""


class MemoryStorage:
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def close(self) -> None:
        pass


class FileStorage:
    def __init__(self, db_path: Path) -> None:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.execute(_DDL)
        self._conn.commit()

    def get_item(self, key: str) -> Optional[str]:
        row = self._conn.execute("SELECT value FROM session_store WHERE key = ?", (key,)).fetchone()
        return row[0] if row is not None else None

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any existing entry."""
        self._conn.execute(
            "INSERT OR REPLACE INTO session_store (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def remove_item(self, key: str) -> None:
        self._conn.execute("DELETE FROM session_store WHERE key = ?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
