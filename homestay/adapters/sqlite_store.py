"""
SQLite adapter for KeyValueStore.

Use ":memory:" for tests, a file path for production.
"""

import sqlite3

from homestay.domain.store import KeyValueStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key     TEXT PRIMARY KEY,
    value   TEXT NOT NULL
);
"""


class SqliteKeyValueStore(KeyValueStore):

    def __init__(self, db_path: str = "homestay_cache.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.executescript(_SCHEMA)

    async def get_item(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    async def remove_item(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self._conn.commit()

    async def get_all_keys(self) -> list[str]:
        rows = self._conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        self._conn.close()
