"""
Key-Value Storage

A durable SQLite-backed store for the quote collection and the selected
filter, and an in-memory store for per-session values such as the last
viewed quote.
"""

import sqlite3
from pathlib import Path
from datetime import datetime
from typing import Optional
import json

from . import config

# Persistent store keys
QUOTES_KEY = "quotes"
SELECTED_CATEGORY_KEY = "selectedCategory"

# Session store keys
LAST_VIEWED_KEY = "lastViewedQuote"


class PersistentStore:
    """
    String key-value store persisted in a SQLite database.

    Schema:
    - kv_store: one row per key holding a string value
    - sync_log: Audit log of sync operations
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the persistent store.

        Args:
            db_path: Path to the SQLite database (env: QUOTESYNC_STATE_DB)
        """
        if db_path is None:
            db_path = config.STATE_DB

        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS sync_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp INTEGER NOT NULL,
                    action TEXT NOT NULL,
                    details TEXT
                )
            """)

            conn.commit()

    def get(self, key: str) -> Optional[str]:
        """Get the value stored under key, or None."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str):
        """Insert or replace the value stored under key."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value)
            )
            conn.commit()

    def remove(self, key: str):
        """Delete a key."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()

    def log_action(self, action: str, details: Optional[dict] = None):
        """Log a sync action for auditing."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO sync_log (timestamp, action, details)
                VALUES (?, ?, ?)
            """, (
                int(datetime.now().timestamp()),
                action,
                json.dumps(details) if details else None,
            ))
            conn.commit()

    def get_recent_logs(self, limit: int = 100) -> list[dict]:
        """Get recent sync log entries, newest first."""
        logs = []
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                "SELECT * FROM sync_log ORDER BY id DESC LIMIT ?",
                (limit,)
            )
            for row in cursor:
                logs.append({
                    "id": row["id"],
                    "timestamp": datetime.fromtimestamp(row["timestamp"]),
                    "action": row["action"],
                    "details": json.loads(row["details"]) if row["details"] else None,
                })
        return logs

    def clear_all(self):
        """Clear all stored keys and the sync log. Use with caution!"""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store")
            conn.execute("DELETE FROM sync_log")
            conn.commit()

    def get_stats(self) -> dict:
        """Get storage statistics."""
        with sqlite3.connect(self.db_path) as conn:
            keys = conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
            syncs = conn.execute(
                "SELECT COUNT(*) FROM sync_log WHERE action = 'sync_complete'"
            ).fetchone()[0]
            failures = conn.execute(
                "SELECT COUNT(*) FROM sync_log WHERE action = 'sync_failed'"
            ).fetchone()[0]

            return {
                "stored_keys": keys,
                "syncs_completed": syncs,
                "syncs_failed": failures,
            }


class SessionStore:
    """String key-value store that lives only as long as the process."""

    def __init__(self):
        self._values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str):
        self._values[key] = value

    def remove(self, key: str):
        self._values.pop(key, None)
