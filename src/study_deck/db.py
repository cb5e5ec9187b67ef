"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".study_deck" / "study_deck.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS state_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the state table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def read_value(db_path: str, key: str) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM state_store WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else None


def write_value(db_path: str, key: str, value: str, updated_at: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO state_store (key, value, updated_at) VALUES (?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=?, updated_at=?",
        (key, value, updated_at, value, updated_at),
    )
    conn.commit()
    conn.close()


def list_keys(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT key FROM state_store ORDER BY key").fetchall()
    conn.close()
    return [r["key"] for r in rows]
