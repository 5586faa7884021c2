"""
SQLite schema for Agency Leadership saves.
One DB file; each game is a JSON document in a single row keyed by game id.
"""
import sqlite3
from pathlib import Path

# Save path (relative to project root)
DB_DIR = "data"
DB_FILENAME = "agency.db"


def get_db_path() -> Path:
    """Return absolute path to the save DB file. DB_DIR may be absolute (tests)."""
    root = Path(__file__).resolve().parent.parent
    return root / DB_DIR / DB_FILENAME


def _ensure_db_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def get_connection() -> sqlite3.Connection:
    """Open a connection to the save DB. Creates dir and file if needed.
    timeout: seconds to wait for lock (avoids 'database is locked' under concurrent requests).
    """
    path = get_db_path()
    _ensure_db_dir(path)
    conn = sqlite3.connect(str(path), timeout=15.0)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection | None = None) -> None:
    """Create all tables if they do not exist."""
    close = False
    if conn is None:
        conn = get_connection()
        close = True
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS games (
                game_id TEXT PRIMARY KEY,
                game_name TEXT NOT NULL DEFAULT '',
                current_quarter INTEGER NOT NULL DEFAULT 1,
                is_complete INTEGER NOT NULL DEFAULT 0,
                data TEXT NOT NULL,
                created_at TEXT DEFAULT (datetime('now')),
                updated_at TEXT DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_games_updated
                ON games(updated_at DESC);
        """)
        conn.commit()
    finally:
        if close:
            conn.close()
