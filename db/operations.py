"""
Database operations for Agency Leadership saves.
Games are stored as the JSON produced by GameSession.to_dict.
"""
import json
import logging
import sqlite3
from typing import Any

from .schema import get_connection, init_db

_log = logging.getLogger("agency.db")


def _open(conn: sqlite3.Connection | None) -> tuple[sqlite3.Connection, bool]:
    if conn is not None:
        return conn, False
    conn = get_connection()
    init_db(conn)
    return conn, True


def save_game(data: dict[str, Any], conn: sqlite3.Connection | None = None) -> str:
    """Upsert an exported game. Returns its game id."""
    config = data["config"]
    game_id = config["game_id"]
    blob = json.dumps(data)
    conn, close = _open(conn)
    try:
        conn.execute(
            """
            INSERT INTO games (game_id, game_name, current_quarter, is_complete, data)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(game_id)
            DO UPDATE SET game_name=excluded.game_name, current_quarter=excluded.current_quarter,
                          is_complete=excluded.is_complete, data=excluded.data,
                          updated_at=datetime('now')
            """,
            (game_id, config.get("game_name", ""), data.get("current_quarter", 1),
             int(bool(data.get("is_complete"))), blob),
        )
        conn.commit()
        _log.debug("Saved game %s (%d bytes)", game_id, len(blob))
        return game_id
    finally:
        if close:
            conn.close()


def load_game(game_id: str, conn: sqlite3.Connection | None = None) -> dict[str, Any] | None:
    """Exported game dict, or None when nothing is saved under ``game_id``."""
    conn, close = _open(conn)
    try:
        row = conn.execute("SELECT data FROM games WHERE game_id = ?", (game_id,)).fetchone()
        return json.loads(row["data"]) if row else None
    finally:
        if close:
            conn.close()


def list_games(conn: sqlite3.Connection | None = None) -> list[dict[str, Any]]:
    """Saved game summaries, most recently updated first."""
    conn, close = _open(conn)
    try:
        rows = conn.execute(
            "SELECT game_id, game_name, current_quarter, is_complete, updated_at FROM games ORDER BY updated_at DESC, game_id"
        ).fetchall()
        return [
            {
                "game_id": r["game_id"],
                "game_name": r["game_name"],
                "current_quarter": r["current_quarter"],
                "is_complete": bool(r["is_complete"]),
                "updated_at": r["updated_at"],
            }
            for r in rows
        ]
    finally:
        if close:
            conn.close()


def delete_game(game_id: str, conn: sqlite3.Connection | None = None) -> bool:
    """Delete a saved game. Returns True if a row was removed."""
    conn, close = _open(conn)
    try:
        cur = conn.execute("DELETE FROM games WHERE game_id = ?", (game_id,))
        conn.commit()
        return cur.rowcount > 0
    finally:
        if close:
            conn.close()
