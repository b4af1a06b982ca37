import logging
import os
import sqlite3
from typing import Any, Dict, List, Optional

from gdziestoja.config import load_settings

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS posts (
    post_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    title       TEXT,
    location    TEXT,
    description TEXT,
    date_added  DATETIME,
    author      TEXT,
    rating      REAL
);
CREATE UNIQUE INDEX IF NOT EXISTS uniq_post_natural_key ON posts(title, location);

CREATE TABLE IF NOT EXISTS comments (
    comment_id INTEGER PRIMARY KEY AUTOINCREMENT,
    post_id    INTEGER NOT NULL,
    parent_id  INTEGER,
    text       TEXT,
    author     TEXT,
    score      TEXT,
    timestamp  TEXT,
    FOREIGN KEY (post_id) REFERENCES posts(post_id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS urls (
    url_id  INTEGER PRIMARY KEY AUTOINCREMENT,
    type    TEXT NOT NULL,
    url     TEXT UNIQUE NOT NULL,
    created DATETIME
);
"""

_conn: Optional[sqlite3.Connection] = None


def get_connection() -> sqlite3.Connection:
    """Return the shared SQLite connection, creating the file and schema on first use."""
    global _conn
    if _conn is None:
        path = load_settings().db_path
        try:
            if path != ":memory:":
                parent = os.path.dirname(os.path.abspath(path))
                os.makedirs(parent, exist_ok=True)
            conn = sqlite3.connect(path)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
            conn.executescript(SCHEMA_SQL)
        except (OSError, sqlite3.Error) as exc:
            raise RuntimeError(
                f"Failed to open SQLite database at '{path}'. Check GDZIESTOJA_DB_PATH and directory permissions.\nError: {exc}"
            ) from exc
        logger.debug("Opened SQLite database %s", path)
        _conn = conn
    return _conn


def close_connection():
    global _conn
    if _conn is not None:
        _conn.close()
        _conn = None


def run_sql(query: str, parameters: dict = None) -> List[Dict[str, Any]]:
    """Run one statement in its own transaction and return the rows as dicts."""
    conn = get_connection()
    with conn:
        cur = conn.execute(query, parameters or {})
        rows = cur.fetchall()
    return [dict(r) for r in rows]


def execute(query: str, parameters: dict = None) -> sqlite3.Cursor:
    """Run one write statement, committed immediately; callers read lastrowid/rowcount."""
    conn = get_connection()
    with conn:
        cur = conn.execute(query, parameters or {})
    return cur
