"""SQLite connection handling and the tinues table schema."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from tinuefinder.errors import StorageUnavailable

_LOGGER = logging.getLogger(__name__)

# Seconds to wait on a locked database before giving up.
_BUSY_TIMEOUT_S = 30.0

TINUES_SCHEMA = """
CREATE TABLE IF NOT EXISTS tinues (
    id INTEGER PRIMARY KEY,
    gameid INTEGER NOT NULL REFERENCES games(id),
    size INTEGER NOT NULL,
    plies_to_undo INTEGER NOT NULL,
    start_ply INTEGER NOT NULL,
    tinue_depth INTEGER NOT NULL,
    tinue TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_tinues_game_start_ply
    ON tinues (gameid, start_ply);
"""


def open_database(path: str | Path) -> sqlite3.Connection:
    """Open an existing games database for reading and writing.

    The file is never created: a missing file, an unreadable file or a
    database without a ``games`` table raises :class:`StorageUnavailable`.
    """
    db_path = Path(path)
    if not db_path.is_file():
        raise StorageUnavailable(f"Database not found: {db_path}")

    uri = db_path.resolve().as_uri() + "?mode=rw"
    try:
        conn = sqlite3.connect(uri, uri=True, timeout=_BUSY_TIMEOUT_S)
    except sqlite3.Error as exc:
        raise StorageUnavailable(f"Cannot open database {db_path}: {exc}") from exc

    try:
        row = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'games'"
        ).fetchone()
    except sqlite3.Error as exc:
        conn.close()
        raise StorageUnavailable(f"Cannot read database {db_path}: {exc}") from exc
    if row is None:
        conn.close()
        raise StorageUnavailable(f"Database {db_path} has no games table")

    _LOGGER.debug("Opened database %s", db_path)
    return conn


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the tinues table and its uniqueness index when missing.

    A ``tinues`` table written by older tools has no ``start_ply`` column;
    it is reported instead of being altered or reused.
    """
    try:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(tinues)")}
        if columns and "start_ply" not in columns:
            raise StorageUnavailable(
                "Existing tinues table has no start_ply column; "
                "migrate or drop it before running"
            )
        conn.executescript(TINUES_SCHEMA)
        conn.commit()
    except sqlite3.Error as exc:
        raise StorageUnavailable(f"Cannot prepare tinues table: {exc}") from exc
