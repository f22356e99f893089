"""Result persister: idempotent writes of proven tinues."""

from __future__ import annotations

import json
import logging
import sqlite3

from tinuefinder.errors import StorageUnavailable
from tinuefinder.jobs.models import TinueResult

_LOGGER = logging.getLogger(__name__)


class ResultPersister:
    """Writes each (game, start ply) tinue at most once.

    Must be used from a single thread; the scheduler funnels every result to
    the coordinating thread for that reason.
    """

    __slots__ = ("_conn", "_dry_run")

    def __init__(self, conn: sqlite3.Connection, *, dry_run: bool = False) -> None:
        self._conn = conn
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def has_result(self, game_id: int, start_ply: int) -> bool:
        try:
            row = self._conn.execute(
                "SELECT 1 FROM tinues WHERE gameid = ? AND start_ply = ?",
                (game_id, start_ply),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Cannot read tinues: {exc}") from exc
        return row is not None

    def persist(self, result: TinueResult) -> bool:
        """Store *result*; return ``False`` when an equal key already exists."""
        if self._dry_run:
            _LOGGER.info(
                "Dry run: would store tinue for game %d at ply %d: %s",
                result.game_id,
                result.start_ply,
                " ".join(result.moves),
            )
            return False

        try:
            with self._conn:
                self._conn.execute("BEGIN IMMEDIATE")
                if self.has_result(result.game_id, result.start_ply):
                    _LOGGER.debug(
                        "Tinue for game %d at ply %d already stored",
                        result.game_id,
                        result.start_ply,
                    )
                    return False
                self._conn.execute(
                    "INSERT INTO tinues "
                    "(gameid, size, plies_to_undo, start_ply, tinue_depth, tinue) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        result.game_id,
                        result.size,
                        result.plies_to_undo,
                        result.start_ply,
                        result.length,
                        json.dumps(list(result.moves)),
                    ),
                )
        except sqlite3.IntegrityError:
            # Another writer stored the same key between our check and insert.
            _LOGGER.debug("Concurrent insert for game %d ignored", result.game_id)
            return False
        except sqlite3.Error as exc:
            raise StorageUnavailable(
                f"Cannot store tinue for game {result.game_id}: {exc}"
            ) from exc
        return True
