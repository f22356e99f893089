"""Candidate query: games eligible for a tinue search."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Sequence

from tinuefinder.notation import split_server_notation
from tinuefinder.errors import StorageUnavailable
from tinuefinder.jobs.models import ROAD_RESULTS, GameRecord

_LOGGER = logging.getLogger(__name__)

_DEFAULT_PAGE_SIZE = 500


class CandidateQuery:
    """Lazy, restartable read of finished games of one board size.

    Games are read in id order, one page at a time (keyset pagination), so no
    statement stays open while results are being written on the same
    connection, and a run can resume from any game id.
    """

    __slots__ = ("_conn", "_page_size")

    def __init__(self, conn: sqlite3.Connection, page_size: int = _DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("Page size must be >= 1")
        self._conn = conn
        self._page_size = page_size

    def iter_games(
        self,
        size: int,
        *,
        min_id: int = 0,
        result_types: Sequence[str] = ROAD_RESULTS,
    ) -> Iterator[GameRecord]:
        """Yield games of *size* with one of *result_types*, ``id >= min_id``."""
        if not result_types:
            return
        placeholders = ", ".join("?" for _ in result_types)
        sql = (
            "SELECT id, size, notation, result FROM games "
            f"WHERE size = ? AND result IN ({placeholders}) AND id > ? "
            "ORDER BY id LIMIT ?"
        )
        last_id = min_id - 1
        while True:
            try:
                rows = self._conn.execute(
                    sql, (size, *result_types, last_id, self._page_size)
                ).fetchall()
            except sqlite3.Error as exc:
                raise StorageUnavailable(f"Cannot read games: {exc}") from exc
            for game_id, game_size, notation, result in rows:
                yield GameRecord(
                    id=int(game_id),
                    size=int(game_size),
                    moves=split_server_notation(notation or ""),
                    result=result or "",
                )
            if len(rows) < self._page_size:
                return
            last_id = int(rows[-1][0])
            _LOGGER.debug("Read games up to id %d", last_id)
