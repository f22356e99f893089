"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest
from helpers.games import GAMES_TABLE

from tinuefinder.engine.tak_rules import TakRules
from tinuefinder.storage.database import ensure_schema, open_database

GameRow = tuple[int, int, str, str]


@pytest.fixture
def tak_rules() -> TakRules:
    return TakRules()


@pytest.fixture
def make_games_db(tmp_path: Path) -> Callable[[Sequence[GameRow]], Path]:
    """Create a games database holding ``(id, size, notation, result)`` rows."""

    def _create(rows: Sequence[GameRow]) -> Path:
        path = tmp_path / "games.db"
        conn = sqlite3.connect(path)
        try:
            conn.execute(GAMES_TABLE)
            with conn:
                conn.executemany(
                    "INSERT INTO games (id, size, notation, result) VALUES (?, ?, ?, ?)",
                    rows,
                )
        finally:
            conn.close()
        return path

    return _create


@pytest.fixture
def db_conn(
    make_games_db: Callable[[Sequence[GameRow]], Path],
) -> Iterator[sqlite3.Connection]:
    """Open connection to an empty games database with the tinues table."""
    conn = open_database(make_games_db([]))
    ensure_schema(conn)
    yield conn
    conn.close()
