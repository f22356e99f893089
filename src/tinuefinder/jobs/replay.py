"""Position replay: rebuild the search-starting position of a stored game."""

from __future__ import annotations

from typing import Any

from tinuefinder.engine.search import RulesEngine
from tinuefinder.errors import CorruptGameError, InvalidUndoCount
from tinuefinder.jobs.models import GameRecord, ReplayedPosition


def replay_game(
    game: GameRecord,
    plies_to_undo: int,
    rules: RulesEngine[Any, Any],
) -> ReplayedPosition:
    """Apply all but the last *plies_to_undo* moves of *game*.

    Raises :class:`InvalidUndoCount` when the game has no more than
    *plies_to_undo* moves and :class:`CorruptGameError` when a move in the
    replayed prefix does not parse or is illegal.
    """
    if plies_to_undo < 0 or plies_to_undo >= game.length:
        raise InvalidUndoCount(game.id, plies_to_undo, game.length)

    next_ply = game.length - plies_to_undo
    try:
        position = rules.start_position(game.size)
    except ValueError as exc:
        raise CorruptGameError(game.id, 0, "", str(exc)) from exc

    for ply, text in enumerate(game.moves[:next_ply]):
        try:
            move = rules.parse_move(position, text)
            position = rules.apply_move(position, move)
        except ValueError as exc:
            raise CorruptGameError(game.id, ply, text, str(exc)) from exc
    return ReplayedPosition(position, next_ply)
