"""Exception hierarchy for the tinue finder.

Fatal errors (:class:`StorageUnavailable`, :class:`ConfigurationError`) abort
a run. :class:`GameSkipped` subclasses are recovered per game: the worker
turns them into skipped outcomes and the run continues.
"""

from __future__ import annotations


class TinueFinderError(Exception):
    """Base class for all tinue finder errors."""

    code = "TINUE_FINDER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(TinueFinderError):
    """Invalid run configuration."""

    code = "CONFIGURATION_ERROR"


class StorageUnavailable(TinueFinderError):
    """The games database cannot be opened, read or written."""

    code = "STORAGE_UNAVAILABLE"


class IllegalMoveError(TinueFinderError, ValueError):
    """The rules engine rejected a move for the given position."""

    code = "ILLEGAL_MOVE"


class SearchCancelled(TinueFinderError):
    """A search observed the run-wide cancellation signal."""

    code = "SEARCH_CANCELLED"

    def __init__(self, message: str = "Search cancelled") -> None:
        super().__init__(message)


class InvalidTinueLine(TinueFinderError):
    """A proven line does not end in a win for the side that started it."""

    code = "INVALID_TINUE_LINE"


class GameSkipped(TinueFinderError):
    """Base class for per-game problems that skip one game only."""

    code = "GAME_SKIPPED"

    def __init__(self, game_id: int, message: str) -> None:
        super().__init__(message)
        self.game_id = game_id


class CorruptGameError(GameSkipped):
    """A stored move does not parse or is illegal in the replayed position."""

    code = "CORRUPT_GAME"

    def __init__(self, game_id: int, ply: int, move_text: str, reason: str) -> None:
        super().__init__(game_id, f"game {game_id}: bad move {move_text!r} at ply {ply}: {reason}")
        self.ply = ply
        self.move_text = move_text
        self.reason = reason


class InvalidUndoCount(GameSkipped):
    """The game is too short for the requested number of plies to undo."""

    code = "INVALID_UNDO_COUNT"

    def __init__(self, game_id: int, plies_to_undo: int, game_length: int) -> None:
        super().__init__(
            game_id,
            f"game {game_id}: cannot undo {plies_to_undo} plies of a {game_length}-ply game",
        )
        self.plies_to_undo = plies_to_undo
        self.game_length = game_length
