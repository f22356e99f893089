"""Shared search models and the rules-engine protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

PositionT = TypeVar("PositionT")
MoveT = TypeVar("MoveT")

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single position."""

    max_depth: int = 3
    min_depth: int = 1
    unique_only: bool = False


@dataclass(slots=True, frozen=True)
class TinueLine(Generic[MoveT]):
    """Proven forced-win line, starting with the prover's move."""

    moves: tuple[MoveT, ...]

    @property
    def length(self) -> int:
        return len(self.moves)


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the tinue search."""

    line: TinueLine[Any] | None
    depth: int
    nodes: int
    ambiguous: bool = False

    @property
    def found(self) -> bool:
        return self.line is not None


class RulesEngine(Protocol[PositionT, MoveT]):
    """Game rules consumed by the replay and search layers.

    Positions are treated as values: :meth:`apply_move` returns a new
    position and never mutates its argument.
    """

    def start_position(self, size: int) -> PositionT: ...

    def parse_move(self, position: PositionT, text: str) -> MoveT:
        """Parse stored move text; raises ``ValueError`` when malformed."""
        ...

    def format_move(self, position: PositionT, move: MoveT) -> str: ...

    def legal_moves(self, position: PositionT) -> list[MoveT]:
        """Legal moves in the engine's canonical, deterministic order."""
        ...

    def apply_move(self, position: PositionT, move: MoveT) -> PositionT:
        """Return the successor position; raises ``IllegalMoveError``."""
        ...

    def side_to_move(self, position: PositionT) -> Any: ...

    def is_win_for(self, position: PositionT, side: Any) -> bool: ...

    def is_game_over(self, position: PositionT) -> bool: ...
