"""Explicit game tree implementing the rules-engine protocol.

Lets search tests describe exactly which lines win, escape or draw without
depending on a real rules engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from tinuefinder.errors import IllegalMoveError


@dataclass(frozen=True, slots=True)
class TreePosition:
    node: str
    side: int


class TreeGame:
    """Game whose positions are nodes of a hand-written tree.

    ``edges`` maps a node to its children in move order; a move is named by
    the child it leads to, so node names must be unique. ``wins`` maps
    terminal nodes to the winning side (0 or 1); ``draws`` lists drawn
    terminal nodes. Nodes without children that are not terminal simply
    have no legal moves.
    """

    def __init__(
        self,
        edges: Mapping[str, Sequence[str]],
        wins: Mapping[str, int] | None = None,
        draws: Iterable[str] = (),
        start: str = "root",
    ) -> None:
        self._edges = {node: tuple(children) for node, children in edges.items()}
        self._wins = dict(wins or {})
        self._draws = frozenset(draws)
        self._start = start
        self.applied: list[str] = []

    def start_position(self, size: int) -> TreePosition:
        return TreePosition(self._start, 0)

    def parse_move(self, position: TreePosition, text: str) -> str:
        move = text.strip()
        if not move:
            raise ValueError("empty move")
        return move

    def format_move(self, position: TreePosition, move: str) -> str:
        return move

    def legal_moves(self, position: TreePosition) -> list[str]:
        if self.is_game_over(position):
            return []
        return list(self._edges.get(position.node, ()))

    def apply_move(self, position: TreePosition, move: str) -> TreePosition:
        if move not in self.legal_moves(position):
            raise IllegalMoveError(f"{move} is not playable from {position.node}")
        self.applied.append(move)
        return TreePosition(move, 1 - position.side)

    def side_to_move(self, position: TreePosition) -> int:
        return position.side

    def is_win_for(self, position: TreePosition, side: object) -> bool:
        return self._wins.get(position.node) == side

    def is_game_over(self, position: TreePosition) -> bool:
        return position.node in self._wins or position.node in self._draws


TINUE_EDGES: dict[str, list[str]] = {
    "root": ["b", "a"],
    "b": ["b1", "b2"],
    "b1": ["b1x"],
    "b2": ["b2w"],
    "a": ["a1", "a2"],
    "a1": ["a1x", "a1w"],
    "a2": ["a2w"],
}
TINUE_WINS: dict[str, int] = {"b2w": 0, "a1w": 0, "a2w": 0}


def tinue_in_three() -> TreeGame:
    """Root side wins in exactly three plies by playing ``a``; ``b`` fails."""
    return TreeGame(TINUE_EDGES, TINUE_WINS)


def tinue_forest(
    prefixes: Sequence[str],
    dead_ends: Sequence[str] = (),
    game_type: type[TreeGame] = TreeGame,
) -> TreeGame:
    """Tree whose ``start`` moves hand the opponent a position to prove.

    After prefix ``p`` the side to move (side 1) wins with ``py, py1, py1w``;
    after a dead end ``q`` it has no tinue at all. Every prefix yields a
    different line.
    """
    edges: dict[str, list[str]] = {"start": [*prefixes, *dead_ends]}
    wins: dict[str, int] = {}
    for p in prefixes:
        edges[p] = [f"{p}x", f"{p}y"]
        edges[f"{p}x"] = [f"{p}x1"]
        edges[f"{p}y"] = [f"{p}y1", f"{p}y2"]
        edges[f"{p}y1"] = [f"{p}y1w"]
        edges[f"{p}y2"] = [f"{p}y2w"]
        wins[f"{p}y1w"] = 1
        wins[f"{p}y2w"] = 1
    for q in dead_ends:
        edges[q] = [f"{q}x"]
        edges[f"{q}x"] = [f"{q}x1"]
    return game_type(edges, wins, start="start")


def forest_moves(prefix: str) -> tuple[str, ...]:
    """Four stored moves whose first ply is *prefix*."""
    return (prefix, f"{prefix}y", f"{prefix}y1", f"{prefix}y1w")
