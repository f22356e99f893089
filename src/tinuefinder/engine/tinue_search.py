"""Bounded-depth forced-win (tinue) search."""

from __future__ import annotations

import logging
from typing import Any

from tinuefinder.engine.search import (
    CancelCheck,
    RulesEngine,
    SearchLimits,
    SearchResult,
    TinueLine,
)
from tinuefinder.errors import SearchCancelled

_LOGGER = logging.getLogger(__name__)


def _never_cancelled() -> bool:
    return False


class TinueSearcher:
    """Proves or disproves a forced win for the side to move.

    One recursive routine serves both node types. At a proving node the
    prover needs *some* move that wins within the remaining depth; at a
    disproving node *every* reply of the defender must still lose. Depths are
    tried in increasing order, so the first line found is the shortest one.

    Line selection is deterministic: proving nodes try immediate wins first,
    then the remaining moves in the rules engine's order, and take the first
    that works; disproving nodes report the reply with the longest proven
    continuation, the earliest one on ties. The reported line therefore has
    exactly as many plies as the depth at which it was proven.
    """

    __slots__ = ("_rules", "_nodes", "_cancel_check", "_prover")

    def __init__(self, rules: RulesEngine[Any, Any]) -> None:
        self._rules = rules
        self._nodes = 0
        self._cancel_check: CancelCheck = _never_cancelled
        self._prover: Any = None

    @property
    def nodes(self) -> int:
        return self._nodes

    def search(
        self,
        position: Any,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        if limits.max_depth <= 0:
            raise ValueError("Search depth must be >= 1")
        if limits.min_depth <= 0 or limits.min_depth > limits.max_depth:
            raise ValueError("Minimum depth must be between 1 and the maximum depth")

        self._nodes = 0
        self._cancel_check = is_cancelled or _never_cancelled
        self._prover = self._rules.side_to_move(position)

        if self._rules.is_game_over(position):
            return SearchResult(None, 0, self._nodes)

        for depth in range(limits.min_depth, limits.max_depth + 1):
            line = self._search(position, depth, proving=True)
            if line is None:
                _LOGGER.debug("No tinue at depth %d (%d nodes)", depth, self._nodes)
                continue
            if limits.unique_only and self._has_alternative(position, depth, line[0]):
                _LOGGER.debug("Tinue at depth %d is not unique", depth)
                return SearchResult(None, depth, self._nodes, ambiguous=True)
            return SearchResult(TinueLine(tuple(line)), depth, self._nodes)

        return SearchResult(None, limits.max_depth, self._nodes)

    # ── Recursive search ─────────────────────────────────────────────────

    def _search(self, position: Any, depth: int, *, proving: bool) -> list[Any] | None:
        self._visit()
        if depth <= 0:
            return None
        if proving:
            return self._prove(position, depth)
        return self._disprove(position, depth)

    def _prove(self, position: Any, depth: int) -> list[Any] | None:
        rules = self._rules
        candidates: list[tuple[Any, Any]] = []
        for move in rules.legal_moves(position):
            child = rules.apply_move(position, move)
            if rules.is_win_for(child, self._prover):
                return [move]
            if not rules.is_game_over(child):
                candidates.append((move, child))

        if depth == 1:
            return None
        for move, child in candidates:
            line = self._search(child, depth - 1, proving=False)
            if line is not None:
                return [move, *line]
        return None

    def _disprove(self, position: Any, depth: int) -> list[Any] | None:
        rules = self._rules
        longest: list[Any] | None = None
        for move in rules.legal_moves(position):
            child = rules.apply_move(position, move)
            if rules.is_win_for(child, self._prover):
                line = [move]
            elif depth == 1 or rules.is_game_over(child):
                return None
            else:
                tail = self._search(child, depth - 1, proving=True)
                if tail is None:
                    return None
                line = [move, *tail]
            if longest is None or len(line) > len(longest):
                longest = line
        return longest

    def _has_alternative(self, position: Any, depth: int, chosen: Any) -> bool:
        """Whether a root move other than *chosen* also wins within *depth*."""
        rules = self._rules
        for move in rules.legal_moves(position):
            if move == chosen:
                continue
            self._visit()
            child = rules.apply_move(position, move)
            if rules.is_win_for(child, self._prover):
                return True
            if depth > 1 and not rules.is_game_over(child):
                if self._search(child, depth - 1, proving=False) is not None:
                    return True
        return False

    def _visit(self) -> None:
        self._nodes += 1
        if self._cancel_check():
            raise SearchCancelled()
