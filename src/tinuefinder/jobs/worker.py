"""Per-game job execution: replay, search and classification.

:func:`execute_job` is a module-level function so that process pools can
pickle it by reference. Every per-game failure mode is turned into a
:class:`JobOutcome`; only unexpected exceptions escape.
"""

from __future__ import annotations

import signal
from time import perf_counter
from typing import Any

from tinuefinder.engine.search import CancelCheck, RulesEngine, SearchLimits, TinueLine
from tinuefinder.engine.tinue_search import TinueSearcher
from tinuefinder.errors import (
    CorruptGameError,
    InvalidTinueLine,
    InvalidUndoCount,
    SearchCancelled,
)
from tinuefinder.jobs.models import JobOutcome, OutcomeStatus, SearchJob, TinueResult
from tinuefinder.jobs.replay import replay_game

# Shortest line worth keeping; one-move wins are not puzzles.
MIN_TINUE_LENGTH = 2

# Cancel event installed by :func:`init_process_worker` in pool processes.
_process_cancel_event: Any = None


def init_process_worker(cancel_event: Any) -> None:
    """Process pool initializer: share the run-wide cancel event.

    Workers ignore SIGINT; the coordinator handles the interrupt and sets the
    event instead.
    """
    global _process_cancel_event
    signal.signal(signal.SIGINT, signal.SIG_IGN)
    _process_cancel_event = cancel_event


def _process_cancel_check() -> bool:
    return _process_cancel_event is not None and _process_cancel_event.is_set()


def execute_job(
    job: SearchJob,
    rules: RulesEngine[Any, Any],
    is_cancelled: CancelCheck | None = None,
) -> JobOutcome:
    """Run one job to completion and classify the result."""
    cancelled = is_cancelled or _process_cancel_check
    game = job.game
    started = perf_counter()

    if cancelled():
        return JobOutcome(game.id, OutcomeStatus.CANCELLED, reason="cancelled before start")

    try:
        replayed = replay_game(game, job.plies_to_undo, rules)
    except InvalidUndoCount as exc:
        return JobOutcome(game.id, OutcomeStatus.INVALID_UNDO, reason=exc.message)
    except CorruptGameError as exc:
        return JobOutcome(game.id, OutcomeStatus.CORRUPT_GAME, reason=exc.message)

    searcher = TinueSearcher(rules)
    limits = SearchLimits(max_depth=job.max_depth, unique_only=job.unique_only)
    try:
        result = searcher.search(replayed.position, limits, cancelled)
    except SearchCancelled:
        return JobOutcome(
            game.id,
            OutcomeStatus.CANCELLED,
            reason="cancelled during search",
            nodes=searcher.nodes,
            elapsed_ms=_elapsed_ms(started),
        )

    elapsed_ms = _elapsed_ms(started)
    if result.ambiguous:
        return JobOutcome(
            game.id,
            OutcomeStatus.AMBIGUOUS,
            reason=f"several first moves win in {result.depth}",
            depth=result.depth,
            nodes=result.nodes,
            elapsed_ms=elapsed_ms,
        )
    if result.line is None:
        return JobOutcome(
            game.id,
            OutcomeStatus.NOT_FOUND,
            depth=result.depth,
            nodes=result.nodes,
            elapsed_ms=elapsed_ms,
        )

    line = format_line(rules, replayed.position, result.line)
    if result.line.length < MIN_TINUE_LENGTH:
        return JobOutcome(
            game.id,
            OutcomeStatus.IMMEDIATE_WIN,
            line=line,
            depth=result.depth,
            nodes=result.nodes,
            elapsed_ms=elapsed_ms,
        )

    tinue = TinueResult(
        game_id=game.id,
        start_ply=replayed.next_ply,
        moves=line,
        size=game.size,
        plies_to_undo=job.plies_to_undo,
    )
    return JobOutcome(
        game.id,
        OutcomeStatus.FOUND,
        result=tinue,
        line=line,
        depth=result.depth,
        nodes=result.nodes,
        elapsed_ms=elapsed_ms,
    )


def format_line(
    rules: RulesEngine[Any, Any], position: Any, line: TinueLine[Any]
) -> tuple[str, ...]:
    """Render *line* as move text, replaying it from *position*."""
    prover = rules.side_to_move(position)
    texts: list[str] = []
    for move in line.moves:
        texts.append(rules.format_move(position, move))
        position = rules.apply_move(position, move)
    if not rules.is_win_for(position, prover):
        raise InvalidTinueLine(" ".join(texts) + " does not end in a win")
    return tuple(texts)


def _elapsed_ms(started: float) -> float:
    return (perf_counter() - started) * 1000.0
