"""Tests for single-job execution."""

from __future__ import annotations

from helpers.games import CORRUPT_GAME, SHORT_GAME, TINUE_GAME, is_double_threat_tinue

from tinuefinder.engine.tak_rules import TakRules
from tinuefinder.jobs.models import GameRecord, OutcomeStatus, SearchJob
from tinuefinder.jobs.worker import execute_job
from tinuefinder.notation import split_server_notation


def _job(
    notation: str = TINUE_GAME,
    *,
    undo: int = 3,
    max_depth: int = 3,
    unique_only: bool = False,
) -> SearchJob:
    game = GameRecord(id=11, size=3, moves=split_server_notation(notation), result="R-0")
    return SearchJob(game=game, plies_to_undo=undo, max_depth=max_depth, unique_only=unique_only)


class TestExecuteJob:
    def test_found_tinue(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.FOUND
        assert outcome.depth == 3
        assert outcome.result is not None
        assert outcome.result.game_id == 11
        assert outcome.result.start_ply == 4
        assert is_double_threat_tinue(outcome.result.moves)
        assert outcome.line == outcome.result.moves
        assert outcome.result.length == 3
        assert outcome.result.size == 3
        assert outcome.result.plies_to_undo == 3

    def test_unique_tinue_is_still_found(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(unique_only=True), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.FOUND

    def test_immediate_win_is_not_a_result(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(undo=1), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.IMMEDIATE_WIN
        assert outcome.result is None
        assert outcome.line == ("a3",)

    def test_not_found_within_budget(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(max_depth=2), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert outcome.result is None
        assert outcome.depth == 2

    def test_invalid_undo(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(SHORT_GAME), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.INVALID_UNDO
        assert "cannot undo 3 plies" in outcome.reason

    def test_corrupt_game(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(CORRUPT_GAME), tak_rules, lambda: False)
        assert outcome.status == OutcomeStatus.CORRUPT_GAME
        assert "P A2" in outcome.reason

    def test_cancelled_before_start(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(), tak_rules, lambda: True)
        assert outcome.status == OutcomeStatus.CANCELLED

    def test_cancelled_during_search(self, tak_rules: TakRules) -> None:
        calls = 0

        def cancel_after_start() -> bool:
            nonlocal calls
            calls += 1
            return calls > 1

        outcome = execute_job(_job(), tak_rules, cancel_after_start)
        assert outcome.status == OutcomeStatus.CANCELLED
        assert outcome.reason == "cancelled during search"
        assert outcome.result is None

    def test_without_cancel_check_uses_process_event(self, tak_rules: TakRules) -> None:
        outcome = execute_job(_job(), tak_rules)
        assert outcome.status == OutcomeStatus.FOUND
