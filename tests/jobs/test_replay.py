"""Tests for position replay."""

from __future__ import annotations

import pytest
from helpers.games import CORRUPT_GAME, TINUE_GAME, TINUE_START_TPS
from helpers.tree_game import tinue_in_three
from takpy import game_from_tps

from tinuefinder.engine.tak_rules import TakRules
from tinuefinder.errors import CorruptGameError, GameSkipped, InvalidUndoCount
from tinuefinder.jobs.models import GameRecord
from tinuefinder.jobs.replay import replay_game
from tinuefinder.notation import split_server_notation


def _game(notation: str, size: int = 3, game_id: int = 1) -> GameRecord:
    return GameRecord(id=game_id, size=size, moves=split_server_notation(notation), result="R-0")


class TestReplay:
    def test_strips_trailing_plies(self, tak_rules: TakRules) -> None:
        replayed = replay_game(_game(TINUE_GAME), 3, tak_rules)
        assert replayed.next_ply == 4
        assert repr(replayed.position) == repr(game_from_tps(3, TINUE_START_TPS))
        assert replayed.position.ply == 4

    def test_zero_undo_replays_whole_game(self, tak_rules: TakRules) -> None:
        replayed = replay_game(_game(TINUE_GAME), 0, tak_rules)
        assert replayed.next_ply == 7
        assert tak_rules.is_game_over(replayed.position)

    def test_largest_valid_undo_starts_from_scratch(self, tak_rules: TakRules) -> None:
        replayed = replay_game(_game(TINUE_GAME), 6, tak_rules)
        assert replayed.next_ply == 1

    def test_works_with_any_rules_engine(self) -> None:
        game = GameRecord(id=9, size=0, moves=("a", "a1", "a1w"))
        replayed = replay_game(game, 2, tinue_in_three())
        assert replayed.position.node == "a"
        assert replayed.next_ply == 1


class TestReplayErrors:
    @pytest.mark.parametrize("undo", [7, 8, -1])
    def test_invalid_undo_count(self, tak_rules: TakRules, undo: int) -> None:
        with pytest.raises(InvalidUndoCount) as excinfo:
            replay_game(_game(TINUE_GAME, game_id=5), undo, tak_rules)
        assert excinfo.value.game_id == 5
        assert excinfo.value.game_length == 7

    def test_illegal_move_is_corrupt(self, tak_rules: TakRules) -> None:
        with pytest.raises(CorruptGameError) as excinfo:
            replay_game(_game(CORRUPT_GAME), 3, tak_rules)
        assert excinfo.value.ply == 2
        assert excinfo.value.move_text == "P A2"

    def test_unparsable_move_is_corrupt(self, tak_rules: TakRules) -> None:
        with pytest.raises(CorruptGameError) as excinfo:
            replay_game(_game("P A1,P Z9,P B1,P C1"), 1, tak_rules)
        assert excinfo.value.ply == 1

    def test_move_after_game_end_is_corrupt(self, tak_rules: TakRules) -> None:
        with pytest.raises(CorruptGameError):
            replay_game(_game(TINUE_GAME + ",P B2,P C3"), 0, tak_rules)

    def test_unsupported_board_size_is_corrupt(self, tak_rules: TakRules) -> None:
        with pytest.raises(CorruptGameError):
            replay_game(_game("P A1,P B1,P C1", size=9), 1, tak_rules)

    def test_errors_skip_the_game_only(self, tak_rules: TakRules) -> None:
        with pytest.raises(GameSkipped):
            replay_game(_game(CORRUPT_GAME), 3, tak_rules)
