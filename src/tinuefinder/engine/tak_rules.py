"""Tak implementation of the rules-engine protocol, backed by :mod:`takpy`."""

from __future__ import annotations

from takpy import Color, Game, GameResult, Move, new_game

from tinuefinder.errors import IllegalMoveError
from tinuefinder.notation import is_server_move, server_to_ptn


class TakRules:
    """Stateless adapter from :mod:`takpy` games to the search layers.

    Positions are ``takpy.Game`` values: every move is applied with
    ``clone_and_play``, so a position is never mutated once created. Move
    order is ``Game.possible_moves()`` order. The adapter holds no state, so
    one instance can be shared by every worker thread and pickled into worker
    processes.
    """

    __slots__ = ()

    def start_position(self, size: int) -> Game:
        # takpy raises ValueError for sizes outside 3..8.
        return new_game(size)

    def parse_move(self, position: Game, text: str) -> Move:
        """Accept playtak server notation (``P A1 C``) or PTN (``Ca1``)."""
        token = text.strip()
        ptn = server_to_ptn(token, position.size) if is_server_move(token) else token
        move = Move(ptn)
        if move not in self.legal_moves(position):
            raise IllegalMoveError(f"Illegal move {ptn} at ply {position.ply}")
        return move

    def format_move(self, position: Game, move: Move) -> str:
        return str(move)

    def legal_moves(self, position: Game) -> list[Move]:
        if self.is_game_over(position):
            return []
        return position.possible_moves()

    def apply_move(self, position: Game, move: Move) -> Game:
        if self.is_game_over(position):
            raise IllegalMoveError(f"{move} played after the game ended")
        try:
            return position.clone_and_play(move)
        except ValueError as exc:
            raise IllegalMoveError(f"Illegal move {move}: {exc}") from exc

    def side_to_move(self, position: Game) -> Color:
        return position.to_move

    def is_win_for(self, position: Game, side: Color) -> bool:
        return position.result().color() == side

    def is_game_over(self, position: Game) -> bool:
        return position.result() != GameResult.Ongoing
