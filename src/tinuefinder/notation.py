"""Playtak server notation, as stored in the games database.

Placements read ``P A1`` with an optional ``C`` (capstone) or ``W`` (wall)
suffix; spreads read ``M A1 A3 2 1``: origin, final square, then the number
of stones dropped on each square along the way. A game is a comma-separated
list of such moves.

:mod:`takpy` only reads PTN, so server moves are rewritten to PTN text
(``P A1 W`` -> ``Sa1``, ``M A1 A3 2 1`` -> ``3a1+21``) before parsing.
"""

from __future__ import annotations

_PLACEMENT_PREFIX: dict[str, str] = {"": "", "W": "S", "C": "C"}

SERVER_PREFIXES = ("P ", "M ")


def split_server_notation(notation: str) -> tuple[str, ...]:
    """Split a stored game into move tokens, dropping blanks."""
    return tuple(token.strip() for token in notation.split(",") if token.strip())


def is_server_move(text: str) -> bool:
    return text.strip()[:2].upper() in SERVER_PREFIXES


def server_to_ptn(text: str, size: int) -> str:
    """Rewrite one server-notation move as PTN for a board of *size*."""
    parts = text.split()
    if not parts:
        raise ValueError("Empty server move")

    kind = parts[0].upper()
    if kind == "P":
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid placement: {text!r}")
        suffix = parts[2].upper() if len(parts) == 3 else ""
        if suffix not in _PLACEMENT_PREFIX:
            raise ValueError(f"Invalid placement suffix: {text!r}")
        file, rank = _parse_square(parts[1], size)
        return _PLACEMENT_PREFIX[suffix] + _square_name(file, rank)

    if kind == "M":
        if len(parts) < 4:
            raise ValueError(f"Invalid spread: {text!r}")
        start = _parse_square(parts[1], size)
        end = _parse_square(parts[2], size)
        try:
            drops = [int(part) for part in parts[3:]]
        except ValueError:
            raise ValueError(f"Invalid drop counts: {text!r}") from None
        if any(count < 1 for count in drops):
            raise ValueError(f"Drop counts must be positive: {text!r}")
        symbol, distance = _direction_between(start, end)
        if distance != len(drops):
            raise ValueError(f"Drop count does not match distance: {text!r}")
        carry = sum(drops)
        if carry > size:
            raise ValueError(f"Cannot carry {carry} stones on a {size}x{size} board")
        return (
            f"{carry}{_square_name(*start)}{symbol}"
            + "".join(str(count) for count in drops)
        )

    raise ValueError(f"Unknown server move type: {text!r}")


def _parse_square(name: str, size: int) -> tuple[int, int]:
    if len(name) != 2:
        raise ValueError(f"Invalid square: {name!r}")
    file = ord(name[0].lower()) - ord("a")
    rank = ord(name[1]) - ord("1")
    if not (0 <= file < size and 0 <= rank < size):
        raise ValueError(f"Square {name!r} is off a {size}x{size} board")
    return file, rank


def _square_name(file: int, rank: int) -> str:
    return f"{chr(ord('a') + file)}{rank + 1}"


def _direction_between(start: tuple[int, int], end: tuple[int, int]) -> tuple[str, int]:
    df = end[0] - start[0]
    dr = end[1] - start[1]
    if df == 0 and dr > 0:
        return "+", dr
    if df == 0 and dr < 0:
        return "-", -dr
    if dr == 0 and df > 0:
        return ">", df
    if dr == 0 and df < 0:
        return "<", -df
    raise ValueError("Spread must move along a rank or a file")
