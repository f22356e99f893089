"""Data models flowing through the tinue job pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# Result tokens of road wins in the games table.
ROAD_RESULTS: tuple[str, ...] = ("R-0", "0-R")


@dataclass(slots=True, frozen=True)
class GameRecord:
    """A completed game as stored in the games table."""

    id: int
    size: int
    moves: tuple[str, ...]
    result: str = ""

    @property
    def length(self) -> int:
        return len(self.moves)


@dataclass(slots=True, frozen=True)
class ReplayedPosition:
    """Position reached after replaying a game prefix."""

    position: Any
    next_ply: int


@dataclass(slots=True, frozen=True)
class SearchJob:
    """Work unit handed to a worker: one game and the search budget."""

    game: GameRecord
    plies_to_undo: int
    max_depth: int
    unique_only: bool = False

    @property
    def start_ply(self) -> int:
        return self.game.length - self.plies_to_undo


@dataclass(slots=True, frozen=True)
class TinueResult:
    """A proven tinue, ready to be persisted."""

    game_id: int
    start_ply: int
    moves: tuple[str, ...]
    size: int
    plies_to_undo: int

    @property
    def length(self) -> int:
        return len(self.moves)


class OutcomeStatus(StrEnum):
    """Classification of a finished job."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    IMMEDIATE_WIN = "immediate_win"
    AMBIGUOUS = "ambiguous"
    ALREADY_PROCESSED = "already_processed"
    INVALID_UNDO = "invalid_undo"
    CORRUPT_GAME = "corrupt_game"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        """Statuses reported as skipped games in the run report."""
        return self in _SKIP_STATUSES


_SKIP_STATUSES = frozenset(
    {OutcomeStatus.INVALID_UNDO, OutcomeStatus.CORRUPT_GAME, OutcomeStatus.FAILED}
)


@dataclass(slots=True, frozen=True)
class JobOutcome:
    """What happened to one job."""

    game_id: int
    status: OutcomeStatus
    result: TinueResult | None = None
    line: tuple[str, ...] = ()
    reason: str = ""
    depth: int = 0
    nodes: int = 0
    elapsed_ms: float = 0.0


@dataclass(slots=True, frozen=True)
class SkippedGame:
    game_id: int
    status: OutcomeStatus
    reason: str


@dataclass(slots=True)
class RunReport:
    """Aggregated counters for one pipeline run."""

    counts: dict[OutcomeStatus, int] = field(default_factory=dict)
    skipped: list[SkippedGame] = field(default_factory=list)
    inserted: int = 0
    duplicates: int = 0

    def record(self, outcome: JobOutcome) -> None:
        self.counts[outcome.status] = self.counts.get(outcome.status, 0) + 1
        if outcome.status.is_skip:
            self.skipped.append(SkippedGame(outcome.game_id, outcome.status, outcome.reason))

    def count(self, status: OutcomeStatus) -> int:
        return self.counts.get(status, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> str:
        parts = [
            f"{status.value}={self.counts[status]}"
            for status in OutcomeStatus
            if status in self.counts
        ]
        parts.append(f"inserted={self.inserted}")
        parts.append(f"duplicates={self.duplicates}")
        return f"{self.total} games: " + ", ".join(parts)
