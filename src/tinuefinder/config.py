"""Run configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from tinuefinder.errors import ConfigurationError

WORKERS_ENV_VAR = "TINUE_FINDER_WORKERS"

DEFAULT_PLIES_TO_UNDO = 3
DEFAULT_MAX_DEPTH = 3

# Board sizes takpy plays.
MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 8


def default_workers() -> int:
    """Worker count from ``TINUE_FINDER_WORKERS``, else the CPU count."""
    raw = os.getenv(WORKERS_ENV_VAR)
    if raw:
        try:
            return max(1, int(raw))
        except ValueError:
            raise ConfigurationError(
                f"{WORKERS_ENV_VAR} must be an integer, got {raw!r}"
            ) from None
    return max(1, os.cpu_count() or 1)


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Everything one tinue-finding run needs to know."""

    database: Path
    board_size: int
    plies_to_undo: int = DEFAULT_PLIES_TO_UNDO
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = field(default_factory=default_workers)
    start_id: int = 0
    unique_only: bool = False
    dry_run: bool = False
    skip_existing: bool = True
    use_processes: bool = True

    def validate(self) -> RunConfig:
        if not MIN_BOARD_SIZE <= self.board_size <= MAX_BOARD_SIZE:
            raise ConfigurationError(
                f"Board size must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}, "
                f"got {self.board_size}"
            )
        if self.plies_to_undo < 0:
            raise ConfigurationError(f"Plies to undo must be >= 0, got {self.plies_to_undo}")
        if self.max_depth < 1:
            raise ConfigurationError(f"Max depth must be >= 1, got {self.max_depth}")
        if self.workers < 1:
            raise ConfigurationError(f"Worker count must be >= 1, got {self.workers}")
        if self.start_id < 0:
            raise ConfigurationError(f"Start id must be >= 0, got {self.start_id}")
        return self
