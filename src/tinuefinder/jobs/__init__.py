"""Job pipeline: replay, per-game execution, scheduling and run reports."""

from tinuefinder.jobs.models import (
    GameRecord,
    JobOutcome,
    OutcomeStatus,
    ReplayedPosition,
    RunReport,
    SearchJob,
    SkippedGame,
    TinueResult,
)
from tinuefinder.jobs.replay import replay_game
from tinuefinder.jobs.scheduler import JobScheduler
from tinuefinder.jobs.worker import execute_job

__all__ = [
    "GameRecord",
    "JobOutcome",
    "JobScheduler",
    "OutcomeStatus",
    "ReplayedPosition",
    "RunReport",
    "SearchJob",
    "SkippedGame",
    "TinueResult",
    "execute_job",
    "replay_game",
]
