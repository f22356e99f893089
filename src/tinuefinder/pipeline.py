"""Pipeline wiring: candidate query -> scheduler -> persister."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from typing import Any

from tinuefinder.config import RunConfig
from tinuefinder.engine.search import RulesEngine
from tinuefinder.engine.tak_rules import TakRules
from tinuefinder.jobs.models import JobOutcome, OutcomeStatus, RunReport, SearchJob
from tinuefinder.jobs.scheduler import JobScheduler
from tinuefinder.storage.candidates import CandidateQuery
from tinuefinder.storage.persister import ResultPersister

_LOGGER = logging.getLogger(__name__)


class TinuePipeline:
    """Runs the tinue search over every candidate game of one database."""

    __slots__ = ("_config", "_conn", "_rules", "_scheduler")

    def __init__(
        self,
        config: RunConfig,
        conn: sqlite3.Connection,
        rules: RulesEngine[Any, Any] | None = None,
    ) -> None:
        self._config = config
        self._conn = conn
        self._rules = rules or TakRules()
        self._scheduler = JobScheduler(
            self._rules,
            workers=config.workers,
            use_processes=config.use_processes,
        )

    def cancel(self) -> None:
        self._scheduler.cancel()

    def run(self) -> RunReport:
        config = self._config
        query = CandidateQuery(self._conn)
        persister = ResultPersister(self._conn, dry_run=config.dry_run)
        report = RunReport()

        def jobs() -> Iterator[SearchJob]:
            games = query.iter_games(config.board_size, min_id=config.start_id)
            for game in games:
                job = SearchJob(
                    game=game,
                    plies_to_undo=config.plies_to_undo,
                    max_depth=config.max_depth,
                    unique_only=config.unique_only,
                )
                if (
                    config.skip_existing
                    and job.start_ply > 0
                    and persister.has_result(game.id, job.start_ply)
                ):
                    report.record(JobOutcome(game.id, OutcomeStatus.ALREADY_PROCESSED))
                    _LOGGER.debug(
                        "Game %d already has a tinue at ply %d", game.id, job.start_ply
                    )
                    continue
                yield job

        def on_outcome(outcome: JobOutcome) -> None:
            report.record(outcome)
            _log_outcome(outcome, config)
            if outcome.result is None:
                return
            if persister.persist(outcome.result):
                report.inserted += 1
            elif not persister.dry_run:
                report.duplicates += 1

        _LOGGER.info(
            "Searching %dx%d games from id %d: undo=%d max_depth=%d workers=%d",
            config.board_size,
            config.board_size,
            config.start_id,
            config.plies_to_undo,
            config.max_depth,
            config.workers,
        )
        self._scheduler.run(jobs(), on_outcome)
        return report


def _log_outcome(outcome: JobOutcome, config: RunConfig) -> None:
    status = outcome.status
    if status == OutcomeStatus.FOUND:
        _LOGGER.info(
            "Game %d (%dx%d): tinue in %d (undo=%d, %.0f ms, %d nodes): %s",
            outcome.game_id,
            config.board_size,
            config.board_size,
            outcome.depth,
            config.plies_to_undo,
            outcome.elapsed_ms,
            outcome.nodes,
            " ".join(outcome.line),
        )
    elif status.is_skip:
        _LOGGER.warning("Game %d skipped (%s): %s", outcome.game_id, status.value, outcome.reason)
    else:
        _LOGGER.debug(
            "Game %d: %s (depth %d, %.0f ms, %d nodes)",
            outcome.game_id,
            status.value,
            outcome.depth,
            outcome.elapsed_ms,
            outcome.nodes,
        )
