"""Parallel job scheduling with a single result funnel."""

from __future__ import annotations

import logging
import multiprocessing as mp
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import (
    FIRST_COMPLETED,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from typing import Any

from tinuefinder.engine.search import RulesEngine
from tinuefinder.jobs.models import JobOutcome, OutcomeStatus, SearchJob
from tinuefinder.jobs.worker import execute_job, init_process_worker

_LOGGER = logging.getLogger(__name__)

# Jobs queued per worker; keeps the pool busy without draining the job source.
_IN_FLIGHT_PER_WORKER = 2

OutcomeCallback = Callable[[JobOutcome], None]


class JobScheduler:
    """Fans jobs out to a fixed pool and funnels outcomes back to the caller.

    Jobs are pulled lazily from the source iterable, and every outcome is
    delivered to ``on_outcome`` on the thread that called :meth:`run`, so the
    callback is the single writer of the run. With one worker, jobs run
    inline.
    """

    __slots__ = ("_rules", "_workers", "_use_processes", "_cancel_event")

    def __init__(
        self,
        rules: RulesEngine[Any, Any],
        *,
        workers: int = 1,
        use_processes: bool = True,
    ) -> None:
        if workers < 1:
            raise ValueError("Worker count must be >= 1")
        self._rules = rules
        self._workers = workers
        self._use_processes = use_processes and workers > 1
        self._cancel_event: Any = (
            mp.get_context().Event() if self._use_processes else threading.Event()
        )

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Ask running searches to stop and stop dispatching new jobs."""
        self._cancel_event.set()

    def run(self, jobs: Iterable[SearchJob], on_outcome: OutcomeCallback) -> None:
        """Process every job, or until cancelled.

        An exception raised by ``on_outcome`` (or an interrupt) cancels the
        remaining work and is re-raised once the pool has shut down.
        """
        if self._workers == 1:
            self._run_inline(iter(jobs), on_outcome)
            return

        executor = self._make_executor()
        try:
            self._run_pool(executor, iter(jobs), on_outcome)
        except BaseException:
            self.cancel()
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _run_inline(self, jobs: Iterator[SearchJob], on_outcome: OutcomeCallback) -> None:
        for job in jobs:
            if self.cancelled:
                break
            try:
                outcome = execute_job(job, self._rules, self._cancel_event.is_set)
            except Exception as exc:
                outcome = _failed(job, exc)
            on_outcome(outcome)

    def _run_pool(
        self,
        executor: Executor,
        jobs: Iterator[SearchJob],
        on_outcome: OutcomeCallback,
    ) -> None:
        limit = self._workers * _IN_FLIGHT_PER_WORKER
        pending: dict[Future[JobOutcome], SearchJob] = {}

        def refill() -> None:
            while len(pending) < limit and not self.cancelled:
                job = next(jobs, None)
                if job is None:
                    return
                pending[self._submit(executor, job)] = job

        refill()
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in sorted(done, key=lambda f: pending[f].game.id):
                job = pending.pop(future)
                on_outcome(_collect(future, job))
            refill()

    def _submit(self, executor: Executor, job: SearchJob) -> Future[JobOutcome]:
        if self._use_processes:
            # Process workers read the cancel event installed by the initializer.
            return executor.submit(execute_job, job, self._rules)
        return executor.submit(execute_job, job, self._rules, self._cancel_event.is_set)

    def _make_executor(self) -> Executor:
        if self._use_processes:
            _LOGGER.debug("Starting process pool with %d workers", self._workers)
            return ProcessPoolExecutor(
                max_workers=self._workers,
                initializer=init_process_worker,
                initargs=(self._cancel_event,),
            )
        _LOGGER.debug("Starting thread pool with %d workers", self._workers)
        return ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="tinue")


def _collect(future: Future[JobOutcome], job: SearchJob) -> JobOutcome:
    if future.cancelled():
        return JobOutcome(job.game.id, OutcomeStatus.CANCELLED, reason="not started")
    try:
        return future.result()
    except Exception as exc:
        return _failed(job, exc)


def _failed(job: SearchJob, exc: Exception) -> JobOutcome:
    _LOGGER.exception("Job for game %d failed", job.game.id)
    return JobOutcome(job.game.id, OutcomeStatus.FAILED, reason=f"{type(exc).__name__}: {exc}")
