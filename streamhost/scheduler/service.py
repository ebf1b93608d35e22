"""Task scheduler: one execution slot shared by a fixed set of recurring jobs."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Mapping

from loguru import logger

from streamhost.scheduler.types import DEFAULT_JOBS, JobSpec, ScheduledJob
from streamhost.utils.helpers import now_ms

JobHandler = Callable[[], Awaitable[Any]]


class TaskScheduler:
    """Drive at most one job per tick.

    The registry is fixed at construction. On every tick the jobs are ordered
    by ``(priority, registry index)`` and the first eligible one runs to
    completion before the tick returns. Because the loop awaits each tick,
    no two jobs are ever in flight at the same time; ``tick`` additionally
    refuses to start a job while another one is marked running, so direct
    callers get the same guarantee.

    A job's failure (exception or timeout) is logged and recorded on its
    state. It never escapes the tick and never skips the bookkeeping update.
    """

    def __init__(
        self,
        handlers: Mapping[str, JobHandler],
        jobs: Iterable[JobSpec] = DEFAULT_JOBS,
        tick_s: float = 1.0,
        job_timeout_s: float | None = 120.0,
        clock: Callable[[], int] = now_ms,
    ):
        self._jobs: tuple[ScheduledJob, ...] = tuple(spec.build() for spec in jobs)
        self._check_registry(handlers)
        self._handlers = dict(handlers)
        # Index in the registry breaks priority ties.
        self._order = {job.name: i for i, job in enumerate(self._jobs)}
        self.tick_s = tick_s
        self.job_timeout_s = job_timeout_s or None
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None

    def _check_registry(self, handlers: Mapping[str, JobHandler]) -> None:
        names = [job.name for job in self._jobs]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate job names: {', '.join(duplicates)}")
        missing = sorted(set(names) - set(handlers))
        if missing:
            raise ValueError(f"No handler for job(s): {', '.join(missing)}")
        unknown = sorted(set(handlers) - set(names))
        if unknown:
            raise ValueError(f"Handler(s) without a job: {', '.join(unknown)}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def jobs(self) -> tuple[ScheduledJob, ...]:
        return self._jobs

    @property
    def running_job(self) -> ScheduledJob | None:
        return next((job for job in self._jobs if job.state.is_running), None)

    async def start(self) -> None:
        """Start the tick loop. Calling it again while running is a no-op."""
        if self._task is not None and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            "Scheduler started: {} jobs, tick every {}s", len(self._jobs), self.tick_s
        )

    def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.tick_s)
                await self.tick()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Scheduler tick failed")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def select(self, now_ms: int) -> ScheduledJob | None:
        """Return the job the next tick would run at *now_ms*, if any."""
        if self.running_job is not None:
            return None
        ordered = sorted(self._jobs, key=lambda j: (j.priority, self._order[j.name]))
        return next((job for job in ordered if job.is_eligible(now_ms)), None)

    async def tick(self, now_ms: int | None = None) -> str | None:
        """Run the first eligible job to completion.

        Returns the name of the job that ran, or None when nothing was
        eligible (or another job is still in flight).
        """
        now = self._clock() if now_ms is None else now_ms
        job = self.select(now)
        if job is None:
            return None

        # Claimed before the first suspension point.
        job.state.is_running = True
        try:
            await self._execute(job)
        finally:
            job.state.last_run_at_ms = self._clock()
            job.state.run_count += 1
            job.state.is_running = False
        return job.name

    async def _execute(self, job: ScheduledJob) -> None:
        handler = self._handlers[job.name]
        logger.debug("Scheduler: running '{}'", job.name)
        deadline = asyncio.timeout(self.job_timeout_s)
        try:
            async with deadline:
                await handler()
            job.state.last_status = "ok"
            job.state.last_error = None
        except TimeoutError as e:
            if not deadline.expired():
                # Raised by the job body itself, not by the deadline.
                job.state.last_status = "error"
                job.state.last_error = str(e) or "TimeoutError"
                logger.exception("Scheduler: job '{}' failed: {}", job.name, e)
                return
            job.state.last_status = "timeout"
            job.state.last_error = f"timed out after {self.job_timeout_s}s"
            logger.error("Scheduler: job '{}' timed out after {}s", job.name, self.job_timeout_s)
        except Exception as e:
            job.state.last_status = "error"
            job.state.last_error = str(e)
            logger.exception("Scheduler: job '{}' failed: {}", job.name, e)

    def status(self) -> list[dict[str, Any]]:
        return [
            {
                "name": job.name,
                "priority": job.priority,
                "min_interval_ms": job.min_interval_ms,
                "last_run_at_ms": job.state.last_run_at_ms,
                "is_running": job.state.is_running,
                "last_status": job.state.last_status,
                "last_error": job.state.last_error,
                "run_count": job.state.run_count,
            }
            for job in self._jobs
        ]
