import asyncio
from unittest.mock import AsyncMock

import pytest

from streamhost.scheduler.service import TaskScheduler
from streamhost.scheduler.types import DEFAULT_JOBS, JobSpec


class FakeClock:
    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


def _handlers(jobs=DEFAULT_JOBS, **overrides):
    handlers = {spec.name: AsyncMock() for spec in jobs}
    handlers.update(overrides)
    return handlers


def _scheduler(jobs=DEFAULT_JOBS, clock=None, timeout=None, **overrides) -> TaskScheduler:
    return TaskScheduler(
        _handlers(jobs, **overrides),
        jobs=jobs,
        job_timeout_s=timeout,
        clock=clock or FakeClock(),
    )


@pytest.mark.asyncio
async def test_all_eligible_selects_gifts_first() -> None:
    scheduler = _scheduler()
    assert await scheduler.tick() == "read_gifts"


@pytest.mark.asyncio
async def test_default_registry_runs_in_priority_order() -> None:
    scheduler = _scheduler()
    ran = [await scheduler.tick() for _ in DEFAULT_JOBS]
    assert ran == [
        "read_gifts",
        "read_chat_and_reply",
        "thank_top_likers",
        "fresh_thought",
        "peer_chat",
        "periodic_animation",
        "heartbeat",
    ]
    # Everything has just run, nothing is due yet.
    assert await scheduler.tick() is None


@pytest.mark.asyncio
async def test_job_cannot_refire_before_interval() -> None:
    jobs = (JobSpec("a", priority=1, min_interval_ms=1000), JobSpec("b", priority=2, min_interval_ms=1000))
    clock = FakeClock(0)
    scheduler = _scheduler(jobs, clock=clock)

    assert await scheduler.tick() == "a"
    clock.now = 500
    assert await scheduler.tick() == "b"
    clock.now = 999
    assert await scheduler.tick() is None
    clock.now = 1000
    assert await scheduler.tick() == "a"


@pytest.mark.asyncio
async def test_interval_measured_from_completion() -> None:
    jobs = (JobSpec("slow", priority=1, min_interval_ms=100),)
    clock = FakeClock(0)

    async def slow() -> None:
        clock.now = 50

    scheduler = _scheduler(jobs, clock=clock, slow=slow)
    assert await scheduler.tick() == "slow"
    assert scheduler.jobs[0].state.last_run_at_ms == 50
    clock.now = 120
    assert await scheduler.tick() is None
    clock.now = 150
    assert await scheduler.tick() == "slow"


@pytest.mark.asyncio
async def test_failing_job_still_updates_bookkeeping() -> None:
    jobs = (JobSpec("broken", priority=1, min_interval_ms=1000), JobSpec("ok", priority=2, min_interval_ms=1000))
    clock = FakeClock(10)
    scheduler = _scheduler(jobs, clock=clock, broken=AsyncMock(side_effect=RuntimeError("boom")))

    assert await scheduler.tick() == "broken"
    broken = scheduler.jobs[0]
    assert broken.state.is_running is False
    assert broken.state.last_run_at_ms == 10
    assert broken.state.last_status == "error"
    assert broken.state.last_error == "boom"

    # The next tick proceeds normally with the other job.
    assert await scheduler.tick() == "ok"
    assert scheduler.jobs[1].state.last_status == "ok"


@pytest.mark.asyncio
async def test_no_job_left_running_after_any_tick() -> None:
    scheduler = _scheduler(
        read_gifts=AsyncMock(side_effect=ValueError("bad gift")),
        heartbeat=AsyncMock(side_effect=RuntimeError("offline")),
    )
    for _ in range(10):
        await scheduler.tick()
        assert all(not job.state.is_running for job in scheduler.jobs)


@pytest.mark.asyncio
async def test_timeout_counts_as_failure() -> None:
    jobs = (JobSpec("hung", priority=1, min_interval_ms=1000), JobSpec("next", priority=2, min_interval_ms=1000))

    async def hung() -> None:
        await asyncio.sleep(10)

    scheduler = _scheduler(jobs, timeout=0.01, hung=hung)
    assert await scheduler.tick() == "hung"
    state = scheduler.jobs[0].state
    assert state.last_status == "timeout"
    assert state.is_running is False
    assert state.last_run_at_ms is not None
    assert await scheduler.tick() == "next"


@pytest.mark.asyncio
async def test_timeout_raised_by_job_body_is_an_error() -> None:
    jobs = (JobSpec("socket", priority=1, min_interval_ms=1000),)
    scheduler = _scheduler(jobs, timeout=5.0, socket=AsyncMock(side_effect=TimeoutError("read timed out")))

    assert await scheduler.tick() == "socket"
    state = scheduler.jobs[0].state
    assert state.last_status == "error"
    assert state.last_error == "read timed out"
    assert state.is_running is False


@pytest.mark.asyncio
async def test_timeout_raised_without_deadline_is_an_error() -> None:
    jobs = (JobSpec("socket", priority=1, min_interval_ms=1000),)
    scheduler = _scheduler(jobs, timeout=None, socket=AsyncMock(side_effect=TimeoutError()))

    await scheduler.tick()
    assert scheduler.jobs[0].state.last_status == "error"


@pytest.mark.asyncio
async def test_only_one_job_running_at_a_time() -> None:
    jobs = (JobSpec("first", priority=1, min_interval_ms=1000), JobSpec("second", priority=2, min_interval_ms=1000))
    release = asyncio.Event()
    entered = asyncio.Event()
    running_counts: list[int] = []
    scheduler: TaskScheduler

    async def first() -> None:
        running_counts.append(sum(j.state.is_running for j in scheduler.jobs))
        entered.set()
        await release.wait()

    scheduler = _scheduler(jobs, first=first)
    pending = asyncio.create_task(scheduler.tick())
    await asyncio.wait_for(entered.wait(), timeout=1.0)

    # "second" is eligible, but the slot is taken.
    assert await scheduler.tick() is None
    assert scheduler.running_job is scheduler.jobs[0]

    release.set()
    assert await pending == "first"
    assert running_counts == [1]
    assert await scheduler.tick() == "second"


@pytest.mark.asyncio
async def test_priority_ties_broken_by_registry_order() -> None:
    jobs = (JobSpec("x", priority=4, min_interval_ms=10), JobSpec("y", priority=4, min_interval_ms=10))
    scheduler = _scheduler(jobs)
    assert await scheduler.tick() == "x"


@pytest.mark.asyncio
async def test_priority_key_wins_over_registry_position() -> None:
    jobs = (JobSpec("low", priority=5, min_interval_ms=10), JobSpec("high", priority=1, min_interval_ms=10))
    scheduler = _scheduler(jobs)
    assert await scheduler.tick() == "high"


def test_duplicate_job_names_rejected() -> None:
    jobs = (JobSpec("a", 1, 10), JobSpec("a", 2, 10))
    with pytest.raises(ValueError, match="Duplicate"):
        TaskScheduler({"a": AsyncMock()}, jobs=jobs)


def test_missing_handler_rejected() -> None:
    handlers = _handlers()
    del handlers["heartbeat"]
    with pytest.raises(ValueError, match="heartbeat"):
        TaskScheduler(handlers)


def test_handler_without_job_rejected() -> None:
    with pytest.raises(ValueError, match="Handler"):
        TaskScheduler(_handlers(extra=AsyncMock()))


def test_status_snapshot() -> None:
    scheduler = _scheduler()
    status = scheduler.status()
    assert [s["name"] for s in status] == [spec.name for spec in DEFAULT_JOBS]
    assert status[0]["min_interval_ms"] == 25_000
    assert status[0]["last_run_at_ms"] is None
    assert status[0]["is_running"] is False


@pytest.mark.asyncio
async def test_start_is_idempotent() -> None:
    scheduler = TaskScheduler(_handlers(), tick_s=9999)

    await scheduler.start()
    first_task = scheduler._task
    await scheduler.start()

    assert scheduler._task is first_task

    scheduler.stop()
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_loop_ticks_on_fixed_period() -> None:
    jobs = (JobSpec("beat", priority=1, min_interval_ms=0),)
    beats = asyncio.Event()

    async def beat() -> None:
        beats.set()

    scheduler = TaskScheduler({"beat": beat}, jobs=jobs, tick_s=0.01)
    await scheduler.start()
    try:
        await asyncio.wait_for(beats.wait(), timeout=1.0)
    finally:
        scheduler.stop()
    assert scheduler.jobs[0].state.run_count >= 1
