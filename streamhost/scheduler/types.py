"""Scheduler types."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class JobState:
    """Runtime state of a job, mutated only by the scheduler."""
    # Completion time of the last run; None means eligible immediately
    last_run_at_ms: int | None = None
    is_running: bool = False
    last_status: Literal["ok", "error", "timeout"] | None = None
    last_error: str | None = None
    run_count: int = 0


@dataclass
class ScheduledJob:
    """A named recurring job sharing the scheduler's single execution slot."""
    name: str
    # Lower value wins among simultaneously eligible jobs
    priority: int
    # Minimum gap between the end of one run and the next eligibility
    min_interval_ms: int
    state: JobState = field(default_factory=JobState)

    def is_eligible(self, now_ms: int) -> bool:
        if self.state.is_running:
            return False
        if self.state.last_run_at_ms is None:
            return True
        return now_ms - self.state.last_run_at_ms >= self.min_interval_ms


@dataclass(frozen=True)
class JobSpec:
    """Static definition used to build the registry."""
    name: str
    priority: int
    min_interval_ms: int

    def build(self) -> ScheduledJob:
        return ScheduledJob(name=self.name, priority=self.priority, min_interval_ms=self.min_interval_ms)


READ_GIFTS = "read_gifts"
READ_CHAT_AND_REPLY = "read_chat_and_reply"
THANK_TOP_LIKERS = "thank_top_likers"
FRESH_THOUGHT = "fresh_thought"
PEER_CHAT = "peer_chat"
PERIODIC_ANIMATION = "periodic_animation"
HEARTBEAT = "heartbeat"

DEFAULT_JOBS: tuple[JobSpec, ...] = (
    JobSpec(READ_GIFTS, priority=1, min_interval_ms=25_000),
    JobSpec(READ_CHAT_AND_REPLY, priority=2, min_interval_ms=20_000),
    JobSpec(THANK_TOP_LIKERS, priority=3, min_interval_ms=90_000),
    JobSpec(FRESH_THOUGHT, priority=4, min_interval_ms=30_000),
    JobSpec(PEER_CHAT, priority=4, min_interval_ms=60_000),
    JobSpec(PERIODIC_ANIMATION, priority=5, min_interval_ms=20_000),
    JobSpec(HEARTBEAT, priority=5, min_interval_ms=5_000),
)
