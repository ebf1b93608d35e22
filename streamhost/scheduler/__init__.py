"""Recurring job scheduling for the co-host."""

from streamhost.scheduler.service import TaskScheduler
from streamhost.scheduler.types import DEFAULT_JOBS, JobSpec, JobState, ScheduledJob

__all__ = ["TaskScheduler", "DEFAULT_JOBS", "JobSpec", "JobState", "ScheduledJob"]
