"""Agent core: composer, selector, memory and job bodies."""

from streamhost.agent.composer import Reply, ResponseComposer
from streamhost.agent.jobs import StreamJobs
from streamhost.agent.memory import MemoryStore
from streamhost.agent.selector import EventSelector

__all__ = ["EventSelector", "MemoryStore", "Reply", "ResponseComposer", "StreamJobs"]
