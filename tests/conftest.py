"""Shared fixtures: canned completions, a mocked gateway and speech service."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from loguru import logger

from streamhost.agent.composer import ResponseComposer
from streamhost.agent.jobs import StreamJobs
from streamhost.agent.memory import MemoryStore
from streamhost.config.schema import AgentConfig, Config
from streamhost.gateway.client import GatewayClient
from streamhost.providers.base import LLMProvider, LLMResponse
from streamhost.speech.service import SpeechService

AUDIO_URL = "https://cdn.example.com/host-1-1.mp3"


class DummyProvider(LLMProvider):
    def __init__(self, responses: list[str]):
        super().__init__({"small": "small-model", "medium": "medium-model"})
        self._responses = list(responses)
        self.prompts: list[str] = []
        self.models_used: list[str] = []

    async def chat(self, messages, model=None, max_tokens=512, temperature=0.8) -> LLMResponse:
        self.prompts.append(messages[-1]["content"])
        self.models_used.append(model)
        if self._responses:
            return LLMResponse(content=self._responses.pop(0))
        return LLMResponse(content="")

    def get_default_model(self) -> str:
        return "small-model"


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        agent=AgentConfig(
            agent_id="host-1",
            name="Aiko",
            bio=["A cheerful stream co-host."],
            adjectives=["playful", "curious"],
            in_peer_chat=True,
        ),
        workspace=str(tmp_path),
    )


@pytest.fixture
def gateway() -> AsyncMock:
    return AsyncMock(spec=GatewayClient)


@pytest.fixture
def speech() -> AsyncMock:
    service = AsyncMock(spec=SpeechService)
    service.synthesize.return_value = AUDIO_URL
    return service


@pytest.fixture
def memory(tmp_path: Path) -> MemoryStore:
    return MemoryStore(tmp_path)


@pytest.fixture
def make_composer(config, speech, memory):
    def _make(responses: list[str]) -> ResponseComposer:
        provider = DummyProvider(responses)
        return ResponseComposer(config.agent, provider, speech, memory, clock=lambda: 1_700_000_000_000)

    return _make


@pytest.fixture
def make_jobs(config, gateway, make_composer):
    def _make(responses: list[str], rng: random.Random | None = None) -> StreamJobs:
        return StreamJobs(
            config,
            gateway,
            make_composer(responses),
            rng=rng or random.Random(7),
            now=lambda: datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def log_messages():
    """Capture loguru output at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
