"""Stream client: wires collaborators, job bodies and the scheduler."""

from __future__ import annotations

from loguru import logger

from streamhost.agent.composer import ResponseComposer
from streamhost.agent.jobs import StreamJobs
from streamhost.agent.memory import MemoryStore
from streamhost.config.schema import Config
from streamhost.gateway.client import GatewayClient
from streamhost.providers.base import LLMProvider
from streamhost.providers.openai_compat import OpenAICompatProvider
from streamhost.scheduler.service import TaskScheduler
from streamhost.speech.service import DisabledSpeechService, HttpSpeechService, SpeechService


def build_provider(config: Config) -> OpenAICompatProvider:
    p = config.provider
    return OpenAICompatProvider(
        api_base=p.api_base,
        api_key=p.api_key,
        models={"small": p.small_model, "medium": p.medium_model, "large": p.large_model},
        default_model=p.small_model,
        max_tokens=p.max_tokens,
        temperature=p.temperature,
        timeout_s=p.timeout_s,
    )


def build_speech(config: Config) -> SpeechService:
    s = config.speech
    if not s.enabled:
        return DisabledSpeechService()
    return HttpSpeechService(
        agent_id=config.agent.agent_id,
        tts_url=s.tts_url,
        storage_url=s.storage_url,
        storage_zone=s.storage_zone,
        public_base_url=s.public_base_url,
        api_key=s.api_key,
        storage_access_key=s.storage_access_key,
        model=s.model,
        voice=s.voice,
        timeout_s=s.timeout_s,
    )


class StreamClient:
    """One co-host agent attached to one stream."""

    def __init__(
        self,
        config: Config,
        gateway: GatewayClient | None = None,
        provider: LLMProvider | None = None,
        speech: SpeechService | None = None,
    ):
        self.config = config
        self.gateway = gateway or GatewayClient(
            config.gateway.server_url, config.gateway.api_key, config.gateway.timeout_s
        )
        self.provider = provider or build_provider(config)
        self.speech = speech or build_speech(config)
        self.memory = MemoryStore(config.workspace_path)
        self.composer = ResponseComposer(config.agent, self.provider, self.speech, self.memory)
        self.jobs = StreamJobs(config, self.gateway, self.composer)
        self.scheduler = TaskScheduler(
            self.jobs.handlers(),
            tick_s=config.scheduler.tick_s,
            job_timeout_s=config.scheduler.job_timeout_s,
        )

    async def start(self) -> None:
        logger.info("Starting stream client for {} ({})", self.config.agent.name, self.config.agent.agent_id)
        await self.scheduler.start()


class StreamClientInterface:
    """Process-level entry points."""

    @staticmethod
    async def start(config: Config) -> StreamClient:
        """Construct a client and start its scheduler immediately."""
        client = StreamClient(config)
        await client.start()
        return client

    @staticmethod
    async def stop(client: StreamClient | None = None) -> None:
        """Not supported: the client keeps running. Do not rely on this for shutdown."""
        logger.warning("Stream client does not support stopping yet")
