"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatorConfig(Base):
    username: str = ""
    title: str = ""
    avatar: str = ""
    description: str = ""


class AgentConfig(Base):
    """Persona and stream identity of the co-host."""

    agent_id: str = "streamhost-agent"
    name: str = "Host"
    bio: list[str] = Field(default_factory=list)
    lore: list[str] = Field(default_factory=list)
    adjectives: list[str] = Field(default_factory=list)
    message_examples: list[str] = Field(default_factory=list)
    in_peer_chat: bool = False
    twitter_username: str = ""
    wallet_public_key: str = ""
    stream_title: str = ""
    stream_description: str = "Interactive AI Stream"
    avatar_model: str = ""
    environment_url: str = ""
    creator: CreatorConfig | None = None


class GatewayConfig(Base):
    server_url: str = "http://localhost:6969"
    api_key: str = ""
    timeout_s: float = 15.0


class ProviderConfig(Base):
    """OpenAI-compatible completion endpoint and per-size model names."""

    api_base: str = "https://api.openai.com/v1"
    api_key: str = ""
    small_model: str = "gpt-4o-mini"
    medium_model: str = "gpt-4o"
    large_model: str = "gpt-4o"
    max_tokens: int = 512
    temperature: float = 0.8
    timeout_s: float = 60.0


class SpeechConfig(Base):
    enabled: bool = False
    tts_url: str = "https://api.openai.com/v1/audio/speech"
    api_key: str = ""
    model: str = "tts-1"
    voice: str = "nova"
    storage_url: str = "https://storage.bunnycdn.com"
    storage_zone: str = ""
    storage_access_key: str = ""
    public_base_url: str = ""
    timeout_s: float = 60.0


class SchedulerConfig(Base):
    tick_s: float = 1.0
    job_timeout_s: float | None = 120.0


class ChatConfig(Base):
    comment_fetch_limit: int = 15
    # By default the comment watermark moves forward even when the
    # fetch failed, skipping that window.
    advance_watermark_on_error: bool = True
    peer_room_id: str = "streamhost-room"
    peer_history_limit: int = 20


class GiftsConfig(Base):
    fetch_limit: int = 15
    speech_probability: float = 0.5
    special_gift: str = "Ice Cream"


class Config(Base):
    """Root configuration for streamhost."""

    agent: AgentConfig = Field(default_factory=AgentConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    gifts: GiftsConfig = Field(default_factory=GiftsConfig)
    workspace: str = "~/.streamhost/workspace"

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace).expanduser()
