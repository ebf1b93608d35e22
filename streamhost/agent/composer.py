"""Response composer: turns stream events into prompts and prompts into records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from loguru import logger

from streamhost.agent import templates
from streamhost.agent.animations import ALL_ANIMATIONS, EXPRESSIVE_ANIMATIONS, catalog_or_none
from streamhost.agent.memory import MemoryStore
from streamhost.config.schema import AgentConfig
from streamhost.errors import GenerationError, SpeechError
from streamhost.gateway.types import (
    Comment,
    Gift,
    ResponseRecord,
    RoomMessage,
    StreamingStatusUpdate,
    TopLiker,
)
from streamhost.providers.base import LLMProvider, SizeClass
from streamhost.speech.service import SpeechService
from streamhost.utils.helpers import (
    now_ms,
    parse_json_object,
    render_template,
    string_to_uuid,
    truncate,
)


@dataclass
class Reply:
    """Parsed structured output of a reply-style completion."""
    text: str
    animation: str | None = None
    action: str | None = None


class ResponseComposer:
    """Build generation contexts from event data and map results to records."""

    def __init__(
        self,
        agent: AgentConfig,
        provider: LLMProvider,
        speech: SpeechService,
        memory: MemoryStore,
        clock: Callable[[], int] = now_ms,
    ):
        self.agent = agent
        self.provider = provider
        self.speech = speech
        self.memory = memory
        self._clock = clock

    # ------------------------------------------------------------------
    # Context building
    # ------------------------------------------------------------------

    def persona(self, **extra: Any) -> dict[str, Any]:
        values: dict[str, Any] = {
            "agentName": self.agent.name,
            "bio": "\n".join(self.agent.bio),
            "lore": "\n".join(self.agent.lore),
            "adjectives": ", ".join(self.agent.adjectives),
            "messageExamples": "\n".join(self.agent.message_examples),
            "recentMessages": self.memory.get_memory_context(),
        }
        values.update(extra)
        return values

    def render(self, template: str, **extra: Any) -> str:
        return render_template(template, **self.persona(**extra))

    async def generate(self, context: str, size: SizeClass) -> str:
        return await self.provider.complete(context, size)

    async def _generate_reply(self, context: str, size: SizeClass, what: str) -> Reply:
        raw = await self.generate(context, size)
        parsed = parse_json_object(raw)
        text = str(parsed.get("text") or "").strip() if parsed else ""
        if not text:
            raise GenerationError(f"Unparseable {what} response: {truncate(raw)}")
        action = parsed.get("action")
        return Reply(
            text=text,
            animation=catalog_or_none(parsed.get("animation")),
            action=str(action) if action else None,
        )

    # ------------------------------------------------------------------
    # Compositions
    # ------------------------------------------------------------------

    async def compose_reply(self, comment: Comment) -> Reply:
        context = self.render(
            templates.MESSAGE_REPLY,
            user=comment.handle or comment.user,
            comment=comment.message,
            animationOptions=", ".join(ALL_ANIMATIONS),
        )
        return await self._generate_reply(context, "medium", "comment reply")

    async def reactive_animation(self, text: str) -> str | None:
        context = self.render(
            templates.REACTION_ANIMATION,
            lastMessage=text,
            animationOptions=", ".join(ALL_ANIMATIONS),
        )
        return catalog_or_none(await self.generate(context, "small"))

    async def compose_gift_thanks(self, gift: Gift) -> Reply:
        context = self.render(
            templates.GIFT_THANKS,
            giftName=gift.gift_name,
            giftCount=gift.gift_count,
            handle=gift.handle or gift.user,
            coinsTotal=gift.coins_total,
            animationOptions=", ".join(EXPRESSIVE_ANIMATIONS),
        )
        return await self._generate_reply(context, "small", "gift")

    async def compose_top_liker_thanks(self, liker: TopLiker, rank: int) -> Reply:
        context = self.render(
            templates.TOP_LIKER_THANKS,
            username=liker.handle or liker.public_key,
            likeCount=liker.like_count,
            rank=rank,
            animationOptions=", ".join(EXPRESSIVE_ANIMATIONS),
        )
        return await self._generate_reply(context, "small", "top liker")

    async def compose_thought(self) -> str:
        text = await self.generate(self.render(templates.FRESH_THOUGHT), "medium")
        logger.info("Generated fresh thought: {}", truncate(text))
        return text

    async def compose_peer_reply(self, history: list[RoomMessage], latest: RoomMessage) -> str:
        chat_history = "\n".join(f"{m.agent_name}: {m.message}" for m in history)
        context = self.render(
            templates.PEER_CHAT_REPLY,
            chatHistory=chat_history,
            latestMessage=latest.message,
        )
        return (await self._generate_reply(context, "small", "peer chat")).text

    async def compose_animation(self) -> str:
        context = self.render(
            templates.PERIODIC_ANIMATION,
            animationOptions=", ".join(EXPRESSIVE_ANIMATIONS),
        )
        return await self.generate(context, "small")

    async def choose_comment(self, candidates: str) -> str:
        context = self.render(templates.SELECT_COMMENT, recentMessages=candidates)
        raw = await self.generate(context, "medium")
        return re.sub(r"^(ID:)?\s*", "", raw.strip().strip("\"'`")).strip()

    # ------------------------------------------------------------------
    # Speech and records
    # ------------------------------------------------------------------

    async def speak(self, text: str) -> str | None:
        """Synthesize *text*; speech failures degrade to no audio."""
        try:
            return await self.speech.synthesize(text)
        except SpeechError as e:
            logger.warning("Speech unavailable, continuing without audio: {}", e)
            return None

    def new_record(self, text: str, **fields: Any) -> ResponseRecord:
        record_id = string_to_uuid(f"{self.agent.agent_id}-{self._clock()}")
        return ResponseRecord(id=record_id, text=text, agent_id=self.agent.agent_id, **fields)

    def status_update(self) -> StreamingStatusUpdate:
        agent = self.agent
        identifier = re.sub(r"\s+", "_", re.sub(r"[^\w\s]", "", agent.name.lower()))
        model = agent.avatar_model or None
        return StreamingStatusUpdate(
            agent_id=agent.agent_id,
            is_streaming=True,
            last_heartbeat=datetime.now(timezone.utc).isoformat(),
            title=agent.stream_title or f"{agent.name}'s Stream",
            description=agent.stream_description,
            model_name=agent.name,
            identifier=identifier,
            twitter=agent.twitter_username or None,
            wallet_address=agent.wallet_public_key or None,
            creator=agent.creator.model_dump() if agent.creator else None,
            scene_configs=[
                {
                    "model": model,
                    "environmentURL": agent.environment_url or None,
                    "models": [{"model": model, "agentId": agent.agent_id}],
                }
            ],
        )
