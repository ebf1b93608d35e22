"""Job bodies run by the scheduler, one per registry entry."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Awaitable, Callable

from loguru import logger

from streamhost.agent.animations import validate_animation
from streamhost.agent.composer import ResponseComposer
from streamhost.agent.selector import EventSelector
from streamhost.config.schema import Config
from streamhost.errors import StreamHostError, ValidationError
from streamhost.gateway.client import GatewayClient
from streamhost.gateway.types import Gift
from streamhost.scheduler.types import (
    FRESH_THOUGHT,
    HEARTBEAT,
    PEER_CHAT,
    PERIODIC_ANIMATION,
    READ_CHAT_AND_REPLY,
    READ_GIFTS,
    THANK_TOP_LIKERS,
)

TOP_LIKER_WINDOWS = ("5m", "all")
TOP_LIKER_LIMIT = 10
PEER_HISTORY_IN_PROMPT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StreamJobs:
    """Owns per-job state (comment watermark, last peer message id).

    That state is read and written only from inside its own job, and the
    scheduler never runs two jobs at once, so it needs no locking.
    """

    def __init__(
        self,
        config: Config,
        gateway: GatewayClient,
        composer: ResponseComposer,
        selector: EventSelector | None = None,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.config = config
        self.agent = config.agent
        self.gateway = gateway
        self.composer = composer
        self.selector = selector or EventSelector(composer, gateway)
        self._rng = rng or random.Random()
        self._now = now
        self.comment_watermark: datetime = now()
        self.last_peer_message_id: str | None = None

    def handlers(self) -> dict[str, Callable[[], Awaitable[None]]]:
        return {
            READ_GIFTS: self.read_gifts,
            READ_CHAT_AND_REPLY: self.read_chat_and_reply,
            THANK_TOP_LIKERS: self.thank_top_likers,
            FRESH_THOUGHT: self.fresh_thought,
            PEER_CHAT: self.peer_chat,
            PERIODIC_ANIMATION: self.periodic_animation,
            HEARTBEAT: self.heartbeat,
        }

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def read_chat_and_reply(self) -> None:
        since = self.comment_watermark
        logger.debug("{}: reading chat since {}", self.agent.name, since.isoformat())
        fetched = False
        try:
            comments = await self.gateway.fetch_unread_comments(
                self.agent.agent_id, since, limit=self.config.chat.comment_fetch_limit
            )
            fetched = True
            await self.selector.handle_batch(comments)
        finally:
            now = self._now()
            if fetched:
                self.comment_watermark = now
            elif self.config.chat.advance_watermark_on_error:
                # Comments that arrived in [since, now) will not be fetched again.
                logger.warning(
                    "Comment fetch failed; advancing watermark anyway, skipping {} .. {}",
                    since.isoformat(),
                    now.isoformat(),
                )
                self.comment_watermark = now

    # ------------------------------------------------------------------
    # Gifts and likes
    # ------------------------------------------------------------------

    async def read_gifts(self) -> None:
        gifts = await self.gateway.fetch_unread_gifts(
            self.agent.agent_id, limit=self.config.gifts.fetch_limit
        )
        logger.debug("{}: {} unread gift(s)", self.agent.name, len(gifts))
        for gift in gifts:
            try:
                await self.process_gift(gift)
            except StreamHostError as e:
                logger.error("Gift {} not processed: {}", gift.id, e)

    def _wants_speech(self, gift: Gift) -> bool:
        if gift.gift_name == self.config.gifts.special_gift:
            return True
        return self._rng.random() < self.config.gifts.speech_probability

    async def process_gift(self, gift: Gift) -> bool:
        """Thank the sender of one gift; returns True once it is marked read."""
        try:
            self.composer.memory.record_gift(gift)
        except OSError as e:
            logger.error("Failed to record gift {}: {}", gift.id, e)

        reply = await self.composer.compose_gift_thanks(gift)
        audio_url = await self.composer.speak(reply.text) if self._wants_speech(gift) else None

        record = self.composer.new_record(
            reply.text,
            reply_to_user=gift.user,
            reply_to_handle=gift.handle,
            reply_to_pfp=gift.avatar,
            is_gift_response=True,
            gift_id=gift.id,
            animation=reply.animation,
            audio_url=audio_url,
        )
        await self.gateway.publish_response(record)
        await self.gateway.mark_gifts_read(self.agent.agent_id, [gift.id])
        logger.info("Thanked {} for {}; gift {} marked read", gift.handle or gift.user, gift.gift_name, gift.id)
        return True

    async def thank_top_likers(self) -> None:
        window = self._rng.choice(TOP_LIKER_WINDOWS)
        likers = await self.gateway.fetch_top_likers(
            self.agent.agent_id, window=window, limit=TOP_LIKER_LIMIT
        )
        if not likers:
            logger.info("No top likers ({}) to thank", window)
            return

        index = self._rng.randrange(len(likers))
        liker = likers[index]
        reply = await self.composer.compose_top_liker_thanks(liker, rank=index + 1)
        record = self.composer.new_record(
            reply.text,
            reply_to_user=liker.handle,
            reply_to_handle=liker.handle,
            reply_to_pfp=liker.pfp,
            is_top_liker_response=True,
            animation=reply.animation,
        )
        await self.gateway.publish_response(record)
        logger.info("Thanked top liker ({}): {}", window, liker.handle or liker.public_key)

    # ------------------------------------------------------------------
    # Unprompted output
    # ------------------------------------------------------------------

    async def fresh_thought(self) -> None:
        text = await self.composer.compose_thought()
        audio_url = await self.composer.speak(text)
        record = self.composer.new_record(text, thought=True, audio_url=audio_url)
        await self.gateway.publish_response(record)

    async def peer_chat(self) -> None:
        if not self.agent.in_peer_chat:
            return

        room_id = self.config.chat.peer_room_id
        messages = await self.gateway.fetch_room_messages(
            room_id, limit=self.config.chat.peer_history_limit
        )
        if not messages:
            logger.debug("Peer room {} is empty", room_id)
            return

        latest = messages[-1]
        if latest.id == self.last_peer_message_id:
            logger.debug("Peer room: latest message {} already processed", latest.id)
            return
        if latest.agent_id == self.agent.agent_id:
            logger.debug("Peer room: latest message {} is our own", latest.id)
            self.last_peer_message_id = latest.id
            return

        text = await self.composer.compose_peer_reply(messages[-PEER_HISTORY_IN_PROMPT:], latest)
        audio_url = await self.composer.speak(text)
        await self.gateway.post_room_message(
            room_id, self.agent.agent_id, self.agent.name, text, audio_url
        )
        logger.info("Peer room: replied to {} ({})", latest.agent_name, latest.id)
        self.last_peer_message_id = latest.id

    async def periodic_animation(self) -> None:
        raw = await self.composer.compose_animation()
        try:
            animation = validate_animation(raw)
        except ValidationError as e:
            # No fallback animation is published.
            logger.warning("Invalid animation generated, skipping publish: {}", e)
            return
        await self.gateway.publish_animation(self.agent.agent_id, animation)

    async def heartbeat(self) -> None:
        await self.gateway.publish_status(self.composer.status_update())
