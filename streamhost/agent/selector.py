"""Event selector: pick at most one comment per batch to answer."""

from __future__ import annotations

from loguru import logger

from streamhost.agent.composer import ResponseComposer
from streamhost.errors import GatewayError, GenerationError
from streamhost.gateway.client import GatewayClient
from streamhost.gateway.types import Comment, ResponseRecord
from streamhost.utils.helpers import truncate

NONE_SENTINEL = "NONE"


def format_candidates(comments: list[Comment]) -> str:
    return "\n\n".join(
        f"ID: {c.id}\nFrom: {c.handle or c.user}\nMessage: {c.message}\n---" for c in comments
    )


class EventSelector:
    """Select one comment from a batch and publish a reply to it.

    Every comment in the batch is marked read exactly once, whichever one
    (if any) is selected.
    """

    def __init__(self, composer: ResponseComposer, gateway: GatewayClient):
        self.composer = composer
        self.gateway = gateway

    async def select(self, comments: list[Comment]) -> Comment | None:
        if not comments:
            return None
        if len(comments) == 1:
            return comments[0]

        choice = await self.composer.choose_comment(format_candidates(comments))
        if choice.upper() == NONE_SENTINEL:
            logger.info("Selector: no suitable comment among {}", len(comments))
            return None
        selected = next((c for c in comments if c.id == choice), None)
        if selected is None:
            logger.warning("Selector: generated id {!r} is not in the batch", choice)
        return selected

    async def handle_batch(self, comments: list[Comment]) -> ResponseRecord | None:
        """Mark the batch read, then reply to the selected comment, if any.

        Returns the published record, or None when nothing was published.
        """
        if not comments:
            return None

        try:
            modified = await self.gateway.mark_comments_read([c.id for c in comments])
            logger.debug("Selector: marked {} comment(s) read", modified)
        except GatewayError as e:
            logger.error("Selector: failed to mark comments read: {}", e)

        selected = await self.select(comments)
        if selected is None:
            return None
        return await self.reply_to(selected)

    async def reply_to(self, comment: Comment) -> ResponseRecord:
        composer = self.composer
        logger.info("Replying to {}: {}", comment.handle or comment.user, truncate(comment.message))
        if comment.message:
            try:
                composer.memory.record_comment(comment)
            except OSError as e:
                logger.error("Failed to record comment {}: {}", comment.id, e)

        reply = await composer.compose_reply(comment)
        if not reply.text:
            raise GenerationError("Empty reply text")

        animation = await composer.reactive_animation(reply.text) or reply.animation
        audio_url = await composer.speak(reply.text)

        record = composer.new_record(
            reply.text,
            reply_to_message_id=comment.id,
            reply_to_message=comment.message,
            reply_to_user=comment.user,
            reply_to_handle=comment.handle,
            reply_to_pfp=comment.avatar,
            is_gift_response=False,
            animation=animation,
            audio_url=audio_url,
        )
        await self.gateway.publish_response(record)
        logger.info("Posted chat reply {}", record.id)
        return record
