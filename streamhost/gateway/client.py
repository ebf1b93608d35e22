"""HTTP client for the stream data gateway."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
from loguru import logger

from streamhost.errors import GatewayError
from streamhost.gateway.types import (
    Comment,
    Gift,
    ResponseRecord,
    RoomMessage,
    StreamingStatusUpdate,
    TopLiker,
)


def _iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class GatewayClient:
    """Fetch viewer events from, and publish reactions to, the stream server.

    Every method raises :class:`GatewayError` on a non-success status or a
    transport failure; callers decide whether that is fatal.
    """

    def __init__(
        self,
        server_url: str,
        api_key: str = "",
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["api_key"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=server_url.rstrip("/"),
            headers=headers,
            timeout=timeout_s,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            r = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e

        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            else:
                message = r.text[:200] or r.reason_phrase
            raise GatewayError(f"{method} {path}: {message}", status=r.status_code)

        if not r.content:
            return {}
        try:
            data = r.json()
        except ValueError as e:
            raise GatewayError(f"{method} {path}: invalid JSON body", status=r.status_code) from e
        return data if isinstance(data, dict) else {"data": data}

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def fetch_unread_comments(
        self, agent_id: str, since: datetime, limit: int = 15
    ) -> list[Comment]:
        data = await self._request(
            "GET",
            f"/api/streams/{agent_id}/unread-comments",
            params={"since": _iso(since), "limit": limit},
        )
        return [Comment.from_dict(c) for c in data.get("comments") or []]

    async def mark_comments_read(self, comment_ids: list[str]) -> int:
        data = await self._request(
            "POST", "/api/comments/mark-read", json={"commentIds": comment_ids}
        )
        return int(data.get("modifiedCount") or 0)

    # ------------------------------------------------------------------
    # Gifts and likes
    # ------------------------------------------------------------------

    async def fetch_unread_gifts(self, agent_id: str, page: int = 1, limit: int = 15) -> list[Gift]:
        data = await self._request(
            "GET",
            f"/api/agents/{agent_id}/gifts",
            params={"page": page, "limit": limit, "readByAgent": "false"},
        )
        return [Gift.from_dict(g) for g in data.get("gifts") or []]

    async def mark_gifts_read(self, agent_id: str, gift_ids: list[str]) -> int:
        data = await self._request(
            "PUT", f"/api/agents/{agent_id}/gifts/mark-read", json={"giftIds": gift_ids}
        )
        return int(data.get("modifiedCount") or 0)

    async def fetch_top_likers(
        self, agent_id: str, window: str = "all", limit: int = 10
    ) -> list[TopLiker]:
        data = await self._request(
            "GET",
            f"/api/agents/{agent_id}/top-likers",
            params={"limit": limit, "timeframe": window},
        )
        return [TopLiker.from_dict(t) for t in data.get("topLikers") or []]

    async def fetch_total_likes(self, agent_id: str) -> int:
        data = await self._request("GET", f"/api/agents/{agent_id}/total-likes")
        return int(data.get("totalLikes") or 0)

    # ------------------------------------------------------------------
    # Peer room
    # ------------------------------------------------------------------

    async def fetch_room_messages(self, room_id: str, limit: int = 20) -> list[RoomMessage]:
        data = await self._request("GET", f"/api/rooms/{room_id}/messages", params={"limit": limit})
        return [RoomMessage.from_dict(m) for m in data.get("messages") or []]

    async def post_room_message(
        self,
        room_id: str,
        agent_id: str,
        display_name: str,
        text: str,
        audio_url: str | None = None,
    ) -> None:
        body: dict[str, Any] = {"agentId": agent_id, "agentName": display_name, "message": text}
        if audio_url:
            body["audioUrl"] = audio_url
        await self._request("POST", f"/api/rooms/{room_id}/messages", json=body)

    # ------------------------------------------------------------------
    # Presentation layer
    # ------------------------------------------------------------------

    async def publish_response(self, record: ResponseRecord) -> None:
        await self._request("POST", "/api/ai-responses", json=record.to_payload())
        logger.debug("Gateway: published response {}", record.id)

    async def publish_animation(self, agent_id: str, animation: str) -> None:
        await self._request(
            "POST", "/api/update-animation", json={"agentId": agent_id, "animation": animation}
        )

    async def publish_status(self, update: StreamingStatusUpdate) -> dict[str, Any]:
        data = await self._request(
            "PUT", f"/api/scenes/{update.agent_id}", json=update.to_payload()
        )
        if not data.get("success"):
            raise GatewayError(data.get("error") or "Failed to update streaming status")
        return data.get("status") or {}
