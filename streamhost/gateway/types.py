"""Gateway record types.

Inbound records are parsed from the gateway's camelCase JSON; outbound
records serialise back to camelCase and drop unset optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _payload(obj: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        data[_camel(f.name)] = value
    return data


@dataclass
class Comment:
    id: str
    user: str
    message: str
    agent_id: str = ""
    created_at: str | None = None
    read_by_agent: bool = False
    handle: str | None = None
    avatar: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Comment:
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            user=data.get("user", ""),
            message=data.get("message", ""),
            agent_id=data.get("agentId", ""),
            created_at=data.get("createdAt"),
            read_by_agent=bool(data.get("readByAgent", False)),
            handle=data.get("handle"),
            avatar=data.get("avatar"),
        )


@dataclass
class Gift:
    id: str
    user: str
    gift_name: str
    gift_count: int = 1
    coins_total: float = 0
    recipient_agent_id: str = ""
    handle: str | None = None
    avatar: str | None = None
    tx_hash: str | None = None
    created_at: str | None = None
    read_by_agent: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Gift:
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            user=data.get("senderPublicKey") or data.get("user", ""),
            gift_name=data.get("giftName") or data.get("giftType", ""),
            gift_count=int(data.get("giftCount") or 1),
            coins_total=data.get("coinsTotal") or 0,
            recipient_agent_id=data.get("recipientAgentId", ""),
            handle=data.get("handle"),
            avatar=data.get("avatar"),
            tx_hash=data.get("txHash"),
            created_at=data.get("createdAt"),
            read_by_agent=bool(data.get("readByAgent", False)),
        )


@dataclass
class TopLiker:
    public_key: str
    like_count: int = 0
    last_liked: str | None = None
    handle: str | None = None
    pfp: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TopLiker:
        return cls(
            public_key=data.get("publicKey", ""),
            like_count=int(data.get("likeCount") or 0),
            last_liked=data.get("lastLiked"),
            handle=data.get("handle"),
            pfp=data.get("pfp"),
        )


@dataclass
class RoomMessage:
    id: str
    agent_id: str
    agent_name: str
    message: str
    audio_url: str | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoomMessage:
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            agent_id=data.get("agentId", ""),
            agent_name=data.get("agentName", ""),
            message=data.get("message", ""),
            audio_url=data.get("audioUrl"),
            created_at=data.get("createdAt"),
        )


@dataclass(frozen=True)
class ResponseRecord:
    """One agent reaction, published once and never mutated."""

    id: str
    text: str
    agent_id: str
    reply_to_user: str | None = None
    reply_to_message_id: str | None = None
    reply_to_message: str | None = None
    reply_to_handle: str | None = None
    reply_to_pfp: str | None = None
    intensity: float | None = None
    thought: bool | None = None
    is_gift_response: bool | None = None
    gift_id: str | None = None
    is_top_liker_response: bool | None = None
    animation: str | None = None
    audio_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _payload(self)


@dataclass
class StreamingStatusUpdate:
    agent_id: str
    is_streaming: bool = True
    last_heartbeat: str | None = None
    title: str | None = None
    description: str | None = None
    type: str = "stream"
    component: str = "ThreeScene"
    model_name: str | None = None
    identifier: str | None = None
    twitter: str | None = None
    wallet_address: str | None = None
    creator: dict[str, Any] | None = None
    scene_configs: list[dict[str, Any]] = field(default_factory=list)
    stats: dict[str, int] = field(
        default_factory=lambda: {"likes": 0, "comments": 0, "bookmarks": 0, "shares": 0}
    )

    def to_payload(self) -> dict[str, Any]:
        return _payload(self)
