"""Data gateway client and record types."""

from streamhost.gateway.client import GatewayClient
from streamhost.gateway.types import (
    Comment,
    Gift,
    ResponseRecord,
    RoomMessage,
    StreamingStatusUpdate,
    TopLiker,
)

__all__ = [
    "GatewayClient",
    "Comment",
    "Gift",
    "ResponseRecord",
    "RoomMessage",
    "StreamingStatusUpdate",
    "TopLiker",
]
