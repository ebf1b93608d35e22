import json
from datetime import datetime, timezone

import httpx
import pytest

from streamhost.errors import GatewayError
from streamhost.gateway.client import GatewayClient
from streamhost.gateway.types import Gift, ResponseRecord, StreamingStatusUpdate


def _client(handler, api_key: str = "secret") -> GatewayClient:
    return GatewayClient("https://stream.example.com/", api_key=api_key, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_unread_comments_parses_and_sends_since() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "comments": [
                    {"id": "c1", "user": "w1", "message": "hi", "agentId": "host-1", "handle": "@w1"},
                    {"_id": "c2", "user": "w2", "message": "yo", "readByAgent": False},
                ]
            },
        )

    client = _client(handler)
    since = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    comments = await client.fetch_unread_comments("host-1", since, limit=5)
    await client.aclose()

    assert [c.id for c in comments] == ["c1", "c2"]
    assert comments[0].handle == "@w1"
    request = seen[0]
    assert request.url.path == "/api/streams/host-1/unread-comments"
    assert request.url.params["since"] == "2026-01-01T12:00:00.000Z"
    assert request.url.params["limit"] == "5"
    assert request.headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_fetch_unread_gifts_maps_gateway_fields() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["readByAgent"] == "false"
        return httpx.Response(
            200,
            json={
                "gifts": [
                    {
                        "_id": "g1",
                        "senderPublicKey": "wallet-9",
                        "giftType": "Ice Cream",
                        "giftCount": 3,
                        "coinsTotal": 30,
                        "txHash": "0xabc",
                    }
                ]
            },
        )

    client = _client(handler)
    gifts = await client.fetch_unread_gifts("host-1")
    await client.aclose()

    assert gifts == [
        Gift(id="g1", user="wallet-9", gift_name="Ice Cream", gift_count=3, coins_total=30, tx_hash="0xabc")
    ]


@pytest.mark.asyncio
async def test_mark_gifts_read_returns_modified_count() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PUT"
        assert json.loads(request.content) == {"giftIds": ["g1", "g2"]}
        return httpx.Response(200, json={"modifiedCount": 2})

    client = _client(handler)
    assert await client.mark_gifts_read("host-1", ["g1", "g2"]) == 2
    await client.aclose()


@pytest.mark.asyncio
async def test_top_likers_window_sent_as_timeframe() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["timeframe"] == "5m"
        return httpx.Response(200, json={"topLikers": [{"publicKey": "pk", "likeCount": 7, "handle": "@fan"}]})

    client = _client(handler)
    likers = await client.fetch_top_likers("host-1", window="5m")
    await client.aclose()

    assert likers[0].handle == "@fan"
    assert likers[0].like_count == 7


@pytest.mark.asyncio
async def test_publish_response_sends_camel_case_without_nulls() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/ai-responses"
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"ok": True})

    client = _client(handler)
    record = ResponseRecord(
        id="r1", text="thanks!", agent_id="host-1", is_gift_response=True, gift_id="g1", audio_url="https://a/1.mp3"
    )
    await client.publish_response(record)
    await client.aclose()

    assert bodies[0] == {
        "id": "r1",
        "text": "thanks!",
        "agentId": "host-1",
        "isGiftResponse": True,
        "giftId": "g1",
        "audioUrl": "https://a/1.mp3",
    }


@pytest.mark.asyncio
async def test_error_status_raises_gateway_error() -> None:
    client = _client(lambda request: httpx.Response(500, json={"error": "database offline"}))

    with pytest.raises(GatewayError) as exc_info:
        await client.fetch_total_likes("host-1")
    await client.aclose()

    assert exc_info.value.status == 500
    assert "database offline" in str(exc_info.value)


@pytest.mark.asyncio
async def test_error_with_non_object_body() -> None:
    client = _client(lambda request: httpx.Response(404, text="not here"))

    with pytest.raises(GatewayError) as exc_info:
        await client.fetch_room_messages("room")
    await client.aclose()

    assert exc_info.value.status == 404
    assert "not here" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_failure_raises_gateway_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(GatewayError) as exc_info:
        await client.mark_comments_read(["c1"])
    await client.aclose()

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_publish_status_requires_success_flag() -> None:
    responses = iter(
        [
            httpx.Response(200, json={"success": True, "status": {"isStreaming": True}}),
            httpx.Response(200, json={"success": False, "error": "unknown scene"}),
        ]
    )
    client = _client(lambda request: next(responses))
    update = StreamingStatusUpdate(agent_id="host-1", title="Aiko's Stream")

    assert await client.publish_status(update) == {"isStreaming": True}
    with pytest.raises(GatewayError, match="unknown scene"):
        await client.publish_status(update)
    await client.aclose()


@pytest.mark.asyncio
async def test_room_message_round_trip() -> None:
    posted: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            posted.append(json.loads(request.content))
            return httpx.Response(201, json={})
        return httpx.Response(
            200, json={"messages": [{"_id": "m1", "agentId": "host-2", "agentName": "Bo", "message": "hey"}]}
        )

    client = _client(handler, api_key="")
    messages = await client.fetch_room_messages("streamhost-room", limit=3)
    await client.post_room_message("streamhost-room", "host-1", "Aiko", "hi Bo")
    await client.aclose()

    assert messages[0].agent_name == "Bo"
    assert posted == [{"agentId": "host-1", "agentName": "Aiko", "message": "hi Bo"}]
