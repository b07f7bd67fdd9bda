"""End-to-end tests for the interactions webhook over a real aiohttp test server."""
import json

from contextlib import asynccontextmanager

import pytest

from aiohttp.test_utils import TestClient, TestServer
from nacl.signing import SigningKey

from apps.stat_tracker_bot.common.constants import EPHEMERAL_FLAG
from apps.stat_tracker_bot.handlers import build_command_table
from apps.stat_tracker_bot.webhook_server import create_app

TIMESTAMP = "1700000000"


@pytest.fixture
def signing_key():
    return SigningKey.generate()


@asynccontextmanager
async def webhook_client(signing_key, context):
    app = create_app(
        public_key=signing_key.verify_key.encode().hex(),
        context=context,
        command_table=build_command_table(),
    )
    client = TestClient(TestServer(app))
    await client.start_server()
    try:
        yield client
    finally:
        await client.close()


def signed_headers(signing_key, body: bytes, timestamp: str = TIMESTAMP):
    signature = signing_key.sign(timestamp.encode() + body).signature.hex()
    return {
        "X-Signature-Ed25519": signature,
        "X-Signature-Timestamp": timestamp,
        "Content-Type": "application/json",
    }


async def post_signed(client, signing_key, payload, path="/"):
    body = json.dumps(payload).encode()
    return await client.post(path, data=body, headers=signed_headers(signing_key, body))


def command(name, options=None, actor_id="100"):
    return {
        "type": 2,
        "id": "i1",
        "token": "tok",
        "channel_id": "555",
        "member": {"user": {"id": actor_id, "username": f"user{actor_id}"}},
        "data": {"name": name, "options": options or []},
    }


@pytest.mark.asyncio
async def test_non_post_is_405(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        response = await client.get("/")
        assert response.status == 405


@pytest.mark.asyncio
async def test_bad_signature_is_401(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        body = json.dumps({"type": 1}).encode()
        headers = signed_headers(SigningKey.generate(), body)
        response = await client.post("/", data=body, headers=headers)
        assert response.status == 401

        missing = await client.post("/", data=body)
        assert missing.status == 401


@pytest.mark.asyncio
async def test_ping_is_answered_with_pong(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        response = await post_signed(client, signing_key, {"type": 1})
        assert response.status == 200
        assert await response.json() == {"type": 1}


@pytest.mark.asyncio
async def test_malformed_json_is_400(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        body = b"{not json"
        response = await client.post("/", data=body, headers=signed_headers(signing_key, body))
        assert response.status == 400


@pytest.mark.asyncio
async def test_track_then_whois_through_webhook(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        track = command("track", [
            {"name": "user", "type": 6, "value": "200"},
            {"name": "stat", "type": 3, "value": "gaslight"},
            {"name": "operation", "type": 3, "value": "add"},
            {"name": "amount", "type": 4, "value": 5},
        ])
        response = await post_signed(client, signing_key, track, path="/interactions")
        data = await response.json()
        assert data["type"] == 4
        assert data["data"]["embeds"][0]["title"] == "✅ Stats Updated"
        assert "flags" not in data["data"]

        whois = command("whois", [{"name": "user", "type": 6, "value": "200"}])
        response = await post_signed(client, signing_key, whois)
        embed = (await response.json())["data"]["embeds"][0]
        assert "🔥 **Gaslight**: 5" in embed["description"]


@pytest.mark.asyncio
async def test_self_track_is_ephemeral(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        track = command("track", [
            {"name": "user", "type": 6, "value": "100"},
            {"name": "stat", "type": 3, "value": "gaslight"},
            {"name": "operation", "type": 3, "value": "add"},
            {"name": "amount", "type": 4, "value": 1},
        ])
        response = await post_signed(client, signing_key, track)
        data = (await response.json())["data"]
        assert data["flags"] == EPHEMERAL_FLAG
        assert data["embeds"][0]["description"] == "You cannot track stats for yourself!"


@pytest.mark.asyncio
async def test_unknown_command(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        response = await post_signed(client, signing_key, command("dance"))
        data = await response.json()
        assert data["type"] == 4
        assert data["data"]["embeds"][0]["description"] == "Unknown command: dance"


@pytest.mark.asyncio
async def test_healthz(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        response = await client.get("/healthz")
        assert response.status == 200
        assert await response.text() == "ok"


@pytest.mark.asyncio
async def test_malformed_resolved_users_is_400(signing_key, context):
    async with webhook_client(signing_key, context) as client:
        payload = command("whois", [{"name": "user", "type": 6, "value": "200"}])
        payload["data"]["resolved"] = {"users": {"200": "not-an-object"}}

        response = await post_signed(client, signing_key, payload)

        assert response.status == 400
