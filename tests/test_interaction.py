"""Tests for interaction payload parsing and signature verification."""
import pytest

from nacl.signing import SigningKey

from apps.stat_tracker_bot.common.interaction import (
    SYSTEM_USER,
    CommandOption,
    InteractionPayloadError,
    InteractionUser,
    build_invocation,
    parse_interaction,
)
from apps.stat_tracker_bot.common.signature import verify_signature


def command_payload(**overrides):
    payload = {
        "type": 2,
        "id": "i1",
        "token": "tok",
        "application_id": "app",
        "channel_id": "555",
        "guild_id": "777",
        "member": {
            "nick": "Nicky",
            "user": {"id": "100", "username": "actor", "global_name": "Actor"},
        },
        "user": {"id": "999", "username": "ignored"},
        "data": {
            "name": "track",
            "options": [
                {"name": "user", "type": 6, "value": "200"},
                {"name": "stat", "type": 3, "value": "gaslight"},
                {"name": "amount", "type": 4, "value": 5},
            ],
            "resolved": {
                "users": {"200": {"id": "200", "username": "target", "global_name": None}},
                "members": {"200": {"nick": "Tee"}},
            },
        },
    }
    payload.update(overrides)
    return payload


def test_parse_command_prefers_member_user():
    interaction = parse_interaction(command_payload())

    invocation = interaction.invocation
    assert interaction.type == 2
    assert invocation.name == "track"
    assert invocation.actor.id == "100"
    assert invocation.actor.display_name == "Nicky"
    assert invocation.channel_id == "555"
    assert invocation.guild_id == "777"


def test_parse_falls_back_to_user_then_system():
    dm = command_payload()
    del dm["member"]
    assert parse_interaction(dm).invocation.actor.id == "999"

    anonymous = command_payload()
    del anonymous["member"]
    del anonymous["user"]
    assert parse_interaction(anonymous).invocation.actor == SYSTEM_USER
    assert SYSTEM_USER.is_system


def test_parse_resolves_user_options():
    invocation = parse_interaction(command_payload()).invocation

    target = invocation.get_user("user")
    assert target.id == "200"
    assert target.username == "target"
    assert target.display_name == "Tee"
    assert invocation.get_string("stat") == "gaslight"
    assert invocation.get_integer("amount") == 5
    assert invocation.get_string("operation") is None
    assert not invocation.has_option("operation")


def test_unresolved_user_option_keeps_id():
    payload = command_payload()
    payload["data"]["resolved"] = {}

    target = parse_interaction(payload).invocation.get_user("user")

    assert target == InteractionUser(id="200")
    assert target.mention == "<@200>"
    assert target.display_name is None


def test_ping_has_no_invocation():
    interaction = parse_interaction({"type": 1, "id": "p"})

    assert interaction.type == 1
    assert interaction.invocation is None


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"id": "x"},
        {"type": "2"},
        {"type": 2},
        {"type": 2, "data": {"options": []}},
        {"type": 2, "data": {"name": "whois", "options": {"user": "1"}}},
        {"type": 2, "data": {"name": "whois", "options": [{"value": 1}]}},
    ],
)
def test_malformed_payloads_rejected(payload):
    with pytest.raises(InteractionPayloadError):
        parse_interaction(payload)


def test_get_integer_rejects_non_integers():
    invocation = build_invocation(
        "leaderboard",
        SYSTEM_USER,
        [CommandOption("limit", 4, "many"), CommandOption("flag", 4, True)],
    )

    with pytest.raises(InteractionPayloadError):
        invocation.get_integer("limit")
    with pytest.raises(InteractionPayloadError):
        invocation.get_integer("flag")


def test_build_invocation_drops_empty_options():
    invocation = build_invocation(
        "history",
        InteractionUser(id="1", username="a"),
        [CommandOption("category", 3, None), CommandOption("limit", 4, 3)],
        channel_id=42,
    )

    assert set(invocation.options) == {"limit"}
    assert invocation.channel_id == "42"
    assert invocation.log_params() == {"limit": 3}


# =========================================================================
# Signatures
# =========================================================================

@pytest.fixture
def signing_key():
    return SigningKey.generate()


def sign(signing_key, timestamp, body):
    return signing_key.sign(timestamp.encode() + body).signature.hex()


def test_valid_signature_accepted(signing_key):
    public_key = signing_key.verify_key.encode().hex()
    body = b'{"type":1}'

    assert verify_signature(public_key, sign(signing_key, "1700000000", body), "1700000000", body)


def test_tampered_body_rejected(signing_key):
    public_key = signing_key.verify_key.encode().hex()
    signature = sign(signing_key, "1700000000", b'{"type":1}')

    assert not verify_signature(public_key, signature, "1700000000", b'{"type":2}')
    assert not verify_signature(public_key, signature, "1700000001", b'{"type":1}')


@pytest.mark.parametrize(
    "signature, timestamp",
    [(None, "1"), ("", "1"), ("abcd", None), ("not-hex", "1"), ("abcd", "1")],
)
def test_missing_or_malformed_signature_rejected(signing_key, signature, timestamp):
    public_key = signing_key.verify_key.encode().hex()

    assert not verify_signature(public_key, signature, timestamp, b"{}")


@pytest.mark.parametrize(
    "resolved",
    [
        "users",
        ["200"],
        {"users": ["200"]},
        {"users": {"200": "target"}},
        {"users": {"200": {"id": "200"}}, "members": "nope"},
    ],
)
def test_malformed_resolved_data_rejected(resolved):
    payload = command_payload()
    payload["data"]["resolved"] = resolved

    with pytest.raises(InteractionPayloadError):
        parse_interaction(payload)
