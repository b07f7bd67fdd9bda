"""Tests for the D1 HTTP client with a stubbed aiohttp session."""
import asyncio
import json

import aiohttp
import pytest

from libs.db.config import StoreConfig
from libs.db.database import (
    D1Client,
    StoreConfigError,
    StoreError,
    StoreQueryError,
    StoreTransportError,
)


class FakeResponse:
    def __init__(self, status=200, payload=None, reason="OK"):
        self.status = status
        self.reason = reason
        self._payload = payload if payload is not None else {}

    async def json(self, content_type="application/json"):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, json=None, headers=None):
        self.calls.append({"url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


def make_config(**overrides):
    config = StoreConfig()
    config.api_token = "token"
    config.account_id = "acct"
    config.database_id = "db"
    config.api_base = "https://d1.example"
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def ok_payload(results=None, meta=None):
    return {"success": True, "result": [{"results": results or [], "meta": meta or {}}], "errors": []}


@pytest.mark.asyncio
async def test_missing_credentials_fail_before_any_request():
    session = FakeSession(FakeResponse(payload=ok_payload()))
    client = D1Client(make_config(api_token=None, database_id=""), session=session)

    with pytest.raises(StoreConfigError) as excinfo:
        await client.all("SELECT 1")

    assert "CLOUDFLARE_API_TOKEN" in str(excinfo.value)
    assert "CLOUDFLARE_DATABASE_ID" in str(excinfo.value)
    assert "CLOUDFLARE_ACCOUNT_ID" not in str(excinfo.value)
    assert session.calls == []


@pytest.mark.asyncio
async def test_request_shape_and_rows():
    rows = [{"name": "gaslight"}, {"name": "girlboss"}]
    session = FakeSession(FakeResponse(payload=ok_payload(rows)))
    client = D1Client(make_config(), session=session)

    result = await client.all("SELECT name FROM point_categories WHERE name = ?", "gaslight")

    assert result == rows
    call = session.calls[0]
    assert call["url"] == "https://d1.example/accounts/acct/d1/database/db/query"
    assert call["json"] == {
        "sql": "SELECT name FROM point_categories WHERE name = ?",
        "params": ["gaslight"],
    }
    assert call["headers"]["Authorization"] == "Bearer token"


@pytest.mark.asyncio
async def test_first_returns_none_without_rows():
    client = D1Client(make_config(), session=FakeSession(FakeResponse(payload=ok_payload())))

    assert await client.first("SELECT 1 WHERE 0") is None


@pytest.mark.asyncio
async def test_run_reports_changes():
    payload = ok_payload(meta={"changes": 2, "last_row_id": 7})
    client = D1Client(make_config(), session=FakeSession(FakeResponse(payload=payload)))

    result = await client.run("UPDATE users SET username = ?", "x")

    assert result.success
    assert result.changes == 2
    assert result.meta["last_row_id"] == 7


@pytest.mark.asyncio
async def test_non_2xx_status_is_transport_error():
    response = FakeResponse(status=503, reason="Service Unavailable")
    client = D1Client(make_config(), session=FakeSession(response))

    with pytest.raises(StoreTransportError) as excinfo:
        await client.all("SELECT 1")

    assert "503" in str(excinfo.value)


@pytest.mark.asyncio
async def test_client_error_is_transport_error():
    client = D1Client(make_config(), session=FakeSession(error=aiohttp.ClientConnectionError("boom")))

    with pytest.raises(StoreTransportError):
        await client.run("SELECT 1")


@pytest.mark.asyncio
async def test_unsuccessful_response_is_query_error():
    payload = {"success": False, "result": [], "errors": [{"code": 7500, "message": "no such table: nope"}]}
    client = D1Client(make_config(), session=FakeSession(FakeResponse(payload=payload)))

    with pytest.raises(StoreQueryError) as excinfo:
        await client.all("SELECT * FROM nope")

    assert "no such table: nope" in str(excinfo.value)


@pytest.mark.asyncio
async def test_unsuccessful_response_without_errors():
    client = D1Client(make_config(), session=FakeSession(FakeResponse(payload={"success": False})))

    with pytest.raises(StoreQueryError) as excinfo:
        await client.all("SELECT 1")

    assert "Unknown error" in str(excinfo.value)
    assert isinstance(excinfo.value, StoreError)


@pytest.mark.asyncio
async def test_batch_runs_statements_in_order():
    session = FakeSession(FakeResponse(payload=ok_payload()))
    client = D1Client(make_config(), session=session)

    results = await client.batch([("SELECT 1", ()), ("SELECT ?", (2,))])

    assert len(results) == 2
    assert [call["json"]["sql"] for call in session.calls] == ["SELECT 1", "SELECT ?"]


@pytest.mark.asyncio
async def test_close_leaves_injected_session_open():
    session = FakeSession(FakeResponse(payload=ok_payload()))
    client = D1Client(make_config(), session=session)

    await client.close()

    assert not session.closed


def test_config_reports_missing_variables(monkeypatch):
    monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)
    monkeypatch.setenv("CLOUDFLARE_ACCOUNT_ID", "acct")
    monkeypatch.delenv("CLOUDFLARE_DATABASE_ID", raising=False)
    monkeypatch.delenv("CLOUDFLARE_API_BASE", raising=False)

    config = StoreConfig()

    assert config.missing_variables() == ["CLOUDFLARE_API_TOKEN", "CLOUDFLARE_DATABASE_ID"]
    assert not config.is_complete
    assert config.query_url.startswith("https://api.cloudflare.com/client/v4/accounts/acct/")
    assert "s3cret" not in repr(make_config(api_token="s3cret"))


class RawBodyResponse(FakeResponse):
    """Response whose decoded body is returned verbatim, or whose decoding fails."""

    def __init__(self, body=None, decode_error=None):
        super().__init__()
        self._body = body
        self._decode_error = decode_error

    async def json(self, content_type="application/json"):
        if self._decode_error is not None:
            raise self._decode_error
        return self._body


@pytest.mark.asyncio
async def test_non_json_body_is_transport_error():
    html_page = json.JSONDecodeError("Expecting value", "<html>502 Bad Gateway</html>", 0)
    client = D1Client(make_config(), session=FakeSession(RawBodyResponse(decode_error=html_page)))

    with pytest.raises(StoreTransportError) as excinfo:
        await client.all("SELECT 1")

    assert "non-JSON" in str(excinfo.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, [], ["success"], "ok"])
async def test_non_object_body_is_transport_error(body):
    client = D1Client(make_config(), session=FakeSession(RawBodyResponse(body=body)))

    with pytest.raises(StoreTransportError):
        await client.first("SELECT 1")


@pytest.mark.asyncio
async def test_timeout_is_transport_error():
    client = D1Client(make_config(), session=FakeSession(error=asyncio.TimeoutError()))

    with pytest.raises(StoreTransportError):
        await client.run("SELECT 1")
