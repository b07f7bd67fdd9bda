"""Tests for the container health check."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from apps.stat_tracker_bot import health_check
from libs.db.database import StoreTransportError


class FakeClient:
    def __init__(self, complete=True, row=None, error=None):
        self.config = SimpleNamespace(is_complete=complete)
        self.first = AsyncMock(return_value=row, side_effect=error)
        self.close = AsyncMock()


def use_client(monkeypatch, client):
    monkeypatch.setattr(health_check, "D1Client", lambda: client)


@pytest.mark.asyncio
async def test_incomplete_config_is_unhealthy_without_query(monkeypatch):
    client = FakeClient(complete=False)
    use_client(monkeypatch, client)

    assert not await health_check.check_database()
    client.first.assert_not_called()


@pytest.mark.asyncio
async def test_database_answering_is_healthy(monkeypatch):
    client = FakeClient(row={"ok": 1})
    use_client(monkeypatch, client)

    assert await health_check.check_database()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_store_error_is_unhealthy(monkeypatch):
    client = FakeClient(error=StoreTransportError("down"))
    use_client(monkeypatch, client)

    assert not await health_check.check_database()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_gateway_mode_requires_readiness_file(monkeypatch, tmp_path):
    readiness = tmp_path / "ready"
    monkeypatch.setattr(health_check, "READINESS_FILE", str(readiness))
    use_client(monkeypatch, FakeClient(row={"ok": 1}))

    assert not await health_check.is_healthy(require_gateway=True)
    assert await health_check.is_healthy(require_gateway=False)

    readiness.touch()
    assert await health_check.is_healthy(require_gateway=True)
