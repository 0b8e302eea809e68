"""Tests for src.adapters.http_sync_client — the cloud sync client adapter."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.adapters.http_sync_client import NOT_CONFIGURED_MESSAGE, HttpSyncClient
from src.data.models import Idea, SyncPayload

BASE = "https://sync.example.com"


def _mock_client(resp=None, side_effect=None, method="post"):
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    setattr(mock_client, method, AsyncMock(return_value=resp, side_effect=side_effect))
    return mock_client


def _response(status_code=200, json_body=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.is_error = status_code >= 400
    resp.text = text
    resp.json.return_value = json_body
    if status_code >= 400:
        resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}", request=MagicMock(), response=resp,
        )
    else:
        resp.raise_for_status = MagicMock()
    return resp


class TestUnconfigured:
    @pytest.mark.asyncio
    async def test_save_without_base_url(self):
        with patch("src.adapters.http_sync_client.httpx.AsyncClient") as client_cls:
            result = await HttpSyncClient(base_url="", timeout=5).save("alice", {"ideas": []})
        assert result.ok is False
        assert result.message == NOT_CONFIGURED_MESSAGE
        client_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_without_base_url(self):
        with patch("src.adapters.http_sync_client.httpx.AsyncClient") as client_cls:
            result = await HttpSyncClient(base_url="", timeout=5).load("alice")
        assert result is None
        client_cls.assert_not_called()

    def test_defaults_come_from_settings(self):
        # conftest clears SYNC_API_BASE_URL
        assert HttpSyncClient().configured is False


class TestSave:
    @pytest.mark.asyncio
    async def test_successful_save(self):
        mock_client = _mock_client(_response(200, {"ok": True}))
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            result = await HttpSyncClient(base_url=BASE + "/", timeout=5).save("alice", {"ideas": []})

        assert result.ok is True
        assert result.message is None
        call = mock_client.post.call_args
        assert call.args[0] == f"{BASE}/api/sync/save"
        assert call.kwargs["json"] == {"userId": "alice", "data": {"ideas": []}}

    @pytest.mark.asyncio
    async def test_sync_payload_is_serialized(self):
        payload = SyncPayload(ideas=[Idea(id="1", text="x", created_at="2024-01-01T00:00:00Z")])
        mock_client = _mock_client(_response(200, {"ok": True}))
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            await HttpSyncClient(base_url=BASE, timeout=5).save("alice", payload)

        sent = mock_client.post.call_args.kwargs["json"]["data"]
        assert sent == payload.to_dict()
        assert sent["ideas"][0]["createdAt"] == "2024-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_http_error_returns_body_text(self):
        mock_client = _mock_client(_response(400, text='{"error":"bad"}'))
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            result = await HttpSyncClient(base_url=BASE, timeout=5).save("alice", {})
        assert result.ok is False
        assert result.message == '{"error":"bad"}'

    @pytest.mark.asyncio
    async def test_network_error_returns_message(self):
        mock_client = _mock_client(side_effect=httpx.ConnectError("Connection refused"))
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            result = await HttpSyncClient(base_url=BASE, timeout=5).save("alice", {})
        assert result.ok is False
        assert result.message == "Connection refused"

    @pytest.mark.asyncio
    async def test_empty_user_id_not_sent(self):
        with patch("src.adapters.http_sync_client.httpx.AsyncClient") as client_cls:
            result = await HttpSyncClient(base_url=BASE, timeout=5).save("", {})
        assert result.ok is False
        client_cls.assert_not_called()


class TestLoad:
    @pytest.mark.asyncio
    async def test_successful_load(self):
        data = {"ideas": [], "habits": [], "Weekly": None}
        mock_client = _mock_client(_response(200, {"data": data}), method="get")
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            result = await HttpSyncClient(base_url=BASE, timeout=5).load("alice")

        assert result == data
        call = mock_client.get.call_args
        assert call.args[0] == f"{BASE}/api/sync/load"
        assert call.kwargs["params"] == {"userId": "alice"}

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self):
        mock_client = _mock_client(_response(404, {"error": "not found"}), method="get")
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            assert await HttpSyncClient(base_url=BASE, timeout=5).load("ghost") is None

    @pytest.mark.asyncio
    async def test_server_error_returns_none(self):
        mock_client = _mock_client(_response(500, {"error": "Failed to load"}), method="get")
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            assert await HttpSyncClient(base_url=BASE, timeout=5).load("alice") is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        mock_client = _mock_client(side_effect=httpx.ReadTimeout("timed out"), method="get")
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            assert await HttpSyncClient(base_url=BASE, timeout=5).load("alice") is None

    @pytest.mark.asyncio
    async def test_missing_data_field_returns_none(self):
        mock_client = _mock_client(_response(200, {"something": "else"}), method="get")
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", return_value=mock_client):
            assert await HttpSyncClient(base_url=BASE, timeout=5).load("alice") is None


class TestAgainstServer:
    """Drive the real API through httpx's ASGI transport."""

    @pytest.mark.asyncio
    async def test_alice_round_trip(self, user_data_db):
        from src.server.app import create_app

        app = create_app(db=user_data_db, cors_origins=["*"], max_body_bytes=1024 * 1024)
        real_client_cls = httpx.AsyncClient

        def asgi_client(**kwargs):
            return real_client_cls(transport=httpx.ASGITransport(app=app), **kwargs)

        payload = {
            "ideas": [{"id": "1", "text": "x", "createdAt": "2024-01-01T00:00:00Z"}],
            "habits": [],
            "Weekly": None,
            "Monthly": None,
            "Yearly": None,
        }
        client = HttpSyncClient(base_url="http://testserver", timeout=5)
        with patch("src.adapters.http_sync_client.httpx.AsyncClient", side_effect=asgi_client):
            assert (await client.save("alice", payload)).ok is True
            assert await client.load("alice") == payload
            assert await client.load("bob") is None
