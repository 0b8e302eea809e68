"""Tests for src.server.app — the cloud sync REST API."""

import sqlite3
from datetime import datetime
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from src.server.app import create_app

ALICE_PAYLOAD = {
    "ideas": [{"id": "1", "text": "x", "createdAt": "2024-01-01T00:00:00Z"}],
    "habits": [],
    "Weekly": None,
    "Monthly": None,
    "Yearly": None,
}


class TestHealth:
    def test_health_reports_ok_and_time(self, api_client):
        resp = api_client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        datetime.fromisoformat(body["time"])


class TestSave:
    def test_save_returns_ok(self, api_client, user_data_db):
        resp = api_client.post("/api/sync/save", json={"userId": "alice", "data": ALICE_PAYLOAD})
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert user_data_db.load("alice") == ALICE_PAYLOAD

    def test_empty_user_id_rejected_without_write(self, api_client, user_data_db):
        resp = api_client.post("/api/sync/save", json={"userId": "", "data": {}})
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert user_data_db.count() == 0

    def test_missing_user_id_rejected(self, api_client, user_data_db):
        resp = api_client.post("/api/sync/save", json={"data": {}})
        assert resp.status_code == 400
        assert "userId" in resp.json()["error"]
        assert user_data_db.count() == 0

    def test_non_object_data_rejected(self, api_client, user_data_db):
        resp = api_client.post("/api/sync/save", json={"userId": "alice", "data": [1, 2]})
        assert resp.status_code == 400
        assert "data" in resp.json()["error"]
        assert user_data_db.count() == 0

    def test_invalid_json_rejected(self, api_client):
        resp = api_client.post(
            "/api/sync/save",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_oversized_body_rejected(self, user_data_db):
        client = TestClient(create_app(db=user_data_db, cors_origins=["*"], max_body_bytes=64))
        resp = client.post("/api/sync/save", json={"userId": "alice", "data": {"blob": "x" * 200}})
        assert resp.status_code == 413
        assert resp.json() == {"error": "payload too large"}
        assert user_data_db.count() == 0

    def test_oversized_chunked_body_rejected(self, user_data_db):
        client = TestClient(create_app(db=user_data_db, cors_origins=["*"], max_body_bytes=64))
        body = b'{"userId": "alice", "data": {"blob": "' + b"x" * 200 + b'"}}'
        resp = client.post(
            "/api/sync/save",
            content=iter([body[:50], body[50:]]),
            headers={"Content-Type": "application/json"},
        )
        assert "content-length" not in {k.lower() for k in resp.request.headers}
        assert resp.status_code == 413
        assert resp.json() == {"error": "payload too large"}
        assert user_data_db.count() == 0

    def test_small_chunked_body_accepted(self, user_data_db):
        client = TestClient(create_app(db=user_data_db, cors_origins=["*"], max_body_bytes=1024))
        resp = client.post(
            "/api/sync/save",
            content=iter([b'{"userId": "alice", ', b'"data": {}}']),
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 200
        assert user_data_db.load("alice") == {}

    def test_storage_failure_returns_500(self):
        db = MagicMock()
        db.save.side_effect = sqlite3.OperationalError("disk I/O error")
        client = TestClient(create_app(db=db, cors_origins=["*"], max_body_bytes=1024))
        resp = client.post("/api/sync/save", json={"userId": "alice", "data": {}})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to save"}


class TestLoad:
    def test_load_missing_param(self, api_client):
        resp = api_client.get("/api/sync/load")
        assert resp.status_code == 400
        assert resp.json() == {"error": "userId required"}

    def test_load_empty_param(self, api_client):
        resp = api_client.get("/api/sync/load", params={"userId": ""})
        assert resp.status_code == 400

    def test_load_unknown_user(self, api_client):
        resp = api_client.get("/api/sync/load", params={"userId": "ghost"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "not found"}

    def test_storage_failure_returns_500(self):
        db = MagicMock()
        db.load.side_effect = sqlite3.DatabaseError("corrupt")
        client = TestClient(create_app(db=db, cors_origins=["*"], max_body_bytes=1024))
        resp = client.get("/api/sync/load", params={"userId": "alice"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to load"}


class TestRoundTrip:
    def test_save_then_load_returns_same_document(self, api_client):
        api_client.post("/api/sync/save", json={"userId": "alice", "data": ALICE_PAYLOAD})
        resp = api_client.get("/api/sync/load", params={"userId": "alice"})
        assert resp.status_code == 200
        assert resp.json() == {"data": ALICE_PAYLOAD}

    def test_last_write_wins(self, api_client):
        api_client.post("/api/sync/save", json={"userId": "alice", "data": {"ideas": [], "n": 1}})
        api_client.post("/api/sync/save", json={"userId": "alice", "data": {"ideas": [], "n": 2}})
        resp = api_client.get("/api/sync/load", params={"userId": "alice"})
        assert resp.json()["data"]["n"] == 2

    def test_user_id_with_special_characters(self, api_client):
        user_id = "me@example.com/α β"
        api_client.post("/api/sync/save", json={"userId": user_id, "data": {"ok": 1}})
        resp = api_client.get("/api/sync/load", params={"userId": user_id})
        assert resp.json() == {"data": {"ok": 1}}


def test_cors_headers_present(api_client):
    resp = api_client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers.get("access-control-allow-origin") == "*"


def test_unknown_route_uses_error_shape(api_client):
    resp = api_client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}
