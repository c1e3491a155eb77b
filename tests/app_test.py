"""HTTP surface: upload, status polling, reset, immediate evaluate."""

import io
import json

import pytest

import app as app_module
from ui_audit.session import AuditSession, SessionRegistry
from conftest import PNG_BYTES


@pytest.fixture
def client(monkeypatch, timer_factory, clock):
    registry = SessionRegistry(session_factory=lambda: AuditSession(timer_factory=timer_factory, clock=clock))
    monkeypatch.setattr(app_module, "sessions", registry)
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def _upload(client, data: bytes = PNG_BYTES, filename="screen.png", content_type="image/png", role=None):
    form = {"file": (io.BytesIO(data), filename, content_type)}
    if role is not None:
        form["role"] = role
    return client.post("/api/upload", data=form, content_type="multipart/form-data")


def test_index_renders_roles(client):
    res = client.get("/")
    assert res.status_code == 200
    body = res.get_data(as_text=True)
    assert "UI audit" in body
    assert "product-manager" in body


def test_roles(client):
    res = client.get("/api/roles")
    assert res.get_json() == {"roles": ["developer", "designer", "product-manager", "project-owner"]}


def test_upload_then_complete(client, timers):
    res = _upload(client, role="developer")
    assert res.status_code == 202
    assert res.get_json()["state"] == "analyzing"

    timers[0].fire()
    snap = client.get("/api/status").get_json()
    assert snap["state"] == "results"
    assert snap["step"] == 2
    assert snap["result"]["score"] == 75
    assert snap["result"]["stats"] == {"errors": 1, "warnings": 2, "info": 1}
    assert snap["image"]["data_url"].startswith("data:image/png;base64,")


def test_upload_without_role(client, timers):
    _upload(client)
    timers[0].fire()
    assert client.get("/api/status").get_json()["result"]["score"] == 80


def test_non_image_upload_rejected_and_state_kept(client, timers):
    _upload(client, role="designer")
    timers[0].fire()
    before = client.get("/api/status").get_json()

    res = _upload(client, data=b"hello", filename="notes.txt", content_type="text/plain")
    assert res.status_code == 415
    data = res.get_json()
    assert data["code"] == "UNSUPPORTED_MEDIA_TYPE"
    assert data["session"] == before
    assert client.get("/api/status").get_json() == before
    assert len(timers) == 1


def test_upload_missing_file(client):
    res = client.post("/api/upload", data={}, content_type="multipart/form-data")
    assert res.status_code == 400
    assert res.get_json()["error"] == "No file provided"
    assert res.get_json()["code"] == "NO_FILE"


def test_upload_empty_filename(client):
    res = _upload(client, filename="")
    assert res.status_code == 400
    assert res.get_json()["code"] == "NO_FILE"


def test_reupload_during_analysis_restarts(client, timers):
    _upload(client, role="developer")
    _upload(client, role="project-owner")
    assert timers[0].cancelled
    timers[0].fire()
    assert client.get("/api/status").get_json()["state"] == "analyzing"
    timers[1].fire()
    snap = client.get("/api/status").get_json()
    assert snap["role"] == "project-owner"
    assert snap["result"]["issue_count"] == 4


def test_reset(client, timers):
    _upload(client)
    timers[0].fire()
    res = client.post("/api/reset")
    assert res.status_code == 200
    assert res.get_json()["state"] == "idle"
    assert res.get_json()["result"] is None


def test_sessions_are_per_browser(monkeypatch, timer_factory, clock, timers):
    registry = SessionRegistry(session_factory=lambda: AuditSession(timer_factory=timer_factory, clock=clock))
    monkeypatch.setattr(app_module, "sessions", registry)
    first = app_module.app.test_client()
    second = app_module.app.test_client()
    _upload(first)
    assert first.get("/api/status").get_json()["state"] == "analyzing"
    assert second.get("/api/status").get_json()["state"] == "idle"


def test_evaluate_endpoint(client):
    res = client.post("/api/evaluate", json={"role": "designer"})
    assert res.status_code == 200
    data = res.get_json()
    assert data["score"] == 75
    assert data["issues"][3]["label"] == "Warning"


def test_evaluate_endpoint_without_body(client):
    res = client.post("/api/evaluate")
    assert res.status_code == 200
    assert res.get_json()["score"] == 80


def test_actions_are_audit_logged(client, timers, audit_dir):
    _upload(client, role="developer")
    _upload(client, data=b"x", filename="a.txt", content_type="text/plain")
    client.post("/api/reset")
    entries = [
        json.loads(line)
        for line in (audit_dir / "audit.log").read_text(encoding="utf-8").splitlines()
    ]
    assert [(e["action"], e["status"]) for e in entries] == [
        ("upload", "success"),
        ("upload", "ignored"),
        ("reset", "success"),
    ]
    assert "data" not in entries[0]
    assert entries[0]["byte_count"] == len(PNG_BYTES)


@pytest.mark.parametrize("body", [["developer"], "developer", 5])
def test_evaluate_endpoint_rejects_non_object_body(client, body):
    res = client.post("/api/evaluate", json=body)
    assert res.status_code == 400
    assert res.is_json
    assert res.get_json()["code"] == "INVALID_BODY"


def test_upload_too_large_returns_json(client, monkeypatch):
    monkeypatch.setitem(app_module.app.config, "MAX_CONTENT_LENGTH", 64)
    res = _upload(client, data=b"\x00" * 1024)
    assert res.status_code == 413
    assert res.is_json
    assert res.get_json()["code"] == "PAYLOAD_TOO_LARGE"


def test_cookieless_status_does_not_create_sessions(client):
    for _ in range(50):
        fresh = app_module.app.test_client()
        snap = fresh.get("/api/status").get_json()
        assert snap["state"] == "idle"
    assert len(app_module.sessions) == 0


def test_reset_without_session_is_idle(client):
    res = client.post("/api/reset")
    assert res.status_code == 200
    assert res.get_json()["state"] == "idle"
    assert len(app_module.sessions) == 0


def test_status_after_upload_uses_existing_session(client, timers):
    _upload(client)
    assert len(app_module.sessions) == 1
    client.get("/api/status")
    client.post("/api/reset")
    assert len(app_module.sessions) == 1
