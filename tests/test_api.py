"""Tests for the FastAPI app in notes_api.main."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from notes_api import main
from notes_api.main import app, get_manager
from notes_api.models import TITLE_MAX_LENGTH
from notes_api.service import NoteManager
from notes_api.storage import InMemoryStore, JsonFileStore

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def client():
    """TestClient whose NoteManager uses a fresh in-memory store."""
    store = InMemoryStore()
    store.initialize()
    manager = NoteManager(store)
    app.dependency_overrides[get_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def broken_client():
    """TestClient whose store was never initialized, so every read fails."""
    manager = NoteManager(InMemoryStore())
    app.dependency_overrides[get_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client: TestClient, **body) -> dict:
    resp = client.post("/notes", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateNote:
    def test_created(self, client: TestClient) -> None:
        note = _create(client, title="T1", content="C1", tags=["a"])
        assert note["title"] == "T1"
        assert note["content"] == "C1"
        assert note["tags"] == ["a"]
        assert note["id"]
        assert note["createdAt"] == note["updatedAt"]

    def test_tags_optional(self, client: TestClient) -> None:
        assert _create(client, title="T2", content="C2")["tags"] == []

    def test_empty_title_rejected(self, client: TestClient) -> None:
        resp = client.post("/notes", json={"title": "", "content": "body"})
        assert resp.status_code == 422

    def test_long_title_rejected(self, client: TestClient) -> None:
        resp = client.post(
            "/notes", json={"title": "x" * (TITLE_MAX_LENGTH + 1), "content": ""}
        )
        assert resp.status_code == 422

    def test_missing_content_rejected(self, client: TestClient) -> None:
        resp = client.post("/notes", json={"title": "T"})
        assert resp.status_code == 422

    def test_long_tag_rejected(self, client: TestClient) -> None:
        resp = client.post("/notes", json={"title": "T", "content": "", "tags": ["x" * 51]})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


class TestReadNotes:
    def test_list_in_creation_order(self, client: TestClient) -> None:
        _create(client, title="First", content="")
        _create(client, title="Second", content="")
        resp = client.get("/notes")
        assert resp.status_code == 200
        assert [n["title"] for n in resp.json()] == ["First", "Second"]

    def test_search(self, client: TestClient) -> None:
        _create(client, title="React Hook", content="no match", tags=["frontend"])
        _create(client, title="Unrelated", content="nothing", tags=[])
        resp = client.get("/notes", params={"search": "react"})
        assert [n["title"] for n in resp.json()] == ["React Hook"]

    def test_empty_search_returns_all(self, client: TestClient) -> None:
        _create(client, title="A", content="")
        _create(client, title="B", content="")
        assert len(client.get("/notes", params={"search": ""}).json()) == 2

    def test_get_one(self, client: TestClient) -> None:
        note = _create(client, title="T", content="C")
        resp = client.get(f"/notes/{note['id']}")
        assert resp.status_code == 200
        assert resp.json() == note

    def test_get_missing(self, client: TestClient) -> None:
        resp = client.get("/notes/does-not-exist")
        assert resp.status_code == 404
        assert resp.json() == {"detail": 'Note with ID "does-not-exist" not found'}


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


class TestUpdateNote:
    def test_partial_update(self, client: TestClient) -> None:
        note = _create(client, title="A", content="B", tags=["x"])
        resp = client.patch(f"/notes/{note['id']}", json={"title": "Z"})
        assert resp.status_code == 200
        body = resp.json()
        assert (body["title"], body["content"], body["tags"]) == ("Z", "B", ["x"])
        assert body["createdAt"] == note["createdAt"]

    def test_id_in_body_ignored(self, client: TestClient) -> None:
        note = _create(client, title="A", content="B")
        resp = client.patch(f"/notes/{note['id']}", json={"id": "forged", "content": "C"})
        assert resp.json()["id"] == note["id"]

    def test_invalid_patch_rejected(self, client: TestClient) -> None:
        note = _create(client, title="A", content="B")
        resp = client.patch(f"/notes/{note['id']}", json={"title": ""})
        assert resp.status_code == 422
        assert client.get(f"/notes/{note['id']}").json()["title"] == "A"

    def test_update_missing(self, client: TestClient) -> None:
        resp = client.patch("/notes/missing", json={"title": "Z"})
        assert resp.status_code == 404


class TestDeleteNote:
    def test_delete(self, client: TestClient) -> None:
        keep = _create(client, title="Keep", content="")
        gone = _create(client, title="Gone", content="")
        resp = client.delete(f"/notes/{gone['id']}")
        assert resp.status_code == 204
        assert resp.content == b""
        assert client.get("/notes").json() == [keep]

    def test_delete_missing(self, client: TestClient) -> None:
        assert client.delete("/notes/missing").status_code == 404


# ---------------------------------------------------------------------------
# Storage failures, health, metrics, startup
# ---------------------------------------------------------------------------


class TestStorageFailure:
    def test_list_returns_500(self, broken_client: TestClient) -> None:
        resp = broken_client.get("/notes")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Storage failure"}

    def test_create_returns_500(self, broken_client: TestClient) -> None:
        resp = broken_client.post("/notes", json={"title": "T", "content": ""})
        assert resp.status_code == 500


class TestServiceEndpoints:
    def test_health(self, client: TestClient) -> None:
        _create(client, title="A", content="")
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["notes"] == 1
        assert "timestamp" in data

    def test_health_storage_down(self, broken_client: TestClient) -> None:
        resp = broken_client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"

    def test_metrics(self, client: TestClient) -> None:
        _create(client, title="A", content="")
        client.get("/notes/missing")
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "notes_operations_total" in resp.text
        assert 'endpoint="/notes/{note_id}"' in resp.text


class TestLifespan:
    def test_startup_creates_notes_file(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "data" / "notes.json"
        store = JsonFileStore(path)
        monkeypatch.setattr(main, "store", store)
        monkeypatch.setattr(main, "manager", NoteManager(store))

        with TestClient(app) as client:
            assert json.loads(path.read_text()) == []
            note = _create(client, title="On disk", content="")

        assert json.loads(path.read_text())[0]["id"] == note["id"]
