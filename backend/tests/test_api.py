import time

import pytest
from fastapi.testclient import TestClient

from raillovable.config import settings
from raillovable.engine.orchestrator import get_orchestrator
from raillovable.events import get_event_publisher
from raillovable.main import app
from raillovable.schemas.project import Project
from raillovable.store import get_project_store

from helpers import LANDING_PAGE_REPLY, StubGateway


@pytest.fixture
def gateway():
    return StubGateway(LANDING_PAGE_REPLY)


@pytest.fixture
def orchestrator(make_orchestrator, gateway):
    return make_orchestrator(gateway)


@pytest.fixture
def client(monkeypatch, store, orchestrator, publisher):
    monkeypatch.setattr(settings, "store_backend", "memory")
    app.dependency_overrides[get_project_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_chat_creates_project(client, store):
    response = client.post("/chat", json={"text": "Build a landing page"})

    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "idle"
    project = body["project"]
    assert project["name"] == "Build a landing page"
    assert project["files"] == {"/App.tsx": "export default function App(){return <div/>}"}
    assert project["turns"][-1]["id"] == body["assistant_turn_id"]

    files = client.get(f"/projects/{project['id']}/files").json()
    assert files["files"] == project["files"]


def test_empty_chat_is_rejected(client, gateway):
    response = client.post("/chat", json={"text": "   "})
    assert response.status_code == 400
    assert gateway.calls == []


def test_chat_unknown_project(client):
    response = client.post("/chat", json={"project_id": "missing", "text": "hi"})
    assert response.status_code == 404


def test_chat_while_generating_conflicts(client, store, orchestrator):
    project = Project(name="Busy")
    client.portal.call(store.replace, project)
    orchestrator.controller.open(project.id)

    response = client.post("/chat", json={"project_id": project.id, "text": "hi"})

    assert response.status_code == 409
    assert orchestrator.is_generating(project.id)


def test_oversized_attachment_is_unprocessable(client, monkeypatch):
    monkeypatch.setattr(settings, "max_attachment_bytes", 8)
    attachment = {"name": "big.png", "mime_type": "image/png", "size_bytes": 3, "data": "A" * 16}

    response = client.post("/chat", json={"text": "copy", "attachments": [attachment]})

    assert response.status_code == 422


def test_chat_without_waiting(client):
    response = client.post("/chat?wait=false", json={"text": "Build a landing page"})

    assert response.status_code == 202
    body = response.json()
    assert body["project"]["turns"][-1]["streaming"] is True
    project_id = body["project"]["id"]

    for _ in range(100):
        if client.get(f"/projects/{project_id}/status").json()["state"] == "idle":
            break
        time.sleep(0.01)

    project = client.get(f"/projects/{project_id}").json()
    assert project["turns"][-1]["text"] == LANDING_PAGE_REPLY
    assert project["turns"][-1]["streaming"] is False


def test_cancel_idle_project(client):
    response = client.post("/projects/anything/cancel")
    assert response.json() == {"project_id": "anything", "cancelled": False, "state": "idle"}


def test_project_crud(client):
    created = client.post("/projects", json={"name": "Portfolio"}).json()
    project_id = created["id"]

    listing = client.get("/projects").json()
    assert listing["total"] == 1
    assert listing["projects"][0]["generating"] is False

    renamed = client.patch(f"/projects/{project_id}", json={"name": "Folio"}).json()
    assert renamed["name"] == "Folio"

    assert client.delete(f"/projects/{project_id}").status_code == 200
    assert client.get(f"/projects/{project_id}").status_code == 404
    assert client.delete(f"/projects/{project_id}").status_code == 404


def test_export_download(client):
    project = client.post("/chat", json={"text": "Shop page"}).json()["project"]

    response = client.get(f"/projects/{project['id']}/export")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert 'filename="shop-page.zip"' in response.headers["content-disposition"]


def test_settings_never_return_keys(client, monkeypatch):
    monkeypatch.setattr(settings, "llm_provider", "openai")
    monkeypatch.setattr(settings, "llm_model", "")
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "anthropic_api_key", "")
    monkeypatch.setattr(settings, "gemini_api_key", "")

    assert client.get("/settings").json()["has_api_key"] is False

    body = client.patch(
        "/settings", json={"provider": "anthropic", "anthropic_api_key": "sk-ant"}
    ).json()

    assert body == {
        "provider": "anthropic",
        "model": settings.anthropic_model,
        "has_api_key": True,
        "configured_providers": ["anthropic"],
    }
    assert "sk-ant" not in str(body)


async def _next_event(stream):
    async for chunk in stream:
        return chunk
    return None


def test_delete_closes_event_streams(client, publisher):
    project_id = client.post("/projects", json={"name": "Doomed"}).json()["id"]
    stream = publisher.subscribe(project_id)
    assert "connected" in client.portal.call(_next_event, stream)
    assert publisher.subscriber_count(project_id) == 1

    assert client.delete(f"/projects/{project_id}").status_code == 200

    assert publisher.closed == [project_id]
    assert client.portal.call(_next_event, stream) is None
    assert publisher.subscriber_count(project_id) == 0
