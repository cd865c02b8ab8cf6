"""
Tests for the session and annotation routers.

Mounts the routers on a bare FastAPI app and overrides the service
dependencies with services backed by the in-memory object store.
"""

import json
from datetime import timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from annotator.api.deps import (
    get_annotation_store,
    get_index_builder,
    get_lifecycle_manager,
    get_metadata_store,
)
from annotator.api.routers import annotations_router, health_router, sessions_router
from annotator.application.services import (
    AnnotationLogStore,
    SessionIndexBuilder,
    SessionLifecycleManager,
    SessionMetadataStore,
)
from annotator.core.local_video_locator import LocalVideoLocator

SESSION = "2025-08-19 22-13-32"
SESSIONS_URL = "/api/v1/users/alice/sessions"
ANNOTATIONS_URL = f"{SESSIONS_URL}/{SESSION}/annotations"


@pytest.fixture
def app(store, video_dir) -> FastAPI:
    """Create app with services wired to the fake store."""
    app = FastAPI()
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(annotations_router, prefix="/api/v1")

    locator = LocalVideoLocator([video_dir])
    app.dependency_overrides[get_index_builder] = lambda: SessionIndexBuilder(
        store, locator, tolerance_window=timedelta(minutes=5)
    )
    app.dependency_overrides[get_annotation_store] = lambda: AnnotationLogStore(store)
    app.dependency_overrides[get_metadata_store] = lambda: SessionMetadataStore(store)
    app.dependency_overrides[get_lifecycle_manager] = lambda: SessionLifecycleManager(store)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def seeded(store, make_metadata, to_millis):
    """Seed one complete remote session for alice."""
    store.seed(f"alice/metadata/{SESSION}.json", make_metadata("alice", SESSION, "Demo", to_millis(SESSION)))
    store.seed(f"alice/videos/{SESSION}.mkv", b"video")
    return store


class TestSessionRoutes:
    """Test suite for /users/{username}/sessions endpoints."""

    def test_health(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_sessions(self, client, seeded, to_millis) -> None:
        """
        Test session index endpoint.

        Arrange: One stored session with a remote video
        Act: GET the session list
        Assert: 200 with camelCase fields
        """
        response = client.get(SESSIONS_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        session = body["sessions"][0]
        assert session["sessionId"] == SESSION
        assert session["effectiveVideoStartTimestamp"] == to_millis(SESSION)
        assert session["videoReference"]["kind"] == "remote"
        assert session["annotationReference"] is None

    def test_list_sessions_store_unavailable(self, client, store) -> None:
        store.fail_list = True

        response = client.get(SESSIONS_URL)

        assert response.status_code == 502

    def test_provision_user(self, client, store) -> None:
        response = client.put("/api/v1/users/bob")

        assert response.status_code == 200
        assert sorted(response.json()) == ["bob/annotations/", "bob/metadata/", "bob/videos/"]
        assert "bob/videos/" in store.objects

    def test_delete_session(self, client, seeded) -> None:
        response = client.delete(f"{SESSIONS_URL}/{SESSION}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert seeded.objects == {}

    def test_delete_session_partial_failure(self, client, seeded) -> None:
        seeded.fail_delete.add(f"alice/videos/{SESSION}.mkv")

        response = client.delete(f"{SESSIONS_URL}/{SESSION}")

        assert response.status_code == 502
        assert response.json()["detail"]["success"] is False

    def test_delete_malformed_session_id(self, client) -> None:
        response = client.delete(f"{SESSIONS_URL}/yesterday")

        assert response.status_code == 400

    def test_get_metadata(self, client, seeded) -> None:
        response = client.get(f"{SESSIONS_URL}/{SESSION}/metadata")

        assert response.status_code == 200
        assert response.json()["title"] == "Demo"

    def test_get_missing_metadata(self, client) -> None:
        response = client.get(f"{SESSIONS_URL}/{SESSION}/metadata")

        assert response.status_code == 404

    def test_get_corrupt_metadata(self, client, store) -> None:
        store.seed(f"alice/metadata/{SESSION}.json", "{broken")

        response = client.get(f"{SESSIONS_URL}/{SESSION}/metadata")

        assert response.status_code == 422

    def test_save_metadata(self, client, store) -> None:
        document = {"username": "alice", "title": "Renamed", "sessionId": SESSION, "videoStartTimestamp": 5}

        response = client.put(f"{SESSIONS_URL}/{SESSION}/metadata", json=document)

        assert response.status_code == 200
        assert json.loads(store.objects[f"alice/metadata/{SESSION}.json"])["title"] == "Renamed"

    def test_save_metadata_path_mismatch(self, client) -> None:
        document = {"username": "mallory", "sessionId": SESSION}

        response = client.put(f"{SESSIONS_URL}/{SESSION}/metadata", json=document)

        assert response.status_code == 400


class TestAnnotationRoutes:
    """Test suite for annotation endpoints."""

    def test_append_then_read(self, client) -> None:
        """
        Test append returns the written log.

        Arrange: No annotation log
        Act: POST two notes, then GET
        Assert: 201 responses and both notes in order
        """
        first = client.post(ANNOTATIONS_URL, json={"note": "intro", "timestamp": 1000})
        second = client.post(ANNOTATIONS_URL, json={"note": "demo", "timestamp": 2000})

        assert first.status_code == 201
        assert second.status_code == 201
        assert len(second.json()) == 2

        response = client.get(ANNOTATIONS_URL)
        assert [entry["note"] for entry in response.json()] == ["intro", "demo"]

    def test_read_missing_log_is_empty(self, client) -> None:
        response = client.get(ANNOTATIONS_URL)

        assert response.status_code == 200
        assert response.json() == []

    def test_delete_annotation(self, client, store) -> None:
        store.seed(f"alice/annotations/{SESSION}.json", [{"note": "a", "timestamp": 5}, {"note": "b", "timestamp": 9}])

        response = client.delete(f"{ANNOTATIONS_URL}/5")

        assert response.status_code == 200
        assert response.json() == [{"note": "b", "timestamp": 9}]

    def test_delete_unknown_timestamp(self, client, store) -> None:
        store.seed(f"alice/annotations/{SESSION}.json", [{"note": "a", "timestamp": 5}])

        response = client.delete(f"{ANNOTATIONS_URL}/7")

        assert response.status_code == 404

    def test_delete_without_log(self, client) -> None:
        response = client.delete(f"{ANNOTATIONS_URL}/7")

        assert response.status_code == 404

    def test_append_store_failure(self, client, store) -> None:
        store.fail_put.add(f"alice/annotations/{SESSION}.json")

        response = client.post(ANNOTATIONS_URL, json={"note": "lost", "timestamp": 1})

        assert response.status_code == 502

    def test_malformed_session_id_is_rejected(self, client, store) -> None:
        url = f"{SESSIONS_URL}/not a timestamp/annotations"

        post = client.post(url, json={"note": "x", "timestamp": 1})
        get = client.get(url)
        delete = client.delete(f"{url}/1")

        assert (post.status_code, get.status_code, delete.status_code) == (400, 400, 400)
        assert store.objects == {}


def test_create_app_registers_versioned_routes() -> None:
    from annotator.api.main import create_app

    paths = create_app().openapi()["paths"]

    assert "/api/v1/health" in paths
    assert "/api/v1/users/{username}/sessions" in paths
    assert "/api/v1/users/{username}/sessions/{session_id}/annotations/{timestamp}" in paths
