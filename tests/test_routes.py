# =============================================================================
# tests/test_routes.py - HTTP API Tests
# =============================================================================
# Exercises the FastAPI app through TestClient with in-memory stores:
# - health and readiness
# - list/append endpoints for every collection
# - upload validation (missing file, non-file field, size cap)
# - structured {"error": ...} bodies for every failure
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_content_service, get_record_store
from app.exceptions import StorageUploadError, StoreReadError, StoreWriteError
from app.main import app
from core.services.content_service import ContentService


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_health_ok(self, api_client, api_prefix):
        response = api_client.get(f"{api_prefix}/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_readiness_ready(self, api_client, api_prefix):
        data = api_client.get(f"{api_prefix}/health/ready").json()

        assert data["status"] == "ready"
        assert data["checks"] == {"database": "healthy", "storage": "healthy"}

    def test_readiness_degraded_when_store_down(self, api_client, api_prefix):
        broken = MagicMock()
        broken.get.side_effect = StoreReadError("projects", "connection refused")
        app.dependency_overrides[get_record_store] = lambda: broken

        data = api_client.get(f"{api_prefix}/health/ready").json()

        assert data["status"] == "degraded"
        assert data["checks"]["database"].startswith("unhealthy")

    def test_root(self, api_client, api_prefix):
        assert api_client.get("/").json()["health"] == f"{api_prefix}/health"


# =============================================================================
# Projects & Clients
# =============================================================================

class TestProjectRoutes:

    def test_create_and_list(self, api_client, api_prefix, object_store):
        path = object_store.put("p1.jpg", b"jpeg", "image/jpeg")

        response = api_client.post(
            f"{api_prefix}/projects",
            json={"name": "A", "description": "d", "imagePath": path},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["project"]["name"] == "A"
        assert body["project"]["id"]

        listed = api_client.get(f"{api_prefix}/projects").json()
        assert len(listed) == 1
        assert listed[0]["imagePath"] == path
        assert listed[0]["imageUrl"].startswith("memory://")

    def test_extra_fields_are_kept(self, api_client, api_prefix):
        project = api_client.post(f"{api_prefix}/projects", json={"name": "A", "location": "Austin"}).json()["project"]
        assert project["location"] == "Austin"

    def test_empty_list(self, api_client, api_prefix):
        assert api_client.get(f"{api_prefix}/projects").json() == []

    def test_malformed_json_is_structured_error(self, api_client, api_prefix):
        response = api_client.post(
            f"{api_prefix}/projects",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["error"] == "Request body must be a JSON object"

    def test_array_body_is_structured_error(self, api_client, api_prefix):
        response = api_client.post(f"{api_prefix}/projects", json=[{"name": "A"}])

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_non_string_values_are_stored(self, api_client, api_prefix):
        response = api_client.post(
            f"{api_prefix}/projects",
            json={"name": 42, "description": ["a", "b"], "imagePath": 7},
        )

        assert response.status_code == 200
        project = response.json()["project"]
        assert project["name"] == 42
        assert project["description"] == ["a", "b"]

        listed = api_client.get(f"{api_prefix}/projects").json()
        assert listed[0]["imagePath"] == 7
        assert "imageUrl" not in listed[0]


class TestClientRoutes:

    def test_create_and_list(self, api_client, api_prefix):
        response = api_client.post(
            f"{api_prefix}/clients",
            json={"name": "Jane", "designation": "CEO", "description": "Great"},
        )

        assert response.json()["client"]["designation"] == "CEO"
        assert api_client.get(f"{api_prefix}/clients").json()[0]["name"] == "Jane"


# =============================================================================
# Contact & Newsletter
# =============================================================================

class TestContactRoutes:

    def test_submit_and_list(self, api_client, api_prefix):
        response = api_client.post(
            f"{api_prefix}/contact",
            json={"fullName": "Jane", "email": "j@example.com", "mobile": "1", "city": "Oslo"},
        )

        submission = response.json()["submission"]
        assert response.json()["success"] is True
        assert submission["submittedAt"]
        assert api_client.get(f"{api_prefix}/contact").json() == [submission]

    def test_numeric_mobile_accepted(self, api_client, api_prefix):
        response = api_client.post(f"{api_prefix}/contact", json={"fullName": "J", "mobile": 5550100})

        assert response.status_code == 200
        assert response.json()["submission"]["mobile"] == 5550100
        assert api_client.get(f"{api_prefix}/contact").json()[0]["mobile"] == 5550100


class TestNewsletterRoutes:

    def test_duplicate_subscription_still_succeeds(self, api_client, api_prefix):
        first = api_client.post(f"{api_prefix}/newsletter", json={"email": "a@example.com"})
        second = api_client.post(f"{api_prefix}/newsletter", json={"email": "a@example.com"})

        assert first.json() == {"success": True}
        assert second.json() == {"success": True}
        assert len(api_client.get(f"{api_prefix}/newsletter").json()) == 1


# =============================================================================
# Upload
# =============================================================================

class TestUploadRoute:

    def test_upload_returns_path(self, api_client, api_prefix, object_store, png_bytes):
        response = api_client.post(
            f"{api_prefix}/upload",
            files={"file": ("cropped.jpg", png_bytes, "image/jpeg")},
        )

        assert response.status_code == 200
        path = response.json()["path"]
        assert path.endswith("-cropped.jpg")
        assert object_store.objects[path] == (png_bytes, "image/jpeg")

    def test_missing_file_is_bad_request(self, api_client, api_prefix, object_store):
        response = api_client.post(f"{api_prefix}/upload", data={"other": "x"})

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert object_store.objects == {}

    def test_empty_body_is_bad_request(self, api_client, api_prefix, object_store):
        response = api_client.post(f"{api_prefix}/upload")

        assert response.status_code == 400
        assert object_store.objects == {}

    def test_text_field_named_file_is_bad_request(self, api_client, api_prefix, object_store):
        response = api_client.post(f"{api_prefix}/upload", data={"file": "not-a-file"})

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"
        assert object_store.objects == {}

    def test_oversized_file_rejected(self, api_client, api_prefix, object_store):
        with patch("app.routers.upload.settings") as mock_settings:
            mock_settings.max_upload_size_bytes = 10
            mock_settings.MAX_UPLOAD_SIZE_MB = 1
            response = api_client.post(
                f"{api_prefix}/upload",
                files={"file": ("big.jpg", b"x" * 11, "image/jpeg")},
            )

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"
        assert object_store.objects == {}

    def test_storage_failure_is_structured_error(self, api_client, api_prefix, record_store):
        failing_store = MagicMock()
        failing_store.put.side_effect = StorageUploadError("bucket not found")
        app.dependency_overrides[get_content_service] = lambda: ContentService(record_store, failing_store)

        response = api_client.post(
            f"{api_prefix}/upload",
            files={"file": ("a.jpg", b"jpeg", "image/jpeg")},
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Upload failed: bucket not found"


# =============================================================================
# Store failures
# =============================================================================

class TestStoreFailures:

    @pytest.fixture
    def failing_client(self, object_store):
        record_store = MagicMock()
        record_store.get.side_effect = StoreReadError("projects", "connection refused")
        record_store.set.side_effect = StoreWriteError("clients", "read-only")
        app.dependency_overrides[get_content_service] = lambda: ContentService(record_store, object_store)
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()

    def test_list_read_failure_is_500(self, failing_client, api_prefix):
        response = failing_client.get(f"{api_prefix}/projects")

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_READ_ERROR"
        assert "connection refused" in response.json()["error"]

    def test_unknown_route_keeps_error_shape(self, failing_client):
        response = failing_client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"
