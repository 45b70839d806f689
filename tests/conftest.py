# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory record/object stores so no test touches Supabase
# - A TestClient wired to those stores through dependency overrides
# =============================================================================

import io
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.config import settings
from app.dependencies import get_content_service, get_object_store, get_record_store
from app.main import app
from core.services.content_service import ContentService
from core.services.record_store import InMemoryRecordStore
from core.services.storage_service import InMemoryObjectStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def object_store():
    return InMemoryObjectStore(bucket="test-images")


@pytest.fixture
def content_service(record_store, object_store):
    return ContentService(record_store, object_store, signed_url_ttl=3600)


@pytest.fixture
def api_client(content_service, record_store, object_store):
    """TestClient whose routes use the in-memory stores."""
    app.dependency_overrides[get_content_service] = lambda: content_service
    app.dependency_overrides[get_record_store] = lambda: record_store
    app.dependency_overrides[get_object_store] = lambda: object_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api_prefix():
    return settings.API_PREFIX


def make_image_bytes(size=(800, 600), color=(200, 30, 30), fmt="PNG", mode="RGB") -> bytes:
    """Encode a solid-colour image in memory."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes()
