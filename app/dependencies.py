# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# Tests swap them out with app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.content_service import ContentService
from core.services.record_store import RecordStore, SupabaseRecordStore
from core.services.storage_service import ObjectStore, SupabaseObjectStore


@lru_cache
def get_record_store() -> RecordStore:
    """Record store backed by the configured KV table."""
    return SupabaseRecordStore(table=settings.KV_TABLE)


@lru_cache
def get_object_store() -> ObjectStore:
    """Object store backed by the configured private bucket."""
    return SupabaseObjectStore(bucket=settings.STORAGE_BUCKET)


@lru_cache
def get_content_service() -> ContentService:
    """
    Get the shared ContentService.

    A single instance per process so the per-collection append locks are
    shared by every request.
    """
    return ContentService(
        record_store=get_record_store(),
        object_store=get_object_store(),
        signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS,
        serialize_appends=settings.SERIALIZE_APPENDS,
    )


# Type aliases for dependency injection
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]
RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
