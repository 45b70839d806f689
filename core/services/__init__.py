# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .content_service import ContentService
from .record_store import InMemoryRecordStore, RecordStore, SupabaseRecordStore
from .storage_service import (
    InMemoryObjectStore,
    ObjectStore,
    SupabaseObjectStore,
    build_storage_path,
)

__all__ = [
    "ContentService",
    "RecordStore",
    "SupabaseRecordStore",
    "InMemoryRecordStore",
    "ObjectStore",
    "SupabaseObjectStore",
    "InMemoryObjectStore",
    "build_storage_path",
]
