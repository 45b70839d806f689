# =============================================================================
# core/services/storage_service.py - Private Object Storage
# =============================================================================
# Handles image writes and signed retrieval URLs against a private bucket.
# Objects are never public and never overwritten: every put gets a fresh
# "{uuid}-{filename}" path, and reads go through short-lived signed URLs.
# =============================================================================

import logging
import threading
import time
from typing import Any
from urllib.parse import quote
from uuid import uuid4

from lib.supabase_client import SupabaseClient
from lib.utils import safe_filename
from app.exceptions import StorageUploadError, StorageSignError

logger = logging.getLogger(__name__)


def build_storage_path(name: str | None) -> str:
    """
    Build a globally unique storage path from a human-readable name.

    Example:
        build_storage_path("cropped.jpg")  # "3f6c...-cropped.jpg"
    """
    return f"{uuid4()}-{safe_filename(name)}"


class ObjectStore:
    """Narrow interface the content service depends on."""

    def put(self, name: str | None, data: bytes, content_type: str) -> str:
        """Write data under a new unique path derived from name and return that path."""
        raise NotImplementedError

    def sign(self, path: str | None, ttl_seconds: int) -> str | None:
        """
        Return a time-limited URL for path, or None when path is empty.

        Implementations should raise StorageSignError on failure. Callers
        listing many records treat any exception as "no URL" for that record.
        """
        raise NotImplementedError

    def ensure_bucket(self) -> bool:
        """Create the private bucket if missing. Returns True if it was created."""
        raise NotImplementedError


class SupabaseObjectStore(ObjectStore):
    """
    Object store backed by a private Supabase Storage bucket.

    Example:
        store = SupabaseObjectStore("showcase-images")
        path = store.put("cropped.jpg", blob, "image/jpeg")
        url = store.sign(path, 3600)
    """

    def __init__(self, bucket: str):
        self.bucket = bucket

    def put(self, name: str | None, data: bytes, content_type: str) -> str:
        """
        Upload bytes to storage.

        Raises:
            StorageUploadError: If upload fails (including a path collision)
        """
        client = SupabaseClient.get_client()
        path = build_storage_path(name)

        try:
            client.storage.from_(self.bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e), path=path) from e

        logger.info(f"Uploaded object to storage: {path} ({len(data)} bytes)")
        return path

    def sign(self, path: str | None, ttl_seconds: int) -> str | None:
        """
        Create a signed URL for a private object.

        Raises:
            StorageSignError: If the storage service rejects the request
        """
        if not path:
            return None

        client = SupabaseClient.get_client()

        try:
            result: dict[str, Any] = client.storage.from_(self.bucket).create_signed_url(path, ttl_seconds)
        except Exception as e:
            raise StorageSignError(path, str(e)) from e

        return result.get("signedURL") or result.get("signedUrl")

    def ensure_bucket(self) -> bool:
        client = SupabaseClient.get_client()

        buckets = client.storage.list_buckets() or []
        names = {getattr(b, "name", None) or (b.get("name") if isinstance(b, dict) else None) for b in buckets}
        if self.bucket in names:
            logger.debug(f"Storage bucket exists: {self.bucket}")
            return False

        logger.info(f"Creating private storage bucket: {self.bucket}")
        client.storage.create_bucket(self.bucket, options={"public": False})
        return True


class InMemoryObjectStore(ObjectStore):
    """
    Process-local object store for tests and local development.

    Signed URLs use a memory:// scheme and carry their expiry timestamp.
    """

    def __init__(self, bucket: str = "memory"):
        self.bucket = bucket
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.bucket_created = False
        self._guard = threading.Lock()

    def put(self, name: str | None, data: bytes, content_type: str) -> str:
        path = build_storage_path(name)
        with self._guard:
            if path in self.objects:
                raise StorageUploadError("The resource already exists", path=path)
            self.objects[path] = (bytes(data), content_type)
        return path

    def sign(self, path: str | None, ttl_seconds: int) -> str | None:
        if not path:
            return None
        if path not in self.objects:
            raise StorageSignError(path, "Object not found")
        expires = int(time.time()) + ttl_seconds
        return f"memory://{self.bucket}/{quote(path)}?expires={expires}"

    def ensure_bucket(self) -> bool:
        if self.bucket_created:
            return False
        self.bucket_created = True
        return True
