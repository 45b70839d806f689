# =============================================================================
# core/services/content_service.py - Content Business Logic
# =============================================================================
# Composes the record store and the object store:
# - list projects/clients with freshly signed image URLs
# - append records with server-assigned ids and timestamps
# - newsletter subscriptions unique by email
# - image uploads that return a storage path, never a URL
# =============================================================================

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from app.exceptions import StorageSignError
from core.models.content import Collection
from core.services.record_store import Record, RecordStore
from core.services.storage_service import ObjectStore
from lib.utils import new_record_id, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_SIGNED_URL_TTL = 3600


class ContentService:
    """
    Service for the four content collections and image uploads.

    Appends are read-modify-write on the whole collection. With
    serialize_appends enabled (default) appends to the same collection run
    one at a time inside this process; with it disabled two concurrent
    appends can lose one record (last write wins).

    Example:
        service = ContentService(InMemoryRecordStore(), InMemoryObjectStore())
        path = service.upload_image("cropped.jpg", blob, "image/jpeg")
        project = service.add_project({"name": "A", "description": "d", "imagePath": path})
        service.list_projects()[0]["imageUrl"]
    """

    def __init__(
        self,
        record_store: RecordStore,
        object_store: ObjectStore,
        signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL,
        serialize_appends: bool = True,
    ):
        self.record_store = record_store
        self.object_store = object_store
        self.signed_url_ttl = signed_url_ttl
        self.serialize_appends = serialize_appends
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _append_lock(self, collection: Collection) -> Iterator[None]:
        if not self.serialize_appends:
            yield
            return

        with self._locks_guard:
            lock = self._locks.setdefault(collection.value, threading.Lock())
        with lock:
            yield

    def _append(self, collection: Collection, record: Record) -> Record:
        with self._append_lock(collection):
            records = self.record_store.get(collection.value)
            records.append(record)
            self.record_store.set(collection.value, records)

        logger.info(f"Appended record to {collection.value} (now {len(records)})")
        return record

    def _with_image_urls(self, records: list[Record]) -> list[Record]:
        """Attach imageUrl to every record that has an imagePath it can sign."""
        enriched = []
        for record in records:
            path = record.get("imagePath")
            if not path:
                enriched.append(record)
                continue

            try:
                url = self.object_store.sign(path, self.signed_url_ttl)
            except StorageSignError as e:
                logger.warning(f"Could not sign image for record {record.get('id')}: {e.message}")
                url = None
            except Exception as e:
                logger.warning(f"Unexpected error signing image for record {record.get('id')}: {e}")
                url = None

            enriched.append({**record, "imageUrl": url} if url else record)
        return enriched

    # -------------------------------------------------------------------------
    # Projects & Clients
    # -------------------------------------------------------------------------

    def list_projects(self) -> list[Record]:
        return self._with_image_urls(self.record_store.get(Collection.PROJECTS.value))

    def add_project(self, body: dict[str, Any]) -> Record:
        return self._append(Collection.PROJECTS, {**body, "id": new_record_id()})

    def list_clients(self) -> list[Record]:
        return self._with_image_urls(self.record_store.get(Collection.CLIENTS.value))

    def add_client(self, body: dict[str, Any]) -> Record:
        return self._append(Collection.CLIENTS, {**body, "id": new_record_id()})

    # -------------------------------------------------------------------------
    # Contact Submissions
    # -------------------------------------------------------------------------

    def list_contact_submissions(self) -> list[Record]:
        return self.record_store.get(Collection.CONTACT_SUBMISSIONS.value)

    def add_contact_submission(self, body: dict[str, Any]) -> Record:
        """Append a contact-form lead stamped with id and submittedAt."""
        submission = {**body, "id": new_record_id(), "submittedAt": utc_now_iso()}
        return self._append(Collection.CONTACT_SUBMISSIONS, submission)

    # -------------------------------------------------------------------------
    # Newsletter
    # -------------------------------------------------------------------------

    def list_newsletter_subscriptions(self) -> list[Record]:
        return self.record_store.get(Collection.NEWSLETTER_SUBSCRIPTIONS.value)

    def subscribe_newsletter(self, body: dict[str, Any]) -> bool:
        """
        Add a subscription unless the email is already present.

        Returns:
            True if a subscription was stored, False for a duplicate
        """
        collection = Collection.NEWSLETTER_SUBSCRIPTIONS
        email = body.get("email")

        with self._append_lock(collection):
            subscriptions = self.record_store.get(collection.value)
            if any(s.get("email") == email for s in subscriptions):
                logger.info("Newsletter subscription already exists, ignoring")
                return False

            subscriptions.append({**body, "subscribedAt": utc_now_iso()})
            self.record_store.set(collection.value, subscriptions)

        logger.info(f"Added newsletter subscription (now {len(subscriptions)})")
        return True

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def upload_image(self, filename: str | None, data: bytes, content_type: str) -> str:
        """
        Store an image and return its storage path.

        Raises:
            StorageUploadError: If the object store write fails
        """
        return self.object_store.put(filename, data, content_type)
