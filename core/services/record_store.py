# =============================================================================
# core/services/record_store.py - Collection Record Store
# =============================================================================
# Holds each record collection as one ordered list under one key.
# Every write replaces the whole list: callers do read -> append -> write.
# That pattern is not safe under concurrent writers on its own; see
# ContentService for the per-collection lock.
# =============================================================================

import copy
import logging
import threading
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordStore:
    """Narrow interface the content service depends on."""

    def get(self, collection: str) -> list[Record]:
        """Return the collection in insertion order, or [] if it was never written."""
        raise NotImplementedError

    def set(self, collection: str, records: list[Record]) -> None:
        """Replace the whole collection."""
        raise NotImplementedError


class SupabaseRecordStore(RecordStore):
    """
    Record store backed by a Supabase key/value table.

    One row per collection: key = collection name, value = JSON array.
    """

    def __init__(self, table: str):
        self.table = table

    def get(self, collection: str) -> list[Record]:
        try:
            value = SupabaseClient.fetch_kv(self.table, collection)
        except SupabaseClientError as e:
            logger.error(f"Record store read failed for {collection}: {e}")
            raise StoreReadError(collection, e.message) from e

        if value is None:
            return []
        if not isinstance(value, list):
            raise StoreReadError(collection, f"expected a list, found {type(value).__name__}")
        return value

    def set(self, collection: str, records: list[Record]) -> None:
        try:
            SupabaseClient.upsert_kv(self.table, collection, records)
        except SupabaseClientError as e:
            logger.error(f"Record store write failed for {collection}: {e}")
            raise StoreWriteError(collection, e.message) from e

        logger.info(f"Saved {len(records)} records to {collection}")


class InMemoryRecordStore(RecordStore):
    """Process-local record store for tests and local development."""

    def __init__(self, initial: dict[str, list[Record]] | None = None):
        self._data: dict[str, list[Record]] = copy.deepcopy(initial or {})
        self._guard = threading.Lock()

    def get(self, collection: str) -> list[Record]:
        with self._guard:
            return copy.deepcopy(self._data.get(collection, []))

    def set(self, collection: str, records: list[Record]) -> None:
        with self._guard:
            self._data[collection] = copy.deepcopy(records)
