# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the key/value access used by the record store:
# - fetch_kv: read one JSON value by key
# - upsert_kv: replace one JSON value by key
#
# The KV table is expected to look like:
#   create table kv_store (key text primary key, value jsonb not null);
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   projects = SupabaseClient.fetch_kv("kv_store", "projects")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        value = SupabaseClient.fetch_kv("kv_store", "clients")
        SupabaseClient.upsert_kv("kv_store", "clients", value + [new_client])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key: the bucket is private and the KV table is
        not exposed to anonymous callers.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return cls._instance

    # -------------------------------------------------------------------------
    # Key/Value Operations
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_kv(cls, table: str, key: str) -> Any | None:
        """
        Fetch the JSON value stored under key.

        Args:
            table: KV table name
            key: Row key

        Returns:
            The decoded JSON value, or None if the key has no row

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch key '{key}': {e}",
                code="FETCH_KV_FAILED",
                suggestion=f"Check that the '{table}' table exists and is reachable",
                details={"table": table, "key": key},
            ) from e

        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("value")

    @classmethod
    def upsert_kv(cls, table: str, key: str, value: Any) -> None:
        """
        Insert or replace the JSON value stored under key.

        The whole value is written; there is no partial update.

        Raises:
            SupabaseClientError: If the upsert fails
        """
        client = cls.get_client()

        try:
            (
                client.table(table)
                .upsert({"key": key, "value": value})
                .execute()
            )
            logger.debug(f"Upserted key '{key}' in {table}")

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to write key '{key}': {e}",
                code="UPSERT_KV_FAILED",
                suggestion=f"Check that the '{table}' table exists and the service key can write to it",
                details={"table": table, "key": key},
            ) from e
