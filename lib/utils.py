# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import uuid4


# =============================================================================
# Identifiers & Timestamps
# =============================================================================

def new_record_id() -> str:
    """Generate a fresh, never-reused record identifier."""
    return str(uuid4())


def utc_now_iso() -> str:
    """
    Current UTC time as an ISO-8601 string with a trailing "Z".

    Example:
        utc_now_iso()  # "2024-01-15T10:30:00.123456Z"
    """
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse a timestamp produced by utc_now_iso()."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# =============================================================================
# Filenames
# =============================================================================

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str | None, default: str = "upload") -> str:
    """
    Reduce a client-supplied filename to a storage-safe basename.

    Directory components are dropped and anything outside [A-Za-z0-9._-]
    becomes "_".

    Example:
        safe_filename("../My Photo (1).jpg")  # "My_Photo_1_.jpg"
    """
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
    return name or default


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors outside the HTTP layer.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
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
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
