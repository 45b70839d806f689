# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every non-2xx response carries {"error": <message>, "code": <CODE>, ...}
# so the admin UI can show the message as-is.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ShowcaseException(Exception):
    """
    Base exception for the Estate Showcase API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SHOWCASE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Upload Exceptions
# =============================================================================

class BadRequestError(ShowcaseException):
    """Raised when an upload request carries no usable file part."""

    def __init__(self, message: str = "No file uploaded", field: str = "file"):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            suggestion=f"Send a multipart/form-data body with a single file in the '{field}' field",
            details={"field": field},
        )


class FileTooLargeError(ShowcaseException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Crop or compress the image below {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class StorageUploadError(ShowcaseException):
    """Raised when writing an object to storage fails."""

    def __init__(self, error: str, path: str | None = None):
        super().__init__(
            message=f"Upload failed: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try the upload again; the previous crop can be reused",
            details={"path": path} if path else None,
        )


class StorageSignError(ShowcaseException):
    """Raised when a signed retrieval URL cannot be produced."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to sign storage path: {error}",
            code="STORAGE_SIGN_ERROR",
            status_code=500,
            details={"path": path},
        )


# =============================================================================
# Record Store Exceptions
# =============================================================================

class StoreReadError(ShowcaseException):
    """Raised when a collection cannot be read from the record store."""

    def __init__(self, collection: str, error: str):
        super().__init__(
            message=f"Failed to read {collection}: {error}",
            code="STORE_READ_ERROR",
            status_code=500,
            suggestion="Try again later or check the record store connection",
            details={"collection": collection},
        )


class StoreWriteError(ShowcaseException):
    """Raised when a collection cannot be written back to the record store."""

    def __init__(self, collection: str, error: str):
        super().__init__(
            message=f"Failed to save {collection}: {error}",
            code="STORE_WRITE_ERROR",
            status_code=500,
            suggestion="Nothing was saved; submit the form again",
            details={"collection": collection},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def showcase_exception_handler(
    request: Request,
    exc: ShowcaseException
) -> JSONResponse:
    """Convert ShowcaseException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body validation errors.

    Only unparsable JSON or a body that is not an object ends up here;
    field values are never type-checked.
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "Request body must be a JSON object",
            "code": "VALIDATION_ERROR",
            "details": {"errors": [str(err.get("msg")) for err in exc.errors()]},
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Keep framework errors (404, 405, ...) in the same {"error": ...} shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": str(exc.detail),
            "code": "HTTP_ERROR",
        },
        headers=getattr(exc, "headers", None),
    )
