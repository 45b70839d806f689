# =============================================================================
# app/routers/upload.py - Image Upload
# =============================================================================
# Accepts one cropped image as multipart/form-data (field "file"), stores it
# in the private bucket and returns its storage path. The path is what the
# client puts in a record's imagePath; no URL is ever returned here.
# =============================================================================

import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.config import settings
from app.dependencies import ContentServiceDep
from app.exceptions import BadRequestError, FileTooLargeError
from core.models.content import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_FIELD = "file"


@router.post("/upload", response_model=UploadResponse)
async def upload_image(request: Request, service: ContentServiceDep):
    """
    Upload an image.

    This endpoint:
    1. Requires exactly one file part named "file"
    2. Enforces MAX_UPLOAD_SIZE_MB
    3. Writes the bytes under a fresh unique path (never overwrites)

    Returns {"path": "<storage path>"}.
    """
    form = await request.form()
    try:
        parts = form.getlist(UPLOAD_FIELD)
        if not parts:
            raise BadRequestError("No file uploaded", field=UPLOAD_FIELD)
        if len(parts) > 1:
            raise BadRequestError("Only one file can be uploaded per request", field=UPLOAD_FIELD)

        file = parts[0]
        if not isinstance(file, UploadFile):
            raise BadRequestError(f"Field '{UPLOAD_FIELD}' is not a file", field=UPLOAD_FIELD)

        content = await file.read()
        size_mb = len(content) / (1024 * 1024)
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(size_mb, settings.MAX_UPLOAD_SIZE_MB)

        filename = file.filename or "upload"
        content_type = file.content_type or "application/octet-stream"
        logger.info(f"Processing upload: {filename} ({size_mb:.2f}MB, {content_type})")

    finally:
        await form.close()

    path = await run_in_threadpool(service.upload_image, filename, content, content_type)
    return UploadResponse(path=path)
