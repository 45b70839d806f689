# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - content.py: collection keys, request bodies and response envelopes
#
# These models define the "contract" between API and clients.
# =============================================================================

from .content import (
    ClientCreate,
    Collection,
    ContactSubmissionCreate,
    NewsletterSubscribeRequest,
    ProjectCreate,
    SuccessResponse,
    UploadResponse,
)

__all__ = [
    "ClientCreate",
    "Collection",
    "ContactSubmissionCreate",
    "NewsletterSubscribeRequest",
    "ProjectCreate",
    "SuccessResponse",
    "UploadResponse",
]
