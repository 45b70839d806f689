# =============================================================================
# core/models/content.py - Content Schemas
# =============================================================================
# These models define the API contract for the four record collections:
# - Collection: the storage key of each collection
# - *Create: request bodies for the append endpoints
# - *Response: envelopes returned by the append and upload endpoints
#
# Request bodies accept unknown keys and values of any JSON type, and no
# field is required: the stored record is the body as sent plus the
# server-assigned fields. Only a body that is not a JSON object is refused.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Collection(str, Enum):
    """
    Record collections and the key each one is stored under.

    - projects: real-estate project listings (have images, 4:3)
    - clients: client testimonials (have images, 1:1)
    - contact_submissions: contact-form leads, append-only
    - newsletter_subscriptions: unique by email
    """
    PROJECTS = "projects"
    CLIENTS = "clients"
    CONTACT_SUBMISSIONS = "contact_submissions"
    NEWSLETTER_SUBSCRIPTIONS = "newsletter_subscriptions"


class _OpenBody(BaseModel):
    """Base for request bodies: keeps any extra keys the client sends."""

    model_config = ConfigDict(extra="allow")

    def to_record(self) -> dict[str, Any]:
        """Body as a plain dict, dropping keys sent as null."""
        return self.model_dump(exclude_none=True)


class ProjectCreate(_OpenBody):
    """
    Body of POST /projects.

    Example:
        {"name": "Lakeside Villas", "description": "...", "imagePath": "3f6c...-cropped.jpg"}
    """
    name: Any = Field(default=None, description="Project name")
    description: Any = Field(default=None, description="Short description")
    imagePath: Any = Field(default=None, description="Storage path returned by /upload")


class ClientCreate(_OpenBody):
    """Body of POST /clients (a testimonial)."""
    name: Any = None
    designation: Any = Field(default=None, description="e.g. 'CEO, Foo Corp'")
    description: Any = Field(default=None, description="Testimonial text")
    imagePath: Any = None


class ContactSubmissionCreate(_OpenBody):
    """Body of POST /contact."""
    fullName: Any = None
    email: Any = None
    mobile: Any = None
    city: Any = None


class NewsletterSubscribeRequest(_OpenBody):
    """Body of POST /newsletter."""
    email: Any = None


# =============================================================================
# Responses
# =============================================================================

class UploadResponse(BaseModel):
    """Storage path of an uploaded image. Never a URL."""
    path: str = Field(..., description="Opaque storage path to put in imagePath")


class SuccessResponse(BaseModel):
    """Acknowledgement for writes that return no record."""
    success: bool = True
