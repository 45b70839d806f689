# =============================================================================
# tests/test_models.py - Pydantic Model & Settings Tests
# =============================================================================
# Unit tests for the request models and settings to ensure:
# - Bodies keep unknown keys and drop nulls
# - No field is required on append bodies, and values are not type-checked
# - Settings helpers parse their inputs
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from app.config import Settings
from core.models import (
    ClientCreate,
    Collection,
    ContactSubmissionCreate,
    NewsletterSubscribeRequest,
    ProjectCreate,
    UploadResponse,
)
from lib.utils import safe_filename


class TestRequestBodies:

    def test_project_keeps_extra_keys(self):
        body = ProjectCreate(name="A", description="d", imagePath="p1", featured=True)

        assert body.to_record() == {"name": "A", "description": "d", "imagePath": "p1", "featured": True}

    def test_empty_bodies_are_accepted(self):
        assert ProjectCreate().to_record() == {}
        assert ClientCreate().to_record() == {}
        assert ContactSubmissionCreate().to_record() == {}
        assert NewsletterSubscribeRequest().to_record() == {}

    def test_nulls_are_dropped(self):
        body = ClientCreate(name="Jane", designation=None)
        assert body.to_record() == {"name": "Jane"}

    def test_non_string_values_kept_as_sent(self):
        body = ContactSubmissionCreate(fullName="J", mobile=5550100, email=["a@x.com", "b@x.com"])

        assert body.to_record() == {"fullName": "J", "mobile": 5550100, "email": ["a@x.com", "b@x.com"]}

    def test_numeric_project_name_not_coerced(self):
        assert ProjectCreate(name=42).to_record() == {"name": 42}

    def test_upload_response_requires_path(self):
        with pytest.raises(ValidationError):
            UploadResponse()


class TestCollection:

    def test_storage_keys(self):
        assert [c.value for c in Collection] == [
            "projects",
            "clients",
            "contact_submissions",
            "newsletter_subscriptions",
        ]


class TestSettings:

    def test_defaults(self):
        s = Settings(SUPABASE_URL="https://x.supabase.co", SUPABASE_SERVICE_KEY="k")

        assert s.SIGNED_URL_TTL_SECONDS == 3600
        assert s.max_upload_size_bytes == 10 * 1024 * 1024
        assert s.SERIALIZE_APPENDS is True

    def test_cors_origins_list(self):
        s = Settings(
            SUPABASE_URL="https://x.supabase.co",
            SUPABASE_SERVICE_KEY="k",
            CORS_ORIGINS="http://localhost:3000, https://estate.example ,",
        )

        assert s.cors_origins_list == ["http://localhost:3000", "https://estate.example"]

    def test_ttl_lower_bound(self):
        with pytest.raises(ValidationError):
            Settings(SUPABASE_URL="https://x.supabase.co", SUPABASE_SERVICE_KEY="k", SIGNED_URL_TTL_SECONDS=5)


class TestSafeFilename:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("cropped.jpg", "cropped.jpg"),
            ("C:\\Users\\me\\pic.png", "pic.png"),
            ("..", "upload"),
            ("", "upload"),
            ("été 2024.jpg", "t_2024.jpg"),
        ],
    )
    def test_cases(self, raw, expected):
        assert safe_filename(raw) == expected
