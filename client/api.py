# =============================================================================
# client/api.py - Content API Client
# =============================================================================
# Thin httpx wrapper over the content API, used by the admin tooling and
# the upload flow. Every non-2xx response becomes an APIRequestError that
# carries the server's "error" message so it can be shown to the user. A
# 2xx response whose body is not JSON is an APIRequestError too.
#
# Usage:
#   api = ContentAPIClient.connect("https://xxx.example.com", prefix="/api/v1")
#   path = api.upload_image(blob)["path"]
#   api.add_project({"name": "A", "description": "d", "imagePath": path})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from lib.imaging import OUTPUT_CONTENT_TYPE, OUTPUT_EXTENSION
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_UPLOAD_NAME = f"cropped{OUTPUT_EXTENSION}"


class APIRequestError(ApplicationError):
    """Raised when the content API answers with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, endpoint: str | None = None):
        super().__init__(
            message=message,
            code="API_REQUEST_FAILED",
            details={"status_code": status_code, "endpoint": endpoint},
        )
        self.status_code = status_code


class ContentAPIClient:
    """
    Client for the content API.

    The http client is injected so tests can pass FastAPI's TestClient,
    which is an httpx.Client.
    """

    def __init__(self, client: httpx.Client, prefix: str = "/api/v1"):
        self.client = client
        self.prefix = prefix.rstrip("/")

    @classmethod
    def connect(
        cls,
        base_url: str,
        prefix: str = "/api/v1",
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> ContentAPIClient:
        """
        Build a client with its own httpx.Client.

        api_key is sent as a bearer token when the deployment's gateway
        requires one; the API itself does not check it.
        """
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        return cls(httpx.Client(base_url=base_url, headers=headers, timeout=timeout), prefix=prefix)

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        url = f"{self.prefix}{endpoint}"
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIRequestError(f"Could not reach the server: {e}", endpoint=endpoint) from e

        if response.is_error:
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                message = None
            raise APIRequestError(message or "API Request Failed", response.status_code, endpoint)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response from {method} {url} ({response.status_code})")
            raise APIRequestError("Invalid response from server", response.status_code, endpoint) from e

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def get_projects(self) -> list[dict[str, Any]]:
        return self._request("GET", "/projects")

    def add_project(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/projects", json=data)

    def get_clients(self) -> list[dict[str, Any]]:
        return self._request("GET", "/clients")

    def add_client(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/clients", json=data)

    def get_contact_submissions(self) -> list[dict[str, Any]]:
        return self._request("GET", "/contact")

    def submit_contact(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/contact", json=data)

    def get_newsletter_subscriptions(self) -> list[dict[str, Any]]:
        return self._request("GET", "/newsletter")

    def subscribe_newsletter(self, email: str) -> dict[str, Any]:
        return self._request("POST", "/newsletter", json={"email": email})

    def upload_image(
        self,
        data: bytes,
        filename: str = DEFAULT_UPLOAD_NAME,
        content_type: str = OUTPUT_CONTENT_TYPE,
    ) -> dict[str, Any]:
        """Upload one image as multipart field "file". Returns {"path": ...}."""
        return self._request("POST", "/upload", files={"file": (filename, data, content_type)})
