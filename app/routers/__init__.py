# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - content.py: Projects, clients, contact submissions, newsletter
# - upload.py: Image upload to private storage
#
# Each router is mounted in main.py under settings.API_PREFIX.
# =============================================================================

from . import health
from . import content
from . import upload

__all__ = [
    "health",
    "content",
    "upload",
]
