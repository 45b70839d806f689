# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Estate Showcase API:
# - test_imaging.py: crop geometry and JPEG output
# - test_storage_service.py / test_record_store.py: store adapters
# - test_content_service.py: business logic and append locking
# - test_routes.py: HTTP API through TestClient
# - test_upload_flow.py: client-side crop/upload/submit flow
#
# Run tests with: pytest
# =============================================================================
