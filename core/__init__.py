# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for request/response validation
# - services/: record store, object store and the content service
#
# Code in this package defines no routes; errors it raises are the
# structured exceptions from app/exceptions.py.
# =============================================================================
