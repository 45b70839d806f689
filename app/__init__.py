# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Store and service wiring for Depends()
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
