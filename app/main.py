# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Estate Showcase API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.dependencies import get_object_store
from app.exceptions import (
    ShowcaseException,
    http_exception_handler,
    showcase_exception_handler,
    validation_exception_handler,
)
from app.routers import content, health, upload

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup makes sure the private image bucket exists. A failure is logged
    and the API still starts; uploads will report the storage error.
    """
    logger.info(f"Starting Estate Showcase API in {settings.ENVIRONMENT} mode")
    logger.info(f"Routes mounted under {settings.API_PREFIX or '/'}")

    # Honour test overrides so startup never reaches a real bucket there
    store_factory = app.dependency_overrides.get(get_object_store, get_object_store)

    try:
        created = await run_in_threadpool(store_factory().ensure_bucket)
        if created:
            logger.info(f"Created storage bucket {settings.STORAGE_BUCKET}")
    except Exception as e:
        logger.error(f"Error checking/creating bucket {settings.STORAGE_BUCKET}: {e}")

    yield

    logger.info("Shutting down Estate Showcase API")


# Create FastAPI application
app = FastAPI(
    title="Estate Showcase API",
    description="""
## Content API for a real-estate marketing site

Back-office API for project listings, client testimonials, contact-form
leads and newsletter emails.

### Image flow

1. Crop the image client-side (4:3 for projects, 1:1 for testimonials)
2. `POST /upload` the JPEG and keep the returned `path`
3. `POST /projects` or `/clients` with `imagePath` set to that path
4. `GET /projects` or `/clients` returns each record with a signed `imageUrl`

Images live in a private bucket; signed URLs expire after one hour.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Content",
            "description": "Projects, clients, contact submissions and newsletter",
        },
        {
            "name": "Upload",
            "description": "Upload cropped images to private storage",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - the public site and the admin panel call from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=settings.is_production,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log one line per request with status and duration."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ShowcaseException)
async def handle_showcase_exception(request: Request, exc: ShowcaseException):
    """Handle custom Estate Showcase exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return await showcase_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix=settings.API_PREFIX,
    tags=["Health"]
)

# Collection endpoints
app.include_router(
    content.router,
    prefix=settings.API_PREFIX,
    tags=["Content"]
)

# Image upload endpoint
app.include_router(
    upload.router,
    prefix=settings.API_PREFIX,
    tags=["Upload"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Estate Showcase API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health",
    }
