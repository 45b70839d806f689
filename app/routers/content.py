# =============================================================================
# app/routers/content.py - Collection Endpoints
# =============================================================================
# List and append endpoints for projects, clients, contact submissions and
# newsletter subscriptions. Handlers stay thin: each one delegates to
# ContentService in the threadpool so store I/O never blocks the event loop.
# =============================================================================

import logging

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from app.dependencies import ContentServiceDep
from core.models.content import (
    ClientCreate,
    ContactSubmissionCreate,
    NewsletterSubscribeRequest,
    ProjectCreate,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Projects
# =============================================================================

@router.get("/projects")
async def list_projects(service: ContentServiceDep):
    """
    List projects in insertion order.

    Each project with an imagePath gets an imageUrl valid for a limited
    time. Records whose image cannot be signed are returned without one.
    """
    return await run_in_threadpool(service.list_projects)


@router.post("/projects")
async def add_project(body: ProjectCreate, service: ContentServiceDep):
    """Add a project. The server assigns its id."""
    project = await run_in_threadpool(service.add_project, body.to_record())
    return {"success": True, "project": project}


# =============================================================================
# Clients (testimonials)
# =============================================================================

@router.get("/clients")
async def list_clients(service: ContentServiceDep):
    """List client testimonials with signed image URLs."""
    return await run_in_threadpool(service.list_clients)


@router.post("/clients")
async def add_client(body: ClientCreate, service: ContentServiceDep):
    """Add a client testimonial. The server assigns its id."""
    client = await run_in_threadpool(service.add_client, body.to_record())
    return {"success": True, "client": client}


# =============================================================================
# Contact Submissions
# =============================================================================

@router.get("/contact")
async def list_contact_submissions(service: ContentServiceDep):
    return await run_in_threadpool(service.list_contact_submissions)


@router.post("/contact")
async def submit_contact(body: ContactSubmissionCreate, service: ContentServiceDep):
    """Record a contact-form lead with a server timestamp."""
    submission = await run_in_threadpool(service.add_contact_submission, body.to_record())
    return {"success": True, "submission": submission}


# =============================================================================
# Newsletter
# =============================================================================

@router.get("/newsletter")
async def list_newsletter_subscriptions(service: ContentServiceDep):
    return await run_in_threadpool(service.list_newsletter_subscriptions)


@router.post("/newsletter", response_model=SuccessResponse)
async def subscribe_newsletter(body: NewsletterSubscribeRequest, service: ContentServiceDep):
    """
    Subscribe an email.

    Subscribing an email that is already on the list succeeds without
    adding a second record.
    """
    await run_in_threadpool(service.subscribe_newsletter, body.to_record())
    return SuccessResponse()
