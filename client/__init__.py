# =============================================================================
# client/ - Admin Client Package
# =============================================================================
# Client-side half of the image pipeline:
# - api.py: httpx client for the content API
# - flow.py: crop -> upload -> attach -> submit state machine per draft
#
# Nothing here imports the server packages; it only talks HTTP.
# =============================================================================

from client.api import APIRequestError, ContentAPIClient
from client.flow import (
    DraftIncompleteError,
    DraftKind,
    FlowState,
    InvalidTransitionError,
    SubmitError,
    UploadError,
    UploadFlow,
)

__all__ = [
    "APIRequestError",
    "ContentAPIClient",
    "DraftIncompleteError",
    "DraftKind",
    "FlowState",
    "InvalidTransitionError",
    "SubmitError",
    "UploadError",
    "UploadFlow",
]
