# =============================================================================
# client/flow.py - Crop -> Upload -> Attach -> Submit Flow
# =============================================================================
# One UploadFlow drives one draft record (a project or a client testimonial)
# from file selection to a saved record:
#
#   IDLE -> FILE_SELECTED -> CROPPING -> UPLOADING -> ATTACHED -> SUBMITTING -> DONE
#
# - cancel() from FILE_SELECTED or CROPPING goes back to IDLE, nothing sent
# - a failed upload goes back to CROPPING with the selection kept
# - a failed submit goes back to ATTACHED with the draft kept
# - nothing is retried automatically
#
# Usage:
#   flow = UploadFlow(api, DraftKind.PROJECT)
#   flow.select_file(raw_bytes, "house.png")
#   flow.open_cropper()
#   flow.update_selection(zoom=1.5, pan_x=-0.2)
#   flow.confirm_crop()
#   flow.update_fields(name="Lakeside Villas", description="...")
#   record = flow.submit()
# =============================================================================

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from pathlib import PurePath
from typing import Any

from PIL import Image

from client.api import APIRequestError, ContentAPIClient
from lib.imaging import (
    CLIENT_ASPECT,
    OUTPUT_EXTENSION,
    PROJECT_ASPECT,
    CropRect,
    CropSelection,
    compute_crop_rect,
    decode_image,
    resolve_crop,
)
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    CROPPING = "cropping"
    UPLOADING = "uploading"
    ATTACHED = "attached"
    SUBMITTING = "submitting"
    DONE = "done"


class DraftKind(str, Enum):
    """What the draft becomes, which fixes the crop aspect and the endpoint."""
    PROJECT = "project"
    CLIENT = "client"

    @property
    def aspect(self) -> float:
        return PROJECT_ASPECT if self is DraftKind.PROJECT else CLIENT_ASPECT

    @property
    def fields(self) -> tuple[str, ...]:
        if self is DraftKind.PROJECT:
            return ("name", "description", "imagePath")
        return ("name", "designation", "description", "imagePath")


_TRANSITIONS: dict[FlowState, set[FlowState]] = {
    FlowState.IDLE: {FlowState.FILE_SELECTED},
    FlowState.FILE_SELECTED: {FlowState.CROPPING, FlowState.IDLE},
    FlowState.CROPPING: {FlowState.UPLOADING, FlowState.IDLE},
    FlowState.UPLOADING: {FlowState.ATTACHED, FlowState.CROPPING},
    FlowState.ATTACHED: {FlowState.SUBMITTING},
    FlowState.SUBMITTING: {FlowState.DONE, FlowState.ATTACHED},
    FlowState.DONE: set(),
}


# =============================================================================
# Errors
# =============================================================================

class InvalidTransitionError(ApplicationError):
    """Raised when an action is not allowed in the current state."""

    def __init__(self, current: FlowState, action: str):
        super().__init__(
            message=f"Cannot {action} while {current.value}",
            code="INVALID_TRANSITION",
            details={"state": current.value, "action": action},
        )


class UploadError(ApplicationError):
    """Raised when the cropped image could not be uploaded."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="UPLOAD_FAILED",
            suggestion="Press save again; the crop selection was kept",
        )


class SubmitError(ApplicationError):
    """Raised when the draft record could not be saved."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="SUBMIT_FAILED",
            suggestion="Submit again; the draft and its image were kept",
        )


class DraftIncompleteError(ApplicationError):
    """Raised when submitting a draft that has no uploaded image."""

    def __init__(self, kind: DraftKind):
        super().__init__(
            message=f"The {kind.value} needs an uploaded image before it can be added",
            code="DRAFT_INCOMPLETE",
            suggestion="Choose and crop an image first",
        )


# =============================================================================
# Flow
# =============================================================================

class UploadFlow:
    """State machine for one draft record and its image."""

    def __init__(self, api: ContentAPIClient, kind: DraftKind):
        self.api = api
        self.kind = kind
        self.state = FlowState.IDLE
        self.draft: dict[str, Any] = {field: "" for field in kind.fields}
        self.filename: str | None = None
        self.image: Image.Image | None = None
        self.selection: CropSelection | None = None
        self.last_error: str | None = None
        self.record: dict[str, Any] | None = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, action: str, *states: FlowState) -> None:
        if self.state not in states:
            raise InvalidTransitionError(self.state, action)

    def _transition(self, target: FlowState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state, f"move to {target.value}")
        logger.debug(f"{self.kind.value} draft: {self.state.value} -> {target.value}")
        self.state = target

    # -------------------------------------------------------------------------
    # Image selection & cropping
    # -------------------------------------------------------------------------

    def select_file(self, data: bytes, filename: str | None = None) -> None:
        """
        Decode the chosen file for the cropper. No network call.

        Raises:
            DecodeError: If the file is not an image (state stays IDLE)
        """
        self._require("select a file", FlowState.IDLE)
        self.image = decode_image(data)
        self.filename = filename
        self.last_error = None
        self._transition(FlowState.FILE_SELECTED)

    def open_cropper(self) -> CropSelection:
        """Show the cropper with the full-size window centred."""
        self._require("open the cropper", FlowState.FILE_SELECTED)
        self.selection = CropSelection(aspect=self.kind.aspect)
        self._transition(FlowState.CROPPING)
        return self.selection

    def update_selection(
        self,
        zoom: float | None = None,
        pan_x: float | None = None,
        pan_y: float | None = None,
    ) -> CropSelection:
        """Apply zoom/pan changes from the cropper. Values are clamped."""
        self._require("change the crop", FlowState.CROPPING)
        changes = {k: v for k, v in {"zoom": zoom, "pan_x": pan_x, "pan_y": pan_y}.items() if v is not None}
        self.selection = dataclasses.replace(self.selection, **changes).clamped()
        return self.selection

    @property
    def upload_name(self) -> str:
        """Name sent with the cropped upload: the chosen file's stem as JPEG."""
        stem = PurePath(self.filename or "").stem
        return f"{stem or 'cropped'}{OUTPUT_EXTENSION}"

    @property
    def crop_rect(self) -> CropRect | None:
        """Pixel rectangle the current selection maps to."""
        if self.image is None or self.selection is None:
            return None
        return compute_crop_rect(self.image.size, self.selection)

    def cancel(self) -> None:
        """Abort before anything was uploaded."""
        self._require("cancel", FlowState.FILE_SELECTED, FlowState.CROPPING)
        self.image = None
        self.filename = None
        self.selection = None
        self._transition(FlowState.IDLE)

    def confirm_crop(self) -> str:
        """
        Crop, upload and attach the storage path to the draft.

        Returns:
            The storage path now in draft["imagePath"]

        Raises:
            DecodeError / EncodeError / InvalidCropError: crop failed, still CROPPING
            UploadError: upload failed, back in CROPPING with the selection kept
        """
        self._require("save the crop", FlowState.CROPPING)
        blob = resolve_crop(self.image, self.crop_rect)

        self._transition(FlowState.UPLOADING)
        try:
            result = self.api.upload_image(blob, filename=self.upload_name)
            path = result.get("path") if isinstance(result, dict) else None
            if not path:
                raise APIRequestError("Upload response did not include a path", endpoint="/upload")
        except APIRequestError as e:
            self.last_error = e.message
            self._transition(FlowState.CROPPING)
            logger.warning(f"Image upload failed: {e.message}")
            raise UploadError(e.message) from e

        self.draft["imagePath"] = path
        self.last_error = None
        self._transition(FlowState.ATTACHED)
        logger.info(f"Attached image {path} to {self.kind.value} draft")
        return path

    # -------------------------------------------------------------------------
    # Draft & submission
    # -------------------------------------------------------------------------

    def update_fields(self, **fields: Any) -> dict[str, Any]:
        """Edit draft text fields. imagePath is only set by confirm_crop()."""
        if self.state in (FlowState.SUBMITTING, FlowState.DONE):
            raise InvalidTransitionError(self.state, "edit the draft")
        if "imagePath" in fields:
            raise ValueError("imagePath is set by uploading an image")
        self.draft.update(fields)
        return self.draft

    @property
    def can_submit(self) -> bool:
        return self.state is FlowState.ATTACHED and bool(self.draft.get("imagePath"))

    def submit(self) -> dict[str, Any]:
        """
        Save the draft as a new record.

        Raises:
            DraftIncompleteError: No image attached yet
            SubmitError: The server rejected the record, back in ATTACHED
        """
        if self.state in (FlowState.UPLOADING, FlowState.SUBMITTING, FlowState.DONE):
            raise InvalidTransitionError(self.state, "submit")
        if not self.can_submit:
            raise DraftIncompleteError(self.kind)

        self._transition(FlowState.SUBMITTING)
        try:
            if self.kind is DraftKind.PROJECT:
                response = self.api.add_project(dict(self.draft))
            else:
                response = self.api.add_client(dict(self.draft))
            if not isinstance(response, dict):
                raise APIRequestError(
                    f"Unexpected response when adding {self.kind.value}",
                    endpoint=f"/{self.kind.value}s",
                )
        except APIRequestError as e:
            self.last_error = e.message
            self._transition(FlowState.ATTACHED)
            logger.warning(f"Submitting {self.kind.value} failed: {e.message}")
            raise SubmitError(e.message) from e

        self.record = response.get(self.kind.value)
        self.last_error = None
        self._transition(FlowState.DONE)
        return self.record
