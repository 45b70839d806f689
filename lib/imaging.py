# =============================================================================
# lib/imaging.py - Crop Geometry & Rasterization
# =============================================================================
# Turns an interactive crop selection (aspect, zoom, pan) into an exact
# source-pixel rectangle and rasterizes that rectangle into a JPEG blob.
#
# Everything here is pure: no network, no storage, no shared state.
#
# Usage:
#   image = decode_image(raw_bytes)
#   rect = compute_crop_rect(image.size, CropSelection(aspect=PROJECT_ASPECT, zoom=1.5))
#   blob = resolve_crop(image, rect)
# =============================================================================

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
OUTPUT_CONTENT_TYPE = "image/jpeg"
OUTPUT_EXTENSION = ".jpg"
DEFAULT_QUALITY = 92

PROJECT_ASPECT = 4 / 3
CLIENT_ASPECT = 1.0

MIN_ZOOM = 1.0
MAX_ZOOM = 3.0


# =============================================================================
# Errors
# =============================================================================

class ImagingError(ApplicationError):
    """Base class for crop/encode failures. The user must redo the crop."""


class DecodeError(ImagingError):
    """Raised when the source bytes cannot be rasterized."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Could not read image: {error}",
            code="DECODE_ERROR",
            suggestion="Choose a JPEG, PNG, GIF or WebP file",
        )


class EncodeError(ImagingError):
    """Raised when encoding the cropped canvas yields no data."""

    def __init__(self, error: str = "encoder produced no data"):
        super().__init__(
            message=f"Could not encode cropped image: {error}",
            code="ENCODE_ERROR",
            suggestion="Adjust the crop and try again",
        )


class InvalidCropError(ImagingError):
    """Raised when a crop rectangle has no overlap with the image."""

    def __init__(self, rect: CropRect, image_size: tuple[int, int]):
        super().__init__(
            message=f"Crop rectangle {rect} is empty within a {image_size[0]}x{image_size[1]} image",
            code="INVALID_CROP",
            suggestion="Select an area inside the image",
            details={"rect": rect.as_dict(), "image_size": list(image_size)},
        )


# =============================================================================
# Geometry
# =============================================================================

@dataclass(frozen=True)
class CropRect:
    """A rectangle in source-pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow expects."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CropSelection:
    """
    State of the interactive cropper.

    aspect is width / height of the crop window. zoom shrinks the window
    (1 = largest window that fits). pan_x / pan_y run from -1 (left/top
    edge) to 1 (right/bottom edge) of the room left around the window.
    """

    aspect: float
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def __post_init__(self):
        if self.aspect <= 0:
            raise ValueError(f"aspect must be positive, got {self.aspect}")

    def clamped(self) -> CropSelection:
        """Return a copy with zoom and pan pulled into their valid ranges."""
        return CropSelection(
            aspect=self.aspect,
            zoom=min(max(self.zoom, MIN_ZOOM), MAX_ZOOM),
            pan_x=min(max(self.pan_x, -1.0), 1.0),
            pan_y=min(max(self.pan_y, -1.0), 1.0),
        )


def compute_crop_rect(image_size: tuple[int, int], selection: CropSelection) -> CropRect:
    """
    Convert a cropper selection into the pixel rectangle to extract.

    The window at zoom 1 is the largest rectangle of the selection's aspect
    that fits the image. Zoom divides both sides; pan moves the window's
    centre away from the image centre by pan * slack / 2 on each axis.
    """
    img_w, img_h = image_size
    if img_w <= 0 or img_h <= 0:
        raise InvalidCropError(CropRect(0, 0, 0, 0), image_size)

    sel = selection.clamped()

    if img_w / img_h > sel.aspect:
        base_h = float(img_h)
        base_w = base_h * sel.aspect
    else:
        base_w = float(img_w)
        base_h = base_w / sel.aspect

    width = max(1, min(img_w, round(base_w / sel.zoom)))
    height = max(1, min(img_h, round(base_h / sel.zoom)))

    slack_x = img_w - width
    slack_y = img_h - height
    x = round(slack_x / 2 + sel.pan_x * slack_x / 2)
    y = round(slack_y / 2 + sel.pan_y * slack_y / 2)

    return CropRect(
        x=min(max(x, 0), slack_x),
        y=min(max(y, 0), slack_y),
        width=width,
        height=height,
    )


def clamp_crop_rect(rect: CropRect, image_size: tuple[int, int]) -> CropRect:
    """Intersect rect with the image bounds."""
    img_w, img_h = image_size
    left = max(rect.x, 0)
    top = max(rect.y, 0)
    right = min(rect.x + rect.width, img_w)
    bottom = min(rect.y + rect.height, img_h)

    if right <= left or bottom <= top:
        raise InvalidCropError(rect, image_size)

    return CropRect(x=left, y=top, width=right - left, height=bottom - top)


# =============================================================================
# Rasterization
# =============================================================================

def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw bytes into a fully loaded Pillow image.

    Raises:
        DecodeError: If the bytes are not a readable raster image
    """
    if not data:
        raise DecodeError("file is empty")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(str(e)) from e

    return image


def resolve_crop(
    source: Image.Image | bytes,
    rect: CropRect,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """
    Extract rect from source pixel-for-pixel and encode it as JPEG.

    The output is exactly rect.width x rect.height after clamping to the
    image bounds. No resampling happens here.

    Args:
        source: A decoded image or raw image bytes
        rect: Crop rectangle in source-pixel coordinates
        quality: JPEG quality (fixed per deployment)

    Returns:
        JPEG bytes

    Raises:
        DecodeError: If source bytes cannot be decoded
        InvalidCropError: If rect does not overlap the image
        EncodeError: If encoding fails or produces no bytes
    """
    image = decode_image(source) if isinstance(source, (bytes, bytearray)) else source
    bounded = clamp_crop_rect(rect, image.size)

    cropped = image.crop(bounded.box)
    if cropped.mode != "RGB":
        # JPEG has no alpha; flatten onto white like a browser canvas export
        rgba = cropped.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, (255, 255, 255))
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        cropped = canvas

    out = io.BytesIO()
    try:
        cropped.save(out, format=OUTPUT_FORMAT, quality=quality)
    except (OSError, ValueError) as e:
        raise EncodeError(str(e)) from e

    blob = out.getvalue()
    if not blob:
        raise EncodeError()

    logger.debug(f"Cropped {bounded.width}x{bounded.height} at ({bounded.x}, {bounded.y}): {len(blob)} bytes")
    return blob
