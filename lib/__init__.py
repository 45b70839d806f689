# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - imaging.py: crop geometry and JPEG rasterization (Pillow)
# - supabase_client.py: Typed Supabase wrapper (import it directly; it
#   loads server settings)
# - utils.py: Shared utilities (errors, ids, timestamps, filenames)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.imaging import (
    CropRect,
    CropSelection,
    DecodeError,
    EncodeError,
    InvalidCropError,
    compute_crop_rect,
    decode_image,
    resolve_crop,
)
from lib.utils import ApplicationError, new_record_id, utc_now_iso

__all__ = [
    # Imaging
    "CropRect",
    "CropSelection",
    "DecodeError",
    "EncodeError",
    "InvalidCropError",
    "compute_crop_rect",
    "decode_image",
    "resolve_crop",
    # Utils
    "ApplicationError",
    "new_record_id",
    "utc_now_iso",
]
