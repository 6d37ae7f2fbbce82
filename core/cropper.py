"""
Capture producer: pad the triggering box, clamp it to the frame, crop and encode.
"""

from __future__ import annotations

import logging
import math

import cv2
import numpy as np

from core.config import ScanConfig
from core.errors import EncodeError, InvalidCropError
from core.models import Box, CaptureEvent, FrameContext

logger = logging.getLogger(__name__)


def crop_rect(box: Box, frame: FrameContext, padding: int) -> tuple[int, int, int, int]:
    """
    Padded crop rectangle (sx, sy, sw, sh) clamped to the frame.
    Width/height may come out zero or negative; callers reject those.
    """
    sx = math.floor(max(0.0, box.x - padding))
    sy = math.floor(max(0.0, box.y - padding))
    sw = math.floor(min(frame.frame_width - sx, box.width + 2 * padding))
    sh = math.floor(min(frame.frame_height - sy, box.height + 2 * padding))
    return sx, sy, sw, sh


def encode_jpeg(image: np.ndarray, quality: int) -> bytes:
    if image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    ok, buf = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        raise EncodeError("jpeg", reason=f"imencode failed for shape {image.shape}")
    return buf.tobytes()


def produce_capture(frame_bgr: np.ndarray, box: Box, config: ScanConfig) -> CaptureEvent:
    """
    Crop the padded box out of the frame and encode it as JPEG.

    Raises:
        InvalidCropError: the clamped rectangle has no area.
        EncodeError: OpenCV could not encode the crop.
    """
    ctx = FrameContext.from_frame(frame_bgr)
    rect = crop_rect(box, ctx, config.crop_padding)
    sx, sy, sw, sh = rect
    if sw <= 0 or sh <= 0:
        raise InvalidCropError(rect, (ctx.frame_width, ctx.frame_height))
    crop = frame_bgr[sy:sy + sh, sx:sx + sw]
    encoded = encode_jpeg(crop, config.jpeg_quality)
    logger.info("Captured %dx%d crop at (%d, %d), %d bytes", sw, sh, sx, sy, len(encoded))
    return CaptureEvent(encoded_image=encoded, source_box=box, crop_rect=rect)
