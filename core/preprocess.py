"""
Deterministic preprocessing for text recognition: grayscale, then contrast stretch.

Pixels are BGR / BGRA uint8 arrays as produced by OpenCV. Intermediate values are
rounded half-to-even and clamped to 0..255 after each step.
"""

from __future__ import annotations

import cv2
import numpy as np

from core.cropper import encode_jpeg
from core.errors import EncodeError
from core.models import ProcessedImage

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

# Quality used when re-encoding the processed image
DEBUG_JPEG_QUALITY = 92


def contrast_factor(c: float) -> float:
    return (259.0 * (c + 255.0)) / (255.0 * (259.0 - c))


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Replace B, G, R with luminance; alpha (if any) is left untouched."""
    if image.ndim == 2 or image.shape[2] < 3:
        return image.copy()
    out = image.copy()
    channels = image.astype(np.float64)
    luma = _to_uint8(
        channels[..., 2] * LUMA_R + channels[..., 1] * LUMA_G + channels[..., 0] * LUMA_B
    )
    out[..., 0] = luma
    out[..., 1] = luma
    out[..., 2] = luma
    return out


def stretch_contrast(image: np.ndarray, c: float) -> np.ndarray:
    """v' = clamp(factor * (v - 128) + 128) on color channels; 128 is a fixed point."""
    factor = contrast_factor(c)
    out = image.copy()
    color = out if out.ndim == 2 else out[..., :3]
    stretched = _to_uint8(factor * (color.astype(np.float64) - 128.0) + 128.0)
    if out.ndim == 2:
        return stretched
    out[..., :3] = stretched
    return out


def decode_image(encoded: bytes) -> np.ndarray:
    buf = np.frombuffer(encoded, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise EncodeError("auto", reason="imdecode returned no image")
    return image


def preprocess_pixels(image: np.ndarray, c: float) -> np.ndarray:
    return stretch_contrast(to_grayscale(image), c)


def preprocess_image(source: bytes | np.ndarray, c: float = 1.2) -> ProcessedImage:
    """
    Run the full transform and re-encode. Accepts encoded bytes or a pixel array.
    The encoded output feeds the recognizer and doubles as the debug image.
    """
    pixels = decode_image(source) if isinstance(source, (bytes, bytearray)) else source
    processed = preprocess_pixels(pixels, c)
    return ProcessedImage(pixels=processed, encoded=encode_jpeg(processed, DEBUG_JPEG_QUALITY))
