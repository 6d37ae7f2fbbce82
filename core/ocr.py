"""
Text recognition: Tesseract (via pytesseract) behind a small recognizer interface,
and perform_ocr(), which preprocesses a capture and never raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np
import pytesseract

from core.errors import RecognitionError
from core.models import OcrResult
from core.preprocess import decode_image, preprocess_image

logger = logging.getLogger(__name__)

FAILED_TEXT = "Failed to extract text."


class RecognizerBase(ABC):
    """Accepts an encoded image and a language id, returns recognized text."""

    @abstractmethod
    def recognize(self, encoded_image: bytes, language: str) -> str:
        ...


class TesseractRecognizer(RecognizerBase):
    def __init__(self, tesseract_cmd: str | None = None, extra_config: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self._extra_config = extra_config

    def recognize(self, encoded_image: bytes, language: str) -> str:
        image = decode_image(encoded_image)
        if image.ndim == 3:
            # Tesseract expects RGB channel order
            image = np.ascontiguousarray(image[..., 2::-1])
        try:
            return pytesseract.image_to_string(image, lang=language, config=self._extra_config)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise RecognitionError(str(e)) from e


def perform_ocr(
    encoded_image: bytes,
    recognizer: RecognizerBase,
    language: str = "eng",
    contrast: float = 1.2,
) -> OcrResult:
    """
    Preprocess the captured image and run the recognizer on it.
    Any failure yields FAILED_TEXT with no debug image.
    """
    try:
        processed = preprocess_image(encoded_image, contrast)
        text = recognizer.recognize(processed.encoded, language)
    except Exception:
        logger.exception("OCR failed")
        return OcrResult(text=FAILED_TEXT, debug_image=None)
    logger.info("OCR finished: %d characters", len(text))
    return OcrResult(text=text, debug_image=processed.encoded)
