# Core: config, selection, tracking, capture, preprocessing, OCR

from core.capture import VideoCaptureSource
from core.config import ScanConfig
from core.ocr import perform_ocr
from core.preprocess import preprocess_image
from core.session import DetectionSession

__all__ = ["VideoCaptureSource", "ScanConfig", "DetectionSession", "preprocess_image", "perform_ocr"]
