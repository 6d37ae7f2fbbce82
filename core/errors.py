"""
Exception hierarchy shared by the capture pipeline, detectors and OCR.
"""

from __future__ import annotations

from typing import Any


class ScannerError(Exception):
    """Base exception for document scanner errors."""

    def __init__(self, message: str, error_code: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form; see error_payload()."""
        return {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(ScannerError):
    """A configuration value is out of range."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(
            message=f"Invalid setting {field}={value!r}: {reason}",
            error_code="INVALID_CONFIG",
            details={"field": field, "value": value, "reason": reason},
        )


class VideoSourceError(ScannerError):
    """Camera or video file could not be opened."""

    def __init__(self, source: str, reason: str | None = None) -> None:
        super().__init__(
            message=f"Failed to open video source: {source}",
            error_code="VIDEO_SOURCE_FAILED",
            details={"source": source, "reason": reason},
        )


class DetectorError(ScannerError):
    """Object detector errors."""


class DetectorInitError(DetectorError):
    """Detector model could not be loaded. The detection loop must not start."""

    def __init__(self, detector_id: str, reason: str | None = None) -> None:
        super().__init__(
            message=f"Failed to initialize detector {detector_id!r}",
            error_code="DETECTOR_INIT_FAILED",
            details={"detector_id": detector_id, "reason": reason},
        )


class DetectorNotInitializedError(DetectorError):
    """detect() called before init() or after close()."""

    def __init__(self, detector_id: str) -> None:
        super().__init__(
            message=f"Detector {detector_id!r} is not initialized",
            error_code="DETECTOR_NOT_INITIALIZED",
            details={"detector_id": detector_id},
        )


class CaptureError(ScannerError):
    """Capture production errors."""


class InvalidCropError(CaptureError):
    """Crop rectangle is empty after clamping to the frame."""

    def __init__(self, rect: tuple[int, int, int, int], frame_size: tuple[int, int]) -> None:
        super().__init__(
            message=f"Crop rectangle {rect} is empty inside frame {frame_size[0]}x{frame_size[1]}",
            error_code="INVALID_CROP",
            details={"rect": list(rect), "frame_size": list(frame_size)},
        )


class EncodeError(CaptureError):
    """OpenCV failed to encode or decode an image buffer."""

    def __init__(self, fmt: str, reason: str | None = None) -> None:
        super().__init__(
            message=f"Failed to encode/decode image as {fmt}",
            error_code="ENCODE_FAILED",
            details={"format": fmt, "reason": reason},
        )


class RecognitionError(ScannerError):
    """Text recognizer failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Text recognition failed: {reason}",
            error_code="RECOGNITION_FAILED",
            details={"reason": reason},
        )


def error_payload(error: BaseException) -> dict[str, Any]:
    """Error dict for the Results panel; unexpected exceptions get a generic code."""
    if isinstance(error, ScannerError):
        return error.to_dict()
    return {
        "success": False,
        "error": "An unexpected error occurred",
        "error_code": "UNEXPECTED_ERROR",
        "details": {
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    }
