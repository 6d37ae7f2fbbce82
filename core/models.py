"""
Shared data models: boxes, detections, tracker state, capture events, and the
results dict shown in the Results panel.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

# Type alias for the per-frame results dict
FrameResults = dict[str, Any]


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in frame pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Detection:
    class_label: str
    score: float
    box: Box

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.class_label,
            "score": self.score,
            "bbox": {
                "origin_x": self.box.x,
                "origin_y": self.box.y,
                "width": self.box.width,
                "height": self.box.height,
            },
        }


@dataclass(frozen=True)
class FrameContext:
    frame_width: int
    frame_height: int

    @property
    def area(self) -> int:
        return self.frame_width * self.frame_height

    @classmethod
    def from_frame(cls, frame: np.ndarray) -> FrameContext:
        h, w = frame.shape[:2]
        return cls(frame_width=int(w), frame_height=int(h))


@dataclass(frozen=True)
class Candidate:
    """The single detection selected for the current frame."""

    detection: Detection
    is_document_like: bool

    @property
    def box(self) -> Box:
        return self.detection.box


@dataclass(frozen=True)
class TrackerState:
    """Stability tracker state. counter == 0 and smoothed_center is None means idle."""

    counter: int = 0
    smoothed_center: Point | None = None
    last_box: Box | None = None

    @property
    def is_idle(self) -> bool:
        return self.counter == 0 and self.smoothed_center is None


@dataclass(frozen=True)
class CaptureEvent:
    encoded_image: bytes
    source_box: Box
    crop_rect: tuple[int, int, int, int]
    mime_type: str = "image/jpeg"

    def to_data_url(self) -> str:
        payload = base64.b64encode(self.encoded_image).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"


@dataclass(frozen=True)
class ProcessedImage:
    """Preprocessor output: transformed pixels plus their encoded form."""

    pixels: np.ndarray
    encoded: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class OcrResult:
    text: str
    debug_image: bytes | None = None

    @property
    def ok(self) -> bool:
        return self.debug_image is not None


def frame_results(
    timestamp_s: float,
    detections: list[Detection] | None = None,
    candidate: Candidate | None = None,
    state: TrackerState | None = None,
    status: str = "",
    metadata: dict[str, Any] | None = None,
) -> FrameResults:
    """Build the results dict for one processed frame."""
    state = state or TrackerState()
    return {
        "timestamp_s": timestamp_s,
        "detections": [d.to_dict() for d in detections] if detections else [],
        "candidate": (
            {**candidate.detection.to_dict(), "document_like": candidate.is_document_like}
            if candidate is not None
            else None
        ),
        "stability": {
            "counter": state.counter,
            "smoothed_center": (
                [state.smoothed_center.x, state.smoothed_center.y]
                if state.smoothed_center is not None
                else None
            ),
        },
        "status": status,
        "metadata": metadata if metadata is not None else {},
    }
