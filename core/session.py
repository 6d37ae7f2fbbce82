"""
One capture session: the body of the detection loop, run once per frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from core.config import ScanConfig
from core.cropper import produce_capture
from core.errors import CaptureError
from core.models import (
    Candidate,
    CaptureEvent,
    Detection,
    FrameContext,
    FrameResults,
    TrackerState,
    frame_results,
)
from core.selector import select_candidate
from core.status import project_status
from core.tracker import IDLE, advance

if TYPE_CHECKING:
    from detectors.base import DetectorBase

logger = logging.getLogger(__name__)


@dataclass
class FrameOutcome:
    """Everything the loop learned from one frame."""

    frame: FrameContext
    detections: list[Detection] = field(default_factory=list)
    candidate: Candidate | None = None
    state: TrackerState = IDLE
    status: str = ""
    capture: CaptureEvent | None = None
    detector_failed: bool = False

    def to_results(self, timestamp_s: float) -> FrameResults:
        return frame_results(
            timestamp_s,
            detections=self.detections,
            candidate=self.candidate,
            state=self.state,
            status=self.status,
            metadata={
                "frame_size": [self.frame.frame_width, self.frame.frame_height],
                "captured": self.capture is not None,
                "detector_failed": self.detector_failed,
            },
        )


class DetectionSession:
    """
    Owns the tracker state for one capture session. Not thread-safe: call
    process_frame() from a single loop only, one frame at a time.
    """

    def __init__(self, detector: DetectorBase, config: ScanConfig | None = None) -> None:
        self._detector = detector
        self.config = config or ScanConfig()
        self._state: TrackerState = IDLE
        self._frame_index = 0

    @property
    def state(self) -> TrackerState:
        return self._state

    def reset(self) -> None:
        self._state = IDLE
        self._frame_index = 0

    def process_frame(self, frame_bgr: np.ndarray, timestamp_s: float = 0.0) -> FrameOutcome:
        ctx = FrameContext.from_frame(frame_bgr)
        self._frame_index += 1
        failed = False
        try:
            detections = list(self._detector.detect(frame_bgr, timestamp_s))
        except Exception as e:  # noqa: BLE001
            logger.warning("Detector failed on frame %d: %s", self._frame_index, e)
            detections = []
            failed = True

        candidate = select_candidate(detections, ctx, self.config)
        update = advance(self._state, candidate, ctx, self.config)
        self._state = update.state

        capture = None
        if update.trigger is not None:
            logger.info("Document stable on frame %d, capturing", self._frame_index)
            try:
                capture = produce_capture(frame_bgr, update.trigger, self.config)
            except CaptureError as e:
                logger.warning("Capture rejected: %s", e)
                self._state = IDLE

        status = project_status(
            self._state.counter, self.config.stability_threshold, candidate is not None
        )
        return FrameOutcome(
            frame=ctx,
            detections=detections,
            candidate=candidate,
            state=self._state,
            status=status,
            capture=capture,
            detector_failed=failed,
        )
