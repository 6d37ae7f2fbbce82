"""
Candidate selection: reduce one frame's detections to at most one document candidate.
"""

from __future__ import annotations

from typing import Iterable

from core.config import ScanConfig
from core.models import Candidate, Detection, FrameContext


def is_document_like(detection: Detection, config: ScanConfig) -> bool:
    return (
        detection.class_label in config.document_classes
        and detection.score > config.document_score_threshold
    )


def is_centered(detection: Detection, frame: FrameContext, config: ScanConfig) -> bool:
    """Box center lies strictly inside the centered inset region on both axes."""
    lo, hi = config.centered_inset
    center = detection.box.center
    return (
        frame.frame_width * lo < center.x < frame.frame_width * hi
        and frame.frame_height * lo < center.y < frame.frame_height * hi
    )


def is_prominent(detection: Detection, frame: FrameContext, config: ScanConfig) -> bool:
    """Large, centered, confident non-person object: stands in for a document."""
    return (
        detection.class_label != config.person_label
        and detection.score > config.prominent_score_threshold
        and detection.box.area > config.area_ratio_threshold * frame.area
        and is_centered(detection, frame, config)
    )


def select_candidate(
    detections: Iterable[Detection],
    frame: FrameContext,
    config: ScanConfig,
) -> Candidate | None:
    """
    Return the highest-scoring qualifying detection, or None.
    Ties keep the first one seen.
    """
    best: Candidate | None = None
    for det in detections:
        doc_like = is_document_like(det, config)
        if not (doc_like or is_prominent(det, frame, config)):
            continue
        if best is None or det.score > best.detection.score:
            best = Candidate(detection=det, is_document_like=doc_like)
    return best
