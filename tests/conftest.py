"""
Shared fixtures: default config, synthetic frames, and a scripted fake detector.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from core.config import ScanConfig
from core.models import Box, Candidate, Detection, FrameContext
from detectors.base import DetectorBase

FRAME_W = 1000
FRAME_H = 800


def make_detection(label: str = "book", score: float = 0.9, x: float = 400, y: float = 350,
                   w: float = 200, h: float = 100) -> Detection:
    return Detection(class_label=label, score=score, box=Box(x, y, w, h))


def make_candidate(x: float = 400, y: float = 350, w: float = 200, h: float = 100) -> Candidate:
    return Candidate(detection=make_detection(x=x, y=y, w=w, h=h), is_document_like=True)


class ScriptedDetector(DetectorBase):
    """Returns one scripted result per call; an Exception entry is raised instead."""

    detector_id = "scripted"
    display_name = "Scripted"

    def __init__(self, script: list[Any]) -> None:
        self._script = list(script)
        self.calls = 0

    @staticmethod
    def default_settings() -> dict[str, Any]:
        return {}

    def init(self, settings: dict[str, Any]) -> None:
        pass

    def detect(self, frame_bgr: np.ndarray, timestamp_s: float) -> list[Detection]:
        item = self._script[self.calls] if self.calls < len(self._script) else []
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        pass


@pytest.fixture
def config() -> ScanConfig:
    return ScanConfig()


@pytest.fixture
def frame_ctx() -> FrameContext:
    return FrameContext(frame_width=FRAME_W, frame_height=FRAME_H)


@pytest.fixture
def frame() -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(FRAME_H, FRAME_W, 3), dtype=np.uint8)
