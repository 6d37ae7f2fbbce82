"""
Video source: webcam by index or video file. Yields BGR frames and reports readiness.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# Requested capture size; the camera may pick something smaller.
PREFERRED_WIDTH = 1920
PREFERRED_HEIGHT = 1080


class VideoCaptureSource:
    """Unified source for webcam (by index) or video file."""

    def __init__(self, width: int = PREFERRED_WIDTH, height: int = PREFERRED_HEIGHT) -> None:
        self._cap: cv2.VideoCapture | None = None
        self._source_path: str | None = None  # None = webcam
        self._camera_index: int = 0
        self._preferred_size = (width, height)

    def open_camera(self, index: int = 0) -> bool:
        """Open default or specified webcam. Returns True on success."""
        self.close()
        # DirectShow on Windows opens faster and honours the size request
        if sys.platform == "win32":
            self._cap = cv2.VideoCapture(index, cv2.CAP_DSHOW)
        else:
            self._cap = cv2.VideoCapture(index)
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._preferred_size[0])
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._preferred_size[1])
        self._source_path = None
        self._camera_index = index
        opened = self._cap.isOpened()
        if opened:
            w, h = self.get_size()
            logger.info("Camera %d opened at %dx%d", index, w, h)
        else:
            logger.error("Failed to open camera %d", index)
        return opened

    def open_file(self, path: str | Path) -> bool:
        """Open a video file. Returns True on success."""
        self.close()
        path_str = str(path)
        self._cap = cv2.VideoCapture(path_str)
        self._source_path = path_str
        opened = self._cap.isOpened()
        if not opened:
            logger.error("Failed to open video file %s", path_str)
        return opened

    def close(self) -> None:
        """Release the current source."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("Video source released")
        self._source_path = None

    def is_opened(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def is_ready(self) -> bool:
        """Opened and reporting frame dimensions; until then the loop re-polls."""
        if not self.is_opened():
            return False
        w, h = self.get_size()
        return w > 0 and h > 0

    def read(self) -> tuple[bool, np.ndarray | None]:
        """Read next frame. Returns (success, frame_bgr)."""
        if self._cap is None:
            return False, None
        ok, frame = self._cap.read()
        return ok, frame

    def get_fps(self) -> float:
        if self._cap is None:
            return 30.0
        fps = self._cap.get(cv2.CAP_PROP_FPS)
        return fps if fps > 0 else 30.0

    def get_size(self) -> tuple[int, int]:
        """(width, height) of the stream."""
        if self._cap is None:
            return 0, 0
        w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return w, h

    @property
    def source_path(self) -> str | None:
        return self._source_path

    @property
    def camera_index(self) -> int:
        return self._camera_index
