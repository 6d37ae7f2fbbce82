"""
Base interface every object detector must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import numpy as np
    from core.models import Detection


class DetectorBase(ABC):
    """Produces labelled, scored boxes for one frame. Subclass and implement all methods."""

    detector_id: str = ""
    display_name: str = ""

    @staticmethod
    @abstractmethod
    def default_settings() -> dict[str, Any]:
        """Return default settings dict (e.g. score_threshold)."""
        ...

    @abstractmethod
    def init(self, settings: dict[str, Any]) -> None:
        """
        Load the model with the given settings.
        Raises DetectorInitError if the model cannot be loaded.
        """
        ...

    @abstractmethod
    def detect(self, frame_bgr: np.ndarray, timestamp_s: float) -> list[Detection]:
        """Detect objects in one frame. Boxes are in frame pixel coordinates."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release resources (e.g. the MediaPipe task instance)."""
        ...
