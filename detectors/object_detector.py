"""
MediaPipe Object Detector: COCO classes with bounding boxes, as Detections.
"""

from __future__ import annotations

from typing import Any

import cv2
import mediapipe as mp
import numpy as np

from core.errors import DetectorInitError, DetectorNotInitializedError
from core.model_loader import get_model_path
from core.models import Box, Detection
from detectors.base import DetectorBase


class ObjectDetector(DetectorBase):
    detector_id = "object_detector"
    display_name = "Object Detector (EfficientDet-Lite)"

    def __init__(self) -> None:
        self._detector: mp.tasks.vision.ObjectDetector | None = None
        self._last_timestamp_ms = -1

    @staticmethod
    def default_settings() -> dict[str, Any]:
        return {
            "model": "efficientdet_lite0.tflite",
            "max_results": 10,
            "score_threshold": 0.3,
        }

    def init(self, settings: dict[str, Any]) -> None:
        self.close()
        merged = {**self.default_settings(), **settings}
        try:
            model_path = str(get_model_path(str(merged["model"])))
            base_options = mp.tasks.BaseOptions(model_asset_path=model_path)
            options = mp.tasks.vision.ObjectDetectorOptions(
                base_options=base_options,
                running_mode=mp.tasks.vision.RunningMode.VIDEO,
                max_results=int(merged["max_results"]),
                score_threshold=float(merged["score_threshold"]),
            )
            self._detector = mp.tasks.vision.ObjectDetector.create_from_options(options)
        except Exception as e:
            raise DetectorInitError(self.detector_id, reason=str(e)) from e
        self._last_timestamp_ms = -1

    def detect(self, frame_bgr: np.ndarray, timestamp_s: float) -> list[Detection]:
        if self._detector is None:
            raise DetectorNotInitializedError(self.detector_id)
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        # VIDEO mode requires strictly increasing timestamps
        timestamp_ms = max(int(timestamp_s * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        result = self._detector.detect_for_video(mp_image, timestamp_ms)
        detections: list[Detection] = []
        for det in result.detections or []:
            if not det.categories:
                continue
            c = det.categories[0]
            box = det.bounding_box
            detections.append(Detection(
                class_label=c.category_name or "",
                score=float(c.score or 0.0),
                box=Box(float(box.origin_x), float(box.origin_y), float(box.width), float(box.height)),
            ))
        return detections

    def close(self) -> None:
        if self._detector is not None:
            self._detector.close()
        self._detector = None


detector = ObjectDetector()
