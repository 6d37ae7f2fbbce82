"""
Ensures the object detector model file exists; downloads it from Google storage if missing.
"""

from __future__ import annotations

import logging
import os
import urllib.request
from pathlib import Path

logger = logging.getLogger(__name__)

# Cached models live next to the project root unless DOCSCAN_MODELS_DIR is set
_DEFAULT_MODELS_DIR = Path(__file__).resolve().parent.parent / "models"

# COCO object detectors published for MediaPipe Tasks
_MODEL_URLS = {
    "efficientdet_lite0.tflite": "https://storage.googleapis.com/mediapipe-models/object_detector/efficientdet_lite0/float16/latest/efficientdet_lite0.tflite",
    "efficientdet_lite2.tflite": "https://storage.googleapis.com/mediapipe-models/object_detector/efficientdet_lite2/float16/latest/efficientdet_lite2.tflite",
    "ssd_mobilenet_v2.tflite": "https://storage.googleapis.com/mediapipe-models/object_detector/ssd_mobilenet_v2/float32/latest/ssd_mobilenet_v2.tflite",
}


def models_dir() -> Path:
    path = Path(os.environ.get("DOCSCAN_MODELS_DIR", _DEFAULT_MODELS_DIR))
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_model_path(filename: str) -> Path:
    """Return path to the model file; download if not present."""
    path = models_dir() / filename
    if path.is_file():
        return path
    url = _MODEL_URLS.get(filename)
    if not url:
        raise FileNotFoundError(f"Unknown model: {filename}. Known: {list(_MODEL_URLS)}")
    logger.info("Downloading %s", url)
    urllib.request.urlretrieve(url, path)
    return path
