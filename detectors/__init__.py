"""
Detector registry: built-in detectors by id, plus loading a detector from any
importable module that defines a 'detector' instance (or a 'Detector' class).
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from detectors.base import DetectorBase

# detector_id -> module path
_BUILTIN_DETECTORS = {
    "object_detector": "detectors.object_detector",
}


def load_detector(name: str) -> DetectorBase:
    """
    Load a detector by built-in id or dotted module path.
    Raises KeyError if the module defines no detector.
    """
    module = importlib.import_module(_BUILTIN_DETECTORS.get(name, name))
    if hasattr(module, "detector"):
        return getattr(module, "detector")
    if hasattr(module, "Detector"):
        return getattr(module, "Detector")()
    raise KeyError(f"Module {module.__name__!r} defines no detector")


def builtin_detector_ids() -> list[str]:
    return list(_BUILTIN_DETECTORS)
