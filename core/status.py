"""
Status text for the on-screen badge.
"""

from __future__ import annotations

import math

LOADING = "Loading model..."
LOAD_FAILED = "Error loading model"
READY = "Align document to capture"
SEARCHING = "Align document within frame"
HOLD = "Hold steady to capture"


def progress_percent(counter: int, stability_threshold: int) -> int:
    """Rounded half-up percentage of the stability threshold reached."""
    return int(math.floor(counter * 100 / stability_threshold + 0.5))


def project_status(counter: int, stability_threshold: int, has_candidate: bool) -> str:
    if counter > 0:
        return f"Hold steady... {progress_percent(counter, stability_threshold)}%"
    if has_candidate:
        return HOLD
    return SEARCHING
