"""
Guide overlay drawn on live frames: candidate box, progress bar and status badge.
"""

from __future__ import annotations

import cv2
import numpy as np

from core.session import FrameOutcome

# BGR
GUIDE_COLOR = (241, 102, 99)
ACTIVE_COLOR = (94, 197, 34)
BADGE_BG = (32, 32, 32)
BADGE_FG = (255, 255, 255)


def _dashed_rect(img: np.ndarray, p1: tuple[int, int], p2: tuple[int, int], color, thickness: int = 4, dash: int = 10, gap: int = 5) -> None:
    x1, y1 = p1
    x2, y2 = p2
    for (ax, ay, bx, by) in ((x1, y1, x2, y1), (x2, y1, x2, y2), (x2, y2, x1, y2), (x1, y2, x1, y1)):
        length = int(np.hypot(bx - ax, by - ay))
        if length == 0:
            continue
        for start in range(0, length, dash + gap):
            end = min(start + dash, length)
            sx = int(ax + (bx - ax) * start / length)
            sy = int(ay + (by - ay) * start / length)
            ex = int(ax + (bx - ax) * end / length)
            ey = int(ay + (by - ay) * end / length)
            cv2.line(img, (sx, sy), (ex, ey), color, thickness, cv2.LINE_AA)


def draw_guide(frame_bgr: np.ndarray, outcome: FrameOutcome, stability_threshold: int) -> np.ndarray:
    """Return an annotated copy of the frame; the input is not modified."""
    annotated = frame_bgr.copy()
    h, w = annotated.shape[:2]
    counter = outcome.state.counter

    if outcome.candidate is not None:
        box = outcome.candidate.box
        color = ACTIVE_COLOR if counter > 0 else GUIDE_COLOR
        p1 = (int(box.x), int(box.y))
        p2 = (int(box.x + box.width), int(box.y + box.height))
        _dashed_rect(annotated, p1, p2, color)

    if counter > 0:
        bar_w, bar_h = min(300, w // 2), 8
        bar_x = (w - bar_w) // 2
        bar_y = h - 60
        progress = min(1.0, counter / stability_threshold)
        cv2.rectangle(annotated, (bar_x, bar_y), (bar_x + bar_w, bar_y + bar_h), (100, 100, 100), -1)
        cv2.rectangle(annotated, (bar_x, bar_y), (bar_x + int(bar_w * progress), bar_y + bar_h), ACTIVE_COLOR, -1)

    if outcome.status:
        font = cv2.FONT_HERSHEY_SIMPLEX
        (tw, th), baseline = cv2.getTextSize(outcome.status, font, 0.7, 2)
        tx = max(0, (w - tw) // 2)
        ty = h - 20
        cv2.rectangle(annotated, (tx - 10, ty - th - 8), (tx + tw + 10, ty + baseline + 4), BADGE_BG, -1)
        cv2.putText(annotated, outcome.status, (tx, ty), font, 0.7, BADGE_FG, 2, cv2.LINE_AA)
    return annotated
