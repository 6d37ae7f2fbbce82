"""
Frame timing for the Performance panel.
"""

import time
from collections import deque
from typing import Deque


class FPSCounter:
    """Instantaneous FPS, per-frame interval and a rolling mean interval (ms)."""

    def __init__(self, window: int = 30) -> None:
        self._last: float | None = None
        self._intervals_ms: Deque[float] = deque(maxlen=window)

    def tick(self, now: float | None = None) -> tuple[float, float]:
        """Call once per processed frame. Returns (fps, interval_ms)."""
        now = time.perf_counter() if now is None else now
        interval_ms = 0.0
        if self._last is not None:
            interval_ms = (now - self._last) * 1000.0
            self._intervals_ms.append(interval_ms)
        self._last = now
        fps = 1000.0 / interval_ms if interval_ms > 0 else 0.0
        return fps, interval_ms

    @property
    def rolling_average_ms(self) -> float:
        if not self._intervals_ms:
            return 0.0
        return sum(self._intervals_ms) / len(self._intervals_ms)

    def reset(self) -> None:
        self._last = None
        self._intervals_ms.clear()
