"""
Detection loop runner: runs on a worker thread, one frame in flight at a time,
emits annotated frames, status text and capture events.
Uses QThread + signals so the UI never blocks.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QThread, Signal

from core.capture import VideoCaptureSource
from core.errors import error_payload
from core.overlay import draw_guide
from core.utils import FPSCounter

if TYPE_CHECKING:
    from core.session import DetectionSession

logger = logging.getLogger(__name__)

# Re-poll interval while the camera has no frame yet
NOT_READY_WAIT_S = 1 / 60


class FrameProcessorRunner(QObject):
    """Worker that grabs frames, runs the detection session, and emits results."""

    # Emit (annotated_frame_bgr, results_dict, fps, latency_ms, rolling_avg_ms)
    frame_processed = Signal(object, object, float, float, float)
    status_changed = Signal(str)
    # Emit CaptureEvent
    capture_ready = Signal(object)
    # Emit (message, error dict as returned by error_payload)
    error_occurred = Signal(str, object)
    stopped = Signal()

    def __init__(
        self,
        capture: VideoCaptureSource,
        session: DetectionSession,
        parent: QObject | None = None,
        stop_on_capture: bool = True,
    ) -> None:
        super().__init__(parent)
        self._capture = capture
        self._session = session
        self._stop_on_capture = stop_on_capture
        self._running = False
        self._thread: QThread | None = None
        self._fps_counter = FPSCounter()
        self._last_status = ""
        self._release_source = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start processing in a background thread."""
        if self._running:
            return
        self._running = True
        self._thread = QThread()
        self.moveToThread(self._thread)
        self._thread.started.connect(self._run_loop)
        self._thread.start()

    def stop(self, release_source: bool = False) -> None:
        """
        Request stop; the loop exits before starting another iteration.
        With release_source, the worker closes the video source once the loop
        has exited, so the source is never released under a running read().
        """
        if release_source:
            self._release_source = True
        self._running = False

    def _wait_for_source(self) -> None:
        time.sleep(NOT_READY_WAIT_S)

    def _pace(self, started: float) -> None:
        # Video files read instantly; play them back at their native rate
        if self._capture.source_path is None:
            return
        remaining = 1.0 / self._capture.get_fps() - (time.perf_counter() - started)
        if remaining > 0:
            time.sleep(remaining)

    def _run_loop(self) -> None:
        """Runs in worker thread: read frame -> detect/track -> emit."""
        self._fps_counter.reset()
        self._session.reset()
        threshold = self._session.config.stability_threshold
        try:
            while self._running and self._capture.is_opened():
                if not self._capture.is_ready():
                    self._wait_for_source()
                    continue
                started = time.perf_counter()
                ok, frame = self._capture.read()
                if not ok or frame is None:
                    if self._capture.source_path is not None:
                        logger.info("End of video file")
                        break
                    self._wait_for_source()
                    continue
                try:
                    outcome = self._session.process_frame(frame, started)
                    annotated = draw_guide(frame, outcome, threshold)
                except Exception as e:  # noqa: BLE001
                    logger.exception("Detection loop failed")
                    self.error_occurred.emit(str(e), error_payload(e))
                    break
                if not self._running:
                    break
                fps, latency_ms = self._fps_counter.tick()
                results = outcome.to_results(started)
                self.frame_processed.emit(annotated, results, fps, latency_ms, self._fps_counter.rolling_average_ms)
                if outcome.status != self._last_status:
                    self._last_status = outcome.status
                    self.status_changed.emit(outcome.status)
                if outcome.capture is not None:
                    self.capture_ready.emit(outcome.capture)
                    if self._stop_on_capture:
                        break
                self._pace(started)
        finally:
            self._running = False
            if self._release_source:
                self._capture.close()
        self.stopped.emit()

    def finish_thread(self, timeout_ms: int = 2000) -> bool:
        """Quit and wait for the worker thread. Returns False if it is still running."""
        if self._thread is not None and self._thread.isRunning():
            self._thread.quit()
            if not self._thread.wait(timeout_ms):
                return False
        self._thread = None
        return True
