"""
Main window: left sidebar (source, settings, start/stop), center live view or review,
right tabs (Results, Logs, Performance).
"""

from __future__ import annotations

import logging
from typing import Any

import cv2
from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QStackedWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from core import status as status_text
from core.capture import VideoCaptureSource
from core.config import ScanConfig
from core.errors import ConfigError
from core.models import CaptureEvent, OcrResult
from core.ocr import RecognizerBase, perform_ocr
from core.runner import FrameProcessorRunner
from core.session import DetectionSession
from detectors.base import DetectorBase
from ui.panels import LogsPanel, PerformancePanel, QtLogHandler, ResultsPanel, ReviewPanel, SettingsPanel

logger = logging.getLogger(__name__)


class DetectorInitWorker(QObject):
    """Runs detector.init(settings) in a background thread so the UI stays responsive."""

    init_done = Signal(bool, str)  # success, error_message

    def __init__(self, detector: DetectorBase, settings: dict[str, Any]) -> None:
        super().__init__()
        self._detector = detector
        self._settings = settings

    def run(self) -> None:
        try:
            self._detector.init(self._settings)
            self.init_done.emit(True, "")
        except Exception as e:  # noqa: BLE001
            self.init_done.emit(False, str(e))


class OcrWorker(QObject):
    """Preprocesses a capture and recognizes its text off the GUI thread."""

    finished = Signal(object, object)  # CaptureEvent, OcrResult

    def __init__(self, event: CaptureEvent, recognizer: RecognizerBase, config: ScanConfig) -> None:
        super().__init__()
        self.capture_event = event
        self._recognizer = recognizer
        self._config = config

    def run(self) -> None:
        result = perform_ocr(
            self.capture_event.encoded_image,
            self._recognizer,
            language=self._config.ocr_language,
            contrast=self._config.contrast_factor,
        )
        self.finished.emit(self.capture_event, result)


class MainWindow(QWidget):
    """Main application window: live scanning view, review mode and side panels."""

    def __init__(
        self,
        detector: DetectorBase,
        recognizer: RecognizerBase,
        config: ScanConfig | None = None,
        camera_index: int = 0,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Document Scanner")
        self._detector = detector
        self._detector_ready = False
        self._recognizer = recognizer
        self._config = config or ScanConfig()
        self._capture = VideoCaptureSource()
        self._runner: FrameProcessorRunner | None = None
        self._last_capture: CaptureEvent | None = None
        self._init_thread: QThread | None = None
        self._init_worker: DetectorInitWorker | None = None
        # One (thread, worker) per OCR job, kept alive until the job finishes
        self._ocr_jobs: list[tuple[QThread, OcrWorker]] = []
        # Runners whose loop did not exit within the stop timeout
        self._retired_runners: list[FrameProcessorRunner] = []

        layout = QHBoxLayout(self)
        # --- Left sidebar ---
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.addWidget(QLabel("Camera index"))
        self._camera_spin = QSpinBox()
        self._camera_spin.setRange(0, 15)
        self._camera_spin.setValue(camera_index)
        sidebar_layout.addWidget(self._camera_spin)
        self._open_video_btn = QPushButton("Open Video")
        self._open_video_btn.setToolTip("Use a video file instead of the camera.")
        self._open_video_btn.clicked.connect(self._on_open_video)
        sidebar_layout.addWidget(self._open_video_btn)
        self._settings_panel = SettingsPanel(self._config)
        settings_scroll = QScrollArea()
        settings_scroll.setWidgetResizable(True)
        settings_scroll.setWidget(self._settings_panel)
        settings_group = QGroupBox("Settings")
        settings_inner = QVBoxLayout()
        settings_inner.addWidget(settings_scroll)
        settings_group.setLayout(settings_inner)
        sidebar_layout.addWidget(settings_group)
        self._start_stop_btn = QPushButton("Start")
        self._start_stop_btn.clicked.connect(self._on_start_stop)
        sidebar_layout.addWidget(self._start_stop_btn)
        sidebar_layout.addStretch()
        layout.addWidget(sidebar)

        # --- Center: status badge over live view / review ---
        center = QWidget()
        center_layout = QVBoxLayout(center)
        self._status_label = QLabel(status_text.READY)
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status_label.setStyleSheet("font-size: 16px; padding: 6px;")
        center_layout.addWidget(self._status_label)
        self._center_stack = QStackedWidget()
        self._video_label = QLabel()
        self._video_label.setMinimumSize(640, 480)
        self._video_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._video_label.setStyleSheet("background-color: #1e1e1e; color: #888;")
        self._video_label.setText("No video")
        self._center_stack.addWidget(self._video_label)
        self._review_panel = ReviewPanel()
        self._review_panel.retake_requested.connect(self._on_retake)
        self._review_panel.download_requested.connect(self._on_download)
        self._center_stack.addWidget(self._review_panel)
        center_layout.addWidget(self._center_stack, stretch=1)
        layout.addWidget(center, stretch=1)

        # --- Right: tabs ---
        tabs = QTabWidget()
        self._results_panel = ResultsPanel()
        tabs.addTab(self._results_panel, "Results")
        self._logs_panel = LogsPanel()
        tabs.addTab(self._logs_panel, "Logs")
        self._performance_panel = PerformancePanel()
        tabs.addTab(self._performance_panel, "Performance")
        layout.addWidget(tabs)

        self._log_handler = QtLogHandler(self._logs_panel)
        logging.getLogger().addHandler(self._log_handler)
        logger.info("Application started. Select input, then Start.")
        self.resize(1280, 760)

    # --- session lifecycle ---

    def _read_config(self) -> ScanConfig | None:
        try:
            return ScanConfig.from_settings(self._settings_panel.settings())
        except ConfigError as e:
            logger.error("%s", e.message)
            return None

    def _on_open_video(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", "", "Video (*.mp4 *.avi *.mov *.mkv);;All (*)"
        )
        if not path:
            return
        if self._capture.open_file(path):
            logger.info("Opened video: %s", path)

    def _on_start_stop(self) -> None:
        if self._runner is not None:
            self._stop_processing()
            return
        self._reap_retired_runners()
        if self._retired_runners:
            logger.warning("Previous scan is still shutting down; try again shortly")
            return
        config = self._read_config()
        if config is None:
            return
        self._config = config
        if not self._capture.is_opened():
            index = self._camera_spin.value()
            if not self._capture.open_camera(index):
                return
        if self._detector_ready:
            self._start_runner()
            return
        self._start_stop_btn.setEnabled(False)
        self._start_stop_btn.setText("Loading...")
        self._set_status(status_text.LOADING)
        self._init_worker = DetectorInitWorker(self._detector, self._detector.default_settings())
        self._init_thread = QThread()
        self._init_worker.moveToThread(self._init_thread)
        self._init_thread.started.connect(self._init_worker.run)
        self._init_worker.init_done.connect(self._on_detector_init_done)
        self._init_thread.start()

    @Slot(bool, str)
    def _on_detector_init_done(self, success: bool, error_msg: str) -> None:
        self._start_stop_btn.setEnabled(True)
        self._start_stop_btn.setText("Start")
        if self._init_thread is not None:
            self._init_thread.quit()
            self._init_thread.wait(2000)
            self._init_thread = None
        self._init_worker = None
        if not success:
            # Fail-stop: the loop never starts and the message stays up
            logger.error("Detector init error: %s", error_msg)
            self._set_status(status_text.LOAD_FAILED)
            self._capture.close()
            return
        self._detector_ready = True
        self._set_status(status_text.READY)
        self._start_runner()

    def _start_runner(self) -> None:
        session = DetectionSession(self._detector, self._config)
        self._runner = FrameProcessorRunner(self._capture, session)
        self._runner.frame_processed.connect(self._on_frame_processed)
        self._runner.status_changed.connect(self._set_status)
        self._runner.capture_ready.connect(self._on_capture_ready)
        self._runner.error_occurred.connect(self._on_runner_error)
        self._runner.stopped.connect(self._on_runner_stopped)
        self._center_stack.setCurrentWidget(self._video_label)
        self._runner.start()
        self._start_stop_btn.setText("Stop")
        self._performance_panel.reset()
        logger.info("Scanning started.")

    def _stop_processing(self) -> None:
        """Tear down the loop and release the video source."""
        self._reap_retired_runners()
        if self._runner is not None:
            # The worker releases the source itself if it is still inside a frame
            self._runner.stop(release_source=True)
            if self._runner.finish_thread():
                self._capture.close()
            else:
                logger.warning("Detection loop still busy; the source is released when it exits")
                self._retired_runners.append(self._runner)
            self._runner = None
            logger.info("Scanning stopped.")
        else:
            self._capture.close()
        self._start_stop_btn.setText("Start")
        self._performance_panel.reset()

    def _reap_retired_runners(self) -> None:
        self._retired_runners = [r for r in self._retired_runners if not r.finish_thread(0)]

    # --- runner signals ---

    @Slot(object, object, float, float, float)
    def _on_frame_processed(
        self,
        annotated_frame: cv2.typing.MatLike,
        results: dict,
        fps: float,
        latency_ms: float,
        rolling_avg_ms: float,
    ) -> None:
        self._results_panel.update_results(results)
        self._performance_panel.update_metrics(fps, latency_ms, rolling_avg_ms)
        h, w = annotated_frame.shape[:2]
        qimg = QImage(annotated_frame.data, w, h, 3 * w, QImage.Format.Format_BGR888)
        self._video_label.setPixmap(QPixmap.fromImage(qimg).scaled(
            self._video_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    @Slot(str)
    def _set_status(self, message: str) -> None:
        self._status_label.setText(message)

    @Slot(object)
    def _on_capture_ready(self, event: CaptureEvent) -> None:
        # Review mode: the session ends, the camera is released
        self._stop_processing()
        self._last_capture = event
        self._set_status("Review Capture")
        self._review_panel.show_capture(event.encoded_image)
        self._review_panel.show_processing()
        self._center_stack.setCurrentWidget(self._review_panel)
        self._start_ocr(event)

    @Slot(str, object)
    def _on_runner_error(self, message: str, payload: dict) -> None:
        logger.error("Error: %s", message)
        self._results_panel.update_results(payload)
        self._stop_processing()

    @Slot()
    def _on_runner_stopped(self) -> None:
        if self._runner is not None and not self._runner.is_running:
            self._stop_processing()

    # --- OCR / review ---

    def _start_ocr(self, event: CaptureEvent) -> None:
        worker = OcrWorker(event, self._recognizer, self._config)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_ocr_finished)
        self._ocr_jobs.append((thread, worker))
        thread.start()

    @Slot(object, object)
    def _on_ocr_finished(self, event: CaptureEvent, result: OcrResult) -> None:
        for job in list(self._ocr_jobs):
            thread, worker = job
            if worker.capture_event is event:
                thread.quit()
                thread.wait()
                self._ocr_jobs.remove(job)
        if event is not self._last_capture:
            logger.debug("Discarding OCR result for an earlier capture")
            return
        if self._center_stack.currentWidget() is self._review_panel:
            self._review_panel.show_text(result.text)

    def _finish_ocr_jobs(self) -> None:
        for thread, _ in self._ocr_jobs:
            thread.quit()
            thread.wait()
        self._ocr_jobs.clear()

    def _on_retake(self) -> None:
        self._last_capture = None
        self._review_panel.clear()
        self._center_stack.setCurrentWidget(self._video_label)
        self._set_status(status_text.READY)
        self._on_start_stop()

    def _on_download(self) -> None:
        if self._last_capture is None:
            logger.info("No capture to save.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Capture", "captured_document.jpg", "JPEG (*.jpg);;All (*)"
        )
        if not path:
            return
        try:
            with open(path, "wb") as f:
                f.write(self._last_capture.encoded_image)
            logger.info("Saved capture: %s", path)
        except OSError as e:
            logger.error("Failed to save capture: %s", e)

    def closeEvent(self, event) -> None:
        self._stop_processing()
        self._finish_ocr_jobs()
        self._reap_retired_runners()
        self._detector.close()
        logging.getLogger().removeHandler(self._log_handler)
        event.accept()
