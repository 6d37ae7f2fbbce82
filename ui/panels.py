"""
Side panels: Settings form, Review (capture + extracted text), Results (JSON), Logs, Performance.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from core.config import STABILITY_MODES, ScanConfig


def _pretty_json(obj: Any) -> str:
    """Pretty-print dict/list for display."""
    try:
        return json.dumps(obj, indent=2, default=str)
    except (TypeError, ValueError):
        return str(obj)


def get_settings_from_widget(widget: QWidget) -> dict[str, Any]:
    """Collect current settings from a settings form (inputs keyed by objectName)."""
    out: dict[str, Any] = {}
    for child in widget.findChildren(QDoubleSpinBox):
        if child.objectName():
            out[child.objectName()] = float(child.value())
    for child in widget.findChildren(QSpinBox):
        if child.objectName():
            out[child.objectName()] = int(child.value())
    for child in widget.findChildren(QComboBox):
        if child.objectName():
            out[child.objectName()] = child.currentText()
    return out


class SettingsPanel(QWidget):
    """Spin boxes for the scan tunables; read back with settings()."""

    # (objectName, label, min, max, step, decimals); decimals=0 means integer
    _FIELDS = (
        ("document_score_threshold", "Document score >", 0.0, 1.0, 0.05, 2),
        ("prominent_score_threshold", "Prominent score >", 0.0, 1.0, 0.05, 2),
        ("area_ratio_threshold", "Min area (frame fraction)", 0.0, 1.0, 0.01, 2),
        ("centered_inset_low", "Center region from", 0.0, 1.0, 0.05, 2),
        ("centered_inset_high", "Center region to", 0.0, 1.0, 0.05, 2),
        ("stability_threshold", "Stable frames", 1, 300, 1, 0),
        ("relative_movement_limit", "Movement limit (width fraction)", 0.0, 0.5, 0.005, 3),
        ("ema_alpha", "Smoothing alpha", 0.01, 1.0, 0.05, 2),
        ("crop_padding", "Crop padding (px)", 0, 500, 5, 0),
        ("encode_quality", "JPEG quality", 0.1, 1.0, 0.05, 2),
        ("contrast_factor", "OCR contrast", 0.0, 100.0, 0.1, 2),
    )

    def __init__(self, config: ScanConfig | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        config = config or ScanConfig()
        values = config.to_settings()
        values["centered_inset_low"], values["centered_inset_high"] = config.centered_inset
        layout = QFormLayout(self)
        for name, label, lo, hi, step, decimals in self._FIELDS:
            if decimals == 0:
                box = QSpinBox()
                box.setRange(int(lo), int(hi))
                box.setSingleStep(int(step))
                box.setValue(int(values[name]))
            else:
                box = QDoubleSpinBox()
                box.setDecimals(decimals)
                box.setRange(lo, hi)
                box.setSingleStep(step)
                box.setValue(float(values[name]))
            box.setObjectName(name)
            layout.addRow(label, box)
        mode = QComboBox()
        mode.addItems(list(STABILITY_MODES))
        mode.setCurrentText(config.stability_mode)
        mode.setObjectName("stability_mode")
        layout.addRow("Stability mode", mode)

    def settings(self) -> dict[str, Any]:
        return get_settings_from_widget(self)


class ReviewPanel(QWidget):
    """Shows the captured document and the extracted text, with Retake / Download."""

    retake_requested = Signal()
    download_requested = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._image_label = QLabel("No capture")
        self._image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._image_label.setMinimumSize(320, 240)
        layout.addWidget(self._image_label, stretch=1)
        layout.addWidget(QLabel("Extracted Text"))
        self._text = QPlainTextEdit(self)
        self._text.setReadOnly(True)
        layout.addWidget(self._text, stretch=1)
        buttons = QHBoxLayout()
        retake = QPushButton("Retake")
        retake.clicked.connect(self.retake_requested)
        download = QPushButton("Download")
        download.clicked.connect(self.download_requested)
        buttons.addWidget(retake)
        buttons.addWidget(download)
        layout.addLayout(buttons)

    def show_capture(self, encoded_image: bytes) -> None:
        qimg = QImage.fromData(encoded_image)
        self._image_label.setPixmap(QPixmap.fromImage(qimg).scaled(
            self._image_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    def show_processing(self) -> None:
        self._text.setPlainText("Processing OCR... (this may take a moment)")

    def show_text(self, text: str) -> None:
        self._text.setPlainText(text if text.strip() else "No text found.")

    def text(self) -> str:
        return self._text.toPlainText()

    def clear(self) -> None:
        self._image_label.clear()
        self._image_label.setText("No capture")
        self._text.clear()


class ResultsPanel(QWidget):
    """Shows per-frame results as pretty-printed JSON, updated in real time."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._text = QPlainTextEdit(self)
        self._text.setReadOnly(True)
        self._text.setPlaceholderText("Results will appear here while scanning.")
        layout.addWidget(self._text, stretch=1)

    def update_results(self, results: dict[str, Any] | None) -> None:
        if results is None:
            self._text.setPlainText("")
            return
        self._text.setPlainText(_pretty_json(results))


class LogsPanel(QWidget):
    """Shows application log messages and errors."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._text = QPlainTextEdit(self)
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(2000)
        layout.addWidget(self._text)

    def append(self, message: str) -> None:
        self._text.appendPlainText(message)
        scrollbar = self._text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def clear(self) -> None:
        self._text.clear()


class _LogBridge(QObject):
    message = Signal(str)


class QtLogHandler(logging.Handler):
    """logging.Handler that forwards formatted records to the GUI thread via a signal."""

    def __init__(self, panel: LogsPanel, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._bridge = _LogBridge()
        self._bridge.message.connect(panel.append)
        self.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._bridge.message.emit(self.format(record))
        except RuntimeError:
            # Panel already destroyed during shutdown
            pass


class PerformancePanel(QWidget):
    """Shows FPS, per-frame latency (ms), and rolling average."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._fps_label = QLabel("FPS: —")
        self._latency_label = QLabel("Latency (ms): —")
        self._rolling_label = QLabel("Rolling avg (ms): —")
        for w in (self._fps_label, self._latency_label, self._rolling_label):
            layout.addWidget(w)
        layout.addStretch()

    def update_metrics(self, fps: float, latency_ms: float, rolling_avg_ms: float) -> None:
        self._fps_label.setText(f"FPS: {fps:.1f}")
        self._latency_label.setText(f"Latency (ms): {latency_ms:.1f}")
        self._rolling_label.setText(f"Rolling avg (ms): {rolling_avg_ms:.1f}")

    def reset(self) -> None:
        self._fps_label.setText("FPS: —")
        self._latency_label.setText("Latency (ms): —")
        self._rolling_label.setText("Rolling avg (ms): —")
