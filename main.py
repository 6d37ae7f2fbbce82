"""
Document scanner — entry point.
Run: python main.py                      (live camera GUI)
     python main.py --ocr scan.jpg       (preprocess + recognize one image file)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Reduce TensorFlow/MediaPipe console noise (INFO and WARNING)
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")

from core.config import ScanConfig
from core.ocr import TesseractRecognizer, perform_ocr

logger = logging.getLogger(__name__)


def run_ocr(image_path: Path, config: ScanConfig, debug_out: Path | None, tesseract_cmd: str | None) -> int:
    """Recognize text in an image file; optionally write the preprocessed debug image."""
    try:
        encoded = image_path.read_bytes()
    except OSError as e:
        logger.error("Cannot read %s: %s", image_path, e)
        return 1
    result = perform_ocr(
        encoded,
        TesseractRecognizer(tesseract_cmd=tesseract_cmd),
        language=config.ocr_language,
        contrast=config.contrast_factor,
    )
    print(result.text)
    if debug_out is not None and result.debug_image is not None:
        debug_out.write_bytes(result.debug_image)
        logger.info("Wrote debug image: %s", debug_out)
    return 0 if result.ok else 1


def run_gui(config: ScanConfig, camera_index: int, detector_name: str, tesseract_cmd: str | None) -> int:
    from PySide6.QtWidgets import QApplication

    from detectors import load_detector
    from ui.main_window import MainWindow

    app = QApplication(sys.argv)
    window = MainWindow(
        detector=load_detector(detector_name),
        recognizer=TesseractRecognizer(tesseract_cmd=tesseract_cmd),
        config=config,
        camera_index=camera_index,
    )
    window.show()
    return app.exec()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Automatic document capture and OCR")
    parser.add_argument("--camera", type=int, default=0, help="Camera index to open")
    parser.add_argument("--detector", default="object_detector", help="Detector id or module path")
    parser.add_argument("--ocr", type=Path, metavar="IMAGE", help="Run OCR on an image file and exit")
    parser.add_argument("--debug-out", type=Path, help="With --ocr: save the preprocessed image here")
    parser.add_argument("--lang", default="eng", help="Tesseract language")
    parser.add_argument("--contrast", type=float, default=1.2, help="Contrast factor for preprocessing")
    parser.add_argument("--tesseract-cmd", help="Path to the tesseract binary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    config = ScanConfig.from_settings({"ocr_language": args.lang, "contrast_factor": args.contrast})

    if args.ocr is not None:
        return run_ocr(args.ocr, config, args.debug_out, args.tesseract_cmd)
    return run_gui(config, args.camera, args.detector, args.tesseract_cmd)


if __name__ == "__main__":
    sys.exit(main())
