import cv2
import numpy as np
import pytesseract
import pytest

from core.errors import RecognitionError
from core.ocr import FAILED_TEXT, RecognizerBase, TesseractRecognizer, perform_ocr


class FakeRecognizer(RecognizerBase):
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, encoded_image, language):
        self.calls.append((encoded_image, language))
        if self.error is not None:
            raise self.error
        return self.text


def jpeg(image):
    ok, buf = cv2.imencode(".jpg", image)
    assert ok
    return buf.tobytes()


@pytest.fixture
def capture_bytes(frame):
    return jpeg(frame[:200, :300])


def test_success_returns_text_and_debug_image(capture_bytes):
    recognizer = FakeRecognizer("PASSPORT\nNO 123")
    result = perform_ocr(capture_bytes, recognizer, language="deu")
    assert result.text == "PASSPORT\nNO 123"
    assert result.ok
    assert recognizer.calls[0][1] == "deu"
    # the recognizer sees exactly the preprocessed debug image
    assert recognizer.calls[0][0] == result.debug_image
    debug = cv2.imdecode(np.frombuffer(result.debug_image, np.uint8), cv2.IMREAD_COLOR)
    assert debug.shape[:2] == (200, 300)


def test_recognizer_failure_becomes_sentinel(capture_bytes):
    result = perform_ocr(capture_bytes, FakeRecognizer(error=RecognitionError("boom")))
    assert result.text == FAILED_TEXT
    assert result.debug_image is None
    assert not result.ok


def test_undecodable_image_becomes_sentinel():
    result = perform_ocr(b"not an image", FakeRecognizer("unused"))
    assert result.text == FAILED_TEXT
    assert result.debug_image is None


def test_tesseract_recognizer_passes_rgb_and_language(monkeypatch):
    seen = {}

    def fake_image_to_string(image, lang=None, config=""):
        seen["image"] = image
        seen["lang"] = lang
        return "text"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    img = np.zeros((4, 4, 3), dtype=np.uint8)
    img[..., 2] = 255  # red in BGR
    assert TesseractRecognizer().recognize(jpeg(img), "eng") == "text"
    assert seen["lang"] == "eng"
    assert seen["image"][0, 0, 0] > 200  # red first in RGB
    assert seen["image"][0, 0, 2] < 50


def test_tesseract_error_is_wrapped(monkeypatch):
    def failing(image, lang=None, config=""):
        raise pytesseract.TesseractError(1, "bad language")

    monkeypatch.setattr(pytesseract, "image_to_string", failing)
    with pytest.raises(RecognitionError):
        TesseractRecognizer().recognize(jpeg(np.zeros((4, 4, 3), np.uint8)), "xx")
