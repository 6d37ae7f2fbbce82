import cv2
import pytest

from core.capture import VideoCaptureSource


class FakeVideoCapture:
    """Stands in for cv2.VideoCapture; reports a fixed frame size whatever was requested."""

    reported_size = (0, 0)
    opens = True

    def __init__(self, *args):
        self.released = False

    def set(self, prop, value):
        return True

    def get(self, prop):
        if prop == cv2.CAP_PROP_FRAME_WIDTH:
            return float(self.reported_size[0])
        if prop == cv2.CAP_PROP_FRAME_HEIGHT:
            return float(self.reported_size[1])
        return 0.0

    def isOpened(self):
        return self.opens and not self.released

    def read(self):
        return False, None

    def release(self):
        self.released = True


@pytest.fixture
def fake_cv2_capture(monkeypatch):
    monkeypatch.setattr(FakeVideoCapture, "reported_size", (0, 0))
    monkeypatch.setattr(FakeVideoCapture, "opens", True)
    monkeypatch.setattr("core.capture.cv2.VideoCapture", FakeVideoCapture)
    return FakeVideoCapture


def test_unopened_source_is_not_ready():
    source = VideoCaptureSource()
    assert not source.is_opened()
    assert not source.is_ready()
    assert source.get_size() == (0, 0)


def test_camera_without_dimensions_is_not_ready(fake_cv2_capture):
    source = VideoCaptureSource()
    assert source.open_camera(0)
    assert source.is_opened()
    assert not source.is_ready()


def test_camera_reporting_dimensions_is_ready(fake_cv2_capture):
    fake_cv2_capture.reported_size = (1280, 720)
    source = VideoCaptureSource()
    assert source.open_camera(1)
    assert source.is_ready()
    assert source.get_size() == (1280, 720)
    assert source.camera_index == 1


def test_failed_open_is_not_ready(fake_cv2_capture):
    fake_cv2_capture.opens = False
    fake_cv2_capture.reported_size = (1280, 720)
    source = VideoCaptureSource()
    assert not source.open_camera(0)
    assert not source.is_ready()


def test_close_releases_and_clears_readiness(fake_cv2_capture):
    fake_cv2_capture.reported_size = (640, 480)
    source = VideoCaptureSource()
    source.open_file("clip.mp4")
    assert source.source_path == "clip.mp4"
    assert source.is_ready()
    source.close()
    assert source.source_path is None
    assert not source.is_ready()
